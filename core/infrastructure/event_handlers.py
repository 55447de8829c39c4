"""
Event handlers for domain events.

These handlers process domain events for side effects such as
audit logging and business metrics.
"""

import logging

from billing.domain.events import InvoiceCreated, InvoicePaid
from core import metrics
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import (
    LicenseExpired,
    LicenseIssued,
    LicenseRenewed,
    LicenseSuspended,
    LicenseVerified,
    TrialGranted,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("core.audit")

AUDITED_EVENTS = (
    LicenseIssued,
    TrialGranted,
    LicenseExpired,
    LicenseSuspended,
    LicenseRenewed,
    InvoiceCreated,
    InvoicePaid,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every state-changing domain event to the audit logger.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra=event.to_dict(),
        )


class LicenseMetricsEventHandler(EventHandler):
    """Event handler that feeds the business Prometheus counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseIssued):
            metrics.licenses_issued_total.labels(tier=event.tier).inc()
        elif isinstance(event, TrialGranted):
            metrics.trials_granted_total.inc()
        elif isinstance(event, LicenseVerified):
            result = "valid" if event.valid else event.reason.lower()
            metrics.license_verifications_total.labels(result=result).inc()
        elif isinstance(event, LicenseExpired):
            metrics.licenses_expired_total.inc()
        elif isinstance(event, LicenseSuspended):
            metrics.licenses_suspended_total.inc()
        elif isinstance(event, LicenseRenewed):
            metrics.licenses_renewed_total.labels(source=event.source).inc()
        elif isinstance(event, InvoiceCreated):
            metrics.invoices_created_total.inc()
        elif isinstance(event, InvoicePaid):
            metrics.invoices_paid_total.inc()


audit_handler = AuditLogEventHandler()
metrics_handler = LicenseMetricsEventHandler()


def register_event_handlers():
    """
    Register all event handlers with the event bus.

    Safe to call more than once; a handler is subscribed at most once
    per event type.
    """
    from core.infrastructure.events import event_bus

    for event_type in AUDITED_EVENTS:
        event_bus.subscribe(event_type, audit_handler)

    for event_type in AUDITED_EVENTS + (LicenseVerified,):
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
