"""
Billing domain events.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class InvoiceCreated(DomainEvent):
    """Event raised when an invoice is issued."""

    invoice_id: str
    license_key: str
    amount: Decimal
    due_date: datetime

    @property
    def aggregate_id(self) -> str:
        return self.invoice_id


@dataclass(frozen=True, kw_only=True)
class InvoicePaid(DomainEvent):
    """Event raised once an invoice is paid and its license renewed."""

    invoice_id: str
    license_key: str
    new_expiration: datetime

    @property
    def aggregate_id(self) -> str:
        return self.invoice_id
