"""
Invoice handlers.

CreateInvoice bills an existing license; PayInvoice settles an invoice
and renews the license it refers to.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal

from billing.application.commands.create_invoice import CreateInvoiceCommand
from billing.application.commands.pay_invoice import PayInvoiceCommand
from billing.application.dto.invoice_dto import InvoiceDTO, PaymentResultDTO
from billing.domain.events import InvoiceCreated, InvoicePaid
from billing.domain.invoice import Invoice, generate_invoice_id
from billing.ports.invoice_repository import InvoiceRepository
from core.domain.exceptions import (
    DomainException,
    DuplicateInvoiceError,
    InvalidFieldError,
    InvoiceNotFoundError,
    LicenseNotFoundError,
    PaymentInconsistencyError,
)
from core.domain.value_objects import RenewalMode
from core.infrastructure.events import event_bus
from licenses.application.license_updates import change_license
from licenses.application.validation import require_text, strict_days
from licenses.domain.events import LicenseRenewed
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MAX_INVOICE_ID_ATTEMPTS = 5


class CreateInvoiceHandler:
    """Handler for CreateInvoiceCommand."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        license_repository: LicenseRepository,
        default_due_days: int = 7,
    ):
        """Initialize handler with repositories."""
        self.invoice_repository = invoice_repository
        self.license_repository = license_repository
        self.default_due_days = default_due_days

    async def handle(self, command: CreateInvoiceCommand) -> InvoiceDTO:
        """
        Handle create invoice command.

        Args:
            command: CreateInvoiceCommand

        Returns:
            InvoiceDTO for the pending invoice

        Raises:
            MissingFieldError: MISSING_LICENSE_KEY
            InvalidFieldError: INVALID_AMOUNT or INVALID_DAYS
            LicenseNotFoundError: If the license does not exist
        """
        key = require_text(command.license_key, "MISSING_LICENSE_KEY", "License key is required")
        if command.amount is None or Decimal(str(command.amount)) < 0:
            raise InvalidFieldError("INVALID_AMOUNT", "Amount must be a non-negative number")
        amount = Decimal(str(command.amount))
        due_days = strict_days(command.due_days, self.default_due_days)

        if not await self.license_repository.exists(key):
            raise LicenseNotFoundError(f"License {key} not found")

        now = command.now or datetime.now(timezone.utc)
        for _ in range(MAX_INVOICE_ID_ATTEMPTS):
            invoice = Invoice.create(
                invoice_id=generate_invoice_id(now),
                license_key=key,
                amount=amount,
                now=now,
                due_days=due_days,
                currency=command.currency or "USD",
            )
            try:
                saved = await self.invoice_repository.add(invoice)
                break
            except DuplicateInvoiceError:
                logger.warning("Invoice id %s already taken, retrying", invoice.invoice_id)
        else:
            raise DuplicateInvoiceError("Failed to generate a unique invoice id")

        logger.info(
            "Invoice created",
            extra={"invoice_id": saved.invoice_id, "license_key": key, "amount": str(amount)},
        )
        await event_bus.publish(
            InvoiceCreated(
                invoice_id=saved.invoice_id,
                license_key=key,
                amount=amount,
                due_date=saved.due_date,
            )
        )
        return InvoiceDTO.from_entity(saved)


class PayInvoiceHandler:
    """Handler for PayInvoiceCommand."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        license_repository: LicenseRepository,
        renewal_days: int = 30,
        renewal_mode: RenewalMode = RenewalMode.RESET,
    ):
        """Initialize handler with repositories and renewal settings."""
        self.invoice_repository = invoice_repository
        self.license_repository = license_repository
        self.renewal_days = renewal_days
        self.renewal_mode = RenewalMode(renewal_mode)

    async def handle(self, command: PayInvoiceCommand) -> PaymentResultDTO:
        """
        Handle pay invoice command.

        The invoice is persisted as paid first, then the license is
        renewed. There is no cross-document transaction: if the license
        half fails, the invoice stays paid and the failure is reported as
        a payment inconsistency for manual reconciliation.

        Args:
            command: PayInvoiceCommand

        Returns:
            PaymentResultDTO with the license's new expiry

        Raises:
            MissingFieldError: MISSING_INVOICE_ID
            InvoiceNotFoundError: If the invoice does not exist
            InvoiceNotPendingError: If the invoice was already settled
            PaymentInconsistencyError: If the license could not be renewed
        """
        invoice_id = require_text(command.invoice_id, "MISSING_INVOICE_ID", "Invoice ID is required")
        invoice = await self.invoice_repository.get(invoice_id)
        if not invoice:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

        now = command.now or datetime.now(timezone.utc)
        paid = await self.invoice_repository.settle(
            invoice.mark_paid(now, command.payment_method, command.transaction_id)
        )

        try:
            renewed = await change_license(
                self.license_repository,
                paid.license_key,
                lambda license: license.record_payment(
                    now, self.renewal_days, paid.invoice_id, self.renewal_mode
                ),
            )
        except DomainException as e:
            logger.error(
                "Invoice %s is paid but license %s was not renewed: %s",
                paid.invoice_id,
                paid.license_key,
                e.message,
                extra={"invoice_id": paid.invoice_id, "license_key": paid.license_key},
            )
            raise PaymentInconsistencyError(paid.invoice_id, paid.license_key) from e

        logger.info(
            "Invoice paid",
            extra={"invoice_id": paid.invoice_id, "license_key": renewed.key},
        )
        await event_bus.publish(
            LicenseRenewed(
                license_key=renewed.key,
                new_expiration=renewed.expires_at,
                source="payment",
            )
        )
        await event_bus.publish(
            InvoicePaid(
                invoice_id=paid.invoice_id,
                license_key=renewed.key,
                new_expiration=renewed.expires_at,
            )
        )
        return PaymentResultDTO(
            invoice_id=paid.invoice_id,
            license_key=renewed.key,
            paid_at=now,
            new_expiry=renewed.expires_at,
            invoice_count=renewed.invoice_count,
        )
