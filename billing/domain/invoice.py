"""
Invoice domain entity.

An invoice is a payment obligation for one license. It leaves the
pending state exactly once.
"""
import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from core.domain.exceptions import InvoiceNotPendingError
from core.domain.value_objects import InvoiceStatus

INVOICE_PREFIX = "INV"


def generate_invoice_id(now: datetime) -> str:
    """
    Generate an invoice id in format: INV-YYYYMMDD-XXXXXXXX.

    Args:
        now: Issuance time (supplies the date part)

    Returns:
        Invoice id string
    """
    return f"{INVOICE_PREFIX}-{now:%Y%m%d}-{secrets.token_hex(4).upper()}"


@dataclass(frozen=True)
class Invoice:
    """
    Invoice domain entity.

    Immutable; settlement returns a new instance.
    """

    invoice_id: str
    license_key: str
    amount: Decimal
    currency: str
    due_date: datetime
    created_at: datetime
    status: InvoiceStatus = InvoiceStatus.PENDING
    paid_at: Optional[datetime] = None
    payment_method: str = ""
    transaction_id: str = ""

    def __post_init__(self):
        """Validate invoice entity."""
        if not self.invoice_id:
            raise ValueError("Invoice ID cannot be empty")
        if not self.license_key:
            raise ValueError("Invoice must reference a license")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")

    @classmethod
    def create(
        cls,
        invoice_id: str,
        license_key: str,
        amount: Decimal,
        now: datetime,
        due_days: int = 7,
        currency: str = "USD",
    ) -> "Invoice":
        """
        Create a pending invoice.

        Args:
            invoice_id: Generated invoice id
            license_key: Key of the license being billed
            amount: Amount due
            now: Issuance time
            due_days: Days until the invoice is due
            currency: Billing currency

        Returns:
            Invoice entity instance
        """
        if due_days < 1:
            raise ValueError("Due days must be a positive integer")
        return cls(
            invoice_id=invoice_id,
            license_key=license_key,
            amount=Decimal(amount),
            currency=currency,
            due_date=now + timedelta(days=due_days),
            created_at=now,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == InvoiceStatus.PENDING

    def _settle(self, status: InvoiceStatus, **changes) -> "Invoice":
        if not self.is_pending:
            raise InvoiceNotPendingError(
                f"Invoice {self.invoice_id} is already {self.status.value}"
            )
        return replace(self, status=status, **changes)

    def mark_paid(
        self, now: datetime, payment_method: str = "", transaction_id: str = ""
    ) -> "Invoice":
        """
        Settle the invoice as paid.

        Raises:
            InvoiceNotPendingError: If the invoice was already settled
        """
        return self._settle(
            InvoiceStatus.PAID,
            paid_at=now,
            payment_method=payment_method or "",
            transaction_id=transaction_id or "",
        )
