"""
Invoice DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from billing.domain.invoice import Invoice


@dataclass
class InvoiceDTO:
    """DTO for invoice information."""

    invoice_id: str
    license_key: str
    amount: Decimal
    currency: str
    status: str
    due_date: datetime
    paid_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceDTO":
        """Build the DTO from an Invoice entity."""
        return cls(
            invoice_id=invoice.invoice_id,
            license_key=invoice.license_key,
            amount=invoice.amount,
            currency=invoice.currency,
            status=invoice.status.value,
            due_date=invoice.due_date,
            paid_at=invoice.paid_at,
            created_at=invoice.created_at,
        )


@dataclass
class PaymentResultDTO:
    """DTO for a settled payment."""

    invoice_id: str
    license_key: str
    paid_at: datetime
    new_expiry: datetime
    invoice_count: int
