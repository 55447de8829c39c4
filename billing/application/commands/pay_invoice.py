"""
PayInvoiceCommand.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class PayInvoiceCommand:
    """Command to settle an invoice, renewing its license."""

    invoice_id: str
    payment_method: str = ""
    transaction_id: str = ""
    now: Optional[datetime] = None
