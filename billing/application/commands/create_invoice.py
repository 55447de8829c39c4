"""
CreateInvoiceCommand.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class CreateInvoiceCommand:
    """Command to bill an existing license."""

    license_key: str
    amount: Decimal
    currency: str = "USD"
    due_days: Optional[int] = None
    now: Optional[datetime] = None
