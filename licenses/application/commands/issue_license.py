"""
IssueLicenseCommand.

Command to issue a paid license to an owner.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    ``tier`` and ``days`` are raw request values; the handler applies
    defaults and validation.
    """

    owner_id: str
    tier: Optional[str] = None
    days: Optional[int] = None
    price: Decimal = Decimal("0")
    currency: str = "USD"
    email: Optional[str] = None
    owner_name: Optional[str] = None
    now: Optional[datetime] = None
