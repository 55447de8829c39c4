"""
RenewLicenseCommand.

Command to renew a license for a number of days.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class RenewLicenseCommand:
    """Command to renew a license; ``days`` defaults to the configured term."""

    license_key: str
    days: Optional[int] = None
    now: Optional[datetime] = None
