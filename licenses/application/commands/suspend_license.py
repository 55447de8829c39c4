"""
SuspendLicenseCommand.

Command to suspend a license.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class SuspendLicenseCommand:
    """Command to suspend a license."""

    license_key: str
    now: Optional[datetime] = None
