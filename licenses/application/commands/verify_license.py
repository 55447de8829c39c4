"""
VerifyLicenseCommand.

Command sent by a bot at startup to check its license.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class VerifyLicenseCommand:
    """Command to verify a license key on behalf of a bot."""

    license_key: str
    bot_id: str
    now: Optional[datetime] = None
