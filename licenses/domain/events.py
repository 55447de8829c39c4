"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from dataclasses import dataclass
from datetime import datetime

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseEvent(DomainEvent):
    """Base class for events whose aggregate is a license."""

    license_key: str

    @property
    def aggregate_id(self) -> str:
        return self.license_key


@dataclass(frozen=True, kw_only=True)
class LicenseIssued(LicenseEvent):
    """Event raised when a paid license is issued."""

    owner_id: str
    tier: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class TrialGranted(LicenseEvent):
    """Event raised when a trial license is granted."""

    owner_id: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class LicenseVerified(LicenseEvent):
    """Event raised for every verification attempt on an existing license."""

    valid: bool
    reason: str = ""
    bot_id: str = ""


@dataclass(frozen=True, kw_only=True)
class LicenseExpired(LicenseEvent):
    """Event raised when verification lazily commits an expiry."""

    expired_at: datetime


@dataclass(frozen=True, kw_only=True)
class LicenseSuspended(LicenseEvent):
    """Event raised when a license is suspended."""


@dataclass(frozen=True, kw_only=True)
class LicenseRenewed(LicenseEvent):
    """Event raised when a license is renewed by an admin or a payment."""

    new_expiration: datetime
    source: str = "admin"
