"""
License DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for full license information."""

    key: str
    owner_id: str
    owner_name: str
    email: Optional[str]
    tier: str
    status: str
    price: Decimal
    currency: str
    features: List[str]
    created_at: datetime
    expires_at: datetime
    last_verified: Optional[datetime]
    notes: str
    invoice_count: int
    last_payment_date: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            key=license.key,
            owner_id=license.owner_id,
            owner_name=license.owner_name,
            email=license.email,
            tier=license.tier.value,
            status=license.status.value,
            price=license.price,
            currency=license.currency,
            features=list(license.features),
            created_at=license.created_at,
            expires_at=license.expires_at,
            last_verified=license.last_verified,
            notes=license.notes,
            invoice_count=license.invoice_count,
            last_payment_date=license.last_payment_date,
        )


@dataclass
class VerificationResultDTO:
    """DTO for a verify answer; ``reason`` is set only when invalid."""

    valid: bool
    reason: Optional[str] = None
    expiry: Optional[datetime] = None
    tier: Optional[str] = None
    features: List[str] = field(default_factory=list)
    days_remaining: Optional[int] = None


@dataclass
class TrialDTO:
    """DTO for a freshly granted trial."""

    license_key: str
    owner_id: str
    owner_name: str
    expires_at: datetime
    days: int
    features: List[str]
    download_link: str


@dataclass
class LicensePageDTO:
    """DTO for one page of the license listing."""

    licenses: List[LicenseDTO]
    total: int
    page: int
    limit: int
    status_filter: str

    @property
    def count(self) -> int:
        return len(self.licenses)

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


@dataclass
class ActiveTrialDTO:
    """DTO for a running trial in the trials listing."""

    key: str
    owner_id: str
    owner_name: str
    expires_at: datetime
    days_left: int
