"""
License domain entity.

This is the core domain entity representing a bot license.
It contains business logic and is independent of infrastructure.
"""
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from core.domain.value_objects import LicenseStatus, LicenseTier, OwnerId, RenewalMode

TIER_FEATURES = {
    LicenseTier.BASIC: ("basic_access",),
    LicenseTier.PREMIUM: ("basic_access", "premium_features", "priority_support"),
    LicenseTier.ENTERPRISE: (
        "basic_access",
        "premium_features",
        "priority_support",
        "custom_integration",
    ),
    LicenseTier.TRIAL: ("basic_access", "trial_features"),
}


def features_for_tier(tier: LicenseTier) -> Tuple[str, ...]:
    """
    Look up the capability tags granted by a tier.

    Args:
        tier: License tier

    Returns:
        Ordered tuple of feature tags
    """
    return TIER_FEATURES[tier]


def compute_renewal_expiry(
    current_expiry: datetime, now: datetime, days: int, mode: RenewalMode
) -> datetime:
    """
    Compute the expiry a renewal should set.

    RESET restarts the term at ``now``; EXTEND stacks the term on top of
    whatever time is left (or on ``now`` if the license already lapsed).
    """
    if days < 1:
        raise ValueError("Renewal days must be a positive integer")
    if mode == RenewalMode.EXTEND:
        return max(now, current_expiry) + timedelta(days=days)
    return now + timedelta(days=days)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents a license key issued to a bot owner.
    This is an immutable value object with business logic: every
    transition returns a new instance.
    """

    key: str
    owner_id: str
    owner_name: str
    tier: LicenseTier
    status: LicenseStatus
    price: Decimal
    currency: str
    created_at: datetime
    expires_at: datetime
    features: Tuple[str, ...]
    email: Optional[str] = None
    last_verified: Optional[datetime] = None
    notes: str = ""
    invoice_count: int = 0
    last_payment_date: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        OwnerId(self.owner_id)
        if self.price < 0:
            raise ValueError("Price cannot be negative")
        if self.expires_at < self.created_at:
            raise ValueError("Expiration cannot precede creation")

    @classmethod
    def create(
        cls,
        key: str,
        owner_id: str,
        tier: LicenseTier,
        days: int,
        now: datetime,
        price: Decimal = Decimal("0"),
        currency: str = "USD",
        email: Optional[str] = None,
        owner_name: Optional[str] = None,
    ) -> "License":
        """
        Issue a new active License.

        Args:
            key: Generated license key
            owner_id: External owner identifier
            tier: License tier (determines features)
            days: Term length in days
            now: Issuance time
            price: Billing price
            currency: Billing currency
            email: Optional contact email
            owner_name: Display name (derived from owner_id if omitted)

        Returns:
            License entity instance
        """
        if days < 1:
            raise ValueError("License term must be at least 1 day")
        return cls(
            key=key,
            owner_id=owner_id,
            owner_name=owner_name or f"User-{owner_id[:6]}",
            tier=tier,
            status=LicenseStatus.ACTIVE,
            price=Decimal(price),
            currency=currency,
            created_at=now,
            expires_at=now + timedelta(days=days),
            features=features_for_tier(tier),
            email=email or None,
        )

    @classmethod
    def create_trial(
        cls,
        key: str,
        owner_id: str,
        days: int,
        now: datetime,
        owner_name: Optional[str] = None,
    ) -> "License":
        """Grant a free, time-boxed trial license."""
        trial = cls.create(
            key=key,
            owner_id=owner_id,
            tier=LicenseTier.TRIAL,
            days=days,
            now=now,
            owner_name=owner_name or f"Trial-User-{owner_id[:6]}",
        )
        return trial.with_note(now, f"trial license granted for {days} days")

    @property
    def is_trial(self) -> bool:
        return self.tier == LicenseTier.TRIAL

    def is_expired_at(self, now: datetime) -> bool:
        """True once ``now`` is strictly past the expiry."""
        return now > self.expires_at

    def days_remaining(self, now: datetime) -> int:
        """Whole days left before expiry, rounded up; never negative."""
        seconds = (self.expires_at - now).total_seconds()
        if seconds <= 0:
            return 0
        return math.ceil(seconds / 86400)

    def with_note(self, now: datetime, text: str) -> "License":
        """Return a copy with one audit line appended to the notes."""
        line = f"{now.isoformat()} {text}"
        notes = f"{self.notes}\n{line}" if self.notes else line
        return replace(self, notes=notes)

    def mark_expired(self) -> "License":
        """
        Create a new License instance with expired status.

        Returns:
            New License instance with expired status
        """
        return replace(self, status=LicenseStatus.EXPIRED)

    def mark_verified(self, now: datetime) -> "License":
        """Record a successful verification."""
        return replace(self, last_verified=now)

    def suspend(self, now: datetime) -> "License":
        """
        Suspend the license regardless of its current status.

        Returns:
            New License instance with suspended status
        """
        suspended = replace(self, status=LicenseStatus.SUSPENDED)
        return suspended.with_note(now, "suspended")

    def renew(
        self, now: datetime, days: int, mode: RenewalMode = RenewalMode.RESET
    ) -> "License":
        """
        Reactivate the license with a new expiry.

        Renewal always sets status to active, overriding suspension or expiry.

        Args:
            now: Renewal time
            days: Term length in days (positive)
            mode: Whether to reset or extend the remaining term

        Returns:
            New License instance with updated expiration
        """
        renewed = replace(
            self,
            status=LicenseStatus.ACTIVE,
            expires_at=compute_renewal_expiry(self.expires_at, now, days, mode),
        )
        return renewed.with_note(now, f"renewed for {days} days")

    def record_payment(
        self,
        now: datetime,
        days: int,
        invoice_id: str,
        mode: RenewalMode = RenewalMode.RESET,
    ) -> "License":
        """Renew the license as the result of a paid invoice."""
        paid = replace(
            self,
            status=LicenseStatus.ACTIVE,
            expires_at=compute_renewal_expiry(self.expires_at, now, days, mode),
            invoice_count=self.invoice_count + 1,
            last_payment_date=now,
        )
        return paid.with_note(now, f"payment {invoice_id} received, renewed for {days} days")
