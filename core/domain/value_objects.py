"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class OwnerId(ValueObject):
    """External identifier of a license holder (e.g. a Discord user id)."""

    value: str

    def __post_init__(self):
        """Validate owner id."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Owner ID cannot be empty")
        if len(self.value) > 100:
            raise ValueError("Owner ID too long")

    def __str__(self) -> str:
        """Return owner id as string."""
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class LicenseTier(Enum):
    """Service level purchased; determines feature entitlement."""

    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"
    TRIAL = "trial"

    def __str__(self) -> str:
        """Return tier as string."""
        return self.value


class InvoiceStatus(Enum):
    """Invoice status value object."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class RenewalMode(Enum):
    """How a renewal computes the new expiry."""

    RESET = "reset"
    EXTEND = "extend"

    def __str__(self) -> str:
        """Return mode as string."""
        return self.value
