"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity: verification decisions, trial eligibility
and key generation.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.domain.exceptions import TrialAlreadyActiveError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.domain.license_key import (
    DEFAULT_KEY_PREFIX,
    generate_license_key,
    generate_trial_token,
)

REASON_NOT_FOUND = "LICENSE_NOT_FOUND"
REASON_EXPIRED = "LICENSE_EXPIRED"


class PersistMode(Enum):
    """How urgently a verification decision must be written back."""

    NONE = "none"
    REQUIRED = "required"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class VerificationDecision:
    """Outcome of evaluating a license against the current time."""

    valid: bool
    reason: Optional[str] = None
    license: Optional[License] = None
    persist: PersistMode = PersistMode.NONE


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    def __init__(self, prefix: str = DEFAULT_KEY_PREFIX):
        self.prefix = prefix

    def generate(self) -> str:
        """Generate a paid license key."""
        return generate_license_key(self.prefix)

    @staticmethod
    def generate_trial() -> str:
        """Generate a trial token."""
        return generate_trial_token()


class LicenseValidator:
    """Domain service for license verification."""

    @staticmethod
    def evaluate(license: Optional[License], now: datetime) -> VerificationDecision:
        """
        Decide whether a license is valid right now.

        Expiry is detected lazily: an active license found past its expiry
        is transitioned to expired and must be written back. A license that
        is already expired short-circuits at the status check.

        Args:
            license: License entity, or None if the key was not found
            now: Current time

        Returns:
            VerificationDecision
        """
        if license is None:
            return VerificationDecision(valid=False, reason=REASON_NOT_FOUND)

        if license.status != LicenseStatus.ACTIVE:
            return VerificationDecision(
                valid=False,
                reason=f"LICENSE_{license.status.value.upper()}",
                license=license,
            )

        if license.is_expired_at(now):
            return VerificationDecision(
                valid=False,
                reason=REASON_EXPIRED,
                license=license.mark_expired(),
                persist=PersistMode.REQUIRED,
            )

        return VerificationDecision(
            valid=True,
            license=license.mark_verified(now),
            persist=PersistMode.BEST_EFFORT,
        )


class TrialPolicy:
    """Domain service enforcing one running trial per owner."""

    @staticmethod
    def ensure_can_grant(existing: Optional[License], now: datetime) -> None:
        """
        Check whether a new trial may be granted.

        Args:
            existing: The owner's active trial, if any
            now: Current time

        Raises:
            TrialAlreadyActiveError: If the existing trial is still in term
        """
        if existing is None or existing.status != LicenseStatus.ACTIVE:
            return
        if now < existing.expires_at:
            raise TrialAlreadyActiveError(expires_at=existing.expires_at)

