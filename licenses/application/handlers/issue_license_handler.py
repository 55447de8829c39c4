"""
IssueLicenseHandler.

Handles the admin command that issues a paid license.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from core.domain.exceptions import (
    DuplicateLicenseError,
    InvalidFieldError,
    KeyGenerationFailedError,
)
from core.domain.value_objects import Email, LicenseTier
from core.infrastructure.events import event_bus
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.validation import positive_days, require_owner_id
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 5
DEFAULT_TIER = LicenseTier.PREMIUM
ISSUABLE_TIERS = (LicenseTier.BASIC, LicenseTier.PREMIUM, LicenseTier.ENTERPRISE)


def parse_tier(value: Optional[str]) -> LicenseTier:
    """
    Parse a requested tier; trials are only granted through IssueTrial.

    Raises:
        InvalidFieldError: INVALID_TIER
    """
    if not value:
        return DEFAULT_TIER
    try:
        tier = LicenseTier(str(value).strip().lower())
    except ValueError:
        tier = None
    if tier not in ISSUABLE_TIERS:
        raise InvalidFieldError(
            "INVALID_TIER",
            f"Tier must be one of: {', '.join(t.value for t in ISSUABLE_TIERS)}",
        )
    return tier


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        key_generator: LicenseKeyGenerator = None,
        default_days: int = 30,
    ):
        """Initialize handler with repository and key generator."""
        self.license_repository = license_repository
        self.key_generator = key_generator or LicenseKeyGenerator()
        self.default_days = default_days

    async def handle(self, command: IssueLicenseCommand) -> License:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            The persisted License entity

        Raises:
            MissingFieldError: MISSING_OWNER_ID
            InvalidFieldError: INVALID_TIER, INVALID_AMOUNT or INVALID_EMAIL
            KeyGenerationFailedError: If every key attempt collided
            StoreUnavailableError: If the store cannot be reached
        """
        owner_id = require_owner_id(command.owner_id)
        tier = parse_tier(command.tier)
        days = positive_days(command.days, self.default_days)

        price = Decimal(str(command.price)) if command.price is not None else Decimal("0")
        if price < 0:
            raise InvalidFieldError("INVALID_AMOUNT", "Price cannot be negative")

        email = (command.email or "").strip() or None
        if email is not None:
            try:
                Email(email)
            except ValueError as e:
                raise InvalidFieldError("INVALID_EMAIL", str(e)) from e

        now = command.now or datetime.now(timezone.utc)

        for attempt in range(1, MAX_KEY_ATTEMPTS + 1):
            key = self.key_generator.generate()
            if await self.license_repository.exists(key):
                logger.warning("Generated license key collided (attempt %d)", attempt)
                continue

            license = License.create(
                key=key,
                owner_id=owner_id,
                tier=tier,
                days=days,
                now=now,
                price=price,
                currency=command.currency or "USD",
                email=email,
                owner_name=command.owner_name,
            )
            try:
                saved = await self.license_repository.add(license)
            except DuplicateLicenseError:
                logger.warning("License key taken at insert time (attempt %d)", attempt)
                continue

            logger.info(
                "License issued",
                extra={"license_key": saved.key, "owner_id": owner_id, "tier": tier.value},
            )
            await event_bus.publish(
                LicenseIssued(
                    license_key=saved.key,
                    owner_id=owner_id,
                    tier=tier.value,
                    expires_at=saved.expires_at,
                )
            )
            return saved

        logger.error("Giving up on key generation after %d attempts", MAX_KEY_ATTEMPTS)
        raise KeyGenerationFailedError()
