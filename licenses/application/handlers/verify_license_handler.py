"""
VerifyLicenseHandler.

Answers a bot's "is my license valid right now?" question. Expiry is
detected lazily here; there is no background sweeper.
"""
import logging
from datetime import datetime, timezone

from core.domain.exceptions import MissingFieldError, StoreUnavailableError
from core.infrastructure.events import event_bus
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.dto.license_dto import VerificationResultDTO
from licenses.domain.events import LicenseExpired, LicenseVerified
from licenses.domain.services import LicenseValidator, PersistMode
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class VerifyLicenseHandler:
    """Handler for VerifyLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: VerifyLicenseCommand) -> VerificationResultDTO:
        """
        Handle verify license command.

        Args:
            command: VerifyLicenseCommand

        Returns:
            VerificationResultDTO; invalid answers carry a reason code

        Raises:
            MissingFieldError: MISSING_DATA if key or bot id is absent
            StoreUnavailableError: If the license cannot be looked up
        """
        if not command.license_key or not command.bot_id:
            raise MissingFieldError("MISSING_DATA", "License key and bot ID are required")

        now = command.now or datetime.now(timezone.utc)
        license = await self.license_repository.get(command.license_key)
        decision = LicenseValidator.evaluate(license, now)

        if decision.persist == PersistMode.REQUIRED:
            try:
                expired = await self.license_repository.expire_if_active(
                    license.key, license.expires_at
                )
            except StoreUnavailableError as e:
                # The answer is still "expired"; the next verify retries the write.
                logger.warning(
                    "Failed to persist expiry for license %s: %s",
                    command.license_key,
                    e.message,
                )
            else:
                if expired:
                    await event_bus.publish(
                        LicenseExpired(license_key=license.key, expired_at=now)
                    )
                else:
                    logger.info(
                        "License %s changed before expiry was recorded", command.license_key
                    )
        elif decision.persist == PersistMode.BEST_EFFORT:
            try:
                await self.license_repository.record_verification(license.key, now)
            except StoreUnavailableError as e:
                logger.warning(
                    "Failed to record last verification for license %s: %s",
                    command.license_key,
                    e.message,
                )

        if license is not None:
            await event_bus.publish(
                LicenseVerified(
                    license_key=license.key,
                    valid=decision.valid,
                    reason=decision.reason or "",
                    bot_id=command.bot_id,
                )
            )

        if not decision.valid:
            logger.info(
                "License verification failed",
                extra={"license_key": command.license_key, "reason": decision.reason},
            )
            return VerificationResultDTO(valid=False, reason=decision.reason)

        verified = decision.license
        return VerificationResultDTO(
            valid=True,
            expiry=verified.expires_at,
            tier=verified.tier.value,
            features=list(verified.features),
            days_remaining=verified.days_remaining(now),
        )
