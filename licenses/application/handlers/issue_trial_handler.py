"""
IssueTrialHandler.

Grants self-service trials, at most one running trial per owner.
"""
import logging
from datetime import datetime, timezone

from core.domain.exceptions import (
    DuplicateLicenseError,
    KeyGenerationFailedError,
    TrialAlreadyActiveError,
)
from core.domain.value_objects import LicenseStatus, LicenseTier
from core.infrastructure.events import event_bus
from licenses.application.commands.issue_trial import IssueTrialCommand
from licenses.application.dto.license_dto import TrialDTO
from licenses.application.handlers.issue_license_handler import MAX_KEY_ATTEMPTS
from licenses.application.validation import require_owner_id
from licenses.domain.events import LicenseExpired, TrialGranted
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator, TrialPolicy
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_LINK = "https://your-site.com/trial-bot.zip"


class IssueTrialHandler:
    """Handler for IssueTrialCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        key_generator: LicenseKeyGenerator = None,
        trial_days: int = 7,
        download_link: str = DEFAULT_DOWNLOAD_LINK,
    ):
        """Initialize handler with repository and trial settings."""
        self.license_repository = license_repository
        self.key_generator = key_generator or LicenseKeyGenerator()
        self.trial_days = trial_days
        self.download_link = download_link

    async def _running_trials(self, owner_id: str):
        return await self.license_repository.find_by_owner_and_tier(
            owner_id, LicenseTier.TRIAL, LicenseStatus.ACTIVE
        )

    async def handle(self, command: IssueTrialCommand) -> TrialDTO:
        """
        Handle issue trial command.

        A trial that is still marked active but has run out of term is
        committed to expired before the new one is inserted, so the
        store-level one-active-trial constraint admits the new trial.

        Args:
            command: IssueTrialCommand

        Returns:
            TrialDTO

        Raises:
            MissingFieldError: MISSING_DISCORD_ID
            TrialAlreadyActiveError: If a trial is still running
            KeyGenerationFailedError: If every token attempt collided
            StoreUnavailableError: If the store cannot be reached
        """
        owner_id = require_owner_id(command.owner_id, missing_code="MISSING_DISCORD_ID")
        now = command.now or datetime.now(timezone.utc)

        for existing in await self._running_trials(owner_id):
            TrialPolicy.ensure_can_grant(existing, now)
            if await self.license_repository.expire_if_active(existing.key, existing.expires_at):
                await event_bus.publish(LicenseExpired(license_key=existing.key, expired_at=now))

        for attempt in range(1, MAX_KEY_ATTEMPTS + 1):
            token = self.key_generator.generate_trial()
            if await self.license_repository.exists(token):
                logger.warning("Generated trial token collided (attempt %d)", attempt)
                continue

            trial = License.create_trial(
                key=token,
                owner_id=owner_id,
                days=self.trial_days,
                now=now,
                owner_name=(command.name or "").strip() or None,
            )
            try:
                saved = await self.license_repository.add(trial)
            except DuplicateLicenseError:
                running = await self._running_trials(owner_id)
                if running:
                    # A concurrent request for the same owner won the race.
                    raise TrialAlreadyActiveError(expires_at=running[0].expires_at)
                continue

            logger.info(
                "Trial granted",
                extra={"license_key": saved.key, "owner_id": owner_id},
            )
            await event_bus.publish(
                TrialGranted(
                    license_key=saved.key,
                    owner_id=owner_id,
                    expires_at=saved.expires_at,
                )
            )
            return TrialDTO(
                license_key=saved.key,
                owner_id=saved.owner_id,
                owner_name=saved.owner_name,
                expires_at=saved.expires_at,
                days=self.trial_days,
                features=list(saved.features),
                download_link=self.download_link,
            )

        raise KeyGenerationFailedError("Failed to generate a unique trial token")
