"""
License lifecycle handlers.

Handlers for suspend and renew license commands.
"""
import logging
from datetime import datetime, timezone

from core.domain.value_objects import RenewalMode
from core.infrastructure.events import event_bus
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.license_updates import change_license
from licenses.application.validation import require_text, strict_days
from licenses.domain.events import LicenseRenewed, LicenseSuspended
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class SuspendLicenseHandler:
    """Handler for SuspendLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: SuspendLicenseCommand) -> License:
        """
        Handle suspend license command.

        Suspension applies regardless of the current status, so suspending
        twice succeeds both times.

        Args:
            command: SuspendLicenseCommand

        Returns:
            Suspended License entity

        Raises:
            MissingFieldError: MISSING_LICENSE_KEY
            LicenseNotFoundError: If license not found
            ConcurrentUpdateError: If the license kept changing while being written
        """
        key = require_text(command.license_key, "MISSING_LICENSE_KEY", "License key is required")
        now = command.now or datetime.now(timezone.utc)
        suspended = await change_license(
            self.license_repository, key, lambda license: license.suspend(now)
        )

        logger.info("License suspended", extra={"license_key": key})
        await event_bus.publish(LicenseSuspended(license_key=key))
        return suspended


class RenewLicenseHandler:
    """Handler for RenewLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        default_days: int = 30,
        renewal_mode: RenewalMode = RenewalMode.RESET,
    ):
        """Initialize handler with repository and renewal settings."""
        self.license_repository = license_repository
        self.default_days = default_days
        self.renewal_mode = RenewalMode(renewal_mode)

    async def handle(self, command: RenewLicenseCommand) -> License:
        """
        Handle renew license command.

        Args:
            command: RenewLicenseCommand

        Returns:
            Renewed License entity, active again

        Raises:
            MissingFieldError: MISSING_LICENSE_KEY
            InvalidFieldError: INVALID_DAYS
            LicenseNotFoundError: If license not found
            ConcurrentUpdateError: If the license kept changing while being written
        """
        key = require_text(command.license_key, "MISSING_LICENSE_KEY", "License key is required")
        days = strict_days(command.days, self.default_days)
        now = command.now or datetime.now(timezone.utc)
        renewed = await change_license(
            self.license_repository,
            key,
            lambda license: license.renew(now, days, self.renewal_mode),
        )

        logger.info(
            "License renewed",
            extra={"license_key": key, "days": days, "mode": self.renewal_mode.value},
        )
        await event_bus.publish(
            LicenseRenewed(license_key=key, new_expiration=renewed.expires_at, source="admin")
        )
        return renewed
