"""
Unit tests for VerifyLicenseHandler.
"""
from datetime import timedelta

import pytest

from core.domain.exceptions import MissingFieldError, StoreUnavailableError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.domain.events import LicenseExpired, LicenseVerified
from licenses.infrastructure.repositories.in_memory_license_repository import (
    InMemoryLicenseRepository,
)


class WritesFailRepository(InMemoryLicenseRepository):
    """Store whose writes are unavailable."""

    async def expire_if_active(self, key, expires_at):
        raise StoreUnavailableError()

    async def record_verification(self, key, verified_at):
        raise StoreUnavailableError()


class ReadFailsRepository(InMemoryLicenseRepository):
    """Store whose reads are unavailable."""

    async def get(self, key):
        raise StoreUnavailableError()


@pytest.mark.asyncio
class TestVerifyLicenseHandler:
    """Tests for VerifyLicenseHandler."""

    @pytest.mark.parametrize("key,bot_id", [("", "bot-1"), ("Dream-ABCD-EFGH-JKLM", ""), ("", "")])
    async def test_missing_data(self, license_repository, key, bot_id):
        handler = VerifyLicenseHandler(license_repository)
        with pytest.raises(MissingFieldError) as exc_info:
            await handler.handle(VerifyLicenseCommand(license_key=key, bot_id=bot_id))
        assert exc_info.value.code == "MISSING_DATA"

    async def test_unknown_key(self, license_repository, recorded_events, now):
        handler = VerifyLicenseHandler(license_repository)
        result = await handler.handle(
            VerifyLicenseCommand(license_key="Dream-ZZZZ-ZZZZ-ZZZZ", bot_id="bot-1", now=now)
        )

        assert not result.valid
        assert result.reason == "LICENSE_NOT_FOUND"
        assert recorded_events.of_type(LicenseVerified) == []

    async def test_valid_license(self, license_repository, stored_license, recorded_events, now):
        handler = VerifyLicenseHandler(license_repository)
        at = now + timedelta(days=10)

        result = await handler.handle(
            VerifyLicenseCommand(license_key=stored_license.key, bot_id="bot-1", now=at)
        )

        assert result.valid
        assert result.reason is None
        assert result.tier == "premium"
        assert result.features == ["basic_access", "premium_features", "priority_support"]
        assert result.expiry == stored_license.expires_at
        assert result.days_remaining == 20

        persisted = await license_repository.get(stored_license.key)
        assert persisted.last_verified == at
        verified = recorded_events.of_type(LicenseVerified)
        assert len(verified) == 1
        assert verified[0].valid
        assert verified[0].bot_id == "bot-1"

    async def test_lazy_expiry_is_persisted(
        self, license_repository, stored_license, recorded_events, now
    ):
        handler = VerifyLicenseHandler(license_repository)
        command = VerifyLicenseCommand(
            license_key=stored_license.key, bot_id="bot-1", now=now + timedelta(days=31)
        )

        result = await handler.handle(command)

        assert not result.valid
        assert result.reason == "LICENSE_EXPIRED"
        persisted = await license_repository.get(stored_license.key)
        assert persisted.status == LicenseStatus.EXPIRED
        assert len(recorded_events.of_type(LicenseExpired)) == 1

    async def test_verify_is_idempotent_on_expired(
        self, license_repository, stored_license, recorded_events, now
    ):
        handler = VerifyLicenseHandler(license_repository)
        command = VerifyLicenseCommand(
            license_key=stored_license.key, bot_id="bot-1", now=now + timedelta(days=31)
        )

        first = await handler.handle(command)
        second = await handler.handle(command)

        assert first == second
        assert len(recorded_events.of_type(LicenseExpired)) == 1

    async def test_suspended_license(self, license_repository, stored_license, now):
        assert await license_repository.update_if_unchanged(
            stored_license, stored_license.suspend(now)
        )
        handler = VerifyLicenseHandler(license_repository)

        result = await handler.handle(
            VerifyLicenseCommand(license_key=stored_license.key, bot_id="bot-1", now=now)
        )

        assert not result.valid
        assert result.reason == "LICENSE_SUSPENDED"

    async def test_expiry_write_failure_still_answers_expired(
        self, sample_license, recorded_events, now
    ):
        repository = WritesFailRepository()
        await repository.add(sample_license)
        handler = VerifyLicenseHandler(repository)

        result = await handler.handle(
            VerifyLicenseCommand(
                license_key=sample_license.key, bot_id="bot-1", now=now + timedelta(days=31)
            )
        )

        assert result.reason == "LICENSE_EXPIRED"
        assert recorded_events.of_type(LicenseExpired) == []

    async def test_last_verified_write_failure_still_valid(self, sample_license, now):
        repository = WritesFailRepository()
        await repository.add(sample_license)
        handler = VerifyLicenseHandler(repository)

        result = await handler.handle(
            VerifyLicenseCommand(license_key=sample_license.key, bot_id="bot-1", now=now)
        )

        assert result.valid

    async def test_lookup_failure_propagates(self):
        handler = VerifyLicenseHandler(ReadFailsRepository())
        with pytest.raises(StoreUnavailableError):
            await handler.handle(
                VerifyLicenseCommand(license_key="Dream-ABCD-EFGH-JKLM", bot_id="bot-1")
            )

    async def test_issued_premium_license_expires_after_term(self, license_repository, now):
        """Issue a 30-day premium license, then verify it a day after the term ends."""
        issued = await IssueLicenseHandler(license_repository).handle(
            IssueLicenseCommand(owner_id="u1", tier="premium", days=30, now=now)
        )
        assert issued.tier == LicenseTier.PREMIUM
        assert issued.features == ("basic_access", "premium_features", "priority_support")
        assert issued.expires_at == now + timedelta(days=30)

        result = await VerifyLicenseHandler(license_repository).handle(
            VerifyLicenseCommand(license_key=issued.key, bot_id="bot-1", now=now + timedelta(days=31))
        )

        assert not result.valid
        assert result.reason == "LICENSE_EXPIRED"
        assert (await license_repository.get(issued.key)).status == LicenseStatus.EXPIRED


@pytest.mark.asyncio
class TestVerifyAgainstConcurrentAdmin:
    """Verify writes must not undo an admin change made after its read."""

    async def test_suspend_during_verify_survives(
        self, interleaving_repository, sample_license, now
    ):
        async def suspend():
            await SuspendLicenseHandler(interleaving_repository).handle(
                SuspendLicenseCommand(license_key=sample_license.key, now=now)
            )

        interleaving_repository.after_read = suspend
        result = await VerifyLicenseHandler(interleaving_repository).handle(
            VerifyLicenseCommand(license_key=sample_license.key, bot_id="bot-1", now=now)
        )

        assert result.valid
        stored = await interleaving_repository.get(sample_license.key)
        assert stored.status == LicenseStatus.SUSPENDED
        assert stored.last_verified is None

    async def test_renew_during_expiring_verify_survives(
        self, interleaving_repository, sample_license, recorded_events, now
    ):
        at = now + timedelta(days=31)

        async def renew():
            await RenewLicenseHandler(interleaving_repository).handle(
                RenewLicenseCommand(license_key=sample_license.key, days=30, now=at)
            )

        interleaving_repository.after_read = renew
        result = await VerifyLicenseHandler(interleaving_repository).handle(
            VerifyLicenseCommand(license_key=sample_license.key, bot_id="bot-1", now=at)
        )

        assert result.reason == "LICENSE_EXPIRED"
        stored = await interleaving_repository.get(sample_license.key)
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.expires_at == at + timedelta(days=30)
        assert recorded_events.of_type(LicenseExpired) == []
