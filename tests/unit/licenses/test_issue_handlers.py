"""
Unit tests for IssueLicenseHandler and IssueTrialHandler.
"""
import re
from datetime import timedelta
from decimal import Decimal

import pytest

from core.domain.exceptions import (
    DuplicateLicenseError,
    InvalidFieldError,
    KeyGenerationFailedError,
    MissingFieldError,
    TrialAlreadyActiveError,
)
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.issue_trial import IssueTrialCommand
from licenses.application.handlers.issue_license_handler import (
    MAX_KEY_ATTEMPTS,
    IssueLicenseHandler,
    parse_tier,
)
from licenses.application.handlers.issue_trial_handler import IssueTrialHandler
from licenses.domain.events import LicenseExpired, LicenseIssued, TrialGranted
from licenses.domain.license import License
from licenses.infrastructure.repositories.in_memory_license_repository import (
    InMemoryLicenseRepository,
)


class InsertRaceRepository(InMemoryLicenseRepository):
    """Store where another writer takes the key between exists() and add()."""

    def __init__(self, taken):
        super().__init__()
        self.taken = set(taken)

    async def add(self, license):
        if license.key in self.taken:
            self.taken.discard(license.key)
            raise DuplicateLicenseError()
        return await super().add(license)


class TestParseTier:
    """Tests for parse_tier."""

    def test_default_tier(self):
        assert parse_tier(None) == LicenseTier.PREMIUM
        assert parse_tier("") == LicenseTier.PREMIUM

    def test_case_insensitive(self):
        assert parse_tier(" Enterprise ") == LicenseTier.ENTERPRISE

    @pytest.mark.parametrize("value", ["gold", "trial"])
    def test_rejected_tiers(self, value):
        with pytest.raises(InvalidFieldError) as exc_info:
            parse_tier(value)
        assert exc_info.value.code == "INVALID_TIER"


@pytest.mark.asyncio
class TestIssueLicenseHandler:
    """Tests for IssueLicenseHandler."""

    async def test_issue_license(self, license_repository, recorded_events, now):
        handler = IssueLicenseHandler(license_repository)
        license = await handler.handle(
            IssueLicenseCommand(
                owner_id="u1",
                tier="basic",
                days=90,
                price=Decimal("9.99"),
                email="owner@example.com",
                owner_name="Owner",
                now=now,
            )
        )

        assert re.fullmatch(r"Dream(-[A-HJ-NP-Z2-9]{4}){3}", license.key)
        assert license.status == LicenseStatus.ACTIVE
        assert license.expires_at == now + timedelta(days=90)
        assert license.price == Decimal("9.99")
        assert license.owner_name == "Owner"
        assert await license_repository.get(license.key) == license

        issued = recorded_events.of_type(LicenseIssued)
        assert len(issued) == 1
        assert issued[0].tier == "basic"

    async def test_defaults(self, license_repository, now):
        license = await IssueLicenseHandler(license_repository, default_days=30).handle(
            IssueLicenseCommand(owner_id="u1", now=now)
        )
        assert license.tier == LicenseTier.PREMIUM
        assert license.expires_at == now + timedelta(days=30)
        assert license.email is None

    @pytest.mark.parametrize("days", [0, -5, None])
    async def test_non_positive_days_fall_back_to_default(self, license_repository, now, days):
        license = await IssueLicenseHandler(license_repository, default_days=30).handle(
            IssueLicenseCommand(owner_id="u1", days=days, now=now)
        )
        assert license.expires_at == now + timedelta(days=30)

    async def test_overlong_term_rejected(self, license_repository, now):
        with pytest.raises(InvalidFieldError) as exc_info:
            await IssueLicenseHandler(license_repository).handle(
                IssueLicenseCommand(owner_id="u1", days=5_000_000, now=now)
            )
        assert exc_info.value.code == "INVALID_DAYS"
        assert not await license_repository.find_by_owner_and_tier("u1", LicenseTier.PREMIUM)

    async def test_missing_owner(self, license_repository):
        with pytest.raises(MissingFieldError) as exc_info:
            await IssueLicenseHandler(license_repository).handle(IssueLicenseCommand(owner_id=" "))
        assert exc_info.value.code == "MISSING_OWNER_ID"

    async def test_invalid_email(self, license_repository):
        with pytest.raises(InvalidFieldError) as exc_info:
            await IssueLicenseHandler(license_repository).handle(
                IssueLicenseCommand(owner_id="u1", email="not-an-email")
            )
        assert exc_info.value.code == "INVALID_EMAIL"

    async def test_negative_price(self, license_repository):
        with pytest.raises(InvalidFieldError) as exc_info:
            await IssueLicenseHandler(license_repository).handle(
                IssueLicenseCommand(owner_id="u1", price=Decimal("-1"))
            )
        assert exc_info.value.code == "INVALID_AMOUNT"

    async def test_retries_on_existing_key(
        self, license_repository, stored_license, sequence_key_generator, now
    ):
        generator = sequence_key_generator(keys=[stored_license.key, "Dream-NEWK-EYAB-CDEF"])
        license = await IssueLicenseHandler(license_repository, key_generator=generator).handle(
            IssueLicenseCommand(owner_id="u2", now=now)
        )
        assert license.key == "Dream-NEWK-EYAB-CDEF"

    async def test_retries_on_insert_race(self, sequence_key_generator, now):
        repository = InsertRaceRepository(taken=["Dream-AAAA-AAAA-AAAA"])
        generator = sequence_key_generator(keys=["Dream-AAAA-AAAA-AAAA", "Dream-BBBB-BBBB-BBBB"])
        license = await IssueLicenseHandler(repository, key_generator=generator).handle(
            IssueLicenseCommand(owner_id="u2", now=now)
        )
        assert license.key == "Dream-BBBB-BBBB-BBBB"

    async def test_gives_up_after_max_attempts(
        self, license_repository, stored_license, sequence_key_generator
    ):
        generator = sequence_key_generator(keys=[stored_license.key] * MAX_KEY_ATTEMPTS)
        with pytest.raises(KeyGenerationFailedError):
            await IssueLicenseHandler(license_repository, key_generator=generator).handle(
                IssueLicenseCommand(owner_id="u2")
            )

    async def test_keys_are_unique_over_many_issues(self, license_repository, now):
        handler = IssueLicenseHandler(license_repository)
        keys = set()
        for i in range(1000):
            license = await handler.handle(IssueLicenseCommand(owner_id=f"owner-{i}", now=now))
            keys.add(license.key)
        assert len(keys) == 1000


@pytest.mark.asyncio
class TestIssueTrialHandler:
    """Tests for IssueTrialHandler."""

    async def test_grant_trial(self, license_repository, recorded_events, now):
        handler = IssueTrialHandler(license_repository, download_link="https://example.com/bot.zip")
        trial = await handler.handle(IssueTrialCommand(owner_id="4242", name="Alex", now=now))

        assert re.fullmatch(r"TRIAL-[0-9A-F]{8}", trial.license_key)
        assert trial.owner_name == "Alex"
        assert trial.days == 7
        assert trial.expires_at == now + timedelta(days=7)
        assert trial.features == ["basic_access", "trial_features"]
        assert trial.download_link == "https://example.com/bot.zip"

        stored = await license_repository.get(trial.license_key)
        assert stored.tier == LicenseTier.TRIAL
        assert stored.price == Decimal("0")
        assert len(recorded_events.of_type(TrialGranted)) == 1

    async def test_missing_discord_id(self, license_repository):
        with pytest.raises(MissingFieldError) as exc_info:
            await IssueTrialHandler(license_repository).handle(IssueTrialCommand(owner_id=""))
        assert exc_info.value.code == "MISSING_DISCORD_ID"

    async def test_second_trial_within_term_rejected(self, license_repository, now):
        handler = IssueTrialHandler(license_repository)
        first = await handler.handle(IssueTrialCommand(owner_id="4242", now=now))

        with pytest.raises(TrialAlreadyActiveError) as exc_info:
            await handler.handle(IssueTrialCommand(owner_id="4242", now=now + timedelta(days=6)))

        assert exc_info.value.code == "TRIAL_ALREADY_ACTIVE"
        assert exc_info.value.expires_at == first.expires_at

    async def test_trial_after_lapse_succeeds(self, license_repository, recorded_events, now):
        handler = IssueTrialHandler(license_repository)
        first = await handler.handle(IssueTrialCommand(owner_id="4242", now=now))

        second = await handler.handle(
            IssueTrialCommand(owner_id="4242", now=first.expires_at + timedelta(seconds=1))
        )

        assert second.license_key != first.license_key
        old = await license_repository.get(first.license_key)
        assert old.status == LicenseStatus.EXPIRED
        assert [e.license_key for e in recorded_events.of_type(LicenseExpired)] == [
            first.license_key
        ]

    async def test_trial_at_exact_expiry_succeeds(self, license_repository, now):
        handler = IssueTrialHandler(license_repository)
        first = await handler.handle(IssueTrialCommand(owner_id="4242", now=now))
        await handler.handle(IssueTrialCommand(owner_id="4242", now=first.expires_at))

    async def test_other_owners_are_independent(self, license_repository, now):
        handler = IssueTrialHandler(license_repository)
        await handler.handle(IssueTrialCommand(owner_id="4242", now=now))
        await handler.handle(IssueTrialCommand(owner_id="9999", now=now))

    async def test_suspended_trial_does_not_block(self, license_repository, now):
        handler = IssueTrialHandler(license_repository)
        first = await handler.handle(IssueTrialCommand(owner_id="4242", now=now))
        stored = await license_repository.get(first.license_key)
        assert await license_repository.update_if_unchanged(stored, stored.suspend(now))

        await handler.handle(IssueTrialCommand(owner_id="4242", now=now))

    async def test_concurrent_grant_reports_active_trial(
        self, license_repository, sequence_key_generator, now
    ):
        class RacingRepository(InMemoryLicenseRepository):
            """Another request inserts a trial right before ours."""

            async def add(self, license):
                rival = License.create_trial(
                    key="TRIAL-00000001", owner_id=license.owner_id, days=7, now=now
                )
                await super().add(rival)
                return await super().add(license)

        generator = sequence_key_generator(trial_tokens=["TRIAL-00000002"])
        with pytest.raises(TrialAlreadyActiveError):
            await IssueTrialHandler(RacingRepository(), key_generator=generator).handle(
                IssueTrialCommand(owner_id="4242", now=now)
            )
