"""
Unit tests for InMemoryLicenseRepository.
"""
from datetime import timedelta

import pytest

from core.domain.exceptions import DuplicateLicenseError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License


@pytest.mark.asyncio
class TestInMemoryLicenseRepository:
    """Tests for InMemoryLicenseRepository."""

    async def test_add_and_get(self, license_repository, sample_license):
        await license_repository.add(sample_license)
        assert await license_repository.get(sample_license.key) == sample_license
        assert await license_repository.exists(sample_license.key)
        assert await license_repository.get("missing") is None

    async def test_duplicate_key(self, license_repository, sample_license):
        await license_repository.add(sample_license)
        with pytest.raises(DuplicateLicenseError):
            await license_repository.add(sample_license)

    async def test_update_unknown(self, license_repository, sample_license, now):
        with pytest.raises(LicenseNotFoundError):
            await license_repository.update_if_unchanged(sample_license, sample_license.suspend(now))

    async def test_one_running_trial_per_owner(self, license_repository, now):
        await license_repository.add(
            License.create_trial(key="TRIAL-0000000A", owner_id="a", days=7, now=now)
        )
        with pytest.raises(DuplicateLicenseError):
            await license_repository.add(
                License.create_trial(key="TRIAL-0000000B", owner_id="a", days=7, now=now)
            )

    async def test_reactivating_second_trial_conflicts(self, license_repository, now):
        first = License.create_trial(key="TRIAL-0000000A", owner_id="a", days=7, now=now)
        second = License.create_trial(key="TRIAL-0000000B", owner_id="a", days=7, now=now)
        expired = first.mark_expired()
        await license_repository.add(expired)
        await license_repository.add(second)

        with pytest.raises(DuplicateLicenseError):
            await license_repository.update_if_unchanged(expired, expired.renew(now, 7))

    async def test_find_by_owner_and_tier(self, license_repository, sample_license, now):
        await license_repository.add(sample_license)
        await license_repository.add(
            License.create_trial(key="TRIAL-0000000A", owner_id="u1", days=7, now=now)
        )

        premium = await license_repository.find_by_owner_and_tier("u1", LicenseTier.PREMIUM)
        trials = await license_repository.find_by_owner_and_tier(
            "u1", LicenseTier.TRIAL, LicenseStatus.ACTIVE
        )
        expired = await license_repository.find_by_owner_and_tier(
            "u1", LicenseTier.TRIAL, LicenseStatus.EXPIRED
        )

        assert [l.key for l in premium] == [sample_license.key]
        assert [l.key for l in trials] == ["TRIAL-0000000A"]
        assert expired == []

    async def test_count_by_status(self, license_repository, sample_license, now):
        await license_repository.add(sample_license)
        await license_repository.add(
            License.create(
                key="Dream-BBBB-BBBB-BBBB",
                owner_id="u2",
                tier=LicenseTier.BASIC,
                days=1,
                now=now - timedelta(days=3),
            ).mark_expired()
        )

        counts = await license_repository.count_by_status()

        assert counts == {"pending": 0, "active": 1, "suspended": 0, "expired": 1}

    async def test_update_if_unchanged_rejects_stale_read(
        self, license_repository, sample_license, now
    ):
        await license_repository.add(sample_license)
        assert await license_repository.update_if_unchanged(
            sample_license, sample_license.suspend(now)
        )

        assert not await license_repository.update_if_unchanged(
            sample_license, sample_license.renew(now, 30)
        )
        stored = await license_repository.get(sample_license.key)
        assert stored.status == LicenseStatus.SUSPENDED

    async def test_record_verification_only_on_active(
        self, license_repository, sample_license, now
    ):
        await license_repository.add(sample_license)
        assert await license_repository.record_verification(sample_license.key, now)
        assert (await license_repository.get(sample_license.key)).last_verified == now

        suspended = await license_repository.get(sample_license.key)
        await license_repository.update_if_unchanged(suspended, suspended.suspend(now))
        later = now + timedelta(hours=1)
        assert not await license_repository.record_verification(sample_license.key, later)
        assert (await license_repository.get(sample_license.key)).last_verified == now
        assert not await license_repository.record_verification("missing", now)

    async def test_expire_if_active_checks_expiry(self, license_repository, sample_license, now):
        await license_repository.add(sample_license)

        assert not await license_repository.expire_if_active(
            sample_license.key, sample_license.expires_at - timedelta(days=1)
        )
        assert await license_repository.expire_if_active(
            sample_license.key, sample_license.expires_at
        )
        assert not await license_repository.expire_if_active(
            sample_license.key, sample_license.expires_at
        )
        stored = await license_repository.get(sample_license.key)
        assert stored.status == LicenseStatus.EXPIRED
