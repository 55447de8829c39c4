"""
Unit tests for the listing handlers.
"""
from datetime import timedelta

import pytest

from core.domain.exceptions import InvalidFieldError
from core.domain.value_objects import LicenseTier
from licenses.application.handlers.list_licenses_handler import (
    MAX_PAGE_SIZE,
    ListActiveTrialsHandler,
    ListLicensesHandler,
    parse_status_filter,
)
from licenses.application.queries.list_active_trials import ListActiveTrialsQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.domain.license import License


async def _seed(repository, now, count, owner_prefix="u"):
    licenses = []
    for i in range(count):
        license = License.create(
            key=f"Dream-AAAA-AAAA-{i:04d}",
            owner_id=f"{owner_prefix}{i}",
            tier=LicenseTier.BASIC,
            days=30,
            now=now + timedelta(minutes=i),
        )
        licenses.append(await repository.add(license))
    return licenses


class TestParseStatusFilter:
    """Tests for parse_status_filter."""

    @pytest.mark.parametrize("value", [None, "", "all", "ALL"])
    def test_all(self, value):
        assert parse_status_filter(value) is None

    def test_status(self):
        assert parse_status_filter("Suspended").value == "suspended"

    def test_invalid(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            parse_status_filter("deleted")
        assert exc_info.value.code == "INVALID_FILTER"


@pytest.mark.asyncio
class TestListLicensesHandler:
    """Tests for ListLicensesHandler."""

    async def test_newest_first_with_paging(self, license_repository, now):
        seeded = await _seed(license_repository, now, 5)

        page = await ListLicensesHandler(license_repository).handle(
            ListLicensesQuery(page=1, limit=2)
        )

        assert page.total == 5
        assert page.count == 2
        assert page.total_pages == 3
        assert page.status_filter == "all"
        assert [dto.key for dto in page.licenses] == [seeded[4].key, seeded[3].key]

    async def test_last_page(self, license_repository, now):
        seeded = await _seed(license_repository, now, 5)
        page = await ListLicensesHandler(license_repository).handle(
            ListLicensesQuery(page=3, limit=2)
        )
        assert [dto.key for dto in page.licenses] == [seeded[0].key]

    async def test_status_filter(self, license_repository, now):
        seeded = await _seed(license_repository, now, 3)
        assert await license_repository.update_if_unchanged(seeded[1], seeded[1].suspend(now))

        page = await ListLicensesHandler(license_repository).handle(
            ListLicensesQuery(status_filter="suspended")
        )

        assert page.total == 1
        assert page.licenses[0].key == seeded[1].key
        assert page.licenses[0].status == "suspended"
        assert page.status_filter == "suspended"

    async def test_limit_is_clamped(self, license_repository):
        page = await ListLicensesHandler(license_repository).handle(
            ListLicensesQuery(limit=MAX_PAGE_SIZE * 10, page=0)
        )
        assert page.limit == MAX_PAGE_SIZE
        assert page.page == 1
        assert page.total_pages == 0

    async def test_invalid_filter(self, license_repository):
        with pytest.raises(InvalidFieldError):
            await ListLicensesHandler(license_repository).handle(
                ListLicensesQuery(status_filter="bogus")
            )


@pytest.mark.asyncio
class TestListActiveTrialsHandler:
    """Tests for ListActiveTrialsHandler."""

    async def test_only_running_trials(self, license_repository, now):
        running = License.create_trial(key="TRIAL-0000000A", owner_id="a", days=7, now=now)
        lapsed = License.create_trial(
            key="TRIAL-0000000B", owner_id="b", days=7, now=now - timedelta(days=8)
        )
        suspended = License.create_trial(
            key="TRIAL-0000000C", owner_id="c", days=7, now=now
        ).suspend(now)
        for license in (running, lapsed, suspended):
            await license_repository.add(license)
        await _seed(license_repository, now, 1)

        trials = await ListActiveTrialsHandler(license_repository).handle(
            ListActiveTrialsQuery(now=now + timedelta(days=1))
        )

        assert [t.key for t in trials] == ["TRIAL-0000000A"]
        assert trials[0].days_left == 6
        assert trials[0].owner_name == "Trial-User-a"
