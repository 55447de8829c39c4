"""
Listing handlers for administrators.
"""
from datetime import datetime, timezone
from typing import List, Optional

from core.domain.exceptions import InvalidFieldError
from core.domain.value_objects import LicenseStatus
from licenses.application.dto.license_dto import ActiveTrialDTO, LicenseDTO, LicensePageDTO
from licenses.application.queries.list_active_trials import ListActiveTrialsQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500
ALL_FILTER = "all"


def parse_status_filter(value: Optional[str]) -> Optional[LicenseStatus]:
    """
    Map a filter value to a status; ``all`` (or nothing) means no filter.

    Raises:
        InvalidFieldError: INVALID_FILTER
    """
    text = (value or ALL_FILTER).strip().lower()
    if text == ALL_FILTER:
        return None
    try:
        return LicenseStatus(text)
    except ValueError as e:
        allowed = ", ".join([ALL_FILTER] + [status.value for status in LicenseStatus])
        raise InvalidFieldError("INVALID_FILTER", f"Filter must be one of: {allowed}") from e


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: ListLicensesQuery) -> LicensePageDTO:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            LicensePageDTO, newest licenses first
        """
        status = parse_status_filter(query.status_filter)
        limit = min(max(query.limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)
        page = max(query.page or 1, 1)

        licenses, total = await self.license_repository.find_by_status(
            status, offset=(page - 1) * limit, limit=limit
        )
        return LicensePageDTO(
            licenses=[LicenseDTO.from_entity(license) for license in licenses],
            total=total,
            page=page,
            limit=limit,
            status_filter=status.value if status else ALL_FILTER,
        )


class ListActiveTrialsHandler:
    """Handler for ListActiveTrialsQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: ListActiveTrialsQuery) -> List[ActiveTrialDTO]:
        now = query.now or datetime.now(timezone.utc)
        trials = await self.license_repository.find_active_trials(now)
        return [
            ActiveTrialDTO(
                key=trial.key,
                owner_id=trial.owner_id,
                owner_name=trial.owner_name,
                expires_at=trial.expires_at,
                days_left=trial.days_remaining(now),
            )
            for trial in trials
        ]
