"""
In-memory implementation of LicenseRepository port.

Used for local runs without a database and for unit tests. It enforces
the same uniqueness rules as the database constraints.
"""
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from core.domain.exceptions import DuplicateLicenseError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository


def _is_running_trial(license: License) -> bool:
    return license.tier == LicenseTier.TRIAL and license.status == LicenseStatus.ACTIVE


def _guard(license: License) -> tuple:
    return (license.status, license.expires_at, license.invoice_count, license.notes)


class InMemoryLicenseRepository(LicenseRepository):
    """Dict-backed license store guarded by a lock."""

    def __init__(self):
        self._licenses: Dict[str, License] = {}
        self._lock = threading.Lock()

    def _check_trial_conflict(self, license: License) -> None:
        if not _is_running_trial(license):
            return
        for other in self._licenses.values():
            if (
                other.key != license.key
                and other.owner_id == license.owner_id
                and _is_running_trial(other)
            ):
                raise DuplicateLicenseError(
                    f"Owner {license.owner_id} already holds an active trial"
                )

    async def get(self, key: str) -> Optional[License]:
        with self._lock:
            return self._licenses.get(key)

    async def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._licenses

    async def add(self, license: License) -> License:
        with self._lock:
            if license.key in self._licenses:
                raise DuplicateLicenseError(f"License {license.key} already exists")
            self._check_trial_conflict(license)
            self._licenses[license.key] = license
            return license

    async def update_if_unchanged(self, current: License, updated: License) -> bool:
        if current.key != updated.key:
            raise ValueError("Cannot change a license key")
        with self._lock:
            stored = self._licenses.get(current.key)
            if stored is None:
                raise LicenseNotFoundError(f"License {current.key} not found")
            if _guard(stored) != _guard(current):
                return False
            self._check_trial_conflict(updated)
            self._licenses[updated.key] = replace(updated, last_verified=stored.last_verified)
            return True

    async def record_verification(self, key: str, verified_at: datetime) -> bool:
        with self._lock:
            stored = self._licenses.get(key)
            if stored is None or stored.status != LicenseStatus.ACTIVE:
                return False
            self._licenses[key] = replace(stored, last_verified=verified_at)
            return True

    async def expire_if_active(self, key: str, expires_at: datetime) -> bool:
        with self._lock:
            stored = self._licenses.get(key)
            if (
                stored is None
                or stored.status != LicenseStatus.ACTIVE
                or stored.expires_at != expires_at
            ):
                return False
            self._licenses[key] = stored.mark_expired()
            return True

    async def find_by_owner_and_tier(
        self,
        owner_id: str,
        tier: LicenseTier,
        status: Optional[LicenseStatus] = None,
    ) -> List[License]:
        with self._lock:
            matches = [
                license
                for license in self._licenses.values()
                if license.owner_id == owner_id
                and license.tier == tier
                and (status is None or license.status == status)
            ]
        return sorted(matches, key=lambda license: license.created_at, reverse=True)

    async def find_by_status(
        self, status: Optional[LicenseStatus], offset: int, limit: int
    ) -> Tuple[List[License], int]:
        with self._lock:
            matches = [
                license
                for license in self._licenses.values()
                if status is None or license.status == status
            ]
        matches.sort(key=lambda license: license.created_at, reverse=True)
        return matches[offset:offset + limit], len(matches)

    async def find_active_trials(self, now: datetime) -> List[License]:
        with self._lock:
            trials = [
                license
                for license in self._licenses.values()
                if _is_running_trial(license) and license.expires_at > now
            ]
        return sorted(trials, key=lambda license: license.expires_at)

    async def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in LicenseStatus}
        with self._lock:
            for license in self._licenses.values():
                counts[license.status.value] += 1
        return counts
