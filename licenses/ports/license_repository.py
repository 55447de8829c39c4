"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every method is a single round-trip; adapters translate their own
    failures into StoreUnavailableError.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if a license key is already taken.

        Args:
            key: License key

        Returns:
            True if a license with this key exists
        """
        pass

    @abstractmethod
    async def add(self, license: License) -> License:
        """
        Insert a new license.

        Args:
            license: License entity to insert

        Returns:
            Inserted license entity

        Raises:
            DuplicateLicenseError: If the key is taken, or the owner already
                holds an active trial and ``license`` is an active trial
        """
        pass

    @abstractmethod
    async def update_if_unchanged(self, current: License, updated: License) -> bool:
        """
        Compare-and-set: write ``updated`` only if the stored record still
        matches ``current``.

        The stored status, expiry, invoice count and notes are compared
        against ``current`` and the write happens in the same atomic step.
        ``last_verified`` is neither compared nor written.

        Args:
            current: The license as it was read
            updated: The transitioned license to store

        Returns:
            True if the write happened, False if the record changed meanwhile

        Raises:
            LicenseNotFoundError: If no license has this key
            DuplicateLicenseError: If the write would break a uniqueness rule
        """
        pass

    @abstractmethod
    async def record_verification(self, key: str, verified_at: datetime) -> bool:
        """
        Set ``last_verified`` on a license that is still active.

        Returns:
            True if an active license was updated
        """
        pass

    @abstractmethod
    async def expire_if_active(self, key: str, expires_at: datetime) -> bool:
        """
        Move a license to expired if it is still active with the given expiry.

        A suspension or renewal that landed after the caller's read makes
        this a no-op.

        Args:
            key: License key
            expires_at: Expiry the caller saw when it decided to expire

        Returns:
            True if the license was expired by this call
        """
        pass

    @abstractmethod
    async def find_by_owner_and_tier(
        self,
        owner_id: str,
        tier: LicenseTier,
        status: Optional[LicenseStatus] = None,
    ) -> List[License]:
        """
        Find an owner's licenses of one tier, newest first.

        Args:
            owner_id: Owner identifier
            tier: License tier
            status: Optional status filter

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def find_by_status(
        self, status: Optional[LicenseStatus], offset: int, limit: int
    ) -> Tuple[List[License], int]:
        """
        Page through licenses, newest first.

        Args:
            status: Status filter, or None for all licenses
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (page of License entities, total matching count)
        """
        pass

    @abstractmethod
    async def find_active_trials(self, now: datetime) -> List[License]:
        """
        Find running trials, soonest expiry first.

        Args:
            now: Current time

        Returns:
            Active trial licenses with expiry after ``now``
        """
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[str, int]:
        """
        Count licenses per status.

        Returns:
            Mapping of status value to count (every status present)
        """
        pass
