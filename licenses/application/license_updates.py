"""
Read-modify-write for a single license.

Transitions are computed from a fresh read and stored with a
compare-and-set, retried while other writers keep getting in first.
"""
import logging
from typing import Callable

from core.domain.exceptions import ConcurrentUpdateError, LicenseNotFoundError
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MAX_UPDATE_ATTEMPTS = 5


async def change_license(
    repository: LicenseRepository,
    key: str,
    transition: Callable[[License], License],
    attempts: int = MAX_UPDATE_ATTEMPTS,
) -> License:
    """
    Apply ``transition`` to the stored license and persist the result.

    Args:
        repository: License store
        key: License key
        transition: Pure function from the current license to the new one
        attempts: Compare-and-set attempts before giving up

    Returns:
        The license as written

    Raises:
        LicenseNotFoundError: If no license has this key
        ConcurrentUpdateError: If every attempt lost to another writer
    """
    for attempt in range(1, attempts + 1):
        current = await repository.get(key)
        if current is None:
            raise LicenseNotFoundError(f"License {key} not found")
        updated = transition(current)
        if await repository.update_if_unchanged(current, updated):
            return updated
        logger.info("License %s changed during update (attempt %d)", key, attempt)
    raise ConcurrentUpdateError(f"License {key} was modified concurrently, please retry")
