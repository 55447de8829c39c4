"""
Database utilities and store error translation.
"""

import contextlib
import functools
import logging
from typing import Callable, Iterator, Optional

from django.db import DatabaseError, IntegrityError

from core.domain.exceptions import DomainException, StoreUnavailableError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def store_errors(
    on_integrity_error: Optional[Callable[[], DomainException]] = None,
) -> Iterator[None]:
    """
    Translate ORM failures into domain exceptions.

    Usage:
        with store_errors(DuplicateLicenseError):
            LicenseModel.objects.create(...)

    Args:
        on_integrity_error: Factory for the exception raised on a uniqueness
            violation. Without one, integrity errors count as store failures.

    Raises:
        StoreUnavailableError: On any database error
    """
    try:
        yield
    except IntegrityError as e:
        if on_integrity_error is not None:
            raise on_integrity_error() from e
        logger.error("Store integrity error: %s", e)
        raise StoreUnavailableError() from e
    except DatabaseError as e:
        logger.error("Store unavailable: %s", e)
        raise StoreUnavailableError() from e


def translate_store_errors(func):
    """
    Decorator form of store_errors for synchronous repository methods.

    Integrity errors are treated as store failures; methods that expect
    uniqueness violations use the context manager directly.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with store_errors():
            return func(*args, **kwargs)

    return wrapper
