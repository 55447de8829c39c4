"""
Store wiring.

The backend behind the license and invoice ports is chosen once, from
the LICENSE_STORE_BACKEND setting, and shared by every request.
"""
import logging
from functools import lru_cache

from django.conf import settings

from billing.ports.invoice_repository import InvoiceRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

DJANGO_BACKEND = "django"
MEMORY_BACKEND = "memory"


def store_backend() -> str:
    """Configured backend name."""
    backend = getattr(settings, "LICENSE_STORE_BACKEND", DJANGO_BACKEND)
    if backend not in (DJANGO_BACKEND, MEMORY_BACKEND):
        raise ValueError(f"Unknown license store backend: {backend}")
    return backend


@lru_cache(maxsize=None)
def get_license_repository() -> LicenseRepository:
    """Shared license repository for the configured backend."""
    backend = store_backend()
    logger.info("Using %s license store", backend)
    if backend == MEMORY_BACKEND:
        from licenses.infrastructure.repositories.in_memory_license_repository import (
            InMemoryLicenseRepository,
        )

        return InMemoryLicenseRepository()

    from licenses.infrastructure.repositories.django_license_repository import (
        DjangoLicenseRepository,
    )

    return DjangoLicenseRepository()


@lru_cache(maxsize=None)
def get_invoice_repository() -> InvoiceRepository:
    """Shared invoice repository for the configured backend."""
    if store_backend() == MEMORY_BACKEND:
        from billing.infrastructure.repositories.in_memory_invoice_repository import (
            InMemoryInvoiceRepository,
        )

        return InMemoryInvoiceRepository()

    from billing.infrastructure.repositories.django_invoice_repository import (
        DjangoInvoiceRepository,
    )

    return DjangoInvoiceRepository()


def reset_stores() -> None:
    """Forget the shared repositories so the next call rebuilds them."""
    get_license_repository.cache_clear()
    get_invoice_repository.cache_clear()
