"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from billing.domain.events import InvoiceCreated, InvoicePaid
from billing.infrastructure.repositories.in_memory_invoice_repository import (
    InMemoryInvoiceRepository,
)
from core.domain.events import EventHandler
from core.domain.value_objects import LicenseTier
from core.infrastructure.event_handlers import register_event_handlers
from core.infrastructure.events import event_bus
from core.infrastructure.stores import reset_stores
from licenses.domain.events import (
    LicenseExpired,
    LicenseIssued,
    LicenseRenewed,
    LicenseSuspended,
    LicenseVerified,
    TrialGranted,
)
from licenses.domain.license import License
from licenses.domain.services import LicenseKeyGenerator
from licenses.infrastructure.repositories.in_memory_license_repository import (
    InMemoryLicenseRepository,
)

ADMIN_KEY = "test-admin-key"

ALL_EVENTS = (
    LicenseIssued,
    TrialGranted,
    LicenseVerified,
    LicenseExpired,
    LicenseSuspended,
    LicenseRenewed,
    InvoiceCreated,
    InvoicePaid,
)


class RecordingHandler(EventHandler):
    """Collects every event it receives."""

    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


class SequenceKeyGenerator(LicenseKeyGenerator):
    """Key generator that hands out a fixed sequence of keys."""

    def __init__(self, keys=(), trial_tokens=()):
        super().__init__()
        self.keys = list(keys)
        self.trial_tokens = list(trial_tokens)

    def generate(self):
        return self.keys.pop(0)

    def generate_trial(self):
        return self.trial_tokens.pop(0)


class InterleavingLicenseRepository(InMemoryLicenseRepository):
    """In-memory store that lets another writer run right after the next read."""

    def __init__(self):
        super().__init__()
        self.after_read = None

    async def get(self, key):
        license = await super().get(key)
        hook, self.after_read = self.after_read, None
        if hook is not None:
            await hook()
        return license


@pytest.fixture
def sequence_key_generator():
    """Factory for key generators that hand out fixed keys."""
    return SequenceKeyGenerator


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def license_repository():
    """Fixture for an in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def invoice_repository():
    """Fixture for an in-memory InvoiceRepository."""
    return InMemoryInvoiceRepository()


@pytest.fixture
def sample_license(now):
    """Fixture for a premium License entity."""
    return License.create(
        key="Dream-ABCD-EFGH-JKLM",
        owner_id="u1",
        tier=LicenseTier.PREMIUM,
        days=30,
        now=now,
        price=Decimal("19.99"),
        email="owner@example.com",
    )


@pytest.fixture
def stored_license(license_repository, sample_license):
    """Fixture for a premium License saved in the in-memory store."""
    license_repository._licenses[sample_license.key] = sample_license
    return sample_license


@pytest.fixture
def recorded_events():
    """Replace the bus subscriptions with a recorder for the duration of a test."""
    recorder = RecordingHandler()
    event_bus.clear()
    for event_type in ALL_EVENTS:
        event_bus.subscribe(event_type, recorder)
    yield recorder
    event_bus.clear()
    register_event_handlers()


@pytest.fixture(autouse=True)
def fresh_stores():
    """Rebuild the shared repositories for every test."""
    reset_stores()
    yield
    reset_stores()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client():
    """API client that sends the admin key header on every request."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_ADMIN_KEY=ADMIN_KEY)
    return client


@pytest.fixture
def interleaving_repository(sample_license):
    """Store holding the sample license, with a hook that runs after the next read."""
    repository = InterleavingLicenseRepository()
    repository._licenses[sample_license.key] = sample_license
    return repository
