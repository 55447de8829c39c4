"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import (
    Email,
    InvoiceStatus,
    LicenseStatus,
    LicenseTier,
    OwnerId,
    RenewalMode,
)


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")


class TestOwnerId:
    """Tests for OwnerId value object."""

    def test_valid_owner_id(self):
        owner_id = OwnerId("123456789012345678")
        assert str(owner_id) == "123456789012345678"

    def test_blank_owner_id(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            OwnerId("   ")

    def test_owner_id_too_long(self):
        with pytest.raises(ValueError, match="too long"):
            OwnerId("x" * 101)

    def test_equality_and_hash(self):
        assert OwnerId("u1") == OwnerId("u1")
        assert hash(OwnerId("u1")) == hash(OwnerId("u1"))
        assert OwnerId("u1") != OwnerId("u2")


class TestEnums:
    """Tests for the status and tier enums."""

    def test_license_status_values(self):
        assert {s.value for s in LicenseStatus} == {"pending", "active", "suspended", "expired"}
        assert str(LicenseStatus.ACTIVE) == "active"

    def test_license_tier_values(self):
        assert {t.value for t in LicenseTier} == {"basic", "premium", "enterprise", "trial"}

    def test_invoice_status_values(self):
        assert {s.value for s in InvoiceStatus} == {"pending", "paid", "failed", "refunded"}

    def test_renewal_mode_from_string(self):
        assert RenewalMode("extend") is RenewalMode.EXTEND
        with pytest.raises(ValueError):
            RenewalMode("forever")
