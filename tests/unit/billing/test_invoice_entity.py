"""
Unit tests for Invoice entity.
"""
import re
from datetime import timedelta
from decimal import Decimal

import pytest

from billing.domain.invoice import Invoice, generate_invoice_id
from core.domain.exceptions import InvoiceNotPendingError
from core.domain.value_objects import InvoiceStatus


@pytest.fixture
def invoice(now):
    return Invoice.create(
        invoice_id="INV-20250101-0000BEEF",
        license_key="Dream-ABCD-EFGH-JKLM",
        amount=Decimal("19.99"),
        now=now,
    )


class TestInvoiceEntity:
    """Tests for Invoice entity."""

    def test_generate_invoice_id(self, now):
        invoice_id = generate_invoice_id(now)
        assert re.fullmatch(r"INV-20250101-[0-9A-F]{8}", invoice_id)

    def test_create(self, invoice, now):
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.is_pending
        assert invoice.due_date == now + timedelta(days=7)
        assert invoice.currency == "USD"
        assert invoice.paid_at is None

    def test_negative_amount_rejected(self, now):
        with pytest.raises(ValueError, match="negative"):
            Invoice.create(
                invoice_id="INV-20250101-0000BEEF",
                license_key="Dream-ABCD-EFGH-JKLM",
                amount=Decimal("-5"),
                now=now,
            )

    def test_due_days_must_be_positive(self, now):
        with pytest.raises(ValueError):
            Invoice.create(
                invoice_id="INV-20250101-0000BEEF",
                license_key="Dream-ABCD-EFGH-JKLM",
                amount=Decimal("5"),
                now=now,
                due_days=0,
            )

    def test_mark_paid(self, invoice, now):
        paid = invoice.mark_paid(now, payment_method="card", transaction_id="tx-1")
        assert paid.status == InvoiceStatus.PAID
        assert paid.paid_at == now
        assert paid.payment_method == "card"
        assert paid.transaction_id == "tx-1"
        assert invoice.is_pending

    def test_settles_only_once(self, invoice, now):
        paid = invoice.mark_paid(now)
        with pytest.raises(InvoiceNotPendingError, match="already paid"):
            paid.mark_paid(now)
