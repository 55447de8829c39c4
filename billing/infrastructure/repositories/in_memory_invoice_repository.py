"""
In-memory implementation of InvoiceRepository port.
"""
import threading
from typing import Dict, Optional

from billing.domain.invoice import Invoice
from billing.ports.invoice_repository import InvoiceRepository
from core.domain.exceptions import (
    DuplicateInvoiceError,
    InvoiceNotFoundError,
    InvoiceNotPendingError,
)


class InMemoryInvoiceRepository(InvoiceRepository):
    """Dict-backed invoice store guarded by a lock."""

    def __init__(self):
        self._invoices: Dict[str, Invoice] = {}
        self._lock = threading.Lock()

    async def get(self, invoice_id: str) -> Optional[Invoice]:
        with self._lock:
            return self._invoices.get(invoice_id)

    async def add(self, invoice: Invoice) -> Invoice:
        with self._lock:
            if invoice.invoice_id in self._invoices:
                raise DuplicateInvoiceError(f"Invoice {invoice.invoice_id} already exists")
            self._invoices[invoice.invoice_id] = invoice
            return invoice

    async def settle(self, invoice: Invoice) -> Invoice:
        with self._lock:
            stored = self._invoices.get(invoice.invoice_id)
            if stored is None:
                raise InvoiceNotFoundError(f"Invoice {invoice.invoice_id} not found")
            if not stored.is_pending:
                raise InvoiceNotPendingError(f"Invoice {invoice.invoice_id} is no longer pending")
            self._invoices[invoice.invoice_id] = invoice
            return invoice
