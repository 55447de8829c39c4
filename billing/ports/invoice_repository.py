"""
Invoice repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional

from billing.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """Abstract repository for Invoice entities."""

    @abstractmethod
    async def get(self, invoice_id: str) -> Optional[Invoice]:
        """
        Find an invoice by id.

        Args:
            invoice_id: Invoice id

        Returns:
            Invoice entity or None if not found
        """
        pass

    @abstractmethod
    async def add(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice.

        Raises:
            DuplicateInvoiceError: If the invoice id is taken
        """
        pass

    @abstractmethod
    async def settle(self, invoice: Invoice) -> Invoice:
        """
        Store a settled invoice, only if the stored one is still pending.

        The pending check and the write are a single atomic update, so of
        two concurrent settlements exactly one succeeds.

        Args:
            invoice: Invoice in its settled state

        Returns:
            Settled invoice entity

        Raises:
            InvoiceNotFoundError: If no invoice has this id
            InvoiceNotPendingError: If the stored invoice was already settled
        """
        pass
