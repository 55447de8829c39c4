"""
Django implementation of InvoiceRepository port.
"""
from decimal import Decimal
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from billing.domain.invoice import Invoice
from billing.infrastructure.models import Invoice as InvoiceModel
from billing.ports.invoice_repository import InvoiceRepository
from core.domain.exceptions import (
    DuplicateInvoiceError,
    InvoiceNotFoundError,
    InvoiceNotPendingError,
)
from core.domain.value_objects import InvoiceStatus
from core.infrastructure.database import store_errors, translate_store_errors


class DjangoInvoiceRepository(InvoiceRepository):
    """Django ORM implementation of InvoiceRepository."""

    def _to_domain(self, model: InvoiceModel) -> Invoice:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Invoice model

        Returns:
            Invoice domain entity
        """
        return Invoice(
            invoice_id=model.invoice_id,
            license_key=model.license_key,
            amount=Decimal(model.amount),
            currency=model.currency,
            due_date=model.due_date,
            created_at=model.created_at,
            status=InvoiceStatus(model.status),
            paid_at=model.paid_at,
            payment_method=model.payment_method,
            transaction_id=model.transaction_id,
        )

    def _to_fields(self, invoice: Invoice) -> dict:
        return {
            "license_key": invoice.license_key,
            "amount": invoice.amount,
            "currency": invoice.currency,
            "status": invoice.status.value,
            "due_date": invoice.due_date,
            "paid_at": invoice.paid_at,
            "payment_method": invoice.payment_method,
            "transaction_id": invoice.transaction_id,
            "created_at": invoice.created_at,
        }

    @sync_to_async
    @translate_store_errors
    def get(self, invoice_id: str) -> Optional[Invoice]:
        try:
            return self._to_domain(InvoiceModel.objects.get(invoice_id=invoice_id))
        except InvoiceModel.DoesNotExist:
            return None

    @sync_to_async
    def add(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice.

        Args:
            invoice: Invoice entity to insert

        Returns:
            Inserted invoice entity
        """
        with store_errors(
            lambda: DuplicateInvoiceError(f"Invoice {invoice.invoice_id} already exists")
        ):
            with transaction.atomic():
                model = InvoiceModel.objects.create(
                    invoice_id=invoice.invoice_id, **self._to_fields(invoice)
                )
        return self._to_domain(model)

    @sync_to_async
    @translate_store_errors
    def settle(self, invoice: Invoice) -> Invoice:
        """
        Store a settled invoice if the stored row is still pending.

        Args:
            invoice: Invoice in its settled state

        Returns:
            Settled invoice entity
        """
        updated = InvoiceModel.objects.filter(
            invoice_id=invoice.invoice_id, status=InvoiceStatus.PENDING.value
        ).update(
            status=invoice.status.value,
            paid_at=invoice.paid_at,
            payment_method=invoice.payment_method,
            transaction_id=invoice.transaction_id,
        )
        if updated:
            return invoice
        if InvoiceModel.objects.filter(invoice_id=invoice.invoice_id).exists():
            raise InvoiceNotPendingError(f"Invoice {invoice.invoice_id} is no longer pending")
        raise InvoiceNotFoundError(f"Invoice {invoice.invoice_id} not found")
