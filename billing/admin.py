"""
Django admin configuration for billing app.
"""
from django.contrib import admin

from billing.infrastructure.models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin interface for Invoice model."""

    list_display = [
        "invoice_id",
        "license_key",
        "amount",
        "currency",
        "status",
        "due_date",
        "paid_at",
    ]
    list_filter = ["status", "currency", "due_date", "paid_at"]
    search_fields = ["invoice_id", "license_key", "transaction_id"]
    readonly_fields = [
        "id",
        "invoice_id",
        "license_key",
        "amount",
        "currency",
        "status",
        "due_date",
        "paid_at",
        "payment_method",
        "transaction_id",
        "created_at",
        "updated_at",
    ]
