"""
Serializers for billing API endpoints.
"""

from rest_framework import serializers


class CreateInvoiceRequestSerializer(serializers.Serializer):
    """Serializer for create invoice request."""

    licenseKey = serializers.CharField(
        source="license_key", required=False, allow_blank=True, default=""
    )
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    currency = serializers.CharField(required=False, max_length=3, default="USD")
    dueDays = serializers.IntegerField(source="due_days", required=False, allow_null=True, default=None)
    adminKey = serializers.CharField(required=False, write_only=True)


class InvoiceSerializer(serializers.Serializer):
    """Serializer for InvoiceDTO."""

    invoiceId = serializers.CharField(source="invoice_id")
    licenseKey = serializers.CharField(source="license_key")
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    currency = serializers.CharField()
    status = serializers.CharField()
    dueDate = serializers.DateTimeField(source="due_date")
    paidAt = serializers.DateTimeField(source="paid_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")


class PayInvoiceRequestSerializer(serializers.Serializer):
    """Serializer for pay invoice request."""

    invoiceId = serializers.CharField(
        source="invoice_id", required=False, allow_blank=True, default=""
    )
    paymentMethod = serializers.CharField(
        source="payment_method", required=False, allow_blank=True, max_length=50, default=""
    )
    transactionId = serializers.CharField(
        source="transaction_id", required=False, allow_blank=True, max_length=255, default=""
    )


class PaymentResultSerializer(serializers.Serializer):
    """Serializer for PaymentResultDTO."""

    invoiceId = serializers.CharField(source="invoice_id")
    licenseKey = serializers.CharField(source="license_key")
    paidAt = serializers.DateTimeField(source="paid_at")
    newExpiry = serializers.DateTimeField(source="new_expiry")
    invoiceCount = serializers.IntegerField(source="invoice_count")
