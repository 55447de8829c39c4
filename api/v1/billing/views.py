"""
Billing API views.

Administrators bill licenses; the payment endpoint settles an invoice
and renews the license it refers to.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import AdminCredentialRequired
from api.v1 import dependencies
from api.v1.billing.serializers import (
    CreateInvoiceRequestSerializer,
    InvoiceSerializer,
    PaymentResultSerializer,
    PayInvoiceRequestSerializer,
)
from billing.application.commands.create_invoice import CreateInvoiceCommand
from billing.application.commands.pay_invoice import PayInvoiceCommand
from core.instrumentation import Status, StatusCode, get_tracer

tracer = get_tracer(__name__)


class CreateInvoiceView(APIView):
    """View for creating invoices."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="create_invoice",
        summary="Create Invoice",
        tags=["Billing"],
        request=CreateInvoiceRequestSerializer,
        responses={
            201: InvoiceSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create an invoice."""
        return async_to_sync(self._handle_create_invoice)(request)

    async def _handle_create_invoice(self, request: Request) -> Response:
        """Async handler for create invoice."""
        with tracer.start_as_current_span("create_invoice") as span:
            serializer = CreateInvoiceRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            command = CreateInvoiceCommand(
                license_key=data["license_key"],
                amount=data["amount"],
                currency=data["currency"],
                due_days=data["due_days"],
            )
            invoice = await dependencies.create_invoice_handler().handle(command)

            span.set_attribute("invoice.id", invoice.invoice_id)
            span.set_attribute("license.key", invoice.license_key)
            span.set_status(Status(StatusCode.OK))

            body = {"success": True}
            body.update(InvoiceSerializer(invoice).data)
            return Response(body, status=status.HTTP_201_CREATED)


class PayInvoiceView(APIView):
    """View for paying invoices."""

    @extend_schema(
        operation_id="pay_invoice",
        summary="Pay Invoice",
        description=(
            "Mark an invoice paid and renew its license for 30 days. A 500 with "
            "PAYMENT_INCONSISTENCY means the invoice is paid but the license "
            "was not renewed."
        ),
        tags=["Billing"],
        request=PayInvoiceRequestSerializer,
        responses={
            200: PaymentResultSerializer,
            400: {"description": "Invoice not pending"},
            404: {"description": "Invoice not found"},
            500: {"description": "Payment inconsistency or store failure"},
        },
    )
    def post(self, request: Request) -> Response:
        """Pay an invoice."""
        return async_to_sync(self._handle_pay_invoice)(request)

    async def _handle_pay_invoice(self, request: Request) -> Response:
        """Async handler for pay invoice."""
        with tracer.start_as_current_span("pay_invoice") as span:
            serializer = PayInvoiceRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            command = PayInvoiceCommand(
                invoice_id=data["invoice_id"],
                payment_method=data["payment_method"],
                transaction_id=data["transaction_id"],
            )
            span.set_attribute("invoice.id", command.invoice_id)
            result = await dependencies.pay_invoice_handler().handle(command)

            span.set_attribute("license.key", result.license_key)
            span.set_status(Status(StatusCode.OK))

            body = {"success": True}
            body.update(PaymentResultSerializer(result).data)
            return Response(body)
