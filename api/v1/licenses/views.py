"""
License API views.

These endpoints are used by:
- Bots, to verify their license at startup
- Owners, to request a free trial
- Administrators, to issue, list, suspend and renew licenses
"""

import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import AdminCredentialRequired
from api.v1 import dependencies
from api.v1.licenses.serializers import (
    ActiveTrialSerializer,
    IssueLicenseRequestSerializer,
    IssueLicenseResponseSerializer,
    IssueTrialRequestSerializer,
    LicenseKeyRequestSerializer,
    LicensePageSerializer,
    LicenseStateSerializer,
    ListLicensesRequestSerializer,
    RenewLicenseRequestSerializer,
    TrialResponseSerializer,
    VerifyLicenseRequestSerializer,
    VerifyLicenseResponseSerializer,
)
from core.domain.exceptions import MissingFieldError, StoreUnavailableError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.issue_trial import IssueTrialCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.dto.license_dto import VerificationResultDTO
from licenses.application.queries.list_active_trials import ListActiveTrialsQuery
from licenses.application.queries.list_licenses import ListLicensesQuery

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

VERIFY_MESSAGES = {
    "LICENSE_NOT_FOUND": "License not found",
    "LICENSE_EXPIRED": "License has expired",
    "MISSING_DATA": "License key and bot ID are required",
    "SERVER_ERROR": "Server error",
}


def verification_message(result: VerificationResultDTO) -> str:
    """Human-readable message for a verify answer."""
    if result.valid:
        return "License is valid"
    if result.reason in VERIFY_MESSAGES:
        return VERIFY_MESSAGES[result.reason]
    return f"License status: {result.reason.replace('LICENSE_', '').lower()}"


class VerifyLicenseView(APIView):
    """View for verifying a license on behalf of a bot."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        description=(
            "Check whether a license key is currently valid. Invalid licenses are "
            "reported with valid=false and a reason code, not an HTTP error."
        ),
        tags=["Licenses"],
        request=VerifyLicenseRequestSerializer,
        responses={
            200: VerifyLicenseResponseSerializer,
            400: VerifyLicenseResponseSerializer,
            500: VerifyLicenseResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a license key."""
        return async_to_sync(self._handle_verify_license)(request)

    async def _handle_verify_license(self, request: Request) -> Response:
        """Async handler for verify license."""
        with tracer.start_as_current_span("verify_license") as span:
            serializer = VerifyLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            command = VerifyLicenseCommand(
                license_key=serializer.validated_data["license_key"].strip(),
                bot_id=serializer.validated_data["bot_id"].strip(),
            )
            span.set_attribute("license.key", command.license_key)
            span.set_attribute("bot.id", command.bot_id)

            try:
                result = await dependencies.verify_license_handler().handle(command)
                status_code = status.HTTP_200_OK
            except MissingFieldError:
                result = VerificationResultDTO(valid=False, reason="MISSING_DATA")
                status_code = status.HTTP_400_BAD_REQUEST
            except StoreUnavailableError as e:
                logger.error("License lookup failed during verify: %s", e.message)
                span.set_status(Status(StatusCode.ERROR, e.message))
                result = VerificationResultDTO(valid=False, reason="SERVER_ERROR")
                status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

            span.set_attribute("license.valid", result.valid)
            if result.reason:
                span.set_attribute("license.reason", result.reason)

            if result.valid:
                body = {
                    "valid": True,
                    "expiry": result.expiry,
                    "tier": result.tier,
                    "features": result.features,
                    "daysRemaining": result.days_remaining,
                    "message": verification_message(result),
                }
            else:
                body = {
                    "valid": False,
                    "reason": result.reason,
                    "message": verification_message(result),
                }
            return Response(body, status=status_code)


class IssueLicenseView(APIView):
    """View for issuing paid licenses."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Create a new paid license. Requires the admin credential "
            "(Admin-Key header or adminKey body field, or an HMAC signature)."
        ),
        tags=["Admin"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssueLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            500: {"description": "Key generation or store failure"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            serializer = IssueLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            command = IssueLicenseCommand(
                owner_id=data["owner_id"],
                tier=data["tier"],
                days=data["days"],
                price=data["price"],
                currency=data["currency"],
                email=data["email"],
                owner_name=data["owner_name"],
            )
            license = await dependencies.issue_license_handler().handle(command)

            span.set_attribute("license.key", license.key)
            span.set_attribute("license.tier", license.tier.value)
            span.set_status(Status(StatusCode.OK))

            body = {"success": True, "message": "License created successfully"}
            body.update(IssueLicenseResponseSerializer(license).data)
            return Response(body, status=status.HTTP_201_CREATED)


class IssueTrialView(APIView):
    """View for self-service trial requests."""

    @extend_schema(
        operation_id="issue_trial",
        summary="Request Trial",
        description="Grant a 7-day trial license. One running trial per owner.",
        tags=["Licenses"],
        request=IssueTrialRequestSerializer,
        responses={
            201: TrialResponseSerializer,
            400: {"description": "Missing discordId or trial already active"},
        },
    )
    def post(self, request: Request) -> Response:
        """Request a trial license."""
        return async_to_sync(self._handle_issue_trial)(request)

    async def _handle_issue_trial(self, request: Request) -> Response:
        """Async handler for issue trial."""
        with tracer.start_as_current_span("issue_trial") as span:
            serializer = IssueTrialRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            command = IssueTrialCommand(
                owner_id=serializer.validated_data["owner_id"],
                name=serializer.validated_data["name"],
            )
            trial = await dependencies.issue_trial_handler().handle(command)

            span.set_attribute("license.key", trial.license_key)
            span.set_status(Status(StatusCode.OK))

            body = {"success": True, "message": "Trial license created successfully"}
            body.update(TrialResponseSerializer(trial).data)
            return Response(body, status=status.HTTP_201_CREATED)


class ListActiveTrialsView(APIView):
    """View for listing running trials."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="list_active_trials",
        summary="List Active Trials",
        tags=["Admin"],
        responses={200: ActiveTrialSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List running trials."""
        return async_to_sync(self._handle_list_active_trials)(request)

    async def _handle_list_active_trials(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_active_trials") as span:
            trials = await dependencies.list_active_trials_handler().handle(
                ListActiveTrialsQuery()
            )
            span.set_attribute("trials.count", len(trials))
            return Response(
                {
                    "success": True,
                    "count": len(trials),
                    "trials": ActiveTrialSerializer(trials, many=True).data,
                }
            )


class ListLicensesView(APIView):
    """View for paging through licenses."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="Page through licenses, newest first, optionally filtered by status.",
        tags=["Admin"],
        parameters=[
            OpenApiParameter(
                name="filter",
                type=str,
                location=OpenApiParameter.QUERY,
                description="all, pending, active, suspended or expired",
            ),
            OpenApiParameter(name="page", type=int, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY),
        ],
        responses={
            200: LicensePageSerializer,
            400: {"description": "Invalid filter"},
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            serializer = ListLicensesRequestSerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)

            query = ListLicensesQuery(
                status_filter=serializer.validated_data["filter"],
                page=serializer.validated_data["page"],
                limit=serializer.validated_data["limit"],
            )
            result = await dependencies.list_licenses_handler().handle(query)

            span.set_attribute("licenses.total", result.total)
            body = {"success": True}
            body.update(LicensePageSerializer(result).data)
            return Response(body)


class SuspendLicenseView(APIView):
    """View for suspending licenses."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="suspend_license",
        summary="Suspend License",
        tags=["Admin"],
        request=LicenseKeyRequestSerializer,
        responses={
            200: LicenseStateSerializer,
            400: {"description": "Missing license key"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Suspend a license."""
        return async_to_sync(self._handle_suspend_license)(request)

    async def _handle_suspend_license(self, request: Request) -> Response:
        """Async handler for suspend license."""
        with tracer.start_as_current_span("suspend_license") as span:
            serializer = LicenseKeyRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            command = SuspendLicenseCommand(license_key=serializer.validated_data["license_key"])
            span.set_attribute("license.key", command.license_key)
            license = await dependencies.suspend_license_handler().handle(command)

            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "message": "License suspended successfully",
                    "license": LicenseStateSerializer(license).data,
                }
            )


class RenewLicenseView(APIView):
    """View for renewing licenses."""

    permission_classes = [AdminCredentialRequired]

    @extend_schema(
        operation_id="renew_license",
        summary="Renew License",
        description="Reactivate a license for a number of days (default 30).",
        tags=["Admin"],
        request=RenewLicenseRequestSerializer,
        responses={
            200: LicenseStateSerializer,
            400: {"description": "Missing license key or invalid days"},
            401: {"description": "Unauthorized"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Renew a license."""
        return async_to_sync(self._handle_renew_license)(request)

    async def _handle_renew_license(self, request: Request) -> Response:
        """Async handler for renew license."""
        with tracer.start_as_current_span("renew_license") as span:
            serializer = RenewLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            command = RenewLicenseCommand(
                license_key=serializer.validated_data["license_key"],
                days=serializer.validated_data["days"],
            )
            span.set_attribute("license.key", command.license_key)
            license = await dependencies.renew_license_handler().handle(command)

            days = command.days or settings.DEFAULT_LICENSE_DAYS
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "message": f"License renewed for {days} days",
                    "license": LicenseStateSerializer(license).data,
                }
            )
