"""
API permissions.

A single guard applied to every privileged view.
"""

import logging

from django.conf import settings
from rest_framework.permissions import BasePermission

from core.domain.exceptions import UnauthorizedError
from core.infrastructure.authorization import Authorizer, build_authorizer

logger = logging.getLogger(__name__)


def get_authorizer() -> Authorizer:
    """Build the authorization strategy configured in settings."""
    return build_authorizer(
        settings.ADMIN_AUTH_STRATEGY,
        admin_key=settings.ADMIN_KEY,
        hmac_secret=settings.ADMIN_HMAC_SECRET,
        tolerance_seconds=settings.ADMIN_HMAC_TOLERANCE_SECONDS,
    )


class AdminCredentialRequired(BasePermission):
    """
    Allow the request only with a valid administrative credential.

    Denial raises UnauthorizedError so the response carries the
    standard error envelope with status 401.
    """

    def has_permission(self, request, view) -> bool:
        if get_authorizer().authorize(request):
            return True
        logger.warning(
            "Rejected privileged request",
            extra={"path": request.path, "remote_addr": request.META.get("REMOTE_ADDR")},
        )
        raise UnauthorizedError()
