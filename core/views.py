"""
Core views for health checks, readiness and metrics.
"""

import logging
from datetime import datetime, timezone

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from core.domain.exceptions import StoreUnavailableError
from core.infrastructure.stores import DJANGO_BACKEND, get_license_repository, store_backend

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """
    Health/status surface.

    Reports store connectivity and, when reachable, license counts.
    Always answers 200; use /ready for load balancer checks.
    """

    def get(self, _request):
        """Return service health status."""
        database = {"backend": store_backend()}
        try:
            counts = async_to_sync(get_license_repository().count_by_status)()
        except StoreUnavailableError:
            logger.warning("Health check could not reach the license store")
            database["status"] = "disconnected"
        else:
            database["status"] = "connected"
            database["licenseCount"] = sum(counts.values())
            database["statusCounts"] = counts

        return JsonResponse(
            {
                "status": "healthy" if database["status"] == "connected" else "degraded",
                "service": "bot-license-service",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "version": settings.SERVICE_VERSION,
                "database": database,
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "database": self._check_database(),
            "cache": self._check_cache(),
        }

        all_healthy = all(checks.values())
        return JsonResponse(
            {
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
            status=200 if all_healthy else 503,
        )

    def _check_database(self) -> bool:
        """Check database connectivity."""
        if store_backend() != DJANGO_BACKEND:
            return True
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return True
        except DatabaseError:
            return False

    def _check_cache(self) -> bool:
        """Check cache connectivity."""
        try:
            cache.set("ready_check", "ok", 10)
            return cache.get("ready_check") == "ok"
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning("Readiness cache check failed", exc_info=True)
            return False


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
