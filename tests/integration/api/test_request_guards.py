"""
Integration tests for HMAC admin authorization and rate limiting.
"""
import json
import time

import pytest
from django.core.cache import cache
from django.urls import reverse

from core.infrastructure.authorization import HmacSignatureAuthorizer


@pytest.mark.django_db
@pytest.mark.integration
class TestHmacAdminAPI:
    """Privileged endpoints under the hmac strategy."""

    @pytest.fixture(autouse=True)
    def hmac_strategy(self, settings):
        settings.ADMIN_AUTH_STRATEGY = "hmac"
        settings.ADMIN_HMAC_SECRET = "test-hmac-secret"

    def _signed_post(self, client, path, body, secret="test-hmac-secret", timestamp=None):
        raw = json.dumps(body)
        timestamp = str(timestamp or int(time.time()))
        signature = HmacSignatureAuthorizer(secret).generate_signature(
            timestamp, "POST", path, raw.encode()
        )
        return client.post(
            path,
            data=raw,
            content_type="application/json",
            HTTP_X_TIMESTAMP=timestamp,
            HTTP_X_SIGNATURE=signature,
        )

    def test_signed_request_accepted(self, api_client):
        response = self._signed_post(api_client, reverse("issue-license"), {"ownerId": "u1"})
        assert response.status_code == 201

    def test_wrong_secret_rejected(self, api_client):
        response = self._signed_post(
            api_client, reverse("issue-license"), {"ownerId": "u1"}, secret="guess"
        )
        assert response.status_code == 401

    def test_stale_signature_rejected(self, api_client):
        response = self._signed_post(
            api_client,
            reverse("issue-license"),
            {"ownerId": "u1"},
            timestamp=int(time.time()) - 3600,
        )
        assert response.status_code == 401

    def test_static_key_not_accepted(self, admin_client):
        response = admin_client.post(reverse("issue-license"), {"ownerId": "u1"}, format="json")
        assert response.status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestRateLimit:
    """Rate limiting on public write endpoints."""

    @pytest.fixture(autouse=True)
    def tight_limit(self, settings):
        settings.RATE_LIMIT_PER_MINUTE = 2
        cache.clear()
        yield
        cache.clear()

    def test_verify_is_rate_limited(self, api_client):
        body = {"licenseKey": "Dream-ZZZZ-ZZZZ-ZZZZ", "botId": "bot-1"}
        responses = [
            api_client.post(reverse("verify-license"), body, format="json") for _ in range(3)
        ]

        assert [r.status_code for r in responses] == [200, 200, 429]
        assert responses[0]["X-RateLimit-Limit"] == "2"
        assert responses[1]["X-RateLimit-Remaining"] == "0"
        assert responses[2].json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
        assert "Retry-After" in responses[2]

    def test_admin_endpoints_are_not_limited(self, admin_client):
        for i in range(3):
            response = admin_client.post(
                reverse("issue-license"), {"ownerId": f"u{i}"}, format="json"
            )
            assert response.status_code == 201
