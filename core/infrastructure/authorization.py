"""
Administrative authorization strategies.

Privileged endpoints are guarded by exactly one strategy, chosen at
startup from settings:

- ``static``: a shared admin key sent in a header or the JSON body
- ``hmac``: a per-request HMAC-SHA256 signature over timestamp, method,
  path and body
"""
import hashlib
import hmac
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADERS = ("Admin-Key", "X-Admin-Key")
ADMIN_KEY_BODY_FIELD = "adminKey"
TIMESTAMP_HEADER = "X-Timestamp"
SIGNATURE_HEADER = "X-Signature"


class Authorizer(ABC):
    """Capability to decide whether a request carries a valid admin credential."""

    @abstractmethod
    def authorize(self, request) -> bool:
        """
        Check a request's administrative credential.

        Args:
            request: Django HttpRequest (or DRF Request)

        Returns:
            True if the request may perform privileged operations
        """
        pass


def _json_body(request) -> dict:
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


class StaticAdminKeyAuthorizer(Authorizer):
    """Compare a presented admin key with the configured one in constant time."""

    def __init__(self, secret: str):
        self.secret = secret or ""

    def credential(self, request) -> Optional[str]:
        """
        Extract the presented admin key.

        Headers win over the ``adminKey`` body field.
        """
        for header in ADMIN_KEY_HEADERS:
            value = request.headers.get(header)
            if value:
                return value
        value = _json_body(request).get(ADMIN_KEY_BODY_FIELD)
        return value if isinstance(value, str) else None

    def authorize(self, request) -> bool:
        if not self.secret:
            logger.warning("Admin key is not configured; denying privileged request")
            return False
        presented = self.credential(request)
        if not presented:
            return False
        return hmac.compare_digest(presented.encode(), self.secret.encode())


class HmacSignatureAuthorizer(Authorizer):
    """Verify a request signature made with a shared secret."""

    def __init__(self, secret: str, tolerance_seconds: int = 300, clock=time.time):
        self.secret = secret or ""
        self.tolerance_seconds = tolerance_seconds
        self.clock = clock

    @staticmethod
    def signing_payload(timestamp: str, method: str, path: str, body: bytes) -> bytes:
        """Bytes covered by the signature."""
        return f"{timestamp}.{method.upper()}.{path}.".encode() + (body or b"")

    def generate_signature(self, timestamp: str, method: str, path: str, body: bytes) -> str:
        """
        Generate the HMAC signature for a request.

        Args:
            timestamp: Unix timestamp in seconds, as sent in X-Timestamp
            method: HTTP method
            path: Full request path including query string
            body: Raw request body

        Returns:
            HMAC SHA-256 signature (hex)
        """
        return hmac.new(
            self.secret.encode(),
            self.signing_payload(timestamp, method, path, body),
            hashlib.sha256,
        ).hexdigest()

    def authorize(self, request) -> bool:
        if not self.secret:
            logger.warning("Admin HMAC secret is not configured; denying privileged request")
            return False

        timestamp = request.headers.get(TIMESTAMP_HEADER, "")
        signature = request.headers.get(SIGNATURE_HEADER, "")
        if not timestamp or not signature:
            return False
        try:
            skew = abs(self.clock() - int(timestamp))
        except ValueError:
            return False
        if skew > self.tolerance_seconds:
            logger.info("Rejected stale admin signature", extra={"skew_seconds": skew})
            return False

        expected = self.generate_signature(
            timestamp, request.method, request.get_full_path(), request.body
        )
        return hmac.compare_digest(expected, signature)


def build_authorizer(
    strategy: str,
    admin_key: str = "",
    hmac_secret: str = "",
    tolerance_seconds: int = 300,
) -> Authorizer:
    """
    Build the configured authorization strategy.

    Args:
        strategy: ``static`` or ``hmac``
        admin_key: Shared key for the static strategy
        hmac_secret: Shared secret for the hmac strategy
        tolerance_seconds: Accepted clock skew for signatures

    Returns:
        Authorizer instance

    Raises:
        ValueError: If the strategy is unknown
    """
    if strategy == "static":
        return StaticAdminKeyAuthorizer(admin_key)
    if strategy == "hmac":
        return HmacSignatureAuthorizer(hmac_secret, tolerance_seconds)
    raise ValueError(f"Unknown admin auth strategy: {strategy}")
