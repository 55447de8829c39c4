"""
Serializers for license API endpoints.

Wire names are camelCase; required-ness is checked by the handlers so
missing fields are reported with their specific error codes.
"""

from rest_framework import serializers


class VerifyLicenseRequestSerializer(serializers.Serializer):
    """Serializer for verify license request."""

    licenseKey = serializers.CharField(
        source="license_key", required=False, allow_blank=True, max_length=100, default=""
    )
    botId = serializers.CharField(
        source="bot_id", required=False, allow_blank=True, max_length=255, default=""
    )


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for VerificationResultDTO."""

    valid = serializers.BooleanField()
    reason = serializers.CharField(required=False)
    expiry = serializers.DateTimeField(required=False)
    tier = serializers.CharField(required=False)
    features = serializers.ListField(child=serializers.CharField(), required=False)
    daysRemaining = serializers.IntegerField(source="days_remaining", required=False)
    message = serializers.CharField()


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issue license request."""

    ownerId = serializers.CharField(
        source="owner_id", required=False, allow_blank=True, default=""
    )
    tier = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    days = serializers.IntegerField(required=False, allow_null=True, default=None)
    price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    currency = serializers.CharField(required=False, max_length=3, default="USD")
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    ownerName = serializers.CharField(
        source="owner_name", required=False, allow_blank=True, allow_null=True, default=None
    )
    adminKey = serializers.CharField(required=False, write_only=True)


class IssueLicenseResponseSerializer(serializers.Serializer):
    """Serializer for an issued License entity."""

    licenseKey = serializers.CharField(source="key")
    ownerId = serializers.CharField(source="owner_id")
    ownerName = serializers.CharField(source="owner_name")
    expiresAt = serializers.DateTimeField(source="expires_at")
    days = serializers.SerializerMethodField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    currency = serializers.CharField()
    tier = serializers.CharField(source="tier.value")
    features = serializers.ListField(child=serializers.CharField())

    def get_days(self, obj) -> int:
        return (obj.expires_at - obj.created_at).days


class IssueTrialRequestSerializer(serializers.Serializer):
    """Serializer for issue trial request."""

    discordId = serializers.CharField(
        source="owner_id", required=False, allow_blank=True, default=""
    )
    name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255, default=None
    )


class TrialResponseSerializer(serializers.Serializer):
    """Serializer for TrialDTO."""

    licenseKey = serializers.CharField(source="license_key")
    ownerId = serializers.CharField(source="owner_id")
    ownerName = serializers.CharField(source="owner_name")
    expiresAt = serializers.DateTimeField(source="expires_at")
    expiresIn = serializers.SerializerMethodField()
    features = serializers.ListField(child=serializers.CharField())
    downloadLink = serializers.CharField(source="download_link")

    def get_expiresIn(self, obj) -> str:
        return f"{obj.days} days"


class LicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for requests addressing one license by key."""

    licenseKey = serializers.CharField(
        source="license_key", required=False, allow_blank=True, default=""
    )
    adminKey = serializers.CharField(required=False, write_only=True)


class RenewLicenseRequestSerializer(LicenseKeyRequestSerializer):
    """Serializer for renew license request."""

    days = serializers.IntegerField(required=False, allow_null=True, default=None)


class LicenseStateSerializer(serializers.Serializer):
    """Compact license view returned by suspend and renew."""

    key = serializers.CharField()
    status = serializers.CharField(source="status.value")
    ownerId = serializers.CharField(source="owner_id")
    expiresAt = serializers.DateTimeField(source="expires_at")


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    key = serializers.CharField()
    ownerId = serializers.CharField(source="owner_id")
    ownerName = serializers.CharField(source="owner_name")
    email = serializers.CharField(allow_null=True)
    tier = serializers.CharField()
    status = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    currency = serializers.CharField()
    features = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source="created_at")
    expiresAt = serializers.DateTimeField(source="expires_at")
    lastVerified = serializers.DateTimeField(source="last_verified", allow_null=True)
    notes = serializers.CharField()
    invoiceCount = serializers.IntegerField(source="invoice_count")
    lastPaymentDate = serializers.DateTimeField(source="last_payment_date", allow_null=True)


class ListLicensesRequestSerializer(serializers.Serializer):
    """Serializer for list licenses query parameters."""

    filter = serializers.CharField(required=False, allow_blank=True, default="all")
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, default=50)


class LicensePageSerializer(serializers.Serializer):
    """Serializer for LicensePageDTO."""

    count = serializers.IntegerField()
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    totalPages = serializers.IntegerField(source="total_pages")
    filter = serializers.CharField(source="status_filter")
    licenses = LicenseSerializer(many=True)


class ActiveTrialSerializer(serializers.Serializer):
    """Serializer for ActiveTrialDTO."""

    key = serializers.CharField()
    ownerId = serializers.CharField(source="owner_id")
    ownerName = serializers.CharField(source="owner_name")
    expiresAt = serializers.DateTimeField(source="expires_at")
    daysLeft = serializers.IntegerField(source="days_left")
