"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "key",
        "owner_id",
        "owner_name",
        "tier",
        "status_display",
        "expires_at",
        "last_verified",
        "invoice_count",
        "created_at",
    ]
    list_filter = ["status", "tier", "expires_at", "created_at"]
    search_fields = ["key", "owner_id", "owner_name", "email"]
    readonly_fields = ["id", "key", "tier", "features", "created_at", "updated_at", "notes"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "key", "owner_id", "owner_name", "email", "tier", "status"),
            },
        ),
        (
            "Entitlement",
            {
                "fields": ("features", "expires_at", "last_verified"),
            },
        ),
        (
            "Billing",
            {
                "fields": ("price", "currency", "invoice_count", "last_payment_date"),
            },
        ),
        (
            "Audit",
            {
                "fields": ("notes",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "pending": "gray",
            "active": "green",
            "suspended": "orange",
            "expired": "red",
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, "black"),
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def has_delete_permission(self, request, obj=None):
        """Licenses are never deleted; suspend them instead."""
        return False
