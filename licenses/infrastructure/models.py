"""
License model.
"""
import uuid

from django.db import models
from django.db.models import Q


class License(models.Model):
    """
    A license key held by a bot owner.

    Keys are never deleted; lifecycle is tracked through ``status``.
    """

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("active", "Active"),
        ("suspended", "Suspended"),
        ("expired", "Expired"),
    ]

    TIER_CHOICES = [
        ("basic", "Basic"),
        ("premium", "Premium"),
        ("enterprise", "Enterprise"),
        ("trial", "Trial"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True, db_index=True)
    owner_id = models.CharField(max_length=100, db_index=True)
    owner_name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(null=True, blank=True)
    tier = models.CharField(max_length=20, choices=TIER_CHOICES, default="premium")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default="USD")
    features = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField()
    expires_at = models.DateTimeField()
    last_verified = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    invoice_count = models.IntegerField(default=0)
    last_payment_date = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "licenses"
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner_id", "tier", "status"]),
            models.Index(fields=["status", "created_at"]),
            models.Index(fields=["tier", "status", "expires_at"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["owner_id"],
                condition=Q(tier="trial", status="active"),
                name="one_active_trial_per_owner",
            ),
        ]

    def __str__(self):
        return f"{self.key} ({self.tier}, {self.status})"
