"""
App configuration for the billing module.
"""

from django.apps import AppConfig


class BillingConfig(AppConfig):
    """App configuration for billing."""

    name = "billing"
    verbose_name = "Billing"
