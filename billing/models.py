"""
Model registry for the billing app.
"""
from billing.infrastructure.models import Invoice  # noqa: F401
