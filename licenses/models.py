"""
Model registry for the licenses app.

Models live in the infrastructure layer; this module exposes them where
Django looks for them.
"""
from licenses.infrastructure.models import License  # noqa: F401
