"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total paid licenses issued",
    ["tier"],
)

trials_granted_total = Counter(
    "trials_granted_total",
    "Total trial licenses granted",
)

license_verifications_total = Counter(
    "license_verifications_total",
    "Total verification attempts on existing licenses",
    ["result"],
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Total licenses transitioned to expired at verification time",
)

licenses_suspended_total = Counter(
    "licenses_suspended_total",
    "Total licenses suspended",
)

licenses_renewed_total = Counter(
    "licenses_renewed_total",
    "Total licenses renewed",
    ["source"],
)

# Billing metrics
invoices_created_total = Counter(
    "invoices_created_total",
    "Total invoices created",
)

invoices_paid_total = Counter(
    "invoices_paid_total",
    "Total invoices paid",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
