# certverify/metrics.py
"""
Prometheus metrics for the certificate service.

Metrics are organized by component:
- Imports: bulk certificate ingestion outcomes
- Verification: public certificate lookups
- Auth: login attempts
- Errors: system-wide error tracking
"""

from prometheus_client import Counter, Histogram

# ============================================================================
# IMPORT METRICS
# ============================================================================

certverify_import_records_total = Counter(
    "certverify_import_records_total",
    "Certificate records processed by the batch importer",
    ["outcome"],  # "successful", "failed", "skipped"
)

certverify_import_batches_total = Counter(
    "certverify_import_batches_total",
    "Bulk import batches by overall outcome",
    ["outcome"],  # "created", "partial", "failed", "rejected"
)

certverify_import_batch_size = Histogram(
    "certverify_import_batch_size",
    "Number of records per bulk import batch",
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

certverify_import_latency_seconds = Histogram(
    "certverify_import_latency_seconds",
    "Time spent processing one bulk import batch",
    buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30),
)

# ============================================================================
# VERIFICATION METRICS
# ============================================================================

certverify_lookups_total = Counter(
    "certverify_lookups_total",
    "Certificate verification lookups",
    ["result"],  # "valid", "revoked", "not_found", "error"
)

# ============================================================================
# AUTH METRICS
# ============================================================================

certverify_login_attempts_total = Counter(
    "certverify_login_attempts_total",
    "Login attempts by result",
    ["result"],  # "success", "invalid_credentials"
)

# ============================================================================
# ERROR TRACKING METRICS
# ============================================================================

certverify_errors_total = Counter(
    "certverify_errors_total",
    "System-wide errors by component and type",
    ["component", "error_type"],  # component: "importer", "storage", "upload"
)

# ============================================================================
# EXPORT ALL METRICS
# ============================================================================

__all__ = [
    # Imports
    "certverify_import_records_total",
    "certverify_import_batches_total",
    "certverify_import_batch_size",
    "certverify_import_latency_seconds",
    # Verification
    "certverify_lookups_total",
    # Auth
    "certverify_login_attempts_total",
    # Errors
    "certverify_errors_total",
]
