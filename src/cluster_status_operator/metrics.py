"""Prometheus metrics for the Cluster Status Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "cluster_status_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "cluster_status_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

error_total = Counter(
    "cluster_status_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

# Provisioned condition metrics
provisioned_transitions_total = Counter(
    "cluster_status_operator_provisioned_transitions_total",
    "Total number of Provisioned condition status changes",
    ["status", "reason"],
)

# API call metrics
api_call_total = Counter(
    "cluster_status_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "cluster_status_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "cluster_status_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)
