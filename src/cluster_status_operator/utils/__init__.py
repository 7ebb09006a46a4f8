"""Utility functions for the Cluster Status Operator."""

from .conditions import (
    ConditionList,
    ensure_conditions,
    find_condition,
    now_rfc3339,
)
from .context import get_context_dict, get_correlation_id, with_correlation_id
from .errors import is_not_found, sanitize_exception
from .events import emit_event, emit_provisioned_changed
from .owners import is_owned_by_kind, owner_of_kind
from .patch import create_merge_patch
from .rate_limit import handle_rate_limit_error, rate_limit_k8s

__all__ = [
    "ConditionList",
    "ensure_conditions",
    "find_condition",
    "now_rfc3339",
    "get_context_dict",
    "get_correlation_id",
    "with_correlation_id",
    "is_not_found",
    "sanitize_exception",
    "emit_event",
    "emit_provisioned_changed",
    "is_owned_by_kind",
    "owner_of_kind",
    "create_merge_patch",
    "handle_rate_limit_error",
    "rate_limit_k8s",
]
