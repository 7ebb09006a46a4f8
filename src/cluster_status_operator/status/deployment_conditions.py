"""Mirror ClusterDeployment install conditions onto ClusterInstance status."""

from __future__ import annotations

from typing import Any

from ..constants import CLUSTER_INSTALL_CONDITION_TYPES, STATUS_UNKNOWN
from ..utils.conditions import ConditionList, ensure_conditions, find_condition, now_rfc3339


def unknown_condition(condition_type: str) -> dict[str, Any]:
    """Placeholder for an install condition the ClusterDeployment does not report yet."""
    return {
        "type": condition_type,
        "status": STATUS_UNKNOWN,
        "reason": "Unknown",
        "message": "Unknown",
    }


def update_deployment_conditions(
    cluster_deployment: dict[str, Any],
    cluster_instance: dict[str, Any],
    now: str | None = None,
) -> list[str]:
    """Copy the install conditions into ``status.deploymentConditions``.

    Each of the four install condition types ends up in the mirror exactly once.
    Types missing on the ClusterDeployment are mirrored as Unknown. Probe time
    is refreshed on every call; transition time moves only when the status of a
    type changes.

    Args:
        cluster_deployment: ClusterDeployment object (read only)
        cluster_instance: ClusterInstance object, mutated in place
        now: Timestamp to stamp on the records, defaults to the current time

    Returns:
        Condition types that were added or changed status
    """
    now = now or now_rfc3339()
    source = (cluster_deployment.get("status") or {}).get("conditions") or []
    ci_status = cluster_instance.setdefault("status", {})
    mirror = ConditionList(ensure_conditions(ci_status, "deploymentConditions"))

    changed = []
    for condition_type in CLUSTER_INSTALL_CONDITION_TYPES:
        install_cond = find_condition(source, condition_type) or unknown_condition(condition_type)
        if mirror.mirror(install_cond, now):
            changed.append(condition_type)
    return changed
