"""ClusterInstance watch mapped onto ClusterDeployment reconciliation."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import CI_API_GROUP_VERSION, KIND_CLUSTER_INSTANCE
from .cluster_deployment import RECONCILE_EVENT_TYPES, reconcile_cluster_deployment


def map_cluster_instance_to_deployment(body: dict[str, Any]) -> list[tuple[str, str]]:
    """Map a ClusterInstance to the ClusterDeployment key recorded in its status.

    Returns:
        ``[(namespace, name)]``, or an empty list when no reference is recorded
    """
    deployment_ref = (body.get("status") or {}).get("clusterDeploymentRef") or {}
    name = deployment_ref.get("name")
    if not name:
        return []
    namespace = (body.get("metadata") or {}).get("namespace", "default")
    return [(namespace, name)]


@kopf.on.event(CI_API_GROUP_VERSION, KIND_CLUSTER_INSTANCE)
def handle_cluster_instance(event: dict[str, Any], body: dict[str, Any], memo: kopf.Memo, **_: Any) -> None:
    """Reconcile the ClusterDeployment referenced by a ClusterInstance.

    Only the first event of an object and changes of its recorded reference
    trigger a reconcile; the status patches written by the reconciler arrive
    here as well.
    """
    if event.get("type") not in RECONCILE_EVENT_TYPES:
        return

    keys = map_cluster_instance_to_deployment(body)
    if memo.get("cluster_deployment_keys") == keys:
        return

    for namespace, name in keys:
        reconcile_cluster_deployment(namespace, name)
    memo["cluster_deployment_keys"] = keys
