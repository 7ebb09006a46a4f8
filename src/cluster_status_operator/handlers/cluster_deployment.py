"""ClusterDeployment reconciler projecting install status onto ClusterInstance."""

from __future__ import annotations

import copy
import os
import threading
import time
import weakref
from typing import Any, Callable

import kopf

from .. import metrics
from ..constants import (
    CD_API_GROUP_VERSION,
    COND_PROVISIONED,
    KIND_CLUSTER_DEPLOYMENT,
    KIND_CLUSTER_INSTANCE,
)
from ..status import (
    initialize_provisioned_condition,
    update_deployment_conditions,
    update_provisioned_status,
)
from ..utils.conditions import find_condition, now_rfc3339
from ..utils.context import with_correlation_id
from ..utils.errors import is_not_found, sanitize_exception
from ..utils.events import emit_provisioned_changed
from ..utils.owners import is_owned_by_kind
from ..utils.patch import create_merge_patch
from .base import BaseHandler, ReconcileResult, Requeue
from .shared import (
    get_cluster_deployment,
    get_k8s_client,
    patch_cluster_instance_status,
    resolve_cluster_instance,
)

REQUEUE_DELAY_SECONDS = float(os.getenv("REQUEUE_DELAY_SECONDS", "10"))
MAX_RECONCILE_ATTEMPTS = max(1, int(os.getenv("MAX_RECONCILE_ATTEMPTS", "3")))

# Watch event types that trigger a reconcile; None is the initial listing
RECONCILE_EVENT_TYPES = (None, "ADDED", "MODIFIED")


class ClusterDeploymentReconciler(BaseHandler):
    """Mirrors ClusterDeployment install conditions onto the owning ClusterInstance."""

    def __init__(self, api: Any, clock: Callable[[], str] = now_rfc3339):
        super().__init__(kind=KIND_CLUSTER_DEPLOYMENT)
        self.api = api
        self.clock = clock

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        """Reconcile the ClusterDeployment ``namespace/name``.

        Not-found resources and missing ownership end the reconciliation
        without error. Store errors are returned as REQUEUE_WITH_ERROR.
        """
        with with_correlation_id():
            return self.reconcile_with_metrics(lambda: self._reconcile(namespace, name))

    def _reconcile(self, namespace: str, name: str) -> ReconcileResult:
        meta = {"name": name, "namespace": namespace}

        try:
            cluster_deployment = get_cluster_deployment(self.api, namespace, name)
        except Exception as e:
            if is_not_found(e):
                self.log_info(meta, "ClusterDeployment not found", reason="NotFound")
                return ReconcileResult.done()
            # API is likely down, retry shortly
            self.log_error(meta, "Failed to get ClusterDeployment", error=e, reason="GetFailed")
            return ReconcileResult.requeue_with_error(e)

        meta = cluster_deployment.get("metadata") or meta

        try:
            cluster_instance = resolve_cluster_instance(self.api, cluster_deployment)
        except Exception as e:
            self.log_error(meta, "Failed to resolve owning ClusterInstance", error=e, reason="GetFailed")
            return ReconcileResult.requeue_with_error(e)

        if cluster_instance is None:
            return ReconcileResult.done()

        ci_meta = cluster_instance.get("metadata") or {}
        snapshot = copy.deepcopy(cluster_instance)
        now = self.clock()

        ci_status = cluster_instance.get("status")
        if ci_status is None:
            ci_status = cluster_instance["status"] = {}

        deployment_ref = ci_status.get("clusterDeploymentRef") or {}
        if not deployment_ref.get("name"):
            ci_status["clusterDeploymentRef"] = {"name": meta.get("name", name)}

        if initialize_provisioned_condition(cluster_instance, now):
            self.log_info(
                meta,
                "Initializing Provisioned condition",
                reason="Initialize",
                cluster_instance=ci_meta.get("name"),
            )

        snapshot_status = snapshot.get("status") or {}
        previous = find_condition(snapshot_status.get("conditions"), COND_PROVISIONED) or {}
        outcome = update_provisioned_status(cluster_deployment, cluster_instance, now)
        changed_types = update_deployment_conditions(cluster_deployment, cluster_instance, now)

        status_patch = create_merge_patch(snapshot_status, ci_status)
        if status_patch:
            try:
                patch_cluster_instance_status(
                    self.api,
                    ci_meta.get("namespace", namespace),
                    ci_meta.get("name"),
                    {"status": status_patch},
                )
            except Exception as e:
                self.log_error(
                    meta,
                    "Failed to patch ClusterInstance status",
                    error=e,
                    reason="PatchFailed",
                    cluster_instance=ci_meta.get("name"),
                )
                return ReconcileResult.requeue_with_error(e)

        if changed_types:
            self.log_info(
                meta,
                "Deployment conditions changed",
                reason="DeploymentConditionsChanged",
                cluster_instance=ci_meta.get("name"),
                conditions=changed_types,
            )

        if outcome is not None and (
            previous.get("status") != outcome.status or previous.get("reason") != outcome.reason
        ):
            self.log_info(
                meta,
                outcome.message,
                reason=outcome.reason,
                cluster_instance=ci_meta.get("name"),
                provisioned=outcome.status,
            )
            metrics.provisioned_transitions_total.labels(status=outcome.status, reason=outcome.reason).inc()
            emit_provisioned_changed(cluster_instance, outcome.reason, outcome.message)

        return ReconcileResult.done()


_reconciler: ClusterDeploymentReconciler | None = None
_reconciler_guard = threading.Lock()

# Reconciliations of the same key never run concurrently; unused locks are dropped
_key_locks: weakref.WeakValueDictionary[tuple[str, str], threading.Lock] = (
    weakref.WeakValueDictionary()
)
_key_locks_guard = threading.Lock()


def get_reconciler() -> ClusterDeploymentReconciler:
    """Return the process-wide reconciler, creating it on first use."""
    global _reconciler
    with _reconciler_guard:
        if _reconciler is None:
            _reconciler = ClusterDeploymentReconciler(get_k8s_client())
        return _reconciler


def _lock_for(namespace: str, name: str) -> threading.Lock:
    with _key_locks_guard:
        lock = _key_locks.get((namespace, name))
        if lock is None:
            lock = threading.Lock()
            _key_locks[(namespace, name)] = lock
        return lock


def reconcile_cluster_deployment(
    namespace: str,
    name: str,
    reconciler: ClusterDeploymentReconciler | None = None,
) -> ReconcileResult:
    """Run one reconciliation for a ClusterDeployment key.

    kopf does not retry watch-event handlers, so a failed attempt is repeated
    here after ``REQUEUE_DELAY_SECONDS``, up to ``MAX_RECONCILE_ATTEMPTS`` times.

    Raises:
        kopf.TemporaryError: If every attempt failed
    """
    reconciler = reconciler or get_reconciler()
    meta = {"name": name, "namespace": namespace}

    for attempt in range(1, MAX_RECONCILE_ATTEMPTS + 1):
        with _lock_for(namespace, name):
            result = reconciler.reconcile(namespace, name)
        if result.requeue is not Requeue.REQUEUE_WITH_ERROR:
            return result
        if attempt < MAX_RECONCILE_ATTEMPTS:
            reconciler.log_warning(
                meta,
                "Reconciliation failed, retrying",
                reason="Requeue",
                attempt=attempt,
                error=sanitize_exception(result.error),
            )
            time.sleep(REQUEUE_DELAY_SECONDS)

    raise kopf.TemporaryError(
        f"Reconciliation of ClusterDeployment {namespace}/{name} failed: "
        f"{sanitize_exception(result.error)}",
        delay=REQUEUE_DELAY_SECONDS,
    ) from result.error


def owned_by_cluster_instance(meta: dict[str, Any], **_: Any) -> bool:
    """Event filter: only ClusterDeployments owned by a ClusterInstance."""
    return is_owned_by_kind(meta.get("ownerReferences"), KIND_CLUSTER_INSTANCE)


@kopf.on.event(CD_API_GROUP_VERSION, KIND_CLUSTER_DEPLOYMENT, when=owned_by_cluster_instance)
def handle_cluster_deployment(event: dict[str, Any], meta: dict[str, Any], **_: Any) -> None:
    """Handle ClusterDeployment listing, create and update events."""
    if event.get("type") not in RECONCILE_EVENT_TYPES:
        return
    reconcile_cluster_deployment(meta.get("namespace", "default"), meta["name"])
