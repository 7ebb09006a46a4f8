"""Shared Kubernetes store access for handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from kubernetes import client

from .. import metrics
from ..constants import (
    CD_API_GROUP,
    CD_API_VERSION,
    CI_API_GROUP,
    CI_API_VERSION,
    FIELD_MANAGER,
    KIND_CLUSTER_INSTANCE,
    PLURAL_CLUSTER_DEPLOYMENTS,
    PLURAL_CLUSTER_INSTANCES,
)
from ..utils.errors import is_not_found
from ..utils.owners import owner_of_kind
from ..utils.rate_limit import handle_rate_limit_error, rate_limit_k8s

logger = logging.getLogger(__name__)


def _call_k8s(operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
    """Call the Kubernetes API with rate limiting, throttling retries and metrics.

    Args:
        operation: Operation label for metrics
        func: Bound CustomObjectsApi method
        **kwargs: Arguments for ``func``

    Returns:
        The API response

    Raises:
        client.exceptions.ApiException: If the call fails (404 included)
    """
    start_time = time.time()
    attempt = 0
    try:
        while True:
            try:
                result = rate_limit_k8s(func)(**kwargs)
            except Exception as e:
                if handle_rate_limit_error(e, attempt):
                    attempt += 1
                    continue
                outcome = "not_found" if is_not_found(e) else "error"
                metrics.api_call_total.labels(api_type="k8s", operation=operation, result=outcome).inc()
                raise
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)


def get_cluster_deployment(api: Any, namespace: str, name: str) -> dict[str, Any]:
    """Get a ClusterDeployment.

    Raises:
        client.exceptions.ApiException: If not found or API error
    """
    return _call_k8s(
        "get_cluster_deployment",
        api.get_namespaced_custom_object,
        group=CD_API_GROUP,
        version=CD_API_VERSION,
        namespace=namespace,
        plural=PLURAL_CLUSTER_DEPLOYMENTS,
        name=name,
    )


def get_cluster_instance(api: Any, namespace: str, name: str) -> dict[str, Any]:
    """Get a ClusterInstance.

    Raises:
        client.exceptions.ApiException: If not found or API error
    """
    return _call_k8s(
        "get_cluster_instance",
        api.get_namespaced_custom_object,
        group=CI_API_GROUP,
        version=CI_API_VERSION,
        namespace=namespace,
        plural=PLURAL_CLUSTER_INSTANCES,
        name=name,
    )


def patch_cluster_instance_status(
    api: Any,
    namespace: str,
    name: str,
    body: dict[str, Any],
) -> dict[str, Any]:
    """Apply a JSON merge patch to the ClusterInstance status subresource.

    Args:
        api: Kubernetes CustomObjectsApi instance
        namespace: ClusterInstance namespace
        name: ClusterInstance name
        body: Merge patch, e.g. ``{"status": {...}}``

    Returns:
        The patched ClusterInstance
    """
    return _call_k8s(
        "patch_cluster_instance_status",
        api.patch_namespaced_custom_object_status,
        group=CI_API_GROUP,
        version=CI_API_VERSION,
        namespace=namespace,
        plural=PLURAL_CLUSTER_INSTANCES,
        name=name,
        body=body,
        field_manager=FIELD_MANAGER,
    )


def resolve_cluster_instance(api: Any, cluster_deployment: dict[str, Any]) -> dict[str, Any] | None:
    """Find the ClusterInstance owning a ClusterDeployment.

    Args:
        api: Kubernetes CustomObjectsApi instance
        cluster_deployment: ClusterDeployment object

    Returns:
        The owning ClusterInstance, or None if there is no owner reference to a
        ClusterInstance or the referenced ClusterInstance does not exist

    Raises:
        client.exceptions.ApiException: On any API error other than 404
    """
    meta = cluster_deployment.get("metadata") or {}
    cd_name = meta.get("name", "unknown")

    ci_name = owner_of_kind(meta.get("ownerReferences"), KIND_CLUSTER_INSTANCE)
    if ci_name is None:
        logger.info(f"ClusterInstance owner-reference not found for ClusterDeployment {cd_name}")
        return None

    try:
        return get_cluster_instance(api, meta.get("namespace", "default"), ci_name)
    except Exception as e:
        if is_not_found(e):
            logger.info(f"ClusterInstance {ci_name} not found")
            return None
        logger.info(f"Failed to get ClusterInstance {ci_name} for ClusterDeployment {cd_name}")
        raise


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()
