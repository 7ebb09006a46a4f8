"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
from typing import Any, Callable
from unittest.mock import patch

import pytest
from kubernetes.client.exceptions import ApiException

from cluster_status_operator.constants import (
    CD_API_GROUP,
    CD_API_GROUP_VERSION,
    CI_API_GROUP,
    CI_API_GROUP_VERSION,
    KIND_CLUSTER_DEPLOYMENT,
    KIND_CLUSTER_INSTANCE,
    PLURAL_CLUSTER_DEPLOYMENTS,
    PLURAL_CLUSTER_INSTANCES,
)

NAMESPACE = "test-ns"
CLUSTER_NAME = "test-cluster"


def apply_merge_patch(target: Any, patch_body: Any) -> Any:
    """Apply an RFC 7386 merge patch the way the API server does."""
    if not isinstance(patch_body, dict):
        return copy.deepcopy(patch_body)
    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch_body.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = apply_merge_patch(result.get(key), value)
    return result


class FakeCustomObjectsApi:
    """In-memory stand-in for kubernetes.client.CustomObjectsApi."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str, str, str], dict[str, Any]] = {}
        self.patch_calls: list[dict[str, Any]] = []
        self.get_errors: dict[str, Exception] = {}
        self.patch_error: Exception | None = None

    def add(self, group: str, plural: str, obj: dict[str, Any]) -> None:
        meta = obj["metadata"]
        self.objects[(group, plural, meta["namespace"], meta["name"])] = copy.deepcopy(obj)

    def stored(self, group: str, plural: str, namespace: str, name: str) -> dict[str, Any]:
        return self.objects[(group, plural, namespace, name)]

    def get_namespaced_custom_object(
        self, group: str, version: str, namespace: str, plural: str, name: str
    ) -> dict[str, Any]:
        if plural in self.get_errors:
            raise self.get_errors[plural]
        key = (group, plural, namespace, name)
        if key not in self.objects:
            raise ApiException(status=404, reason="Not Found")
        return copy.deepcopy(self.objects[key])

    def patch_namespaced_custom_object_status(
        self,
        group: str,
        version: str,
        namespace: str,
        plural: str,
        name: str,
        body: dict[str, Any],
        field_manager: str | None = None,
    ) -> dict[str, Any]:
        self.patch_calls.append(
            {"namespace": namespace, "plural": plural, "name": name, "body": copy.deepcopy(body)}
        )
        if self.patch_error is not None:
            raise self.patch_error
        key = (group, plural, namespace, name)
        if key not in self.objects:
            raise ApiException(status=404, reason="Not Found")
        current = self.objects[key]
        current["status"] = apply_merge_patch(current.get("status"), body.get("status"))
        return copy.deepcopy(current)


def install_condition(cond_type: str, status: str, reason: str = "", message: str = "") -> dict[str, Any]:
    return {
        "type": cond_type,
        "status": status,
        "reason": reason or f"{cond_type}Reason",
        "message": message or f"{cond_type} message",
        "lastTransitionTime": "2024-01-01T00:00:00Z",
        "lastProbeTime": "2024-01-01T00:00:00Z",
    }


@pytest.fixture(autouse=True)
def no_rate_limit_delay():
    """Disable API call spacing so tests run instantly."""
    with patch("cluster_status_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 1e9):
        yield


@pytest.fixture
def api() -> FakeCustomObjectsApi:
    return FakeCustomObjectsApi()


@pytest.fixture
def make_cluster_deployment() -> Callable[..., dict[str, Any]]:
    def _make(
        name: str = CLUSTER_NAME,
        namespace: str = NAMESPACE,
        installed: bool = False,
        conditions: list[dict[str, Any]] | None = None,
        owner_kind: str | None = KIND_CLUSTER_INSTANCE,
        owner_name: str = CLUSTER_NAME,
    ) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": name, "namespace": namespace, "uid": "cd-uid"}
        if owner_kind is not None:
            metadata["ownerReferences"] = [
                {
                    "apiVersion": CI_API_GROUP_VERSION,
                    "kind": owner_kind,
                    "name": owner_name,
                    "uid": "owner-uid",
                }
            ]
        return {
            "apiVersion": CD_API_GROUP_VERSION,
            "kind": KIND_CLUSTER_DEPLOYMENT,
            "metadata": metadata,
            "spec": {"installed": installed},
            "status": {"conditions": list(conditions or [])},
        }

    return _make


@pytest.fixture
def make_cluster_instance() -> Callable[..., dict[str, Any]]:
    def _make(
        name: str = CLUSTER_NAME,
        namespace: str = NAMESPACE,
        status: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        obj: dict[str, Any] = {
            "apiVersion": CI_API_GROUP_VERSION,
            "kind": KIND_CLUSTER_INSTANCE,
            "metadata": {"name": name, "namespace": namespace, "uid": "ci-uid"},
            "spec": {"clusterName": name},
        }
        if status is not None:
            obj["status"] = status
        return obj

    return _make


@pytest.fixture
def store_cluster_deployment(api: FakeCustomObjectsApi) -> Callable[[dict[str, Any]], None]:
    def _store(obj: dict[str, Any]) -> None:
        api.add(CD_API_GROUP, PLURAL_CLUSTER_DEPLOYMENTS, obj)

    return _store


@pytest.fixture
def store_cluster_instance(api: FakeCustomObjectsApi) -> Callable[[dict[str, Any]], None]:
    def _store(obj: dict[str, Any]) -> None:
        api.add(CI_API_GROUP, PLURAL_CLUSTER_INSTANCES, obj)

    return _store


@pytest.fixture
def stored_cluster_instance(api: FakeCustomObjectsApi) -> Callable[..., dict[str, Any]]:
    def _get(name: str = CLUSTER_NAME, namespace: str = NAMESPACE) -> dict[str, Any]:
        return api.stored(CI_API_GROUP, PLURAL_CLUSTER_INSTANCES, namespace, name)

    return _get


@pytest.fixture
def make_condition() -> Callable[..., dict[str, Any]]:
    return install_condition


@pytest.fixture
def clock() -> dict[str, str]:
    """Mutable clock; set ``clock["now"]`` to move time forward."""
    return {"now": "2024-06-01T10:00:00Z"}
