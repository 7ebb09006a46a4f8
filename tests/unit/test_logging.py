"""Tests for structured logging and correlation IDs."""

from __future__ import annotations

import json
import logging

from cluster_status_operator.logging import log_resource_event
from cluster_status_operator.utils.context import (
    get_context_dict,
    get_correlation_id,
    with_correlation_id,
)

logger = logging.getLogger("test_logging")


def _emit(**kwargs):
    log_resource_event(
        logger,
        controller="cluster-status-operator",
        resource_kind="ClusterInstance",
        resource_name="test-cluster",
        namespace="test-ns",
        uid="uid-1",
        event="status_patched",
        reason="Patched",
        message="Status patched",
        **kwargs,
    )


class TestCorrelationId:
    """Test cases for correlation ID propagation."""

    def test_scoped_to_block(self):
        assert get_correlation_id() is None

        with with_correlation_id("abc123") as corr_id:
            assert corr_id == "abc123"
            assert get_correlation_id() == "abc123"

        assert get_correlation_id() is None

    def test_generated_when_omitted(self):
        with with_correlation_id() as corr_id:
            assert len(corr_id) == 16

    def test_context_dict(self):
        assert get_context_dict({"a": 1}) == {"a": 1}
        with with_correlation_id("abc123"):
            assert get_context_dict() == {"correlation_id": "abc123"}


class TestLogResourceEvent:
    """Test cases for JSON log lines."""

    def test_fields(self, caplog):
        with caplog.at_level(logging.INFO, logger="test_logging"):
            _emit(changed=["Completed"])

        record = json.loads(caplog.records[-1].getMessage())
        assert record == {
            "controller": "cluster-status-operator",
            "resource": "ClusterInstance",
            "name": "test-cluster",
            "namespace": "test-ns",
            "uid": "uid-1",
            "event": "status_patched",
            "reason": "Patched",
            "message": "Status patched",
            "changed": ["Completed"],
        }

    def test_includes_correlation_id(self, caplog):
        with caplog.at_level(logging.INFO, logger="test_logging"), with_correlation_id("abc123"):
            _emit()

        record = json.loads(caplog.records[-1].getMessage())
        assert record["correlation_id"] == "abc123"
