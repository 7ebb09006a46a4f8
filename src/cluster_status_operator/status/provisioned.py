"""Derive the ClusterInstance Provisioned condition from ClusterDeployment signals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..constants import (
    COND_COMPLETED,
    COND_FAILED,
    COND_PROVISIONED,
    COND_STOPPED,
    MSG_COMPLETED,
    MSG_FAILED,
    MSG_IN_PROGRESS,
    MSG_STALE,
    MSG_WAITING,
    REASON_COMPLETED,
    REASON_FAILED,
    REASON_IN_PROGRESS,
    REASON_STALE_CONDITIONS,
    REASON_UNKNOWN,
    STATUS_FALSE,
    STATUS_TRUE,
    STATUS_UNKNOWN,
)
from ..utils.conditions import ConditionList, ensure_conditions, find_condition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionedOutcome:
    """Status, reason and message written to the Provisioned condition."""

    status: str
    reason: str
    message: str


WAITING = ProvisionedOutcome(STATUS_UNKNOWN, REASON_UNKNOWN, MSG_WAITING)
COMPLETED = ProvisionedOutcome(STATUS_TRUE, REASON_COMPLETED, MSG_COMPLETED)
STALE = ProvisionedOutcome(STATUS_UNKNOWN, REASON_STALE_CONDITIONS, MSG_STALE)
FAILED = ProvisionedOutcome(STATUS_FALSE, REASON_FAILED, MSG_FAILED)
IN_PROGRESS = ProvisionedOutcome(STATUS_FALSE, REASON_IN_PROGRESS, MSG_IN_PROGRESS)


@dataclass(frozen=True)
class InstallSignals:
    """The ClusterDeployment fields the Provisioned condition is derived from."""

    installed: bool
    stopped: str
    completed: str
    failed: str


def extract_install_signals(cluster_deployment: dict[str, Any]) -> InstallSignals | None:
    """Read the install signals, or None if any required condition is missing."""
    conditions = (cluster_deployment.get("status") or {}).get("conditions") or []
    stopped = find_condition(conditions, COND_STOPPED)
    completed = find_condition(conditions, COND_COMPLETED)
    failed = find_condition(conditions, COND_FAILED)
    if stopped is None or completed is None or failed is None:
        return None

    return InstallSignals(
        installed=bool((cluster_deployment.get("spec") or {}).get("installed", False)),
        stopped=stopped.get("status", STATUS_UNKNOWN),
        completed=completed.get("status", STATUS_UNKNOWN),
        failed=failed.get("status", STATUS_UNKNOWN),
    )


def evaluate_provisioned(signals: InstallSignals) -> ProvisionedOutcome | None:
    """Apply the Provisioned decision table, first matching rule wins.

    Returns:
        The outcome to write, or None when no rule matches
    """
    if signals.installed:
        if signals.stopped == STATUS_TRUE and signals.completed == STATUS_TRUE:
            return COMPLETED
        # Spec.Installed can run ahead of the conditions
        if signals.stopped == STATUS_FALSE or signals.completed == STATUS_FALSE:
            return STALE

    # Only report a failure once the install has stopped
    if signals.stopped == STATUS_TRUE and signals.failed == STATUS_TRUE:
        return FAILED

    if signals.stopped == STATUS_FALSE:
        return IN_PROGRESS

    return None


def initialize_provisioned_condition(cluster_instance: dict[str, Any], now: str | None = None) -> bool:
    """Add the Provisioned condition in its waiting state if it is absent.

    Returns:
        True if the condition was added
    """
    conditions = ConditionList(ensure_conditions(cluster_instance.setdefault("status", {})))
    if COND_PROVISIONED in conditions:
        return False
    conditions.set_status(COND_PROVISIONED, WAITING.status, WAITING.reason, WAITING.message, now)
    return True


def update_provisioned_status(
    cluster_deployment: dict[str, Any],
    cluster_instance: dict[str, Any],
    now: str | None = None,
) -> ProvisionedOutcome | None:
    """Recompute the Provisioned condition of ``cluster_instance``.

    Args:
        cluster_deployment: ClusterDeployment object (read only)
        cluster_instance: ClusterInstance object, mutated in place
        now: Timestamp for a status transition, defaults to the current time

    Returns:
        The outcome written, or None if the condition was left untouched
    """
    signals = extract_install_signals(cluster_deployment)
    if signals is None:
        logger.info(
            "Failed to extract install condition(s) from ClusterDeployment %s",
            (cluster_deployment.get("metadata") or {}).get("name", "unknown"),
        )
        return None

    outcome = evaluate_provisioned(signals)
    if outcome is None:
        return None

    conditions = ConditionList(ensure_conditions(cluster_instance.setdefault("status", {})))
    conditions.set_status(COND_PROVISIONED, outcome.status, outcome.reason, outcome.message, now)
    return outcome
