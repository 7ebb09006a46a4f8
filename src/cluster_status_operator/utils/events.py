"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_PROVISIONING_COMPLETED,
    EVENT_REASON_PROVISIONING_FAILED,
    EVENT_REASON_PROVISIONING_IN_PROGRESS,
    EVENT_REASON_PROVISIONING_STALE,
    REASON_COMPLETED,
    REASON_FAILED,
    REASON_IN_PROGRESS,
    REASON_STALE_CONDITIONS,
)

_PROVISIONED_EVENTS = {
    REASON_COMPLETED: (EVENT_REASON_PROVISIONING_COMPLETED, "Normal"),
    REASON_FAILED: (EVENT_REASON_PROVISIONING_FAILED, "Warning"),
    REASON_IN_PROGRESS: (EVENT_REASON_PROVISIONING_IN_PROGRESS, "Normal"),
    REASON_STALE_CONDITIONS: (EVENT_REASON_PROVISIONING_STALE, "Warning"),
}


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource the event is about (apiVersion, kind and metadata)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_provisioned_changed(body: dict[str, Any], reason: str, message: str) -> None:
    """Emit the event matching a new Provisioned condition reason."""
    if reason not in _PROVISIONED_EVENTS:
        return
    event_reason, type_ = _PROVISIONED_EVENTS[reason]
    emit_event(body, event_reason, message, type_=type_)
