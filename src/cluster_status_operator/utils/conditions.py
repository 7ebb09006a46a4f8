"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def now_rfc3339() -> str:
    """Return the current UTC time the way the API server serializes metav1.Time."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ConditionList:
    """Keyed view over a list of condition dicts.

    The wrapped list is mutated in place, so changes are visible through the
    owning resource. Records are keyed by ``type``; at most one record per type
    is kept and new types are appended. Records without a ``type`` belong to
    other writers and are left where they are.
    """

    def __init__(self, conditions: list[dict[str, Any]] | None = None):
        self._conditions: list[dict[str, Any]] = conditions if conditions is not None else []
        self._index: dict[str, dict[str, Any]] = {}
        # Collapse duplicate types, first one wins
        kept: list[dict[str, Any]] = []
        for cond in self._conditions:
            cond_type = cond.get("type")
            if cond_type is not None:
                if cond_type in self._index:
                    continue
                self._index[cond_type] = cond
            kept.append(cond)
        if len(kept) != len(self._conditions):
            self._conditions[:] = kept

    def __contains__(self, condition_type: object) -> bool:
        return condition_type in self._index

    def find(self, condition_type: str) -> dict[str, Any] | None:
        """Return the record for ``condition_type`` or None."""
        return self._index.get(condition_type)

    def upsert(self, record: dict[str, Any]) -> dict[str, Any]:
        """Insert ``record`` or replace the fields of the existing record of its type."""
        condition_type = record["type"]
        existing = self._index.get(condition_type)
        if existing is None:
            stored = dict(record)
            self._conditions.append(stored)
            self._index[condition_type] = stored
            return stored
        existing.update(record)
        return existing

    def set_status(
        self,
        condition_type: str,
        status: str,
        reason: str,
        message: str,
        now: str | None = None,
    ) -> bool:
        """Set a condition, touching lastTransitionTime only when status changes.

        Returns:
            True if the condition was added or its status changed
        """
        now = now or now_rfc3339()
        existing = self._index.get(condition_type)
        if existing is None:
            self.upsert(
                {
                    "type": condition_type,
                    "status": status,
                    "reason": reason,
                    "message": message,
                    "lastTransitionTime": now,
                }
            )
            return True

        changed = existing.get("status") != status
        existing["status"] = status
        existing["reason"] = reason
        existing["message"] = message
        if changed or not existing.get("lastTransitionTime"):
            existing["lastTransitionTime"] = now
        return changed

    def mirror(self, record: dict[str, Any], now: str | None = None) -> bool:
        """Copy ``record`` into the list as an observed condition.

        lastProbeTime is refreshed on every call; lastTransitionTime only when
        the status differs from the stored one.

        Returns:
            True if the condition was added or its status changed
        """
        now = now or now_rfc3339()
        condition_type = record["type"]
        existing = self._index.get(condition_type)
        if existing is None:
            self.upsert(
                {
                    "type": condition_type,
                    "status": record.get("status"),
                    "reason": record.get("reason") or "",
                    "message": record.get("message") or "",
                    "lastTransitionTime": now,
                    "lastProbeTime": now,
                }
            )
            return True

        changed = existing.get("status") != record.get("status")
        existing["status"] = record.get("status")
        existing["reason"] = record.get("reason") or ""
        existing["message"] = record.get("message") or ""
        existing["lastProbeTime"] = now
        if changed:
            existing["lastTransitionTime"] = now
        return changed


def find_condition(
    conditions: list[dict[str, Any]] | None,
    condition_type: str,
) -> dict[str, Any] | None:
    """Find a condition by type in a plain conditions list."""
    for cond in conditions or []:
        if cond.get("type") == condition_type:
            return cond
    return None


def ensure_conditions(status: dict[str, Any], key: str = "conditions") -> list[dict[str, Any]]:
    """Return ``status[key]`` as a list, creating it when missing or null."""
    conditions = status.get(key)
    if conditions is None:
        conditions = []
        status[key] = conditions
    return conditions
