"""JSON merge patch computation (RFC 7386)."""

from __future__ import annotations

from typing import Any


def create_merge_patch(original: dict[str, Any], modified: dict[str, Any]) -> dict[str, Any]:
    """Compute the merge patch that turns ``original`` into ``modified``.

    Keys removed in ``modified`` are set to None, nested dicts are diffed
    recursively, and any other changed value (lists included) is replaced whole.

    Args:
        original: Snapshot taken before mutation
        modified: Mutated object

    Returns:
        Merge patch; empty when both objects are equal
    """
    patch: dict[str, Any] = {}

    for key in original:
        if key not in modified:
            patch[key] = None

    for key, new_value in modified.items():
        if key not in original:
            patch[key] = new_value
            continue

        old_value = original[key]
        if isinstance(old_value, dict) and isinstance(new_value, dict):
            nested = create_merge_patch(old_value, new_value)
            if nested:
                patch[key] = nested
        elif old_value != new_value:
            patch[key] = new_value

    return patch
