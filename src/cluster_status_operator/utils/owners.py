"""Owner reference lookups."""

from __future__ import annotations

from typing import Any


def owner_of_kind(owner_references: list[dict[str, Any]] | None, kind: str) -> str | None:
    """Return the name of the first owner of the given kind, if any.

    Args:
        owner_references: ``metadata.ownerReferences`` of a resource
        kind: Owner kind to look for

    Returns:
        Owner name, or None when no owner reference of that kind exists
    """
    for owner_ref in owner_references or []:
        if owner_ref.get("kind") == kind and owner_ref.get("name"):
            return owner_ref["name"]
    return None


def is_owned_by_kind(owner_references: list[dict[str, Any]] | None, kind: str) -> bool:
    """Check whether a resource has an owner of the given kind."""
    return owner_of_kind(owner_references, kind) is not None
