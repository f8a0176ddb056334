"""Exclusion rules evaluated once per entity, before any network call."""

from __future__ import annotations

from typing import Iterable, Optional


def exclusion_reason(
    entity_id: int,
    name: str,
    skip_ids: Iterable[int],
    exclude_name_patterns: Iterable[str],
) -> Optional[str]:
    """Return why an entity is excluded, or ``None`` if it should be processed.

    An entity is excluded when its ID is in ``skip_ids`` or any pattern is a
    case-insensitive substring of its display name.
    """
    if entity_id in set(skip_ids):
        return f"id {entity_id} is in the skip list"
    lowered = name.lower()
    for pattern in exclude_name_patterns:
        if pattern and pattern.lower() in lowered:
            return f"name {name!r} matches {pattern!r}"
    return None
