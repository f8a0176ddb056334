"""
Abstract base for catalog resolvers.

A resolver owns every catalog-specific rule:
  1. ``identify(raw)``      — ID and display name, needed by the exclusion filter.
  2. ``exclusion(id, name)``— skip-list / name-pattern check (no network).
  3. ``resolve(raw)``       — metadata fields + ordered ``AssetReference`` tuple.
  4. ``build_record(...)``  — the catalog record once every asset is published.

The pipeline driver (``wuwa_catalog.pipeline.entity``) is catalog-agnostic and
only talks to this interface.

Usage::

    class GadgetResolver(EntityResolver):
        catalog = "gadgets"

        def resolve(self, raw): ...
        def build_record(self, resolved, public_urls): ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from wuwa_catalog.config import AppConfig
from wuwa_catalog.errors import ResolveError
from wuwa_catalog.models.catalog import CatalogRecord, ResolvedEntity
from wuwa_catalog.resolve.filters import exclusion_reason


def require_int(raw: dict[str, Any], key: str) -> int:
    """Read an integer field, rejecting missing values and bools.

    Raises:
        ResolveError: If ``key`` is missing or not integer-like.
    """
    value = raw.get(key)
    if isinstance(value, bool) or value is None:
        raise ResolveError(f"Missing integer field '{key}'")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ResolveError(f"Field '{key}' is not an integer: {value!r}") from exc


def require_str(raw: dict[str, Any], key: str) -> str:
    """Read a non-empty string field.

    Raises:
        ResolveError: If ``key`` is missing, empty, or not a string.
    """
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ResolveError(f"Missing string field '{key}'")
    return value


def identify_entity(raw: dict[str, Any]) -> tuple[int, str]:
    """Return ``(Id, Name)`` of a raw listing entry.

    Raises:
        ResolveError: If the entry is not an object or either field is missing.
    """
    if not isinstance(raw, dict):
        raise ResolveError(f"Listing entry is not an object: {type(raw).__name__}")
    return require_int(raw, "Id"), require_str(raw, "Name")


class EntityResolver(ABC):
    """Catalog-specific rules behind the generic per-entity pipeline.

    Attributes:
        catalog: Catalog name, matches ``RunMetadata.catalog``.
        config: The application configuration for this run.
    """

    catalog: str  # Override in subclass

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @property
    @abstractmethod
    def skip_ids(self) -> list[int]: ...

    @property
    @abstractmethod
    def exclude_name_patterns(self) -> list[str]: ...

    def identify(self, raw: dict[str, Any]) -> tuple[int, str]:
        """Return ``(Id, Name)`` of a raw record.

        Raises:
            ResolveError: If either field is missing.
        """
        return identify_entity(raw)

    def exclusion(self, entity_id: int, name: str) -> Optional[str]:
        return exclusion_reason(entity_id, name, self.skip_ids, self.exclude_name_patterns)

    @abstractmethod
    def resolve(self, raw: dict[str, Any]) -> ResolvedEntity:
        """Derive metadata fields and asset references.

        Raises:
            ResolveError: If any required field or asset reference cannot be derived.
        """
        ...

    @abstractmethod
    def build_record(
        self,
        resolved: ResolvedEntity,
        public_urls: dict[str, str],
    ) -> CatalogRecord:
        """Build the catalog record from resolved fields and ``kind → public URL``."""
        ...
