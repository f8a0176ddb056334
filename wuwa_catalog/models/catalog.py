"""
Catalog domain types.

Transient pipeline values are frozen dataclasses (``AssetReference``,
``PublishedAsset``, ``ResolvedEntity`` and the two ``EntityOutcome`` variants);
the catalog records that end up in JSON output are frozen Pydantic models so
their field names are the serialized keys.

Raw upstream records are never modelled — they stay plain ``dict`` objects
owned by the API, and only the resolvers read fields out of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


# ── Assets ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AssetReference:
    """One image to copy: where it comes from and where it goes in the store.

    Attributes:
        kind:       Record field the public URL is written to (``"RoleHead"``).
        source_url: Absolute upstream URL of the image.
        path:       Target path inside the content store (``"icons/100.png"``).
        message:    Commit message used when the image is written.
    """

    kind: str
    source_url: str
    path: str
    message: str


@dataclass(frozen=True)
class PublishedAsset:
    """Outcome of a single publish attempt.

    ``public_url`` is only set when ``success`` is true.  ``skipped_write``
    marks a publish that found identical bytes already stored.
    """

    path: str
    success: bool
    public_url: Optional[str] = None
    skipped_write: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class ResolvedEntity:
    """Metadata fields plus the ordered asset references for one raw record."""

    entity_id: int
    name: str
    fields: dict[str, Any]
    assets: tuple[AssetReference, ...] = field(default_factory=tuple)


# ── Catalog records ───────────────────────────────────────────────────────────

class RoleRecord(BaseModel):
    """One character in ``roles.json``.

    Attributes:
        id:           Upstream role ID.
        name:         Display name.
        rarity:       Upstream ``QualityId`` (4 or 5 for playable roles).
        element:      Upstream ``Element.Id``.
        RoleHead:     Public URL of the re-hosted head icon.
        RolePortrait: Public URL of the re-hosted portrait.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    rarity: int
    element: int
    RoleHead: str
    RolePortrait: str


class WeaponRecord(BaseModel):
    """One weapon in ``weapons.json``."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    rarity: int
    type: int
    WeaponIcon: str


CatalogRecord = Union[RoleRecord, WeaponRecord]


# ── Per-entity outcome ────────────────────────────────────────────────────────

class SkipReason(str, Enum):
    """Why an entity was left out of the catalog."""

    EXCLUDED = "excluded"
    RESOLVE_FAILED = "resolve_failed"
    FETCH_FAILED = "fetch_failed"
    PUBLISH_FAILED = "publish_failed"


@dataclass(frozen=True)
class Included:
    """Terminal state: every asset published, ``record`` goes into the catalog."""

    entity_id: Any
    record: CatalogRecord


@dataclass(frozen=True)
class Skipped:
    """Terminal state: entity dropped entirely (no partial records)."""

    entity_id: Any
    reason: SkipReason
    detail: str = ""


EntityOutcome = Union[Included, Skipped]
