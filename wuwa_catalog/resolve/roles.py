"""
Role (character) resolver.

Assets, in publish order:
  RoleHead      ``RoleHeadIcon`` from the listing, absolutized
                → ``{head_dir}/{id}.png``
  RolePortrait  ``FormationRoleCard`` from the per-role detail endpoint,
                absolutized then rehosted on the secondary provider by marker
                → ``{portrait_dir}/{id}{portrait_extension}``

A missing or failed detail request is a resolution failure for that role.
"""

from __future__ import annotations

import logging
from typing import Any

from wuwa_catalog.config import AppConfig
from wuwa_catalog.errors import ResolveError
from wuwa_catalog.ingestion.encore_client import EncoreClient
from wuwa_catalog.models.catalog import AssetReference, ResolvedEntity, RoleRecord
from wuwa_catalog.resolve.base import EntityResolver, identify_entity, require_int, require_str
from wuwa_catalog.resolve.urls import absolutize, rehost_by_marker

logger = logging.getLogger(__name__)

HEAD_KIND = "RoleHead"
PORTRAIT_KIND = "RolePortrait"


def role_element(raw: dict[str, Any]) -> int:
    """``Element.Id`` of a role record (some payloads inline the bare ID)."""
    element = raw.get("Element")
    if isinstance(element, dict):
        return require_int(element, "Id")
    return require_int(raw, "Element")


def role_listing_fields(raw: dict[str, Any], config: AppConfig) -> tuple[dict[str, Any], str]:
    """Metadata fields and absolute head icon URL from a listing entry alone."""
    role_id, name = identify_entity(raw)
    fields = {
        "id": role_id,
        "name": name,
        "rarity": require_int(raw, "QualityId"),
        "element": role_element(raw),
    }
    head_url = absolutize(require_str(raw, "RoleHeadIcon"), config.upstream.resource_base)
    return fields, head_url


def resolve_role(raw: dict[str, Any], detail: dict[str, Any], config: AppConfig) -> ResolvedEntity:
    """Resolve a role from its listing entry and its detail record.

    Raises:
        ResolveError: If a listing field or ``FormationRoleCard`` is missing,
            or the card URL has no portrait marker.
    """
    fields, head_url = role_listing_fields(raw, config)
    role_id = fields["id"]
    card = absolutize(require_str(detail, "FormationRoleCard"), config.upstream.resource_base)

    roles_cfg = config.roles
    portrait_url = rehost_by_marker(
        card,
        marker=roles_cfg.portrait_marker,
        host=config.upstream.secondary_host,
        extension=roles_cfg.portrait_extension,
    )

    assets = (
        AssetReference(
            kind=HEAD_KIND,
            source_url=head_url,
            path=f"{roles_cfg.head_dir}/{role_id}.png",
            message=f"chore: upload role head {role_id}",
        ),
        AssetReference(
            kind=PORTRAIT_KIND,
            source_url=portrait_url,
            path=f"{roles_cfg.portrait_dir}/{role_id}{roles_cfg.portrait_extension}",
            message=f"chore: upload role portrait {role_id}",
        ),
    )
    logger.debug("Resolved role %d | head=%s | portrait=%s", role_id, head_url, portrait_url)
    return ResolvedEntity(entity_id=role_id, name=fields["name"], fields=fields, assets=assets)


class RoleResolver(EntityResolver):
    """Resolve role listing entries; fetches one detail record per role."""

    catalog = "roles"

    def __init__(self, config: AppConfig, encore: EncoreClient) -> None:
        super().__init__(config)
        self.encore = encore

    @property
    def skip_ids(self) -> list[int]:
        return self.config.roles.skip_ids

    @property
    def exclude_name_patterns(self) -> list[str]:
        return self.config.roles.exclude_name_patterns

    def resolve(self, raw: dict[str, Any]) -> ResolvedEntity:
        # Listing fields are checked before the detail request is spent
        fields, _ = role_listing_fields(raw, self.config)
        detail = self.encore.fetch_role_detail(fields["id"])
        if detail is None:
            raise ResolveError(f"No detail record for role {fields['id']}")
        return resolve_role(raw, detail, self.config)

    def build_record(self, resolved: ResolvedEntity, public_urls: dict[str, str]) -> RoleRecord:
        return RoleRecord(
            **resolved.fields,
            RoleHead=public_urls[HEAD_KIND],
            RolePortrait=public_urls[PORTRAIT_KIND],
        )
