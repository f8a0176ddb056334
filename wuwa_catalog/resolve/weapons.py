"""
Weapon resolver.

One asset per weapon: ``Icon`` (an engine object path) rehosted on the
secondary provider by prefix stripping → ``{icon_dir}/{id}.webp``.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any

from wuwa_catalog.config import AppConfig
from wuwa_catalog.models.catalog import AssetReference, ResolvedEntity, WeaponRecord
from wuwa_catalog.resolve.base import EntityResolver, identify_entity, require_int, require_str
from wuwa_catalog.resolve.urls import rehost_by_prefix

ICON_KIND = "WeaponIcon"


def resolve_weapon(raw: dict[str, Any], config: AppConfig) -> ResolvedEntity:
    weapon_id, name = identify_entity(raw)
    fields = {
        "id": weapon_id,
        "name": name,
        "rarity": require_int(raw, "QualityId"),
        "type": require_int(raw, "WeaponType"),
    }
    weapons_cfg = config.weapons
    icon_url = rehost_by_prefix(
        require_str(raw, "Icon"),
        prefix=weapons_cfg.icon_prefix,
        template=weapons_cfg.icon_template,
    )
    extension = PurePosixPath(icon_url).suffix or ".webp"
    assets = (
        AssetReference(
            kind=ICON_KIND,
            source_url=icon_url,
            path=f"{weapons_cfg.icon_dir}/{weapon_id}{extension}",
            message=f"chore: upload weapon icon {weapon_id}",
        ),
    )
    return ResolvedEntity(entity_id=weapon_id, name=name, fields=fields, assets=assets)


class WeaponResolver(EntityResolver):
    catalog = "weapons"

    @property
    def skip_ids(self) -> list[int]:
        return self.config.weapons.skip_ids

    @property
    def exclude_name_patterns(self) -> list[str]:
        return self.config.weapons.exclude_name_patterns

    def resolve(self, raw: dict[str, Any]) -> ResolvedEntity:
        return resolve_weapon(raw, self.config)

    def build_record(self, resolved: ResolvedEntity, public_urls: dict[str, str]) -> WeaponRecord:
        return WeaponRecord(**resolved.fields, WeaponIcon=public_urls[ICON_KIND])
