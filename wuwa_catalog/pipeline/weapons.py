"""WeaponCatalogStage — re-host weapon icons, write weapons.json."""

from __future__ import annotations

from typing import Any

from wuwa_catalog.pipeline.base import CatalogStage
from wuwa_catalog.resolve.weapons import WeaponResolver


class WeaponCatalogStage(CatalogStage):
    catalog = "weapons"

    @property
    def output_file(self) -> str:
        return self.config.weapons.output_file

    def _fetch_listing(self) -> list[dict[str, Any]]:
        return self.encore.fetch_weapon_list()

    def _build_resolver(self) -> WeaponResolver:
        return WeaponResolver(self.config)
