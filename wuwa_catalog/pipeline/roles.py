"""RoleCatalogStage — re-host role head icons and portraits, write roles.json."""

from __future__ import annotations

from typing import Any

from wuwa_catalog.pipeline.base import CatalogStage
from wuwa_catalog.resolve.roles import RoleResolver


class RoleCatalogStage(CatalogStage):
    """Build the role catalog from the encore.moe character listing."""

    catalog = "roles"

    @property
    def output_file(self) -> str:
        return self.config.roles.output_file

    def _fetch_listing(self) -> list[dict[str, Any]]:
        return self.encore.fetch_role_list()

    def _build_resolver(self) -> RoleResolver:
        return RoleResolver(self.config, self.encore)
