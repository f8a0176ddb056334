"""
Catalog orchestration.

The ``CatalogOrchestrator`` runs the selected catalogs in a deterministic
sequence, sharing one HTTP client, one fetcher and one content store:

  Step 1 — Pre-flight:  Required store settings present (skipped for dry runs).
                        Nothing touches the network before this passes.
  Step 2 — Roles:       RoleCatalogStage   → roles.json
  Step 3 — Weapons:     WeaponCatalogStage → weapons.json

Failure isolation
-----------------
- Missing store settings:   ``ConfigError`` raised before any stage runs.
- Listing unavailable:      That catalog is recorded as failed; the next
                            catalog still runs.
- Catalog file not written: That catalog is ``partial``; published assets stay.

Overall status: ``success`` when every catalog succeeded, ``failed`` when
every catalog failed, ``partial`` otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx

from wuwa_catalog.config import AppConfig, require_store_settings
from wuwa_catalog.ingestion.encore_client import EncoreClient
from wuwa_catalog.ingestion.fetcher import AssetFetcher
from wuwa_catalog.ingestion.http import build_http_client
from wuwa_catalog.models.meta import RunMetadata
from wuwa_catalog.pipeline.base import CatalogStage
from wuwa_catalog.pipeline.roles import RoleCatalogStage
from wuwa_catalog.pipeline.weapons import WeaponCatalogStage
from wuwa_catalog.publishing.github_store import GitHubContentStore
from wuwa_catalog.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

CATALOG_STAGES: dict[str, type[CatalogStage]] = {
    "roles": RoleCatalogStage,
    "weapons": WeaponCatalogStage,
}


# ── Result types ──────────────────────────────────────────────────────────────

@dataclass
class CatalogResult:
    """Outcome of one catalog stage.

    Attributes:
        catalog: Catalog that was processed.
        success: True if the stage finished (``success`` or ``partial`` run).
        run:     The stage's ``RunMetadata`` when it finished.
        error:   Exception message if success=False.
    """

    catalog: str
    success: bool
    run: Optional[RunMetadata] = None
    error: Optional[str] = None


@dataclass
class OrchestratorResult:
    """Complete result of one orchestrated run."""

    started_at:      Optional[datetime] = None
    finished_at:     Optional[datetime] = None
    dry_run:         bool = False
    catalog_results: list[CatalogResult] = field(default_factory=list)
    errors:          list[str] = field(default_factory=list)
    status:          str = "started"

    @property
    def exit_code(self) -> int:
        """0 unless some catalog failed outright."""
        return 0 if all(r.success for r in self.catalog_results) else 1


# ── Orchestrator ──────────────────────────────────────────────────────────────

class CatalogOrchestrator:
    """Coordinates the role and weapon catalog stages.

    Args:
        config:     AppConfig for this run.
        transport:  Optional httpx transport (``httpx.MockTransport`` in tests).
        output_dir: Directory relative catalog paths are resolved against
                    (defaults to the working directory).
    """

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.BaseTransport] = None,
        output_dir: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.output_dir = output_dir

    def run(
        self,
        catalogs: Optional[list[str]] = None,
        dry_run: bool = False,
    ) -> OrchestratorResult:
        """Run the selected catalogs (default: all, roles first).

        Raises:
            ValueError:  If an unknown catalog name is requested.
            ConfigError: If required store settings are missing (non-dry runs).
        """
        selected = catalogs or list(CATALOG_STAGES)
        unknown = [name for name in selected if name not in CATALOG_STAGES]
        if unknown:
            raise ValueError(
                f"Unknown catalog(s) {unknown}. Must be one of {sorted(CATALOG_STAGES)}."
            )

        if not dry_run:
            require_store_settings(self.config)

        result = OrchestratorResult(started_at=utcnow(), dry_run=dry_run)

        with build_http_client(self.config.http, transport=self.transport) as client:
            encore = EncoreClient(client, self.config.upstream)
            fetcher = AssetFetcher(client)
            store = GitHubContentStore(client, self.config.store)

            for name in selected:
                stage = CATALOG_STAGES[name](
                    config=self.config,
                    encore=encore,
                    fetcher=fetcher,
                    store=store,
                    output_dir=self.output_dir,
                )
                catalog_result = self._run_stage(stage, dry_run)
                result.catalog_results.append(catalog_result)
                if catalog_result.error:
                    result.errors.append(f"{name}: {catalog_result.error}")

        result.finished_at = utcnow()
        result.status = self._overall_status(result.catalog_results)
        logger.info(
            "Run finished | status=%s | catalogs=%s",
            result.status, ", ".join(selected),
        )
        return result

    def _run_stage(self, stage: CatalogStage, dry_run: bool) -> CatalogResult:
        try:
            run = stage.run(dry_run=dry_run)
        except Exception as exc:
            logger.error("Catalog %s failed: %s", stage.catalog, exc)
            return CatalogResult(catalog=stage.catalog, success=False, error=str(exc))
        return CatalogResult(
            catalog=stage.catalog,
            success=True,
            run=run,
            error=run.error_message,
        )

    @staticmethod
    def _overall_status(results: list[CatalogResult]) -> str:
        if results and all(r.success and r.run and r.run.status == "success" for r in results):
            return "success"
        if not any(r.success for r in results):
            return "failed"
        return "partial"
