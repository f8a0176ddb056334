"""
Abstract base class for catalog stages.

Every stage follows the same contract:
  1. Receive ``AppConfig`` and the shared collaborators at construction.
  2. ``run(dry_run=False)`` is the sole public API.
  3. ``run()`` creates a ``RunMetadata`` record, calls ``_execute()``, and
     returns the run record with its final status.
  4. Subclasses supply the listing (``_fetch_listing``) and the
     catalog rules (``_build_resolver``); the per-entity loop and the catalog
     write are shared.

Status rules:
  - listing unavailable (``UpstreamError``) or any error outside the
    per-entity loop → ``failed``, exception re-raised
  - catalog file could not be written → ``partial`` (assets stay published)
  - otherwise → ``success``

Usage::

    class GadgetCatalogStage(CatalogStage):
        catalog = "gadgets"

        def _fetch_listing(self): return self.encore.fetch_gadget_list()
        def _build_resolver(self): return GadgetResolver(self.config)
        @property
        def output_file(self): return self.config.gadgets.output_file
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from wuwa_catalog.config import AppConfig
from wuwa_catalog.ingestion.encore_client import EncoreClient
from wuwa_catalog.ingestion.fetcher import AssetFetcher
from wuwa_catalog.models.catalog import CatalogRecord, Included
from wuwa_catalog.models.meta import RunMetadata
from wuwa_catalog.pipeline.entity import process_entity
from wuwa_catalog.publishing.github_store import GitHubContentStore
from wuwa_catalog.reporting.export import export_catalog
from wuwa_catalog.resolve.base import EntityResolver
from wuwa_catalog.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class CatalogStage(ABC):
    """Abstract base for the role and weapon catalog stages.

    Attributes:
        catalog: Catalog name; matches ``RunMetadata.catalog``.
        config: The application configuration for this run.
        records: Records accumulated by the last ``run()``, in listing order.
    """

    catalog: str  # Override in subclass

    def __init__(
        self,
        config: AppConfig,
        encore: EncoreClient,
        fetcher: AssetFetcher,
        store: GitHubContentStore,
        output_dir: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.encore = encore
        self.fetcher = fetcher
        self.store = store
        self.output_dir = output_dir
        self.records: list[CatalogRecord] = []

    @property
    @abstractmethod
    def output_file(self) -> str: ...

    @property
    def output_path(self) -> Path:
        path = Path(self.output_file)
        if self.output_dir is not None and not path.is_absolute():
            return self.output_dir / path
        return path

    def run(self, dry_run: bool = False) -> RunMetadata:
        """Build this catalog.

        Returns:
            ``RunMetadata`` with final status, counters and ``finished_at`` set.

        Raises:
            Exception: Re-raises any error from ``_execute()`` after recording
                ``status='failed'`` in the run record.
        """
        run = RunMetadata(
            run_slug=str(uuid4()),
            catalog=self.catalog,
            dry_run=dry_run,
            config_snapshot=self.config.redacted_dump(),
            started_at=utcnow(),
        )
        logger.info("Catalog [%s] starting | run_slug=%s", self.catalog, run.run_slug)

        try:
            self._execute(run=run, dry_run=dry_run)
        except Exception as exc:
            run.status = "failed"
            run.error_message = str(exc)
            run.finished_at = utcnow()
            logger.error(
                "Catalog [%s] FAILED: %s | run_slug=%s", self.catalog, exc, run.run_slug
            )
            raise

        run.finished_at = utcnow()
        logger.info(
            "Catalog [%s] %s | listed=%d | included=%d | skipped=%d | uploads=%d | unchanged=%d | run_slug=%s",
            self.catalog, run.status, run.listed, run.included, run.skipped,
            run.uploads, run.unchanged, run.run_slug,
        )
        return run

    def _execute(self, run: RunMetadata, dry_run: bool = False) -> int:
        """Fetch the listing, process every entity, write the catalog.

        Returns:
            Number of records in the catalog.
        """
        listing = self._fetch_listing()
        run.listed = len(listing)

        resolver = self._build_resolver()
        downloads_before = self.fetcher.requests_made
        uploads_before = self.store.writes
        unchanged_before = self.store.unchanged
        records: list[CatalogRecord] = []
        skip_counts: Counter[str] = Counter()

        for raw in listing:
            outcome = process_entity(
                raw, resolver, self.fetcher, self.store, dry_run=dry_run
            )
            if isinstance(outcome, Included):
                records.append(outcome.record)
            else:
                skip_counts[outcome.reason.value] += 1

        self.records = records
        run.included = len(records)
        run.skipped = sum(skip_counts.values())
        run.skip_counts = dict(skip_counts)
        run.downloads = self.fetcher.requests_made - downloads_before
        run.uploads = self.store.writes - uploads_before
        run.unchanged = self.store.unchanged - unchanged_before

        if dry_run:
            logger.info("[dry run] %s catalog not written", self.catalog)
            run.status = "success"
            return len(records)

        path = self.output_path
        try:
            export_catalog(records, path)
        except OSError as exc:
            run.status = "partial"
            run.error_message = f"Could not write {path}: {exc}"
            logger.error("Error writing %s: %s", path, exc)
            return len(records)

        run.output_path = str(path)
        run.status = "success"
        logger.info("%s saved (%d records)", path, len(records))
        return len(records)

    @abstractmethod
    def _fetch_listing(self) -> list[dict[str, Any]]:
        """Fetch the upstream listing.

        Raises:
            UpstreamError: If the listing is unavailable.
        """
        ...

    @abstractmethod
    def _build_resolver(self) -> EntityResolver: ...
