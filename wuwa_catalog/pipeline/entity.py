"""
Per-entity processing — one raw record to ``Included`` or ``Skipped``.

Steps (first failure wins, no retries):
  1. identify        → ``Skipped(resolve_failed)`` if Id / Name missing
  2. exclusion       → ``Skipped(excluded)``; no network call happens
  3. resolve         → ``Skipped(resolve_failed)``
  4. for each asset, in resolver order:
       fetch         → ``Skipped(fetch_failed)``; publish not attempted
       publish       → ``Skipped(publish_failed)``; later assets not attempted
  5. build record    → ``Included``

Dry-run stops after step 3 and reports the entity as included with source
URLs in place of public URLs.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from wuwa_catalog.errors import ResolveError
from wuwa_catalog.ingestion.fetcher import AssetFetcher
from wuwa_catalog.models.catalog import EntityOutcome, Included, Skipped, SkipReason
from wuwa_catalog.publishing.github_store import GitHubContentStore
from wuwa_catalog.resolve.base import EntityResolver

logger = logging.getLogger(__name__)


def process_entity(
    raw: dict[str, Any],
    resolver: EntityResolver,
    fetcher: AssetFetcher,
    store: GitHubContentStore,
    dry_run: bool = False,
) -> EntityOutcome:
    """Run one raw record through resolve → fetch → publish → record.

    Args:
        raw: Upstream listing entry (read only).
        resolver: Catalog-specific rules.
        fetcher: Image downloader.
        store: Content store the images are published to.
        dry_run: Resolve only; never fetch or publish.

    Returns:
        ``Included`` with the catalog record, or ``Skipped`` with the reason.
    """
    try:
        entity_id, name = resolver.identify(raw)
    except ResolveError as exc:
        entity_id = raw.get("Id") if isinstance(raw, dict) else None
        return _skip(resolver, entity_id, SkipReason.RESOLVE_FAILED, str(exc))

    logger.info("Processing %s %d – %s", resolver.catalog, entity_id, name)

    reason = resolver.exclusion(entity_id, name)
    if reason is not None:
        return _skip(resolver, entity_id, SkipReason.EXCLUDED, reason, level=logging.INFO)

    try:
        resolved = resolver.resolve(raw)
    except ResolveError as exc:
        return _skip(resolver, entity_id, SkipReason.RESOLVE_FAILED, str(exc))

    if dry_run:
        for asset in resolved.assets:
            logger.info("[dry run] %s %s → %s", asset.kind, asset.source_url, asset.path)
        planned = {asset.kind: asset.source_url for asset in resolved.assets}
        return _build(resolver, resolved, planned)

    public_urls: dict[str, str] = {}
    for asset in resolved.assets:
        content = fetcher.fetch(asset.source_url)
        if content is None:
            return _skip(
                resolver, entity_id, SkipReason.FETCH_FAILED, asset.source_url,
                note=f"{asset.kind} download failed",
            )

        published = store.publish(asset.path, content, asset.message)
        if not published.success or published.public_url is None:
            return _skip(
                resolver, entity_id, SkipReason.PUBLISH_FAILED, published.error or asset.path,
                note=f"{asset.kind} upload failed",
            )

        public_urls[asset.kind] = published.public_url

    outcome = _build(resolver, resolved, public_urls)
    if isinstance(outcome, Included):
        logger.info(
            "%s %d processed", resolver.catalog, entity_id,
            extra={"catalog": resolver.catalog, "entity_id": entity_id},
        )
    return outcome


def _skip(
    resolver: EntityResolver,
    entity_id: Optional[int],
    reason: SkipReason,
    detail: str,
    note: str = "",
    level: int = logging.WARNING,
) -> Skipped:
    """Log the skip with structured fields and return the outcome."""
    logger.log(
        level,
        "Skipping %s %s (%s): %s",
        resolver.catalog, entity_id, reason.value, note or detail,
        extra={"catalog": resolver.catalog, "entity_id": entity_id, "reason": reason.value},
    )
    return Skipped(entity_id, reason, detail)


def _build(resolver: EntityResolver, resolved, urls: dict[str, str]) -> EntityOutcome:
    try:
        record = resolver.build_record(resolved, urls)
    except (KeyError, ValidationError) as exc:
        return _skip(resolver, resolved.entity_id, SkipReason.RESOLVE_FAILED, str(exc))
    return Included(resolved.entity_id, record)
