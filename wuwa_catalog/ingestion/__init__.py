"""
Ingestion layer — upstream API access and image downloads.

Submodules:
  http            — shared ``httpx.Client`` factory
  encore_client   — encore.moe role listing, role detail and weapon listing
  fetcher         — best-effort binary downloads (``bytes | None``)

No credentials are needed for any upstream call; the GitHub token is only
used by ``wuwa_catalog.publishing``.
"""
