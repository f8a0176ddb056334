"""
Exception hierarchy for the catalog builder.

Only two failures ever escape a catalog stage: a missing required setting
(``ConfigError``, raised before any network call) and an unavailable upstream
listing (``UpstreamError``).  ``ResolveError`` is per-entity and always caught
by the driver.  Asset fetches and publishes never raise — they return
``None`` / a failed ``PublishedAsset`` instead.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog-builder errors."""


class ConfigError(CatalogError):
    """Required configuration (credential, owner, repository) is missing."""


class UpstreamError(CatalogError):
    """The upstream listing could not be fetched or was not the expected shape."""


class ResolveError(CatalogError):
    """A raw record could not be turned into metadata + asset references."""
