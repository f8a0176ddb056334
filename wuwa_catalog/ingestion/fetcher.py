"""
Asset fetcher — one GET per image, bytes or ``None``.

Callers treat ``None`` as "skip this asset"; nothing here ever raises.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class AssetFetcher:
    """Download binary resources with a shared ``httpx.Client``.

    Usage::

        fetcher = AssetFetcher(client)
        data = fetcher.fetch("https://api.hakush.in/ww/UI/.../T_Head.webp")
        if data is None:
            ...  # skip the entity
    """

    def __init__(self, client: httpx.Client) -> None:
        self.client = client
        self.requests_made = 0

    def fetch(self, url: str) -> Optional[bytes]:
        """GET ``url`` and return the body.

        Returns:
            Raw bytes, or ``None`` on a transport error, a non-2xx status,
            a URL httpx cannot parse, or an empty body.  Failures are logged at ERROR.
        """
        self.requests_made += 1
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
            content = resp.content
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Image download failed: %s | %s", url, exc)
            return None

        if not content:
            logger.error("Image download returned an empty body: %s", url)
            return None

        logger.debug("Downloaded %s (%d bytes)", url, len(content))
        return content
