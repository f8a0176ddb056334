"""Shared ``httpx.Client`` construction.

One client is built per orchestrator run and handed to the upstream client,
the asset fetcher and the content store, then closed when the run finishes.
"""

from __future__ import annotations

import httpx

from wuwa_catalog.config import HttpConfig


def build_http_client(
    config: HttpConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Build a blocking client from ``HttpConfig``.

    Args:
        config: HTTP section of ``AppConfig``.
        transport: Optional transport override (``httpx.MockTransport`` in tests).
    """
    return httpx.Client(
        timeout=config.timeout_seconds,
        follow_redirects=config.follow_redirects,
        headers={"User-Agent": config.user_agent},
        transport=transport,
    )
