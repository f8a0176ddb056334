"""
encore.moe game-data API client.

API:   https://api.encore.moe/{language}/

Endpoints used:
  Role listing:
    GET /{language}/character/        → {"roleList": [ {Id, Name, QualityId, Element, RoleHeadIcon, ...} ]}
  Role detail:
    GET /{language}/character/{id}    → {..., "FormationRoleCard": "/Game/Aki/UI/..."}
  Weapon listing:
    GET /{language}/weapon/           → {"weapons": [ {Id, Name, QualityId, WeaponType, Icon, ...} ]}

No API key required.  The listing key names are configurable
(``[upstream] role_list_key`` / ``weapon_list_key``) because the payload
schema is owned by the upstream project.

Listing failures raise ``UpstreamError`` — without a listing a catalog run
cannot do anything.  Detail failures are per-entity and return ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from wuwa_catalog.config import UpstreamConfig
from wuwa_catalog.errors import UpstreamError

logger = logging.getLogger(__name__)


class EncoreClient:
    """Read-only client for the encore.moe role and weapon endpoints.

    Args:
        client: Shared ``httpx.Client`` for this run.
        config: Upstream section of ``AppConfig``.
    """

    def __init__(self, client: httpx.Client, config: UpstreamConfig) -> None:
        self.client = client
        self.config = config

    # ── URLs ───────────────────────────────────────────────────────────────────

    @property
    def _lang_base(self) -> str:
        return f"{self.config.api_base}/{self.config.language}"

    def role_list_url(self) -> str:
        return f"{self._lang_base}/character/"

    def role_detail_url(self, role_id: int) -> str:
        return f"{self._lang_base}/character/{role_id}"

    def weapon_list_url(self) -> str:
        return f"{self._lang_base}/weapon/"

    # ── Listings ───────────────────────────────────────────────────────────────

    def fetch_role_list(self) -> list[dict[str, Any]]:
        """Fetch every role record.

        Raises:
            UpstreamError: On any HTTP failure or if the payload has no
                ``role_list_key`` array.
        """
        return self._fetch_listing(self.role_list_url(), self.config.role_list_key)

    def fetch_weapon_list(self) -> list[dict[str, Any]]:
        """Fetch every weapon record.

        Raises:
            UpstreamError: On any HTTP failure or if the payload has no
                ``weapon_list_key`` array.
        """
        return self._fetch_listing(self.weapon_list_url(), self.config.weapon_list_key)

    def _fetch_listing(self, url: str, key: str) -> list[dict[str, Any]]:
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Listing request failed: {url} | {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"Listing is not valid JSON: {url} | {exc}") from exc

        records = data.get(key) if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise UpstreamError(
                f"Listing at {url} has no '{key}' array "
                f"(top-level keys: {sorted(data) if isinstance(data, dict) else type(data).__name__})."
            )

        logger.info("Fetched listing %s | records=%d", url, len(records))
        return records

    # ── Detail ─────────────────────────────────────────────────────────────────

    def fetch_role_detail(self, role_id: int) -> Optional[dict[str, Any]]:
        """Fetch the detail record for one role.

        Returns:
            Parsed JSON object, or ``None`` on any failure (logged at ERROR).
        """
        url = self.role_detail_url(role_id)
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Role detail request failed: %s | %s", url, exc)
            return None

        if not isinstance(data, dict):
            logger.error("Role detail at %s is not a JSON object", url)
            return None
        return data
