"""
Tests for wuwa_catalog.ingestion.encore_client.

Covers:
  - URL construction from UpstreamConfig
  - listing fetch: success, HTTP failure, bad JSON, missing key → UpstreamError
  - role detail: dict on success, None on any failure
"""

from __future__ import annotations

import httpx
import pytest

from wuwa_catalog.config import UpstreamConfig
from wuwa_catalog.errors import UpstreamError
from wuwa_catalog.ingestion.encore_client import EncoreClient

_ROLE_LIST = "https://api.encore.moe/en/character/"
_WEAPON_LIST = "https://api.encore.moe/en/weapon/"


class TestUrls:
    def test_default_urls(self, encore):
        assert encore.role_list_url() == _ROLE_LIST
        assert encore.role_detail_url(1102) == "https://api.encore.moe/en/character/1102"
        assert encore.weapon_list_url() == _WEAPON_LIST

    def test_language_and_base_from_config(self, http_client):
        client = EncoreClient(
            http_client, UpstreamConfig(api_base="https://mirror.example/", language="ja")
        )
        assert client.role_list_url() == "https://mirror.example/ja/character/"


class TestListings:
    def test_role_list(self, server, encore):
        server.json(_ROLE_LIST, {"roleList": [{"Id": 1}, {"Id": 2}]})
        assert encore.fetch_role_list() == [{"Id": 1}, {"Id": 2}]

    def test_weapon_list(self, server, encore):
        server.json(_WEAPON_LIST, {"weapons": [{"Id": 9}]})
        assert encore.fetch_weapon_list() == [{"Id": 9}]

    def test_empty_listing_is_valid(self, server, encore):
        server.json(_ROLE_LIST, {"roleList": []})
        assert encore.fetch_role_list() == []

    def test_http_failure_raises(self, server, encore):
        server.status(_ROLE_LIST, 502)
        with pytest.raises(UpstreamError):
            encore.fetch_role_list()

    def test_transport_failure_raises(self, server, encore):
        server.error(_WEAPON_LIST)
        with pytest.raises(UpstreamError):
            encore.fetch_weapon_list()

    def test_missing_key_raises(self, server, encore):
        server.json(_ROLE_LIST, {"roles": []})
        with pytest.raises(UpstreamError, match="roleList"):
            encore.fetch_role_list()

    def test_non_object_payload_raises(self, server, encore):
        server.json(_ROLE_LIST, [1, 2, 3])
        with pytest.raises(UpstreamError):
            encore.fetch_role_list()

    def test_invalid_json_raises(self, server, encore):
        server.routes[f"GET {_ROLE_LIST}"] = httpx.Response(200, content=b"<html>")
        with pytest.raises(UpstreamError):
            encore.fetch_role_list()

    def test_custom_list_key(self, server, http_client):
        server.json(_WEAPON_LIST, {"weaponList": [{"Id": 3}]})
        client = EncoreClient(http_client, UpstreamConfig(weapon_list_key="weaponList"))
        assert client.fetch_weapon_list() == [{"Id": 3}]


class TestRoleDetail:
    def test_detail(self, server, encore):
        server.json("https://api.encore.moe/en/character/7", {"FormationRoleCard": "/UI/x.png"})
        assert encore.fetch_role_detail(7) == {"FormationRoleCard": "/UI/x.png"}

    def test_missing_returns_none(self, encore):
        assert encore.fetch_role_detail(7) is None

    def test_non_object_returns_none(self, server, encore):
        server.json("https://api.encore.moe/en/character/7", ["x"])
        assert encore.fetch_role_detail(7) is None

    def test_bad_json_returns_none(self, server, encore):
        server.routes["GET https://api.encore.moe/en/character/7"] = httpx.Response(
            200, content=b"not json"
        )
        assert encore.fetch_role_detail(7) is None
