"""
Shared pytest fixtures for the wuwa-catalog test suite.

Provides:
  - ``FakeServer``: an in-process stand-in for encore.moe, the image hosts and
    the GitHub contents API, plugged in through ``httpx.MockTransport``.
    Every request is recorded so tests can assert what was (not) called.
  - ``app_config``: an ``AppConfig`` with store credentials filled in.
  - Sample raw records matching the upstream payload shapes.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Callable, Generator, Optional, Union

import httpx
import pytest

from wuwa_catalog.config import AppConfig, HttpConfig, StoreConfig
from wuwa_catalog.ingestion.encore_client import EncoreClient
from wuwa_catalog.ingestion.fetcher import AssetFetcher
from wuwa_catalog.ingestion.http import build_http_client
from wuwa_catalog.publishing.github_store import GitHubContentStore, git_blob_sha

OWNER = "owner"
REPO = "assets"
RAW_BASE = f"https://raw.githubusercontent.com/{OWNER}/{REPO}/main"

ROLE_LIST_URL = "https://api.encore.moe/en/character/"
WEAPON_LIST_URL = "https://api.encore.moe/en/weapon/"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def role_detail_url(role_id: int) -> str:
    return f"https://api.encore.moe/en/character/{role_id}"


# ── Fake HTTP server ──────────────────────────────────────────────────────────

class FakeServer:
    """Routes requests by ``METHOD scheme://host/path`` and emulates GitHub.

    GitHub emulation:
      - ``files`` holds the repository content (path → bytes).
      - GET contents → 200 ``{"sha": <git blob sha>}`` or 404.
      - PUT contents → 201 (create) / 200 (update); 409 when the sent ``sha``
        does not match; 500 for paths in ``fail_put_paths``.
    """

    GITHUB_HOST = "api.github.com"

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []
        self.files: dict[str, bytes] = {}
        self.put_bodies: list[dict[str, Any]] = []
        self.fail_put_paths: set[str] = set()
        self.fail_get_paths: set[str] = set()

    # ── Route registration ────────────────────────────────────────────────────

    def json(self, url: str, payload: Any, status: int = 200) -> None:
        self.routes[f"GET {url}"] = httpx.Response(status, json=payload)

    def binary(self, url: str, content: bytes, status: int = 200) -> None:
        self.routes[f"GET {url}"] = httpx.Response(status, content=content)

    def status(self, url: str, status: int) -> None:
        self.routes[f"GET {url}"] = httpx.Response(status)

    def error(self, url: str) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[f"GET {url}"] = _raise

    # ── Inspection ────────────────────────────────────────────────────────────

    def requested(self, method: Optional[str] = None) -> list[str]:
        return [
            _key_url(r)
            for r in self.requests
            if method is None or r.method == method
        ]

    def was_requested(self, url: str) -> bool:
        return url in self.requested()

    def puts(self) -> list[str]:
        return [self._repo_path(r) for r in self.requests if r.method == "PUT"]

    def github_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == self.GITHUB_HOST]

    # ── Handler ───────────────────────────────────────────────────────────────

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == self.GITHUB_HOST:
            return self._github(request)
        route = self.routes.get(f"{request.method} {_key_url(request)}")
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        return route

    def _repo_path(self, request: httpx.Request) -> str:
        prefix = f"/repos/{OWNER}/{REPO}/contents/"
        return request.url.path[len(prefix):]

    def _github(self, request: httpx.Request) -> httpx.Response:
        path = self._repo_path(request)
        current = self.files.get(path)

        if request.method == "GET":
            if path in self.fail_get_paths:
                return httpx.Response(500)
            if current is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"path": path, "sha": git_blob_sha(current)})

        if request.method == "PUT":
            body = json.loads(request.content)
            self.put_bodies.append(body)
            if path in self.fail_put_paths:
                return httpx.Response(500, json={"message": "Server Error"})
            if current is not None and body.get("sha") != git_blob_sha(current):
                return httpx.Response(409, json={"message": "sha mismatch"})
            if current is None and "sha" in body:
                return httpx.Response(422, json={"message": "sha for missing file"})
            self.files[path] = base64.b64decode(body["content"])
            return httpx.Response(200 if current is not None else 201, json={"content": {"path": path}})

        return httpx.Response(405)


def _key_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def transport(server: FakeServer) -> httpx.MockTransport:
    return httpx.MockTransport(server.handler)


@pytest.fixture
def http_client(transport: httpx.MockTransport) -> Generator[httpx.Client, None, None]:
    client = build_http_client(HttpConfig(), transport=transport)
    yield client
    client.close()


@pytest.fixture
def app_config() -> AppConfig:
    """AppConfig with store settings filled in and default upstream settings."""
    return AppConfig(store=StoreConfig(token="test-token", owner=OWNER, repo=REPO))


@pytest.fixture
def encore(http_client: httpx.Client, app_config: AppConfig) -> EncoreClient:
    return EncoreClient(http_client, app_config.upstream)


@pytest.fixture
def fetcher(http_client: httpx.Client) -> AssetFetcher:
    return AssetFetcher(http_client)


@pytest.fixture
def store(http_client: httpx.Client, app_config: AppConfig) -> GitHubContentStore:
    return GitHubContentStore(http_client, app_config.store)


# ── Sample upstream records ───────────────────────────────────────────────────

REX_HEAD_URL = "http://x/h.png"
REX_PORTRAIT_URL = "https://api.hakush.in/ww/UI/Img/x.webp"


@pytest.fixture
def rex_role() -> dict[str, Any]:
    return {
        "Id": 100,
        "Name": "Rex",
        "QualityId": 3,
        "Element": {"Id": 5},
        "RoleHeadIcon": REX_HEAD_URL,
    }


@pytest.fixture
def rex_detail() -> dict[str, Any]:
    return {"Id": 100, "FormationRoleCard": "/UI/Img/x.png"}


@pytest.fixture
def sample_weapon() -> dict[str, Any]:
    return {
        "Id": 21010011,
        "Name": "Training Broadblade",
        "QualityId": 1,
        "WeaponType": 1,
        "Icon": "/Game/Aki/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.T_IconWeapon21010011_UI",
    }


SAMPLE_WEAPON_ICON_URL = (
    "https://api.hakush.in/ww/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.webp"
)


@pytest.fixture
def serve_rex(server: FakeServer, rex_role, rex_detail) -> FakeServer:
    """Upstream with one fully resolvable role, images included."""
    server.json(ROLE_LIST_URL, {"roleList": [rex_role]})
    server.json(role_detail_url(100), rex_detail)
    server.binary(REX_HEAD_URL, b"head-bytes")
    server.binary(REX_PORTRAIT_URL, b"portrait-bytes")
    return server
