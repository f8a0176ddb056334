"""
GitHub content store — idempotent create-or-update of binary files.

API:   https://api.github.com
Docs:  https://docs.github.com/en/rest/repos/contents

Credential setup (.env, gitignored):
  GITHUB_TOKEN=ghp_...        # contents: read & write on the target repo
  GITHUB_USER=owner-login
  REPO_NAME=wuwa-assets
  BRANCH=main                 # optional

Write flow for one path:
  1. GET  /repos/{owner}/{repo}/contents/{path}?ref={branch}
       → 200: {"sha": "<blob sha>", ...}   (version token)
       → 404: file does not exist yet — not an error, create it
  2. PUT  /repos/{owner}/{repo}/contents/{path}
       Body: {"message", "content": <base64>, "branch", "sha"?}

``sha`` is sent only when step 1 found one, so an update always targets the
exact current version.  When ``skip_unchanged`` is on and the stored blob sha
equals the git blob sha of the new bytes, step 2 is skipped.

Public URL for a stored path::

    {raw_host}/{owner}/{repo}/{branch}/{path}
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from wuwa_catalog.config import StoreConfig
from wuwa_catalog.models.catalog import PublishedAsset

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


def git_blob_sha(content: bytes) -> str:
    """SHA-1 git assigns to a blob with these bytes (what the contents API returns as ``sha``)."""
    header = f"blob {len(content)}\0".encode("ascii")
    return hashlib.sha1(header + content).hexdigest()


def build_public_url(config: StoreConfig, path: str) -> str:
    """``{raw_host}/{owner}/{repo}/{branch}/{path}`` for a stored path."""
    return f"{config.raw_host}/{config.owner}/{config.repo}/{config.branch}/{path.lstrip('/')}"


class GitHubContentStore:
    """Publish files to one branch of one GitHub repository.

    Args:
        client: Shared ``httpx.Client`` for this run.
        config: Store section of ``AppConfig``.  Token, owner and repo must be
            set (checked by ``require_store_settings`` before construction).
    """

    def __init__(self, client: httpx.Client, config: StoreConfig) -> None:
        self.client = client
        self.config = config
        self.writes = 0
        self.unchanged = 0

    # ── URLs / headers ─────────────────────────────────────────────────────────

    def contents_url(self, path: str) -> str:
        return (
            f"{self.config.api_url}/repos/{self.config.owner}/{self.config.repo}"
            f"/contents/{quote(path.lstrip('/'))}"
        )

    def public_url(self, path: str) -> str:
        return build_public_url(self.config, path)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    # ── Operations ─────────────────────────────────────────────────────────────

    def get_version(self, path: str) -> Optional[str]:
        """Return the current blob sha for ``path`` on the branch, or ``None``.

        404 is the normal "create new" case and is not logged above DEBUG.
        Other lookup failures are logged at WARNING and also return ``None``;
        the subsequent write then surfaces any real problem.
        """
        try:
            resp = self.client.get(
                self.contents_url(path),
                params={"ref": self.config.branch},
                headers=self._headers,
            )
            if resp.status_code == 404:
                logger.debug("No existing object at %s — will create", path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Version lookup failed for %s: %s", path, exc)
            return None

        sha = data.get("sha") if isinstance(data, dict) else None
        return sha if isinstance(sha, str) else None

    def publish(
        self,
        path: str,
        content: Optional[bytes],
        message: str,
    ) -> PublishedAsset:
        """Create or update ``path`` with ``content``.

        Returns:
            ``PublishedAsset`` with ``success=True`` and the public URL when the
            write succeeded (or was skipped because the bytes are already
            stored).  Never raises.
        """
        if not content:
            return PublishedAsset(path=path, success=False, error="no content")

        sha = self.get_version(path)

        if sha is not None and self.config.skip_unchanged and sha == git_blob_sha(content):
            logger.info("Unchanged, not rewritten: %s", path)
            self.unchanged += 1
            return PublishedAsset(
                path=path, success=True, public_url=self.public_url(path), skipped_write=True
            )

        body: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self.config.branch,
        }
        if sha is not None:
            body["sha"] = sha

        try:
            resp = self.client.put(self.contents_url(path), json=body, headers=self._headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Upload of %s to GitHub failed: %s", path, exc)
            return PublishedAsset(path=path, success=False, error=str(exc))

        self.writes += 1
        logger.info("Published %s (%s)", path, "updated" if sha else "created")
        return PublishedAsset(path=path, success=True, public_url=self.public_url(path))

    def publish_ok(self, path: str, content: Optional[bytes], message: str) -> bool:
        """Boolean form of :meth:`publish`."""
        return self.publish(path, content, message).success
