"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``GITHUB_*`` / ``REPO_NAME`` / ``BRANCH``
                                    and the ``WUWA_CATALOG_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The catalog stages, the upstream client, the fetcher and the publisher all
receive an ``AppConfig`` (or one of its sections) at construction — never raw
dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from wuwa_catalog.errors import ConfigError

# ── Sub-config models ─────────────────────────────────────────────────────────


class StoreConfig(BaseModel):
    """GitHub repository that hosts the re-hosted images.

    ``token``, ``owner`` and ``repo`` are required before any publishing run;
    see :func:`require_store_settings`.
    """

    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: str = "main"
    api_url: str = "https://api.github.com"
    raw_host: str = "https://raw.githubusercontent.com"
    skip_unchanged: bool = True

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("branch must not be empty.")
        return v.strip()

    @field_validator("api_url", "raw_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class UpstreamConfig(BaseModel):
    """encore.moe game-data API and the secondary image host."""

    model_config = ConfigDict(frozen=True)

    api_base: str = "https://api.encore.moe"
    language: str = "en"
    resource_base: str = "https://api.encore.moe/resource/Data"
    secondary_host: str = "https://api.hakush.in/ww"
    role_list_key: str = "roleList"
    weapon_list_key: str = "weapons"

    @field_validator("api_base", "resource_base", "secondary_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class RolesConfig(BaseModel):
    """Role (character) catalog settings."""

    model_config = ConfigDict(frozen=True)

    output_file: str = "roles.json"
    head_dir: str = "icons"
    portrait_dir: str = "portraits"
    portrait_marker: str = "/UI/"
    portrait_extension: str = ".webp"
    skip_ids: list[int] = []
    exclude_name_patterns: list[str] = []

    @field_validator("portrait_marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        if not v:
            raise ValueError("portrait_marker must not be empty.")
        return v

    @field_validator("portrait_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"portrait_extension must start with '.', got '{v}'.")
        return v


class WeaponsConfig(BaseModel):
    """Weapon catalog settings."""

    model_config = ConfigDict(frozen=True)

    output_file: str = "weapons.json"
    icon_dir: str = "weapons"
    icon_prefix: str = "/Game/Aki/"
    icon_template: str = "https://api.hakush.in/ww/{path}.webp"
    skip_ids: list[int] = []
    exclude_name_patterns: list[str] = []

    @field_validator("icon_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if "{path}" not in v:
            raise ValueError("icon_template must contain a '{path}' placeholder.")
        try:
            v.format(path="UI/T_Icon")
        except (KeyError, IndexError, AttributeError, ValueError) as exc:
            raise ValueError(
                f"icon_template may only use the {{path}} placeholder, got '{v}': {exc!r}"
            ) from exc
        return v


class HttpConfig(BaseModel):
    """Shared HTTP client settings."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = 30.0
    user_agent: str = "wuwa-catalog/0.1 (+https://github.com)"
    follow_redirects: bool = True


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    store: StoreConfig = StoreConfig()
    upstream: UpstreamConfig = UpstreamConfig()
    roles: RolesConfig = RolesConfig()
    weapons: WeaponsConfig = WeaponsConfig()
    http: HttpConfig = HttpConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    def redacted_dump(self) -> dict[str, Any]:
        """``model_dump()`` with the access token masked, safe for logs and run records."""
        data = self.model_dump()
        if data["store"].get("token"):
            data["store"]["token"] = "***"
        return data


# ── Required settings ─────────────────────────────────────────────────────────

_REQUIRED_STORE_FIELDS: dict[str, str] = {
    "token": "GITHUB_TOKEN",
    "owner": "GITHUB_USER",
    "repo": "REPO_NAME",
}


def missing_store_settings(config: AppConfig) -> list[str]:
    """Return the env var names of every required store setting that is unset."""
    return [
        env_name
        for field_name, env_name in _REQUIRED_STORE_FIELDS.items()
        if not getattr(config.store, field_name)
    ]


def require_store_settings(config: AppConfig) -> None:
    """Raise ``ConfigError`` unless token, owner and repository are all set.

    Raises:
        ConfigError: Lists every missing setting by its env var name.
    """
    missing = missing_store_settings(config)
    if missing:
        raise ConfigError(
            f"Missing required settings: {', '.join(missing)}. "
            "Set them in .env or the environment."
        )


# ── Loader ────────────────────────────────────────────────────────────────────

# Optional override file looked up beside the main config file.
LOCAL_OVERRIDE_NAME = "local.toml"


def _find_project_root() -> Path:
    """Nearest ancestor of this package holding ``pyproject.toml``.

    Falls back to the package's parent directory for installs without one.
    """
    here = Path(__file__).resolve()
    for candidate in here.parents:
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent.parent


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()
    # .env never overrides variables already set in the process environment
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml_layers(path)
    return _build_app_config(_apply_env_overrides(raw))


def _read_toml_layers(path: Path) -> dict[str, Any]:
    """``path`` merged with its sibling ``local.toml`` when that file exists."""
    layers = [path]
    local = path.parent / LOCAL_OVERRIDE_NAME
    if local != path and local.exists():
        layers.append(local)

    merged: dict[str, Any] = {}
    for layer in layers:
        with open(layer, "rb") as f:
            merged = _deep_merge(merged, tomllib.load(f))
    return merged


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``; tables merge, values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variables to the raw config dict.

    Supported overrides:
      GITHUB_TOKEN              → raw["store"]["token"]
      GITHUB_USER               → raw["store"]["owner"]
      REPO_NAME                 → raw["store"]["repo"]
      BRANCH                    → raw["store"]["branch"]
      WUWA_CATALOG_LANGUAGE     → raw["upstream"]["language"]
      WUWA_CATALOG_LOG_LEVEL    → raw["logging"]["level"]
      WUWA_CATALOG_DEBUG        → raw["debug"]
    """
    store_env = {
        "GITHUB_TOKEN": "token",
        "GITHUB_USER": "owner",
        "REPO_NAME": "repo",
        "BRANCH": "branch",
    }
    for env_name, key in store_env.items():
        if value := os.environ.get(env_name):
            raw.setdefault("store", {})[key] = value

    if language := os.environ.get("WUWA_CATALOG_LANGUAGE"):
        raw.setdefault("upstream", {})["language"] = language

    if log_level := os.environ.get("WUWA_CATALOG_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("WUWA_CATALOG_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


_SECTION_MODELS: dict[str, type[BaseModel]] = {
    "store": StoreConfig,
    "upstream": UpstreamConfig,
    "roles": RolesConfig,
    "weapons": WeaponsConfig,
    "http": HttpConfig,
    "logging": LoggingConfig,
}


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Validate each TOML table with its section model, then assemble ``AppConfig``."""
    sections = {
        name: model(**raw.get(name, {}))
        for name, model in _SECTION_MODELS.items()
    }
    return AppConfig(**sections, debug=raw.get("debug", False))
