"""
wuwa-catalog — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs (store credentials for publishing runs).
  4. Execute action.
  5. Report result to stdout; exit 1 on failure.

Install and run::

    pip install -e .
    wuwa-catalog --help
    wuwa-catalog validate-config
    wuwa-catalog run
    wuwa-catalog run --only weapons --dry-run
    wuwa-catalog roles
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="wuwa-catalog",
    help="Re-host Wuthering Waves role and weapon art on GitHub and write JSON catalogs.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from wuwa_catalog.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from wuwa_catalog.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _run_catalogs(catalogs: Optional[list[str]], dry_run: bool, config_path: Optional[str]) -> None:
    from wuwa_catalog.errors import ConfigError
    from wuwa_catalog.pipeline.orchestrator import CatalogOrchestrator
    from wuwa_catalog.utils.time_utils import elapsed_seconds

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    label = ", ".join(catalogs) if catalogs else "roles, weapons"
    typer.echo(f"run | catalogs={label} | dry_run={dry_run}")

    try:
        result = CatalogOrchestrator(config).run(catalogs=catalogs, dry_run=dry_run)
    except ConfigError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=2)

    for cat in result.catalog_results:
        if cat.run is None:
            typer.echo(f"  {cat.catalog:<8} FAILED: {cat.error}", err=True)
            continue
        run = cat.run
        target = run.output_path or ("(not written)" if not dry_run else "(dry run)")
        typer.echo(
            f"  {cat.catalog:<8} status={run.status} | listed={run.listed} | "
            f"included={run.included} | skipped={run.skipped} | {target} | "
            f"{elapsed_seconds(run.started_at, run.finished_at)}s"
        )
        for reason, count in sorted(run.skip_counts.items()):
            typer.echo(f"           {reason}: {count}")
        if not run.dry_run:
            typer.echo(
                f"           downloads={run.downloads} | uploads={run.uploads} | "
                f"unchanged={run.unchanged}"
            )

    typer.echo("")
    if result.exit_code:
        typer.echo(f"[FAILED] Run finished with status={result.status}.", err=True)
        raise typer.Exit(code=result.exit_code)
    typer.echo(f"[OK] Run finished with status={result.status}.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields (token redacted).",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation or required store
    settings (GITHUB_TOKEN, GITHUB_USER, REPO_NAME) are missing.
    """
    from wuwa_catalog.config import missing_store_settings

    config = _load_config_or_exit(config_path)

    typer.echo("Configuration parsed successfully.")
    typer.echo("")
    typer.echo(f"  Store:            {config.store.owner}/{config.store.repo}@{config.store.branch}")
    typer.echo(f"  Token set:        {bool(config.store.token)}")
    typer.echo(f"  Upstream:         {config.upstream.api_base}/{config.upstream.language}")
    typer.echo(f"  Secondary host:   {config.upstream.secondary_host}")
    typer.echo(f"  Role catalog:     {config.roles.output_file}")
    typer.echo(f"  Weapon catalog:   {config.weapons.output_file}")
    typer.echo(f"  Log level:        {config.logging.level}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.redacted_dump(), indent=2, default=str))

    missing = missing_store_settings(config)
    typer.echo("")
    if missing:
        typer.echo(f"[ERROR] Missing required settings: {', '.join(missing)}", err=True)
        raise typer.Exit(code=1)
    typer.echo("[OK] Config valid.")


@app.command("run")
def run(
    only: Optional[list[str]] = typer.Option(
        None,
        "--only",
        help="Catalog to build (roles, weapons). Repeatable; builds both if omitted.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Resolve every entity and log planned uploads; fetch, publish and write nothing.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Build the role and weapon catalogs.

    \b
    Per catalog:
      1. Fetch the upstream listing (failure → this catalog fails).
      2. For each entity: filter, resolve, download, publish to GitHub.
      3. Write the catalog JSON with every fully published entity.

    \b
    Credential setup (.env, gitignored):
      GITHUB_TOKEN=...
      GITHUB_USER=...
      REPO_NAME=...
      BRANCH=main
    """
    _run_catalogs(only or None, dry_run, config_path)


@app.command("roles")
def roles(
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve only."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Build roles.json only."""
    _run_catalogs(["roles"], dry_run, config_path)


@app.command("weapons")
def weapons(
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve only."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Build weapons.json only."""
    _run_catalogs(["weapons"], dry_run, config_path)


if __name__ == "__main__":
    app()
