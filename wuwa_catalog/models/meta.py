"""
Run metadata — the audit record for one catalog run.

Every catalog stage records a ``config_snapshot`` (full ``AppConfig`` as a
dict, access token redacted) so any run can be reproduced by restoring that
config and re-running.

``RunMetadata`` is the only Pydantic model in the system that is NOT frozen —
its status, counters, ``error_message`` and ``finished_at`` fields are updated
as the stage executes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

VALID_CATALOGS = frozenset({"roles", "weapons"})
VALID_RUN_STATUSES = frozenset({"started", "success", "partial", "failed"})


class RunMetadata(BaseModel):
    """Catalog execution audit record.

    Attributes:
        run_slug: UUID4 string uniquely identifying this run.
        catalog: Which catalog this run builds (``"roles"`` or ``"weapons"``).
        status: ``started`` → ``success`` | ``partial`` | ``failed``.
            ``partial`` means assets were published but the catalog file
            could not be written.
        dry_run: Whether fetching and publishing were disabled.
        config_snapshot: ``AppConfig.redacted_dump()`` at run start time.
        listed: Number of raw records in the upstream listing.
        included: Number of records written to the catalog.
        skipped: Number of entities dropped.
        skip_counts: ``SkipReason`` value → count.
        downloads: Image GET requests made by this run.
        uploads: Files written to the content store by this run.
        unchanged: Publishes skipped because the stored bytes already matched.
        output_path: Catalog file written, or ``None``.
        error_message: Error description if ``status`` is not ``success``.
        started_at: UTC datetime when the run began.
        finished_at: UTC datetime when the run completed or failed.
    """

    model_config = ConfigDict(frozen=False)

    run_slug: str
    catalog: str
    status: str = "started"
    dry_run: bool = False
    config_snapshot: dict[str, Any]
    listed: int = 0
    included: int = 0
    skipped: int = 0
    skip_counts: dict[str, int] = {}
    downloads: int = 0
    uploads: int = 0
    unchanged: int = 0
    output_path: Optional[str] = None
    error_message: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None

    @field_validator("catalog")
    @classmethod
    def validate_catalog(cls, v: str) -> str:
        if v not in VALID_CATALOGS:
            raise ValueError(
                f"Unknown catalog '{v}'. Must be one of {sorted(VALID_CATALOGS)}."
            )
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in VALID_RUN_STATUSES:
            raise ValueError(
                f"Unknown status '{v}'. Must be one of {sorted(VALID_RUN_STATUSES)}."
            )
        return v
