"""
Catalog export helpers.

All functions write to disk and return the written ``Path``.  Catalog files
are overwritten on every run; they are never appended to.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.

    Raises:
        OSError: If the directory or file cannot be written.
        TypeError: If ``data`` is not JSON-serialisable.
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def records_to_rows(records: Iterable[BaseModel]) -> list[dict]:
    """Dump catalog records to plain dicts, preserving order and field names."""
    return [record.model_dump() for record in records]


def export_catalog(records: Iterable[BaseModel], path: Path) -> Path:
    """Write a catalog (a JSON array of records) to ``path``."""
    return export_to_json(records_to_rows(records), path)
