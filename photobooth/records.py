"""Metadata records for saved composites.

Each saved image gets one JSON document under ``<library>/meta/`` named
after the composite, holding who saved it, what it was called before
processing and which overlay was applied.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from . import storage

logger = logging.getLogger(__name__)

META_SUBDIR = "meta"


class ImageRecord(BaseModel):
    owner: Optional[str] = None
    filename: str
    original_filename: str
    overlay: str
    width: int
    height: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _record_path(filename: str) -> str:
    storage.upload_path(filename)  # rejects names with path components
    stem, _ = os.path.splitext(filename)
    return f"{META_SUBDIR}/{stem}.json"


def save_record(library_dir: str, record: ImageRecord) -> None:
    """Persist ``record`` next to the other metadata documents."""
    path = _record_path(record.filename)
    storage.save_bytes(library_dir, path, record.model_dump_json().encode("utf-8"))


def list_records(library_dir: str) -> List[ImageRecord]:
    """All readable records, most recently created first."""
    meta_dir = os.path.join(library_dir, META_SUBDIR)
    if not os.path.isdir(meta_dir):
        return []
    records = []
    for fname in os.listdir(meta_dir):
        if not fname.endswith(".json"):
            continue
        with open(os.path.join(meta_dir, fname), "rb") as f:
            raw = f.read()
        try:
            records.append(ImageRecord.model_validate_json(raw))
        except ValidationError as exc:
            logger.warning("Ignoring malformed record %s: %s", fname, exc.error_count())
    records.sort(key=lambda r: r.created_at, reverse=True)
    return records
