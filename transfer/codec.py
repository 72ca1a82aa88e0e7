"""
Snapshot codec - encode/decode the versioned JSON export format.

Both directions are pure: nothing here reads or writes the store.
"""

import json
import logging
from datetime import datetime
from typing import Optional, Union

from pydantic import ValidationError

from config import SUPPORTED_FORMAT_VERSIONS, EXPORT_FILE_PREFIX
from models import Snapshot, SnapshotMetadata
from .errors import (
    MalformedSnapshotError,
    UnsupportedVersionError,
    DanglingReferenceError,
)

logger = logging.getLogger(__name__)


def with_metadata(snapshot: Snapshot, exported_at: Optional[datetime] = None) -> Snapshot:
    """Copy of `snapshot` whose metadata totals match its lists."""
    metadata = SnapshotMetadata(
        total_themes=len(snapshot.themes),
        total_theme_groups=len(snapshot.theme_groups),
        total_extracts=len(snapshot.extracts),
        exported_at=exported_at,
    )
    return snapshot.model_copy(update={"metadata": metadata})


def encode(snapshot: Snapshot) -> bytes:
    """
    Serialize a snapshot.

    Output is deterministic: same snapshot content gives the same bytes,
    except for metadata.exportedAt.
    """
    data = with_metadata(snapshot, snapshot.metadata.exported_at).to_wire()
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def suggest_file_name(export_type: str, now: Optional[datetime] = None) -> str:
    """e.g. extracts-export-theme-groups-20240115-120000.json"""
    now = now or datetime.now()
    kind = "".join(f"-{c.lower()}" if c.isupper() else c for c in export_type)
    return f"{EXPORT_FILE_PREFIX}-{kind}-{now.strftime('%Y%m%d-%H%M%S')}.json"


def _check_unique_ids(kind: str, ids: list[str]) -> None:
    seen = set()
    for original_id in ids:
        if original_id in seen:
            raise MalformedSnapshotError(f"Duplicate {kind} originalId '{original_id}'")
        seen.add(original_id)


def check_references(snapshot: Snapshot) -> None:
    """Every internal theme reference must resolve within the snapshot."""
    theme_ids = {t.original_id for t in snapshot.themes}

    for group in snapshot.theme_groups:
        missing = [t for t in group.theme_original_ids if t not in theme_ids]
        if missing:
            raise DanglingReferenceError(
                f"Theme group '{group.original_id}' references themes not in snapshot: {', '.join(missing)}"
            )

    for extract in snapshot.extracts:
        if extract.theme_original_id and extract.theme_original_id not in theme_ids:
            raise DanglingReferenceError(
                f"Extract '{extract.original_id}' references theme '{extract.theme_original_id}' not in snapshot"
            )


def decode(data: Union[bytes, str]) -> Snapshot:
    """
    Parse and validate a snapshot.

    Raises:
        MalformedSnapshotError: not JSON, wrong shape, duplicate IDs
        UnsupportedVersionError: missing or unknown formatVersion
        DanglingReferenceError: a reference that the snapshot cannot resolve
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedSnapshotError(f"Snapshot is not valid UTF-8: {e}") from e

    try:
        raw = json.loads(data)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals, nesting too deep
        raise MalformedSnapshotError(f"Invalid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise MalformedSnapshotError("Snapshot must be a JSON object")

    version = raw.get("formatVersion")
    if version not in SUPPORTED_FORMAT_VERSIONS:
        raise UnsupportedVersionError(version)

    try:
        snapshot = Snapshot.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first["loc"])
        raise MalformedSnapshotError(
            f"Invalid snapshot at '{location}': {first['msg']} ({e.error_count()} error(s))"
        ) from e

    _check_unique_ids("theme", [t.original_id for t in snapshot.themes])
    _check_unique_ids("theme group", [g.original_id for g in snapshot.theme_groups])
    _check_unique_ids("extract", [x.original_id for x in snapshot.extracts])
    check_references(snapshot)

    logger.debug(
        "Decoded snapshot: %d themes, %d groups, %d extracts",
        len(snapshot.themes), len(snapshot.theme_groups), len(snapshot.extracts),
    )
    return snapshot
