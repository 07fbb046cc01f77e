"""Row normalization — raw spreadsheet rows to typed catalog records.

Pure transforms, no I/O.  A single bad row must never abort a sync, so
every function here degrades malformed input to empty strings or drops
the row instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from fleetsync.domain.models import CatalogItem, split_features

logger = structlog.get_logger(__name__)

# Column order of the catalog tab, A through L.
FLEET_COLUMNS: tuple[str, ...] = (
    "id",
    "category",
    "name",
    "price",
    "unit",
    "features",
    "badge",
    "imagePublicId",
    "imageAlt",
    "active",
    "createdAt",
    "updatedAt",
)

ACTIVE_TOKEN = "TRUE"


def coerce_cell(value: Any) -> str:
    """Coerce one cell to a trimmed string; missing or unprintable cells are ``""``."""
    if value is None:
        return ""
    try:
        return str(value).strip()
    except Exception:
        return ""


def is_blank_row(row: Sequence[Any] | None) -> bool:
    """True when the row has no non-empty cell (a cleared, i.e. deleted, record)."""
    if not row:
        return True
    return all(coerce_cell(cell) == "" for cell in row)


def normalize_row(
    row: Sequence[Any] | None,
    columns: Sequence[str] = FLEET_COLUMNS,
) -> CatalogItem | None:
    """Normalize one catalog row.

    Returns None (discard) for blank rows.  ``active`` is true only for the
    exact token ``"TRUE"``; ``features`` is split on ``|`` with empty
    segments dropped.
    """
    if row is None or is_blank_row(row):
        return None

    record: dict[str, Any] = {}
    for index, column in enumerate(columns):
        record[column] = coerce_cell(row[index]) if index < len(row) else ""

    record["active"] = record.get("active") == ACTIVE_TOKEN
    record["features"] = split_features(record.get("features", ""))

    try:
        return CatalogItem.model_validate(record)
    except ValidationError:
        logger.warning("row_discarded", reason="validation", row_id=record.get("id"))
        return None


def normalize_rows(
    rows: Iterable[Sequence[Any]],
    columns: Sequence[str] = FLEET_COLUMNS,
    *,
    skip_header: bool = True,
) -> list[CatalogItem]:
    """Normalize a whole catalog range, preserving source order.

    The first row is the header and is skipped.  Rows without an id, and
    rows repeating an id already seen, are dropped so identifiers stay
    unique within one document.
    """
    items: list[CatalogItem] = []
    seen: set[str] = set()
    iterator = iter(rows)
    if skip_header:
        next(iterator, None)

    for position, row in enumerate(iterator, start=2 if skip_header else 1):
        item = normalize_row(row, columns)
        if item is None:
            logger.debug("row_discarded", reason="blank", row=position)
            continue
        if not item.id:
            logger.warning("row_discarded", reason="missing_id", row=position)
            continue
        if item.id in seen:
            logger.warning("row_discarded", reason="duplicate_id", row=position, id=item.id)
            continue
        seen.add(item.id)
        items.append(item)
    return items


def normalize_settings_rows(rows: Iterable[Sequence[Any]]) -> dict[str, str]:
    """Fold key/value rows into a mapping.

    No header skip.  Rows with an empty key are ignored; a later duplicate
    key overwrites the earlier value.
    """
    settings: dict[str, str] = {}
    for row in rows:
        if not row:
            continue
        key = coerce_cell(row[0])
        if not key:
            continue
        settings[key] = coerce_cell(row[1]) if len(row) > 1 else ""
    return settings
