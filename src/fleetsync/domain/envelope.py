"""Envelope construction — version tokens and sync timestamps.

A sync stamps both documents with the same instant so the two files of
one generation can be matched up.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from fleetsync.domain.models import CatalogItem, PublishedEnvelope, SettingsDocument


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def version_token(moment: datetime) -> str:
    """Milliseconds since the epoch, as a string."""
    return str(int(moment.timestamp() * 1000))


def build_envelope(
    items: Iterable[CatalogItem],
    *,
    now: datetime | None = None,
) -> PublishedEnvelope:
    moment = now or utc_now()
    return PublishedEnvelope(
        version=version_token(moment),
        updated_at=format_timestamp(moment),
        cars=list(items),
    )


def build_settings_document(
    values: Mapping[str, str],
    *,
    now: datetime | None = None,
) -> SettingsDocument:
    moment = now or utc_now()
    return SettingsDocument(values=dict(values), updated_at=format_timestamp(moment))
