"""Resilient document fetcher.

``fetch_document`` returns :class:`FetchSuccess` or :class:`FetchFailure`
and never raises into the caller.  Every call goes to the source: caches
are bypassed, and there is no retry.  The failure reason is for logs only.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, max-age=0",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class FetchSuccess:
    """A document that parsed as a JSON object."""

    url: str
    document: dict[str, Any]

    ok = True


@dataclass(frozen=True)
class FetchFailure:
    """Why a fetch did not produce a usable document."""

    url: str
    reason: str

    ok = False


FetchOutcome = FetchSuccess | FetchFailure


def _parse_object(url: str, text: str) -> FetchOutcome:
    try:
        document = json.loads(text)
    except (ValueError, RecursionError) as exc:
        return FetchFailure(url, f"Invalid JSON: {exc}")
    if not isinstance(document, dict):
        return FetchFailure(url, f"Expected a JSON object, got {type(document).__name__}")
    return FetchSuccess(url, document)


def _local_path(url: str, base_dir: Path | None) -> Path | None:
    """Return a filesystem path for ``file://`` URLs and bare paths, else None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        # Malformed netloc; the transport reports it.
        return None
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme in ("http", "https"):
        return None
    # Windows drive letters parse as one-letter schemes.
    if parsed.scheme and len(parsed.scheme) > 1:
        return None
    path = Path(url)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def _fetch_local(url: str, path: Path) -> FetchOutcome:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        return FetchFailure(url, f"Unreadable file: {exc}")
    return _parse_object(url, text)


def _fetch_remote(client: httpx.Client, url: str) -> FetchOutcome:
    try:
        response = client.get(url, headers=NO_CACHE_HEADERS)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return FetchFailure(url, f"Transport error: {exc}")
    if not response.is_success:
        return FetchFailure(url, f"HTTP {response.status_code}")
    try:
        text = response.text
    except (UnicodeDecodeError, LookupError) as exc:
        return FetchFailure(url, f"Undecodable body: {exc}")
    return _parse_object(url, text)


def fetch_document(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    base_dir: Path | None = None,
) -> FetchOutcome:
    """Fetch *url* and parse it as a JSON object.

    Args:
        url: ``http(s)://`` URL, ``file://`` URL, or a filesystem path
            (relative paths resolve against *base_dir*, default cwd).
        client: Optional pre-built ``httpx.Client`` (tests inject one with a
            mock transport).  A short-lived client is created otherwise.
        timeout: Transport timeout in seconds for the created client.
        base_dir: Directory for relative paths.
    """
    path = _local_path(url, base_dir)
    if path is not None:
        outcome = _fetch_local(url, path)
    elif client is not None:
        outcome = _fetch_remote(client, url)
    else:
        with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
            outcome = _fetch_remote(owned, url)

    if isinstance(outcome, FetchFailure):
        logger.debug("Fetch failed for %s: %s", url, outcome.reason)
    return outcome
