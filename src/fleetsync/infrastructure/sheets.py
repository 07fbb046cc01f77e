"""Spreadsheet access — the untyped row stream feeding the normalizer.

The rest of the pipeline only sees :class:`RowSource`; swapping Google
Sheets for another editable backend means providing another
implementation of ``read_range``.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

READONLY_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class ConfigurationError(ValueError):
    """Required credentials or the source identifier are missing or unusable."""


class SourceReadError(RuntimeError):
    """The external source was unreachable or returned malformed ranges."""


class RowSource(Protocol):
    """Anything that can return a named range as rows of cells."""

    def read_range(self, range_name: str) -> list[list[Any]]: ...


def decode_service_account(encoded: str | None) -> dict[str, Any]:
    """Decode a base64-encoded service-account JSON blob.

    Raises:
        ConfigurationError: blob missing, not base64, or not a JSON object.
    """
    if not encoded or not encoded.strip():
        msg = "Service account credentials are not configured"
        raise ConfigurationError(msg)
    try:
        raw = base64.b64decode(encoded.strip(), validate=True)
        info = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Service account credentials are not valid base64-encoded JSON: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(info, dict):
        msg = "Service account credentials must decode to a JSON object"
        raise ConfigurationError(msg)
    return info


def validate_rows(range_name: str, values: Any) -> list[list[Any]]:
    """Check that a range payload is a list of rows, each a list of cells."""
    if values is None:
        return []
    if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
        msg = f"Malformed range {range_name!r}: expected a list of rows"
        raise SourceReadError(msg)
    return values


class GoogleSheetSource:
    """Read ranges from one spreadsheet through gspread.

    Authorization is deferred to the first read so construction never
    touches the network.
    """

    def __init__(self, sheet_id: str, credentials_info: dict[str, Any]) -> None:
        if not sheet_id or not sheet_id.strip():
            msg = "Spreadsheet id is not configured"
            raise ConfigurationError(msg)
        self._sheet_id = sheet_id.strip()
        self._credentials_info = credentials_info
        self._spreadsheet: Any = None

    @classmethod
    def from_encoded(
        cls, sheet_id: str | None, encoded_credentials: str | None
    ) -> GoogleSheetSource:
        """Build a source from the out-of-band configuration values."""
        if not sheet_id or not sheet_id.strip():
            msg = "Spreadsheet id is not configured"
            raise ConfigurationError(msg)
        return cls(sheet_id, decode_service_account(encoded_credentials))

    def _open(self) -> Any:
        if self._spreadsheet is None:
            import gspread
            from google.oauth2.service_account import Credentials

            credentials = Credentials.from_service_account_info(
                self._credentials_info, scopes=READONLY_SCOPES
            )
            client = gspread.authorize(credentials)
            self._spreadsheet = client.open_by_key(self._sheet_id)
        return self._spreadsheet

    def read_range(self, range_name: str) -> list[list[Any]]:
        try:
            response = self._open().values_get(range_name)
        except Exception as exc:
            msg = f"Failed to read range {range_name!r}: {exc}"
            raise SourceReadError(msg) from exc
        if not isinstance(response, dict):
            msg = f"Malformed response for range {range_name!r}"
            raise SourceReadError(msg)
        rows = validate_rows(range_name, response.get("values"))
        logger.debug("Read %d rows from %s", len(rows), range_name)
        return rows
