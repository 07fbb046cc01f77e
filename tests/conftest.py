"""Shared pytest fixtures and test helpers for fleetsync tests."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from fleetsync.config.settings import FleetSettings
from fleetsync.infrastructure.sheets import SourceReadError

CATALOG_RANGE = "Fleet!A:L"
SETTINGS_RANGE = "Settings!A:B"

HEADER = [
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
]

CATALOG_ROWS: list[list[Any]] = [
    HEADER,
    [
        "clio-1",
        "Économique",
        "Renault Clio",
        "300",
        "MAD/jour",
        "Climatisation|Bluetooth| GPS |",
        "",
        "cars/clio",
        "Clio blanche",
        "TRUE",
        "2025-01-02",
        "2025-03-04",
    ],
    ["", "", "", "", "", "", "", "", "", "", "", ""],
    ["duster-1", "SUV", "Dacia Duster", "400", "MAD/jour", "7 places", "Famille", "", "", "FALSE"],
    ["bmw-1", "Luxe", "BMW Série 3", "1100", "MAD/jour", "", "VIP", "cars/bmw", "BMW", "TRUE"],
]

SETTINGS_ROWS: list[list[Any]] = [
    ["email", "old@example.com"],
    ["", "ignored"],
    ["hours", "9h-18h"],
    ["email", "new@example.com"],
    ["whatsapp"],
]

_ENV_VARS = (
    "GOOGLE_SERVICE_ACCOUNT_JSON",
    "GOOGLE_SHEET_ID",
    "FLEETSYNC_SERVICE_ACCOUNT_JSON",
    "FLEETSYNC_SHEET_ID",
    "FLEETSYNC_CONFIG",
    "SERVICE_ACCOUNT_JSON",
    "SHEET_ID",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and config out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    import os

    for name in list(os.environ):
        if name.startswith("FLEETSYNC_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI resolves paths there."""
    monkeypatch.chdir(tmp_path)


class FakeRowSource:
    """In-memory RowSource keyed by range name."""

    def __init__(
        self,
        ranges: dict[str, list[list[Any]]] | None = None,
        *,
        fail_on: str | None = None,
    ) -> None:
        self.ranges = ranges or {}
        self.fail_on = fail_on
        self.reads: list[str] = []

    def read_range(self, range_name: str) -> list[list[Any]]:
        self.reads.append(range_name)
        if range_name == self.fail_on:
            msg = f"Failed to read range {range_name!r}: unreachable"
            raise SourceReadError(msg)
        return [list(row) for row in self.ranges.get(range_name, [])]


def sample_source(**kwargs: Any) -> FakeRowSource:
    return FakeRowSource(
        {CATALOG_RANGE: CATALOG_ROWS, SETTINGS_RANGE: SETTINGS_ROWS},
        **kwargs,
    )


def make_settings(root: Path, **overrides: Any) -> FleetSettings:
    """FleetSettings rooted at *root* with no TOML file."""
    return FleetSettings.from_cli(project_root=root, **overrides)


def encoded_credentials(info: dict[str, Any] | None = None) -> str:
    payload = info or {"type": "service_account", "client_email": "sync@example.iam"}
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


Route = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


def mock_client(routes: dict[str, Route], seen: list[httpx.Request] | None = None) -> httpx.Client:
    """httpx.Client whose responses come from *routes* keyed by URL.

    A route may be a response, an exception to raise, or a callable.
    Unknown URLs answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    return httpx.Client(transport=httpx.MockTransport(handler))


def remote_item(item_id: str, *, active: Any = True, **fields: Any) -> dict[str, Any]:
    """A catalog entry shaped like the published document."""
    base: dict[str, Any] = {
        "id": item_id,
        "category": "SUV",
        "name": f"Car {item_id}",
        "price": "400",
        "unit": "MAD/jour",
        "features": ["Climatisation"],
        "badge": None,
        "imagePublicId": None,
        "imageAlt": "",
        "active": active,
    }
    base.update(fields)
    return base
