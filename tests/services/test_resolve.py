"""Tests for ResolveService — remote catalog with bundled fallback."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from fleetsync.domain.models import BusinessProfile, CatalogItem, PublishedEnvelope
from fleetsync.services.resolve import (
    ResolveService,
    active_remote_items,
    apply_settings_patch,
    patched_keys,
)
from tests.conftest import json_response, make_settings, mock_client, remote_item

CATALOG_URL = "https://fleet.example/data/cars.json"
SETTINGS_URL = "https://fleet.example/data/settings.json"


def _bundled() -> PublishedEnvelope:
    return PublishedEnvelope.model_validate(
        {
            "version": "bundled",
            "updatedAt": "2026-01-01T00:00:00.000Z",
            "cars": [
                {"id": "fallback-1", "category": "Économique", "name": "Clio", "active": True},
                {"id": "fallback-2", "category": "SUV", "name": "Duster", "active": True},
                {"id": "hidden", "category": "SUV", "name": "Old", "active": False},
            ],
        }
    )


def _service(
    tmp_path: Path,
    routes: dict[str, Any] | None = None,
    seen: list[httpx.Request] | None = None,
) -> ResolveService:
    return ResolveService(
        make_settings(tmp_path),
        client=mock_client(routes or {}, seen),
        default_dataset=_bundled(),
    )


def _catalog(cars: Any, version: str = "1760774400000") -> httpx.Response:
    return json_response({"version": version, "updatedAt": "2026-10-18T08:00:00.000Z", "cars": cars})


class TestActiveRemoteItems:
    def test_keeps_active_in_order(self) -> None:
        doc = {"cars": [remote_item("a"), remote_item("b", active=False), remote_item("c")]}
        assert [item.id for item in active_remote_items(doc)] == ["a", "c"]

    @pytest.mark.parametrize("cars", [None, "nope", {"a": 1}, 42])
    def test_missing_or_non_list_cars(self, cars: Any) -> None:
        doc = {} if cars is None else {"cars": cars}
        assert active_remote_items(doc) == []

    @pytest.mark.parametrize("flag", ["true", "TRUE", 1, None])
    def test_only_json_true_counts_as_active(self, flag: Any) -> None:
        assert active_remote_items({"cars": [remote_item("a", active=flag)]}) == []

    def test_missing_active_is_not_shown(self) -> None:
        raw = remote_item("a")
        del raw["active"]
        assert active_remote_items({"cars": [raw]}) == []

    def test_unknown_fields_ignored(self) -> None:
        raw = remote_item("a", seats=5, colour="white")
        items = active_remote_items({"cars": [raw]})
        assert len(items) == 1
        assert "seats" not in items[0].to_document()

    def test_drops_non_objects_missing_ids_and_duplicates(self) -> None:
        doc = {
            "cars": [
                "junk",
                remote_item(""),
                remote_item("a", name="First"),
                remote_item("a", name="Second"),
            ]
        }
        items = active_remote_items(doc)
        assert [(item.id, item.name) for item in items] == [("a", "First")]


class TestResolveCatalog:
    def test_remote_success(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: _catalog([remote_item("r1"), remote_item("r2")])}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "remote"
        assert [item.id for item in catalog.items] == ["r1", "r2"]
        assert catalog.version == "1760774400000"
        assert catalog.reason is None

    def test_remote_active_subset(self, tmp_path: Path) -> None:
        cars = [remote_item("r1", active=False), remote_item("r2"), remote_item("r3", active=False)]
        catalog = _service(tmp_path, {CATALOG_URL: _catalog(cars)}).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "remote"
        assert [item.id for item in catalog.items] == ["r2"]

    def test_http_error_falls_back(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: httpx.Response(500)}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert [item.id for item in catalog.items] == ["fallback-1", "fallback-2"]
        assert catalog.reason == "HTTP 500"
        assert catalog.version == "bundled"

    def test_transport_error_falls_back(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: httpx.ConnectError("offline")}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert catalog.reason is not None
        assert catalog.reason.startswith("Transport error")

    def test_invalid_json_falls_back(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: httpx.Response(200, content=b"<html>")}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert catalog.items

    def test_deeply_nested_body_falls_back(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: httpx.Response(200, content=b"[" * 200_000)}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert [item.id for item in catalog.items] == ["fallback-1", "fallback-2"]

    def test_null_byte_in_configured_url_falls_back(self, tmp_path: Path) -> None:
        catalog = _service(tmp_path).resolve_catalog("data/ca\x00rs.json")
        assert catalog.origin == "fallback"

    def test_all_inactive_falls_back(self, tmp_path: Path) -> None:
        cars = [remote_item("r1", active=False), remote_item("r2", active=False)]
        catalog = _service(tmp_path, {CATALOG_URL: _catalog(cars)}).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert catalog.reason == "No active items in remote catalog"
        assert [item.id for item in catalog.items] == ["fallback-1", "fallback-2"]

    def test_empty_cars_falls_back(self, tmp_path: Path) -> None:
        catalog = _service(tmp_path, {CATALOG_URL: _catalog([])}).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"

    def test_missing_cars_falls_back(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: json_response({"version": "1"})}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"

    def test_non_string_version_dropped(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: json_response({"version": 12, "cars": [remote_item("r1")]})}
        catalog = _service(tmp_path, routes).resolve_catalog(CATALOG_URL)
        assert catalog.origin == "remote"
        assert catalog.version is None

    def test_defaults_to_configured_url(self, tmp_path: Path) -> None:
        data = tmp_path / "data"
        data.mkdir()
        (data / "cars.json").write_text(
            json.dumps({"version": "1", "cars": [remote_item("local")]}),
            encoding="utf-8",
        )
        catalog = _service(tmp_path).resolve_catalog()
        assert catalog.origin == "remote"
        assert [item.id for item in catalog.items] == ["local"]

    def test_missing_local_file_falls_back(self, tmp_path: Path) -> None:
        catalog = _service(tmp_path).resolve_catalog()
        assert catalog.origin == "fallback"

    def test_never_empty_with_real_bundle(self, tmp_path: Path) -> None:
        service = ResolveService(
            make_settings(tmp_path),
            client=mock_client({CATALOG_URL: httpx.Response(404)}),
        )
        catalog = service.resolve_catalog(CATALOG_URL)
        assert catalog.origin == "fallback"
        assert len(catalog.items) > 0
        assert all(isinstance(item, CatalogItem) for item in catalog.items)


class TestSettingsPatch:
    def test_sparse_patch_changes_only_given_keys(self) -> None:
        defaults = BusinessProfile()
        patched = apply_settings_patch(defaults, {"email": "x@y.z"})
        assert patched.email == "x@y.z"
        assert patched.whatsapp == defaults.whatsapp
        assert patched.name == defaults.name

    def test_defaults_not_mutated(self) -> None:
        defaults = BusinessProfile()
        before = defaults.to_document()
        apply_settings_patch(defaults, {"email": "x@y.z", "hours": "24/7"})
        assert defaults.to_document() == before

    def test_empty_and_non_string_values_ignored(self) -> None:
        defaults = BusinessProfile()
        doc = {"email": "", "hours": 9, "address": None, "tagline": "Nouveau"}
        patched = apply_settings_patch(defaults, doc)
        assert patched.email == defaults.email
        assert patched.hours == defaults.hours
        assert patched.address == defaults.address
        assert patched.tagline == "Nouveau"

    def test_unrecognized_keys_ignored(self) -> None:
        defaults = BusinessProfile()
        patched = apply_settings_patch(defaults, {"updatedAt": "x", "color": "red"})
        assert patched is defaults

    def test_camel_case_key(self) -> None:
        patched = apply_settings_patch(BusinessProfile(), {"whatsappMessage": "Salut"})
        assert patched.whatsapp_message == "Salut"

    def test_patched_keys_order(self) -> None:
        assert patched_keys({"hours": "x", "name": "n", "foo": "bar"}) == ["name", "hours"]


class TestResolveSettings:
    def test_patches_from_remote(self, tmp_path: Path) -> None:
        routes = {SETTINGS_URL: json_response({"email": "x@y.z", "updatedAt": "t"})}
        profile = _service(tmp_path, routes).resolve_settings(SETTINGS_URL)
        assert profile.email == "x@y.z"
        assert profile.whatsapp == BusinessProfile().whatsapp

    def test_failure_keeps_defaults(self, tmp_path: Path) -> None:
        routes = {SETTINGS_URL: httpx.Response(503)}
        profile = _service(tmp_path, routes).resolve_settings(SETTINGS_URL)
        assert profile == BusinessProfile()

    def test_configured_business_defaults(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, business=BusinessProfile(name="Autre Agence"))
        service = ResolveService(settings, client=mock_client({}), default_dataset=_bundled())
        assert service.resolve_settings(SETTINGS_URL).name == "Autre Agence"

    def test_settings_result(self, tmp_path: Path) -> None:
        routes = {SETTINGS_URL: json_response({"hours": "24/7"})}
        result = _service(tmp_path, routes).settings_result(SETTINGS_URL)
        assert result.ok
        assert result.op == "resolve_settings"
        assert result.data["settings"]["hours"] == "24/7"
        assert result.data["patched"] == ["hours"]


class TestLoadPage:
    def test_settings_fetched_before_catalog(self, tmp_path: Path) -> None:
        seen: list[httpx.Request] = []
        routes = {
            SETTINGS_URL: json_response({"name": "Remote Name"}),
            CATALOG_URL: _catalog([remote_item("r1")]),
        }
        page = _service(tmp_path, routes, seen).load_page(
            catalog_url=CATALOG_URL, settings_url=SETTINGS_URL
        )
        assert [str(request.url) for request in seen] == [SETTINGS_URL, CATALOG_URL]
        assert page.profile.name == "Remote Name"
        assert page.settings_patched == ["name"]
        assert page.catalog.origin == "remote"

    def test_fetches_are_independent(self, tmp_path: Path) -> None:
        routes = {SETTINGS_URL: httpx.Response(500), CATALOG_URL: _catalog([remote_item("r1")])}
        page = _service(tmp_path, routes).load_page(
            catalog_url=CATALOG_URL, settings_url=SETTINGS_URL
        )
        assert page.profile == BusinessProfile()
        assert page.settings_patched == []
        assert page.catalog.origin == "remote"


class TestCatalogResult:
    def test_remote_result(self, tmp_path: Path) -> None:
        routes = {CATALOG_URL: _catalog([remote_item("r1")])}
        result = _service(tmp_path, routes).catalog_result(CATALOG_URL)
        assert result.ok
        assert result.data["origin"] == "remote"
        assert result.data["count"] == 1
        assert result.warnings == []

    def test_fallback_result_warns(self, tmp_path: Path) -> None:
        result = _service(tmp_path, {CATALOG_URL: httpx.Response(404)}).catalog_result(CATALOG_URL)
        assert result.ok
        assert result.data["origin"] == "fallback"
        assert result.meta is not None
        assert result.meta["reason"] == "HTTP 404"
        assert any("bundled" in warning for warning in result.warnings)
