"""Tests for operation-specific Rich renderers."""

from fleetsync.output.renderers import render_quiet, render_result
from fleetsync.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("publish", "CONFIG_ERROR", "Spreadsheet id is not configured"))
        assert "ERROR" in output
        assert "publish" in output
        assert "Spreadsheet id is not configured" in output
        assert "code: CONFIG_ERROR" in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("publish", "SOURCE_READ_ERROR", "Bad", catalog_range="Fleet!A:L")
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "Fleet!A:L" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="test"))


# ── Operation renderers ──────────────────────────────────────────────


class TestPublishRenderer:
    def test_paths_shown(self) -> None:
        result = _ok(
            "publish",
            version="1760774400000",
            item_count=3,
            catalog_path="/site/data/cars.json",
            settings_path="/site/data/settings.json",
        )
        output = render_result(result)
        assert "OK" in output
        assert "1760774400000" in output
        assert "/site/data/cars.json" in output

    def test_dry_run(self) -> None:
        output = render_result(_ok("publish", dry_run=True, catalog={"cars": []}))
        assert "nothing written" in output
        assert "catalog_path" not in output


class TestCatalogRenderer:
    def test_table(self) -> None:
        result = _ok(
            "resolve_catalog",
            origin="remote",
            count=1,
            items=[{"id": "clio-1", "category": "Économique", "name": "Renault Clio"}],
        )
        output = render_result(result)
        assert "remote" in output
        assert "clio-1" in output
        assert "Renault Clio" in output


class TestSettingsRenderer:
    def test_patched_marker(self) -> None:
        result = _ok(
            "resolve_settings",
            settings={"email": "x@y.z", "hours": "9h"},
            patched=["email"],
        )
        output = render_result(result)
        assert "*email:" in output
        assert "x@y.z" in output
        assert "*hours" not in output


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(_ok("image_url", url="images/car-placeholder.svg", placeholder=True))
        assert "image_url" in output
        assert "images/car-placeholder.svg" in output


class TestQuiet:
    def test_ids_only(self) -> None:
        result = _ok("resolve_catalog", items=[{"id": "a"}, {"id": "b"}])
        assert render_quiet(result) == "a\nb"

    def test_ok_line(self) -> None:
        assert render_quiet(_ok("publish")) == "OK: publish"

    def test_error_line(self) -> None:
        assert render_quiet(_err("publish", "WRITE_ERROR", "disk full")).startswith("ERROR: publish")
