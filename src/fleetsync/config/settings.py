"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``FLEETSYNC_*`` prefix, plus the ``GOOGLE_*`` credential names
  3. TOML file    — ``fleetsync.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The two sync credentials are read from ``GOOGLE_SERVICE_ACCOUNT_JSON`` and
``GOOGLE_SHEET_ID`` (the names scheduled jobs export as secrets) as well as
their ``FLEETSYNC_`` equivalents.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from fleetsync.config.discovery import find_config
from fleetsync.config.models import ClientConfig, ImagesConfig, PublishConfig, SourceConfig
from fleetsync.domain.models import BusinessProfile


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``fleetsync.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class FleetSettings(BaseSettings):
    """Unified settings for the fleetsync CLI and library entry points.

    Attributes:
        project_root: Directory relative paths resolve against (parent of
            ``fleetsync.toml``, or CWD if no config found).
        config_path: The TOML file in use, or None.
        service_account_json: Base64-encoded service-account JSON blob.
        sheet_id: Identifier of the source spreadsheet.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FLEETSYNC_",
        "env_nested_delimiter": "__",
        "populate_by_name": True,
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Out-of-band credentials ---
    service_account_json: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "service_account_json",
            "FLEETSYNC_SERVICE_ACCOUNT_JSON",
            "GOOGLE_SERVICE_ACCOUNT_JSON",
        ),
        repr=False,
    )
    sheet_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("sheet_id", "FLEETSYNC_SHEET_ID", "GOOGLE_SHEET_ID"),
    )

    # --- TOML sections ---
    source: SourceConfig = Field(default_factory=SourceConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)
    business: BusinessProfile = Field(default_factory=BusinessProfile)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> FleetSettings:
        """Construct settings from a CLI invocation.

        Discovers ``fleetsync.toml`` via walk-up (or explicit *config_path*),
        resolves *project_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.  Flags passed
        as None are dropped so they don't mask env or TOML values.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **flags,
            )
        finally:
            _tls.toml_path = None

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve *value* against the project root unless already absolute."""
        path = Path(value)
        return path if path.is_absolute() else self.project_root / path

    @property
    def catalog_output_path(self) -> Path:
        return self.resolve_path(self.publish.output_dir) / self.publish.catalog_filename

    @property
    def settings_output_path(self) -> Path:
        return self.resolve_path(self.publish.output_dir) / self.publish.settings_filename
