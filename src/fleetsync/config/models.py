"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, fleetsync.toml only contains
overrides.  A working setup needs nothing beyond the two credentials
(service account blob and sheet id), normally supplied through the
environment.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- fleetsync.toml sections ---


class SourceConfig(BaseModel):
    """[source] section — spreadsheet ranges read by the publisher."""

    model_config = {"frozen": True}

    catalog_range: str = "Fleet!A:L"
    settings_range: str = "Settings!A:B"


class PublishConfig(BaseModel):
    """[publish] section."""

    model_config = {"frozen": True}

    output_dir: str = "data"
    catalog_filename: str = "cars.json"
    settings_filename: str = "settings.json"


class ClientConfig(BaseModel):
    """[client] section — where the loader fetches published documents."""

    model_config = {"frozen": True}

    catalog_url: str = "data/cars.json"
    settings_url: str = "data/settings.json"
    timeout: float = 10.0


class ImagesConfig(BaseModel):
    """[images] section."""

    model_config = {"frozen": True}

    cloud_name: str | None = None
    default_transform: str = "f_auto,q_auto,w_800,c_fill,g_auto"
    placeholder: str = "images/car-placeholder.svg"

