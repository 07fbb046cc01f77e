"""Catalog, settings, and envelope models.

Field names are snake_case in Python and camelCase on the wire
(``imagePublicId``, ``updatedAt``), matching the published JSON documents.

INVARIANT: ``features`` is always a list of trimmed non-empty strings once
a CatalogItem exists, whatever shape the incoming value had.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FEATURE_DELIMITER = "|"

# Keys the client accepts from a settings document; everything else is ignored.
RECOGNIZED_SETTINGS_KEYS: tuple[str, ...] = (
    "name",
    "tagline",
    "description",
    "whatsapp",
    "whatsappMessage",
    "email",
    "address",
    "hours",
    "instagram",
    "facebook",
)

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def split_features(value: Any) -> list[str]:
    """Coerce a feature value into a clean list of strings.

    Accepts the pipe-delimited form used in the spreadsheet as well as an
    already-split list.  Anything else yields an empty list.
    """
    if isinstance(value, str):
        parts: list[Any] = value.split(FEATURE_DELIMITER)
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        return []
    return [str(part).strip() for part in parts if part is not None and str(part).strip()]


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


class CatalogItem(BaseModel):
    """One rentable vehicle as published and consumed."""

    model_config = _WIRE_CONFIG

    id: str
    category: str = ""
    name: str = ""
    price: str = ""
    unit: str = ""
    features: list[str] = Field(default_factory=list)
    badge: str | None = None
    image_public_id: str | None = None
    image: str | None = None
    image_alt: str = ""
    active: bool = True
    created_at: str = ""
    updated_at: str = ""

    @field_validator(
        "id",
        "category",
        "name",
        "price",
        "unit",
        "image_alt",
        "created_at",
        "updated_at",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("badge", "image_public_id", "image", mode="before")
    @classmethod
    def _coerce_optional(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("features", mode="before")
    @classmethod
    def _coerce_features(cls, value: Any) -> list[str]:
        return split_features(value)

    @field_validator("active", mode="before")
    @classmethod
    def _coerce_active(cls, value: Any) -> bool:
        # Absent or malformed means visible.
        return value if isinstance(value, bool) else True

    def to_document(self) -> dict[str, Any]:
        """Serialize with wire field names.  ``image`` is only kept when set."""
        data = self.model_dump(by_alias=True)
        if data.get("image") is None:
            data.pop("image", None)
        return data


class PublishedEnvelope(BaseModel):
    """Versioned wrapper around the published catalog."""

    model_config = _WIRE_CONFIG

    version: str
    updated_at: str
    cars: list[CatalogItem] = Field(default_factory=list)

    def active_items(self) -> list[CatalogItem]:
        return [item for item in self.cars if item.active]

    def to_document(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "updatedAt": self.updated_at,
            "cars": [item.to_document() for item in self.cars],
        }


class SettingsDocument(BaseModel):
    """Flat key/value settings plus the sync timestamp.

    The publisher keeps every key found in the sheet; filtering to the
    recognized keys happens on the consuming side.
    """

    model_config = {"frozen": True}

    values: dict[str, str] = Field(default_factory=dict)
    updated_at: str

    def to_document(self) -> dict[str, str]:
        return {**self.values, "updatedAt": self.updated_at}


class BusinessProfile(BaseModel):
    """Immutable business defaults that settings documents patch."""

    model_config = _WIRE_CONFIG

    name: str = "USF Luxury Cars"
    tagline: str = "Location de voitures à Tanger"
    description: str = (
        "USF Luxury Cars est une agence de location de voitures basée à Tanger, "
        "offrant des véhicules fiables, propres et bien entretenus aux touristes "
        "et aux locaux. Nous nous concentrons sur la satisfaction client, la "
        "réservation rapide et des tarifs compétitifs."
    )
    whatsapp: str = "212617462173"
    whatsapp_message: str = "Bonjour USF Luxury Cars ! Je souhaite réserver une voiture."
    email: str = "usf.luxuys@gmail.com"
    address: str = "Tanger, Maroc"
    hours: str = "Lun–Dim : 08h00 – 20h00"
    instagram: str = "usf.luxuys"
    facebook: str = "USF Luxury Cars"

    def to_document(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
