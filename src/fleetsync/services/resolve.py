"""ResolveService — fetch published documents, fall back to bundled data.

INVARIANT: ``resolve_catalog`` never returns an empty list while the
bundled dataset holds at least one active item.  A remote document with
zero active items counts as a failure, not as an empty catalog.

Settings degrade field by field: each recognized key present with a
non-empty string overrides its default, everything else keeps the default.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

import structlog
from pydantic import ValidationError

from fleetsync.domain.defaults import load_default_dataset
from fleetsync.domain.models import (
    RECOGNIZED_SETTINGS_KEYS,
    BusinessProfile,
    CatalogItem,
    PublishedEnvelope,
)
from fleetsync.infrastructure.http import FetchFailure, FetchOutcome, fetch_document
from fleetsync.services.base import BaseService
from fleetsync.services.result import ServiceResult

if TYPE_CHECKING:
    import httpx

    from fleetsync.config.settings import FleetSettings

logger = structlog.get_logger(__name__)

Origin = Literal["remote", "fallback"]


@dataclass(frozen=True)
class ResolvedCatalog:
    """Catalog items ready for rendering plus where they came from."""

    items: list[CatalogItem]
    origin: Origin
    reason: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class ResolvedPage:
    """Everything a page render needs, resolved in order: settings, then catalog."""

    profile: BusinessProfile
    catalog: ResolvedCatalog
    settings_patched: list[str] = field(default_factory=list)


def active_remote_items(document: Mapping[str, Any]) -> list[CatalogItem]:
    """Extract the active items of a fetched catalog document.

    A missing or non-list ``cars`` field counts as an empty list.  Only
    entries whose ``active`` is JSON ``true`` survive; entries that are not
    objects, lack an id, or repeat an id are dropped.  Unknown fields are
    ignored.
    """
    cars = document.get("cars")
    if not isinstance(cars, list):
        return []

    items: list[CatalogItem] = []
    seen: set[str] = set()
    for raw in cars:
        if not isinstance(raw, dict) or raw.get("active") is not True:
            continue
        try:
            item = CatalogItem.model_validate(raw)
        except ValidationError:
            continue
        if not item.id or item.id in seen:
            continue
        seen.add(item.id)
        items.append(item)
    return items


def patched_keys(document: Mapping[str, Any]) -> list[str]:
    """Recognized keys of *document* that carry a usable (non-empty string) value."""
    return [
        key
        for key in RECOGNIZED_SETTINGS_KEYS
        if isinstance(document.get(key), str) and document.get(key)
    ]


def apply_settings_patch(
    defaults: BusinessProfile,
    document: Mapping[str, Any],
) -> BusinessProfile:
    """Return a new profile with *document* applied as a sparse patch.

    *defaults* is not modified.
    """
    updates = {key: document[key] for key in patched_keys(document)}
    if not updates:
        return defaults
    return BusinessProfile.model_validate({**defaults.to_document(), **updates})


class ResolveService(BaseService):
    """Client-side loading of the published catalog and settings."""

    def __init__(
        self,
        settings: FleetSettings,
        *,
        client: httpx.Client | None = None,
        default_dataset: PublishedEnvelope | None = None,
    ) -> None:
        super().__init__(settings)
        self._client = client
        self._default_dataset = default_dataset

    @property
    def default_dataset(self) -> PublishedEnvelope:
        if self._default_dataset is None:
            self._default_dataset = load_default_dataset()
        return self._default_dataset

    def _fetch(self, url: str) -> FetchOutcome:
        return fetch_document(
            url,
            client=self._client,
            timeout=self._settings.client.timeout,
            base_dir=self._settings.project_root,
        )

    def fallback_catalog(self, reason: str) -> ResolvedCatalog:
        dataset = self.default_dataset
        return ResolvedCatalog(
            items=dataset.active_items(),
            origin="fallback",
            reason=reason,
            version=dataset.version,
        )

    def resolve_catalog(self, url: str | None = None) -> ResolvedCatalog:
        """Fetch the catalog, keep active items, or fall back to the bundled set."""
        target = url or self._settings.client.catalog_url
        outcome = self._fetch(target)

        if isinstance(outcome, FetchFailure):
            reason = outcome.reason
        else:
            items = active_remote_items(outcome.document)
            if items:
                version = outcome.document.get("version")
                return ResolvedCatalog(
                    items=items,
                    origin="remote",
                    version=version if isinstance(version, str) else None,
                )
            reason = "No active items in remote catalog"

        logger.warning("catalog_fallback", url=target, reason=reason)
        return self.fallback_catalog(reason)

    def resolve_settings(self, url: str | None = None) -> BusinessProfile:
        """Fetch the settings document and patch the configured defaults."""
        profile, _ = self._resolve_settings(url)
        return profile

    def _resolve_settings(self, url: str | None) -> tuple[BusinessProfile, list[str]]:
        defaults = self._settings.business
        target = url or self._settings.client.settings_url
        outcome = self._fetch(target)
        if isinstance(outcome, FetchFailure):
            logger.warning("settings_defaults_kept", url=target, reason=outcome.reason)
            return defaults, []
        return apply_settings_patch(defaults, outcome.document), patched_keys(outcome.document)

    def load_page(
        self,
        *,
        catalog_url: str | None = None,
        settings_url: str | None = None,
    ) -> ResolvedPage:
        """Resolve settings first, then the catalog."""
        profile, patched = self._resolve_settings(settings_url)
        catalog = self.resolve_catalog(catalog_url)
        return ResolvedPage(profile=profile, catalog=catalog, settings_patched=patched)

    # --- ServiceResult adapters for the CLI ---

    def catalog_result(self, url: str | None = None) -> ServiceResult:
        catalog = self.resolve_catalog(url)
        warnings: list[str] = []
        if catalog.origin == "fallback":
            warnings.append(f"Using bundled catalog: {catalog.reason}")
        return ServiceResult(
            ok=True,
            op="resolve_catalog",
            data={
                "origin": catalog.origin,
                "count": len(catalog.items),
                "items": [
                    {"id": item.id, "category": item.category, "name": item.name}
                    for item in catalog.items
                ],
            },
            warnings=warnings,
            meta={"version": catalog.version, "reason": catalog.reason},
        )

    def settings_result(self, url: str | None = None) -> ServiceResult:
        profile, patched = self._resolve_settings(url)
        return ServiceResult(
            ok=True,
            op="resolve_settings",
            data={"settings": profile.to_document(), "patched": patched},
        )
