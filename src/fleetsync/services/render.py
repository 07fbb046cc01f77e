"""RenderService — fleet section markup from a resolved catalog.

Stands in for the page's rendering layer so the escaping rule is
exercised end to end.  All item and settings strings pass through the
autoescaping Jinja2 environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fleetsync.domain.assets import resolve_image_url
from fleetsync.domain.markup import (
    DEFAULT_UNIT,
    alt_text,
    booking_message,
    category_tabs,
    whatsapp_url,
)
from fleetsync.infrastructure.templates import build_template_environment
from fleetsync.services.base import BaseService
from fleetsync.services.resolve import ResolveService
from fleetsync.services.result import ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from fleetsync.config.settings import FleetSettings
    from fleetsync.domain.models import BusinessProfile, CatalogItem
    from fleetsync.services.resolve import ResolvedCatalog

FLEET_TEMPLATE = "fleet.html.j2"

_ORIGIN_LABELS = {"remote": "data/cars.json", "fallback": "catalogue intégré (secours)"}


class RenderService(BaseService):
    """Render the fleet section for a resolved page."""

    def __init__(
        self,
        settings: FleetSettings,
        *,
        resolver: ResolveService | None = None,
        template_dir: Path | None = None,
    ) -> None:
        super().__init__(settings)
        self._resolver = resolver or ResolveService(settings)
        self._env = build_template_environment("fleet", override_dir=template_dir)

    def _card(self, item: CatalogItem, profile: BusinessProfile) -> dict[str, Any]:
        images = self._settings.images
        return {
            "item": item,
            "image_url": resolve_image_url(
                item,
                cloud_name=images.cloud_name,
                default_transform=images.default_transform,
                placeholder=images.placeholder,
            ),
            "alt": alt_text(item),
            "unit": item.unit or DEFAULT_UNIT,
            "booking_url": whatsapp_url(profile.whatsapp, booking_message(item)),
        }

    def render_fleet(
        self,
        catalog: ResolvedCatalog,
        profile: BusinessProfile,
        *,
        show_origin: bool = False,
    ) -> str:
        """Render the fleet section.  *show_origin* adds a diagnostic source line."""
        template = self._env.get_template(FLEET_TEMPLATE)
        return template.render(
            cards=[self._card(item, profile) for item in catalog.items],
            categories=category_tabs(catalog.items),
            profile=profile,
            placeholder=self._settings.images.placeholder,
            show_origin=show_origin,
            origin_label=_ORIGIN_LABELS.get(catalog.origin, catalog.origin),
        )

    def render_page(
        self,
        *,
        catalog_url: str | None = None,
        settings_url: str | None = None,
        show_origin: bool = False,
    ) -> ServiceResult:
        page = self._resolver.load_page(catalog_url=catalog_url, settings_url=settings_url)
        html = self.render_fleet(page.catalog, page.profile, show_origin=show_origin)
        return ServiceResult(
            ok=True,
            op="render",
            data={
                "html": html,
                "origin": page.catalog.origin,
                "item_count": len(page.catalog.items),
            },
            meta={"reason": page.catalog.reason, "settings_patched": page.settings_patched},
        )
