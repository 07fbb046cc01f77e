"""Command group: resolve published documents the way the client does."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fleetsync.commands._base import FleetGroup

if TYPE_CHECKING:
    from fleetsync.commands._context import AppContext

_RESOLVE_EXAMPLES = """\
  fleetsync resolve catalog
  fleetsync resolve catalog --url https://example.com/data/cars.json
  fleetsync --json resolve settings --url data/settings.json"""


@click.group(cls=FleetGroup, examples=_RESOLVE_EXAMPLES)
@click.pass_obj
def resolve(app: AppContext) -> None:
    """Fetch published data with fallback, as a visitor's page would."""


@resolve.command(
    examples="""\
  fleetsync resolve catalog
  fleetsync -v resolve catalog --url file:///srv/site/data/cars.json"""
)
@click.option("--url", default=None, help="Catalog location (default: [client] catalog_url).")
@click.pass_obj
def catalog(app: AppContext, url: str | None) -> None:
    """Show the catalog a visitor would see and where it came from."""
    from fleetsync.services.resolve import ResolveService

    app.emit(ResolveService(app.settings).catalog_result(url))


@resolve.command(
    examples="""\
  fleetsync resolve settings
  fleetsync resolve settings --url https://example.com/data/settings.json"""
)
@click.option("--url", default=None, help="Settings location (default: [client] settings_url).")
@click.pass_obj
def settings(app: AppContext, url: str | None) -> None:
    """Show business settings after patching defaults (patched keys marked *)."""
    from fleetsync.services.resolve import ResolveService

    app.emit(ResolveService(app.settings).settings_result(url))
