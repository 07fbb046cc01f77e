"""Command: render the fleet section from resolved data."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from fleetsync.commands._base import FleetCommand

if TYPE_CHECKING:
    from fleetsync.commands._context import AppContext


@click.command(
    cls=FleetCommand,
    examples="""\
  fleetsync render
  fleetsync render --output build/fleet.html --show-origin""",
)
@click.option("--catalog-url", default=None, help="Override [client] catalog_url.")
@click.option("--settings-url", default=None, help="Override [client] settings_url.")
@click.option(
    "--template-dir",
    type=click.Path(file_okay=False, exists=True),
    default=None,
    help="Directory with template overrides.",
)
@click.option("--show-origin", is_flag=True, help="Include the data source line.")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def render(
    app: AppContext,
    catalog_url: str | None,
    settings_url: str | None,
    template_dir: str | None,
    show_origin: bool,
    output_file: str | None,
) -> None:
    """Render the fleet section HTML, falling back to bundled data if needed."""
    from fleetsync.services.render import RenderService
    from fleetsync.services.result import ServiceResult

    service = RenderService(
        app.settings,
        template_dir=Path(template_dir) if template_dir else None,
    )
    result = service.render_page(
        catalog_url=catalog_url,
        settings_url=settings_url,
        show_origin=show_origin,
    )

    if output_file:
        path = Path(output_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(result.data["html"], encoding="utf-8")
        except OSError as exc:
            app.emit(ServiceResult.failure("render", "WRITE_ERROR", str(exc)))
            return
        app.emit(
            ServiceResult(
                ok=True,
                op="render",
                data={
                    "output_file": output_file,
                    "origin": result.data["origin"],
                    "item_count": result.data["item_count"],
                },
                meta=result.meta,
            )
        )
    else:
        # Pipe-friendly: raw markup to stdout
        click.echo(result.data["html"], nl=False)
