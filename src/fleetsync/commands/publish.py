"""Command: publish the spreadsheet catalog and settings as JSON."""

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
  GOOGLE_SHEET_ID=... GOOGLE_SERVICE_ACCOUNT_JSON=$(base64 -w0 sa.json) fleetsync publish
  fleetsync publish --output-dir site/data
  fleetsync --json publish --dry-run""",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for cars.json and settings.json (default: [publish] output_dir).",
)
@click.option("--dry-run", is_flag=True, help="Read and normalize, but write nothing.")
@click.pass_obj
def publish(app: AppContext, output_dir: str | None, dry_run: bool) -> None:
    """Sync the spreadsheet into the published JSON documents."""
    from fleetsync.services.publish import PublishService

    target = Path(output_dir) if output_dir else None
    app.emit(PublishService(app.settings).publish(output_dir=target, dry_run=dry_run))
