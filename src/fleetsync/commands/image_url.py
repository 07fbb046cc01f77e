"""Command: print the delivery URL for an image identifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fleetsync.commands._base import FleetCommand

if TYPE_CHECKING:
    from fleetsync.commands._context import AppContext


@click.command(
    "image-url",
    cls=FleetCommand,
    examples="""\
  fleetsync image-url cars/clio-2024
  fleetsync image-url cars/clio-2024 --transform f_auto,q_auto,w_400""",
)
@click.argument("public_id")
@click.option("--transform", default=None, help="Override [images] default_transform.")
@click.pass_obj
def image_url(app: AppContext, public_id: str, transform: str | None) -> None:
    """Resolve PUBLIC_ID to an image URL (placeholder if unconfigured)."""
    from fleetsync.domain.assets import build_image_url
    from fleetsync.services.result import ServiceResult

    images = app.settings.images
    url = build_image_url(
        public_id,
        cloud_name=images.cloud_name,
        transform=transform,
        default_transform=images.default_transform,
        placeholder=images.placeholder,
    )
    app.emit(
        ServiceResult(
            ok=True,
            op="image_url",
            data={"public_id": public_id, "url": url, "placeholder": url == images.placeholder},
        )
    )
