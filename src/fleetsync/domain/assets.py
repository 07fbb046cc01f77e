"""Image URL resolution for catalog items.

Remote images are served through Cloudinary's delivery URL scheme:
``https://res.cloudinary.com/{cloud}/image/upload/{transform}/{public_id}``.

INVARIANT: a misconfigured cloud name never yields a dead URL; the
placeholder is returned instead.
"""

from __future__ import annotations

import structlog

from fleetsync.domain.models import CatalogItem

logger = structlog.get_logger(__name__)

CLOUDINARY_BASE = "https://res.cloudinary.com"
DEFAULT_TRANSFORM = "f_auto,q_auto,w_800,c_fill,g_auto"
PLACEHOLDER_PATH = "images/car-placeholder.svg"
UNSET_CLOUD_NAME = "YOUR_CLOUD_NAME"


def is_configured(cloud_name: str | None) -> bool:
    return bool(cloud_name and cloud_name.strip()) and cloud_name != UNSET_CLOUD_NAME


def build_image_url(
    public_id: str | None,
    *,
    cloud_name: str | None,
    transform: str | None = None,
    default_transform: str = DEFAULT_TRANSFORM,
    placeholder: str = PLACEHOLDER_PATH,
) -> str:
    """Build the delivery URL for *public_id*, or the placeholder."""
    if not public_id:
        return placeholder
    if not is_configured(cloud_name):
        logger.warning("cloud_name_not_configured", public_id=public_id)
        return placeholder
    directive = transform or default_transform or DEFAULT_TRANSFORM
    return f"{CLOUDINARY_BASE}/{cloud_name}/image/upload/{directive}/{public_id}"


def resolve_image_url(
    item: CatalogItem,
    *,
    cloud_name: str | None,
    transform: str | None = None,
    default_transform: str = DEFAULT_TRANSFORM,
    placeholder: str = PLACEHOLDER_PATH,
) -> str:
    """Pick the image for *item*: remote asset, then local path, then placeholder."""
    if item.image_public_id:
        return build_image_url(
            item.image_public_id,
            cloud_name=cloud_name,
            transform=transform,
            default_transform=default_transform,
            placeholder=placeholder,
        )
    if item.image:
        return item.image
    return placeholder
