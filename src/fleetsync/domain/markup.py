"""Helpers shared by anything that turns catalog data into markup.

Every string that came from the spreadsheet or a fetched document is
untrusted; :func:`escape_html` is the single escaping rule.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

from markupsafe import Markup, escape

from fleetsync.domain.models import CatalogItem

WHATSAPP_BASE = "https://wa.me"
DEFAULT_UNIT = "MAD/jour"

# Left unencoded in the prefilled message text.
_URI_COMPONENT_SAFE = "!~*'()"


def escape_html(value: Any) -> Markup:
    """Escape ``& < > " '``.  Non-string input renders as an empty string."""
    if not isinstance(value, str):
        return Markup("")
    return escape(value)


def whatsapp_url(number: str, message: str) -> str:
    """Click-to-chat link with *message* prefilled."""
    phone = quote(number or "", safe="")
    text = quote(message or "", safe=_URI_COMPONENT_SAFE)
    return f"{WHATSAPP_BASE}/{phone}?text={text}"


def booking_message(item: CatalogItem) -> str:
    return (
        f"Bonjour ! Je suis intéressé par la location de la {item.name}. "
        "Pouvez-vous me donner plus d'informations ?"
    )


def alt_text(item: CatalogItem) -> str:
    return item.image_alt or f"{item.name} — location à Tanger"


def category_tabs(items: Iterable[CatalogItem]) -> list[str]:
    """Distinct categories in first-seen order, compared by exact string equality."""
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item.category, None)
    return list(seen)
