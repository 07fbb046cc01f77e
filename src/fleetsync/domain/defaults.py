"""Bundled default dataset — the catalog shown when the remote one is unusable.

Shipped as package data (``fleetsync/data/fallback_fleet.json``) and read
only; nothing in the system writes to it.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources

from fleetsync.domain.models import PublishedEnvelope

DEFAULT_DATASET_RESOURCE = "fallback_fleet.json"


@lru_cache(maxsize=1)
def load_default_dataset() -> PublishedEnvelope:
    """Load and validate the bundled envelope (cached after first use)."""
    raw = resources.files("fleetsync.data").joinpath(DEFAULT_DATASET_RESOURCE).read_text(
        encoding="utf-8"
    )
    return PublishedEnvelope.model_validate(json.loads(raw))
