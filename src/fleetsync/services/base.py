"""BaseService — shared foundation for fleetsync services.

Every service receives the frozen :class:`FleetSettings` at construction
time.  Collaborators with side effects (row source, HTTP client, clock)
are injected per service so tests can substitute them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fleetsync.config.settings import FleetSettings


class BaseService:
    """Base for all service-layer classes."""

    def __init__(self, settings: FleetSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> FleetSettings:
        return self._settings
