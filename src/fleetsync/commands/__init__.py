"""Subcommand modules for fleetsync.

Provides register_commands() which uses deferred imports to keep
``fleetsync --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from fleetsync.commands.resolve import resolve

    cli.add_command(resolve)

    # --- Standalone commands ---
    from fleetsync.commands.image_url import image_url
    from fleetsync.commands.publish import publish
    from fleetsync.commands.render import render

    cli.add_command(publish)
    cli.add_command(render)
    cli.add_command(image_url)
