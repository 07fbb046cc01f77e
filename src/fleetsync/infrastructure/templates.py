"""Shared Jinja2 template loading with optional directory overrides."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from fleetsync.domain.markup import escape_html


def build_template_environment(group: str, *, override_dir: Path | None = None) -> Environment:
    """Build an autoescaping Jinja2 environment, user overrides before packaged defaults.

    Overrides are looked up in ``override_dir/<group>/`` and then
    ``override_dir/`` itself.  Autoescape is always on: every value that
    reaches a template may come from the spreadsheet.
    """

    loaders: list[BaseLoader] = []
    if override_dir is not None:
        loaders.append(FileSystemLoader([str(override_dir / group), str(override_dir)]))

    loaders.append(PackageLoader("fleetsync", f"templates/{group}"))
    env = Environment(loader=ChoiceLoader(loaders), autoescape=True, keep_trailing_newline=True)
    env.filters["esc"] = escape_html
    return env
