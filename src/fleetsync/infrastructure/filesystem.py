"""File output for published documents.

INVARIANT: readers never observe a partial document.  Each write goes to
a temporary file in the destination directory and is moved into place
with :func:`os.replace`, which is atomic on the same filesystem.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def render_json(payload: Any) -> str:
    """Serialize a document the way it is published (UTF-8, 2-space indent)."""
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_json_atomic(path: Path, payload: Any) -> Path:
    """Replace *path* with the JSON rendering of *payload*.

    Creates parent directories if they don't exist.  On failure the
    temporary file is removed and any previous document is left intact.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = render_json(payload)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
