"""Small helpers shared by the JSON-file repositories."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json_atomically(path: Path, data: Any) -> None:
    """Write through a temp file in the same directory, then rename."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def ensure_json_file(path: Path, initial: Any) -> None:
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json_atomically(path, initial)
