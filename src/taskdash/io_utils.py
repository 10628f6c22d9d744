"""UTF-8 text file helpers used by the file storage backend."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

PathLike = Path | str


def _as_path(path: PathLike) -> Path:
    return path if isinstance(path, Path) else Path(path)


def read_text(path: PathLike, errors: str = "strict") -> str:
    """Read *path* as UTF-8 text."""
    return _as_path(path).read_text(encoding="utf-8", errors=errors)


def write_text(path: PathLike, text: str) -> None:
    """Write *text* to *path* as UTF-8, creating parent directories."""
    p = _as_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def atomic_write_text(path: PathLike, text: str) -> None:
    """Write *text* to a sibling temp file, then move it over *path*.

    Readers see either the old content or the new one, never a partial file.
    """
    p = _as_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_name, p)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
