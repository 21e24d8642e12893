"""Path helpers for scratch and output files.

Keep this module free of Qt dependencies.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from asset_crop.logger import get_logger

_logger = get_logger("path_utils")


def abs_path(path: str | Path) -> Path:
    """Return an absolute path without requiring that it exists."""
    p = Path(path).expanduser()
    try:
        # strict=False avoids exceptions for non-existent paths.
        return p.resolve(strict=False)
    except OSError:
        return p.absolute()


def scratch_dir(path: str | Path | None) -> Path:
    """Directory where intermediate and output files are written.

    Falls back to the system temp directory and creates the folder if needed.
    """
    d = abs_path(path) if path else Path(tempfile.gettempdir())
    d.mkdir(parents=True, exist_ok=True)
    return d


def new_scratch_file(directory: Path, prefix: str, suffix: str = ".jpg") -> Path:
    """Reserve a unique, empty file in `directory` and return its path."""
    fd, name = tempfile.mkstemp(prefix=f"{prefix}_", suffix=suffix, dir=str(directory))
    os.close(fd)
    return Path(name)


def discard(path: Path | None) -> None:
    """Delete a superseded scratch file; a missing file is not an error."""
    if path is None:
        return
    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)
        _logger.debug("deleted scratch file: %s", path)
