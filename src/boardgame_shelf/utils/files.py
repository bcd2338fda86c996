"""
File helpers.
"""

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> Path:
    """
    Write text so readers never observe a partial file.

    The content goes to a temporary file in the target directory,
    which is then renamed over the destination.

    Args:
        path: Destination file
        text: Full file contents
        encoding: Text encoding

    Returns:
        Path: The destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
