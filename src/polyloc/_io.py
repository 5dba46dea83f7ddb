"""File plumbing for the registry: atomic writes and directory scans."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterator

from polyloc.types import EXTENSION_PREFIX


def atomic_write_text(
    path: str | Path,
    content: str,
    encoding: str = "utf-8",
    sync: bool = False,
) -> Path:
    """Write a text file through a temporary sibling and an atomic rename.

    Readers see either the previous content or the new content, never a
    partially written file. Parent directories are created as needed.

    Args:
        path: Target file
        content: Text to write
        encoding: Text encoding
        sync: fsync the temporary file before the rename

    Returns:
        The target path
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            if sync:
                handle.flush()
                os.fsync(handle.fileno())
        os.replace(temp_path, target)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    return target


def iter_translation_files(directory: str | Path, recurse: bool = False) -> Iterator[Path]:
    """Yield files whose name contains the ``.loc`` marker, in sorted order."""
    root = Path(directory)
    candidates = root.rglob("*") if recurse else root.iterdir()
    for path in sorted(candidates):
        if path.is_file() and EXTENSION_PREFIX in path.name.lower():
            yield path
