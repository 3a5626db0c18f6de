from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, Tuple

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def iter_asset_files(root: Path) -> Iterable[Tuple[Path, str]]:
    """Yield (absolute path, POSIX path relative to root) for every file, sorted.

    Hidden files and directories are skipped.
    """

    if not root.is_dir():
        return []

    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            path = Path(dirpath) / filename
            found.append((path, path.relative_to(root).as_posix()))
    return sorted(found, key=lambda item: item[1])


def files_identical(a: Path, b: Path) -> bool:
    """Byte-for-byte comparison (size first)."""

    if not b.is_file() or a.stat().st_size != b.stat().st_size:
        return False
    with a.open("rb") as fa, b.open("rb") as fb:
        while True:
            chunk_a = fa.read(_CHUNK_SIZE)
            chunk_b = fb.read(_CHUNK_SIZE)
            if chunk_a != chunk_b:
                return False
            if not chunk_a:
                return True


def copy_if_changed(source: Path, target: Path) -> bool:
    """Copy `source` over `target` unless the bytes already match.

    Returns:
        True if the file was written.
    """

    if files_identical(source, target):
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    logger.debug("Copied %s -> %s", source, target)
    return True
