from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Tuple[int, int]]


def take_snapshot(roots: Sequence[Path]) -> Snapshot:
    """Map every file under `roots` to (mtime_ns, size)."""

    snapshot: Snapshot = {}
    for root in roots:
        if root.is_file():
            stat = root.stat()
            snapshot[str(root)] = (stat.st_mtime_ns, stat.st_size)
            continue
        if not root.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                try:
                    stat = os.stat(path)
                except OSError:
                    # Deleted between listing and stat.
                    continue
                snapshot[path] = (stat.st_mtime_ns, stat.st_size)
    return snapshot


class ContentWatcher:
    """Poll a set of directories and report changed files."""

    def __init__(self, paths: Sequence[Path], *, interval: float = 1.0) -> None:
        if float(interval) <= 0:
            raise ValueError("interval must be > 0")
        self._paths = [Path(p) for p in paths]
        self._interval = float(interval)
        self._snapshot = take_snapshot(self._paths)

    def poll(self) -> List[str]:
        """Return paths added, removed or modified since the previous poll."""

        current = take_snapshot(self._paths)
        changed = sorted(
            path
            for path in set(current) | set(self._snapshot)
            if current.get(path) != self._snapshot.get(path)
        )
        self._snapshot = current
        return changed

    def watch(
        self,
        on_change: Callable[[List[str]], None],
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """Call `on_change(paths)` after each tick with changes, until stopped.

        Exceptions raised by `on_change` are logged and watching continues.
        """

        stop = stop_event or threading.Event()
        logger.info("Watching %s for changes", ", ".join(str(p) for p in self._paths))
        while not stop.wait(self._interval):
            changed = self.poll()
            if not changed:
                continue
            logger.info("Detected %d changed file(s)", len(changed))
            try:
                on_change(changed)
            except Exception:
                logger.exception("Rebuild after change failed")
