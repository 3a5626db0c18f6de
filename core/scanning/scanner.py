from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from core.content.loader import load_document
from core.ports.scan_port import ContentScanner, ScanProgressCallback
from core.scanning.models import ScanResult

logger = logging.getLogger(__name__)

CONTENT_EXTENSIONS = (".md", ".markdown")
DEFAULT_EXCLUDED_DIRS = {".git", ".venv", "venv", "node_modules", "__pycache__"}


class FileSystemContentScanner(ContentScanner):
    """File system implementation of the ContentScanner."""

    def __init__(self, exclude_dirs: Optional[Sequence[str]] = None) -> None:
        self._exclude_dirs = set(DEFAULT_EXCLUDED_DIRS)
        if exclude_dirs:
            self._exclude_dirs.update(exclude_dirs)

    def _should_skip(self, name: str) -> bool:
        if name in self._exclude_dirs:
            return True
        # "_drafts", "_includes", ".cache", ...
        return name.startswith((".", "_"))

    def iter_files(self, root_dir: Path) -> Iterable[Path]:
        """Yield Markdown files under a directory in a stable, sorted order."""
        if not root_dir.exists():
            return []

        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root_dir):
            dirnames[:] = sorted(d for d in dirnames if not self._should_skip(d))

            for filename in sorted(filenames):
                if filename.startswith((".", "_")):
                    continue
                path = Path(dirpath) / filename
                if path.suffix.lower() in CONTENT_EXTENSIONS:
                    found.append(path)

        return sorted(found, key=lambda p: p.relative_to(root_dir).as_posix())

    def scan(
        self,
        root_dir: Path,
        progress_callback: Optional[ScanProgressCallback] = None,
    ) -> ScanResult:
        """Load every Markdown document under a content directory."""

        result = ScanResult()

        files = list(self.iter_files(root_dir))
        total_files = len(files)
        logger.info("Scanning %d content files under %s", total_files, root_dir)

        if progress_callback is not None:
            progress_callback(0, total_files, None)

        processed_files = 0

        for path in files:
            document, diagnostics = load_document(path, root_dir)
            result.diagnostics.extend(diagnostics)
            if document is not None:
                result.documents.append(document)

            processed_files += 1
            if progress_callback is not None:
                progress_callback(processed_files, total_files, str(path))

        if progress_callback is not None:
            progress_callback(processed_files, total_files, "")

        result.files_scanned = processed_files
        return result


def scan_content(
    content_dir: str,
    *,
    exclude_dirs: Optional[Sequence[str]] = None,
    progress_callback: Optional[Callable[[int, int, Optional[str]], None]] = None,
) -> ScanResult:
    scanner = FileSystemContentScanner(exclude_dirs)
    return scanner.scan(Path(content_dir), progress_callback=progress_callback)
