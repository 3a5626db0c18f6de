from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Protocol

from core.scanning.models import ScanResult


class ScanProgressCallback(Protocol):
    def __call__(self, current: int, total: int, message: Optional[str]) -> None: ...

class ContentScanner(ABC):
    """Interface for scanning a content tree for tutorial documents."""

    @abstractmethod
    def scan(
        self,
        root_dir: Path,
        progress_callback: Optional[ScanProgressCallback] = None
    ) -> ScanResult:
        """Load every document found under the content tree."""
        pass

    @abstractmethod
    def iter_files(self, root_dir: Path) -> Iterable[Path]:
        """Yield content files found under the content tree."""
        pass
