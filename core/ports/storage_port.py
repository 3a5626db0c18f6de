from abc import ABC, abstractmethod
from pathlib import Path


class SiteRepository(ABC):
    """Abstract interface for writing generated site artifacts."""

    @abstractmethod
    def write_text(self, rel_path: str, content: str) -> bool:
        """Write a text artifact; return True if the stored bytes changed."""
        pass

    @abstractmethod
    def copy_file(self, source: Path, rel_path: str) -> bool:
        """Copy a static file unchanged; return True if the stored bytes changed."""
        pass

    @abstractmethod
    def clean(self) -> None:
        """Remove every previously generated artifact."""
        pass
