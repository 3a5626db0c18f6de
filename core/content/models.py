from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single authoring problem found in a content file."""

    path: str
    line: Optional[int]
    severity: Severity
    code: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def sort_key(self) -> tuple:
        return (self.path, self.line or 0, self.code, self.message)

    def format(self) -> str:
        location = self.path if self.line is None else f"{self.path}:{self.line}"
        return f"{location}: {self.severity.value} [{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class Step:
    """One titled, timed section of a tutorial."""

    label: str
    duration_seconds: int
    body: str
    line: int  # 1-based line of the opening marker in the source file


@dataclass
class FrontMatter:
    """Normalized front-matter fields of a content document."""

    title: str = ""
    date: Optional[date] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    duration_seconds: Optional[int] = None
    authors: str = ""

    # Keys the pipeline does not recognise; kept for templates, never validated.
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Document:
    """A parsed tutorial document.

    Attributes:
        source_path: Path of the Markdown file, relative to the content root.
        slug: URL path segment(s) of the rendered page.
        front_matter: Normalized front matter.
        introduction: Markdown found outside any step marker.
        steps: Steps in the order they appear in the file.
        body_start_line: 1-based line where the body begins (after front matter).
    """

    source_path: str
    slug: str
    front_matter: FrontMatter
    introduction: str = ""
    steps: List[Step] = field(default_factory=list)
    body_start_line: int = 1
    body: str = ""

    @property
    def title(self) -> str:
        return self.front_matter.title

    @property
    def main_category(self) -> Optional[str]:
        cats = self.front_matter.categories
        return cats[0] if cats else None

    @property
    def sub_category(self) -> Optional[str]:
        cats = self.front_matter.categories
        return cats[1] if len(cats) > 1 else None

    @property
    def steps_duration_seconds(self) -> int:
        return sum(s.duration_seconds for s in self.steps)

    @property
    def total_duration_seconds(self) -> int:
        declared = self.front_matter.duration_seconds
        if declared is not None:
            return declared
        return self.steps_duration_seconds

    @property
    def url(self) -> str:
        """Site-relative URL of the rendered page (without base_url)."""
        return f"{self.slug}/"
