from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from core.content.models import Diagnostic


class ContentError(ValueError):
    """Base class for authoring errors found in the content tree."""

    def __init__(self, message: str, *, path: Optional[str] = None, line: Optional[int] = None) -> None:
        self.reason = message
        self.path = path
        self.line = line
        location = path or "<unknown>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class FrontMatterError(ContentError):
    """The front-matter block is missing or is not a YAML mapping."""


class StepMarkerError(ContentError):
    """A step marker could not be parsed."""


class ContentBuildError(RuntimeError):
    """Raised when a build is aborted by content diagnostics.

    Attributes:
        diagnostics: The diagnostics that caused the abort.
    """

    def __init__(self, diagnostics: List["Diagnostic"]) -> None:
        self.diagnostics = list(diagnostics)
        count = len(self.diagnostics)
        noun = "problem" if count == 1 else "problems"
        super().__init__(f"Build aborted: {count} content {noun}")
