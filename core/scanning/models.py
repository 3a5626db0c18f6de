from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from core.content.models import Diagnostic, Document


@dataclass
class ScanResult:
    """Documents loaded from a content tree plus the problems found while loading."""

    documents: List[Document] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    files_scanned: int = 0
