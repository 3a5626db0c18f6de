from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CategoryInfo(BaseModel):
    """Style of a main category."""

    name: str
    label: str
    color: str
    css_class: str
    recognized: bool
    document_count: int = 0


class TagInfo(BaseModel):
    label: str
    slug: str
    document_count: int = 0


class DocumentSummary(BaseModel):
    """Listing entry for a rendered document."""

    slug: str
    url: str
    title: str
    date: Optional[str] = None
    category: str
    sub_category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    duration: str
    authors: str = ""
    source_path: str


class StepInfo(BaseModel):
    label: str
    duration: str
    line: int


class DocumentDetail(DocumentSummary):
    steps: List[StepInfo] = Field(default_factory=list)


class DiagnosticInfo(BaseModel):
    path: str
    line: Optional[int] = None
    severity: str
    code: str
    message: str


class BuildRequest(BaseModel):
    clean: bool = Field(default=False, description="Remove the output directory before building.")


class BuildResponse(BaseModel):
    output_dir: str
    documents: int
    pages_written: int
    pages_unchanged: int
    assets_copied: int
    warnings: List[DiagnosticInfo] = Field(default_factory=list)


class LintResponse(BaseModel):
    errors: int
    warnings: int
    diagnostics: List[DiagnosticInfo] = Field(default_factory=list)
