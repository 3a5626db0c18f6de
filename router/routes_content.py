from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Query, Request

from core.content.categories import CategoryRegistry
from core.content.loader import slugify
from router.common import document_detail, document_summary, require_build
from router.schemas import CategoryInfo, DocumentDetail, DocumentSummary, TagInfo

router = APIRouter()


def _registry(request: Request) -> CategoryRegistry:
    return CategoryRegistry.from_config(request.app.state.config)


@router.get("/documents", response_model=List[DocumentSummary])
def list_documents(
    request: Request,
    category: str = Query(default="", description="Filter by main category name"),
    tag: str = Query(default="", description="Filter by tag (label or slug)"),
) -> List[DocumentSummary]:
    """List rendered documents, newest first."""

    result = require_build(request)
    registry = _registry(request)
    wanted_category = category.strip().lower()
    wanted_tag = slugify(tag) if tag.strip() else ""

    out: List[DocumentSummary] = []
    for document in result.documents:
        style = registry.resolve(document.main_category)
        if wanted_category and style.name != wanted_category:
            continue
        if wanted_tag and wanted_tag not in {slugify(t) for t in document.front_matter.tags}:
            continue
        out.append(document_summary(document, style.name))
    return out


@router.get("/documents/{slug:path}", response_model=DocumentDetail)
def get_document(slug: str, request: Request) -> DocumentDetail:
    """Return one document with its steps."""

    result = require_build(request)
    document = result.index.get(slug.strip("/"))
    if document is None:
        raise HTTPException(status_code=404, detail=f"Unknown document: {slug}")
    style = _registry(request).resolve(document.main_category)
    return document_detail(document, style.name)


@router.get("/categories", response_model=List[CategoryInfo])
def list_categories(request: Request) -> List[CategoryInfo]:
    """List every category style with the number of documents using it."""

    result = require_build(request)
    registry = _registry(request)

    out: List[CategoryInfo] = []
    for style in registry.all_styles():
        entry = result.index.categories.get(style.name)
        out.append(
            CategoryInfo(
                name=style.name,
                label=style.label,
                color=style.color,
                css_class=style.css_class,
                recognized=style.recognized,
                document_count=len(entry[1]) if entry else 0,
            )
        )
    return out


@router.get("/tags", response_model=List[TagInfo])
def list_tags(request: Request) -> List[TagInfo]:
    result = require_build(request)
    return [
        TagInfo(label=entry.label, slug=slug, document_count=len(entry.documents))
        for slug, entry in result.index.tags.items()
    ]
