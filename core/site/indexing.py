from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.content.categories import CategoryRegistry, CategoryStyle
from core.content.durations import format_duration
from core.content.loader import slugify
from core.content.models import Document


def _order_key(document: Document) -> Tuple[int, str, str]:
    d = document.front_matter.date or date.min
    # Newest first, then alphabetical for a stable order.
    return (-d.toordinal(), document.title.lower(), document.slug)


@dataclass
class TagEntry:
    label: str
    slug: str
    documents: List[Document] = field(default_factory=list)


@dataclass
class SiteIndex:
    """Category and tag listings over every document of the site.

    Attributes:
        documents: All documents, newest first.
        categories: Main category name -> (style, documents), sorted by name.
        tags: Tag slug -> TagEntry, sorted by slug.
    """

    documents: List[Document] = field(default_factory=list)
    categories: Dict[str, Tuple[CategoryStyle, List[Document]]] = field(default_factory=dict)
    tags: Dict[str, TagEntry] = field(default_factory=dict)

    def get(self, slug: str) -> Optional[Document]:
        for document in self.documents:
            if document.slug == slug:
                return document
        return None


def build_site_index(documents: Sequence[Document], registry: CategoryRegistry) -> SiteIndex:
    """Group documents by main category and by tag.

    Documents whose main category is unknown are listed under the
    `uncategorized` fallback, never under a recognised category.
    """

    ordered = sorted(documents, key=_order_key)

    by_category: Dict[str, Tuple[CategoryStyle, List[Document]]] = {}
    by_tag: Dict[str, TagEntry] = {}

    for document in ordered:
        style = registry.resolve(document.main_category)
        by_category.setdefault(style.name, (style, []))[1].append(document)

        for tag in document.front_matter.tags:
            slug = slugify(tag)
            entry = by_tag.get(slug)
            if entry is None:
                entry = TagEntry(label=tag, slug=slug)
                by_tag[slug] = entry
            entry.documents.append(document)

    return SiteIndex(
        documents=ordered,
        categories=dict(sorted(by_category.items())),
        tags=dict(sorted(by_tag.items())),
    )


def search_entries(index: SiteIndex, registry: CategoryRegistry) -> List[Dict[str, Any]]:
    """Rows written to `search.json` for client-side search and tag filtering."""

    rows: List[Dict[str, Any]] = []
    for document in index.documents:
        fm = document.front_matter
        style = registry.resolve(document.main_category)
        rows.append(
            {
                "slug": document.slug,
                "url": document.url,
                "title": fm.title,
                "date": fm.date.isoformat() if fm.date else None,
                "category": style.name,
                "category_color": style.color,
                "sub_category": document.sub_category,
                "tags": [slugify(t) for t in fm.tags],
                "duration": format_duration(document.total_duration_seconds),
                "authors": fm.authors,
                "steps": [s.label for s in document.steps],
            }
        )
    return rows
