from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from core.content.categories import CategoryRegistry, CategoryStyle
from core.content.durations import format_duration
from core.content.loader import slugify
from core.content.models import Document
from core.rendering.markdown_renderer import MarkdownRenderer

THEME_DIR = Path(__file__).parent / "theme"
BUNDLED_TEMPLATES_DIR = THEME_DIR / "templates"
BUNDLED_STATIC_DIR = THEME_DIR / "static"


def join_url(base_url: str, path: str) -> str:
    """Join a site base URL ("/" or "/prefix/") with a site-relative path."""

    base = "/" + (base_url or "/").strip("/")
    base = base.rstrip("/") + "/"
    return base + (path or "").lstrip("/")


def _category_context(style: CategoryStyle) -> Dict[str, Any]:
    return {
        "name": style.name,
        "label": style.label,
        "color": style.color,
        "css_class": style.css_class,
        "recognized": style.recognized,
    }


class PageRenderer:
    """Render documents and index pages with Jinja2 templates.

    Templates are looked up in `<theme_dir>/templates` first (when configured)
    and then in the bundled theme, so a site can override a single template.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        *,
        site_title: str = "Codelabs",
        base_url: str = "/",
        theme_dir: Optional[str] = None,
        markdown_renderer: Optional[MarkdownRenderer] = None,
    ) -> None:
        loaders = []
        if theme_dir:
            loaders.append(FileSystemLoader(str(Path(theme_dir) / "templates")))
        loaders.append(FileSystemLoader(str(BUNDLED_TEMPLATES_DIR)))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["duration"] = format_duration
        self._env.globals["url_for"] = lambda path="": join_url(base_url, path)

        self._registry = registry
        self._markdown = markdown_renderer or MarkdownRenderer()
        self._site = {"title": site_title, "base_url": join_url(base_url, "")}

    def document_summary(self, document: Document) -> Dict[str, Any]:
        """Template/JSON-friendly summary of a document (no rendered body)."""

        fm = document.front_matter
        style = self._registry.resolve(document.main_category)
        return {
            "title": fm.title,
            "slug": document.slug,
            "url": document.url,
            "date": fm.date.isoformat() if fm.date else "",
            "authors": fm.authors,
            "duration": format_duration(document.total_duration_seconds),
            "category": _category_context(style),
            "sub_category": document.sub_category or "",
            "tags": [{"label": t, "slug": slugify(t)} for t in fm.tags],
            "step_count": len(document.steps),
        }

    def render_document(self, document: Document) -> str:
        context = self.document_summary(document)
        context["introduction_html"] = self._markdown.render(document.introduction)
        context["steps"] = [
            {
                "index": idx,
                "anchor": f"step-{idx}",
                "label": step.label,
                "duration": format_duration(step.duration_seconds),
                "html": self._markdown.render(step.body, id_prefix=f"step-{idx}-"),
            }
            for idx, step in enumerate(document.steps, start=1)
        ]
        return self._render("page.html", page=context)

    def render_index(self, documents: List[Document]) -> str:
        cards = [self.document_summary(d) for d in documents]
        categories = [_category_context(s) for s in self._registry.all_styles()]
        tags = sorted({(t["slug"], t["label"]) for c in cards for t in c["tags"]})
        return self._render(
            "index.html",
            cards=cards,
            categories=categories,
            tags=[{"slug": slug, "label": label} for slug, label in tags],
        )

    def render_category(self, style: CategoryStyle, documents: List[Document]) -> str:
        return self._render(
            "category.html",
            category=_category_context(style),
            cards=[self.document_summary(d) for d in documents],
        )

    def render_tag(self, label: str, slug: str, documents: List[Document]) -> str:
        return self._render(
            "tag.html",
            tag={"label": label, "slug": slug},
            cards=[self.document_summary(d) for d in documents],
        )

    def _render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(site=self._site, **context)
