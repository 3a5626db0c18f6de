from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

import markdown
from markdown.extensions.toc import TocExtension
from markdown.extensions.toc import slugify as toc_slugify

DEFAULT_EXTENSIONS: List[str] = [
    "fenced_code",
    "tables",
    "sane_lists",
    "attr_list",
    "toc",
]


def _prefixed_slugify(prefix: str) -> Callable[[str, str], str]:
    def _slugify(value: str, separator: str) -> str:
        return prefix + toc_slugify(value, separator)

    return _slugify


class MarkdownRenderer:
    """Render Markdown fragments (introduction, step bodies) to HTML.

    One Python-Markdown instance is kept per heading-id prefix and reset
    between fragments, so output depends only on the input text and prefix.
    Fragments rendered with distinct prefixes never share heading ids, which
    keeps ids unique when several steps of a page use the same heading.
    """

    def __init__(self, extensions: Optional[Sequence[str]] = None) -> None:
        self._extensions = list(extensions or DEFAULT_EXTENSIONS)
        self._converters: Dict[str, markdown.Markdown] = {}

    def _converter(self, id_prefix: str) -> markdown.Markdown:
        md = self._converters.get(id_prefix)
        if md is None:
            extensions: List[object] = list(self._extensions)
            if id_prefix and "toc" in extensions:
                extensions[extensions.index("toc")] = TocExtension(slugify=_prefixed_slugify(id_prefix))
            md = markdown.Markdown(extensions=extensions, output_format="html")
            self._converters[id_prefix] = md
        return md

    def render(self, text: str, *, id_prefix: str = "") -> str:
        if not (text or "").strip():
            return ""
        md = self._converter(id_prefix)
        md.reset()
        return md.convert(text)
