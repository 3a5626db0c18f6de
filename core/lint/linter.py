from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote

from config import AppConfig
from core.content.categories import CategoryRegistry
from core.content.durations import format_duration
from core.content.models import Diagnostic, Document, Severity
from core.content.steps import find_fenced_lines, mask_code_spans
from core.scanning.models import ScanResult
from core.scanning.scanner import scan_content

logger = logging.getLogger(__name__)

ASSET_URL_PREFIX = "/assets/"

# First slug segments the builder writes generated pages or copied files under.
RESERVED_SLUG_ROOTS = ("assets", "categories", "tags", "theme")
_IMAGE_REF_RE = re.compile(r"(?<![\w/.])/assets/images/[^\s)\"'<>\]]+")


def iter_image_references(document: Document) -> Iterable[Tuple[int, str]]:
    """Yield (source line, url path) for each `/assets/images/...` reference.

    References inside fenced code blocks and inline code spans are skipped.
    """

    lines = document.body.split("\n")
    fenced = find_fenced_lines(lines)
    for idx, line in enumerate(lines):
        if idx in fenced:
            continue
        for match in _IMAGE_REF_RE.finditer(mask_code_spans(line)):
            ref = match.group(0).split("#", 1)[0].split("?", 1)[0]
            yield document.body_start_line + idx, ref


def resolve_asset_path(url_path: str, assets_root: Path) -> Optional[Path]:
    """Map an `/assets/...` URL path onto the assets directory.

    Returns:
        The file path, or None when the URL escapes the assets directory.
    """

    rel = unquote(url_path[len(ASSET_URL_PREFIX) :])
    parts = PurePosixPath(rel).parts
    if not parts or any(p in ("..", "") for p in parts):
        return None
    return assets_root.joinpath(*parts)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.is_error for d in diagnostics)


class ContentLinter:
    """Check content documents for authoring problems.

    Parsing already reports missing front-matter fields and malformed step
    markers; the linter adds the checks that need the whole corpus or the
    site configuration (assets, categories, duplicate slugs, ...).
    """

    def __init__(self, config: AppConfig, *, registry: Optional[CategoryRegistry] = None) -> None:
        self._config = config
        self._registry = registry or CategoryRegistry.from_config(config)
        self._assets_root = Path(config.assets_dir)

    def lint(self, scan: ScanResult) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = list(scan.diagnostics)

        slugs: Dict[str, str] = {}
        for document in scan.documents:
            diagnostics.extend(self.lint_document(document))

            root = document.slug.split("/", 1)[0]
            if root in RESERVED_SLUG_ROOTS:
                diagnostics.append(
                    Diagnostic(
                        document.source_path,
                        1,
                        Severity.ERROR,
                        "reserved-slug",
                        f"page slug '{document.slug}' is inside the generated '{root}/' tree; rename the folder",
                    )
                )

            other = slugs.get(document.slug)
            if other is not None:
                diagnostics.append(
                    Diagnostic(
                        document.source_path,
                        1,
                        Severity.ERROR,
                        "duplicate-slug",
                        f"page slug '{document.slug}' is already used by {other}",
                    )
                )
            else:
                slugs[document.slug] = document.source_path

        return sorted(diagnostics, key=Diagnostic.sort_key)

    def lint_document(self, document: Document) -> List[Diagnostic]:
        path = document.source_path
        fm = document.front_matter
        out: List[Diagnostic] = []

        def _warn(code: str, message: str, line: Optional[int] = 1) -> None:
            out.append(Diagnostic(path, line, Severity.WARNING, code, message))

        max_len = int(self._config.title_max_length)
        if max_len > 0 and len(fm.title) > max_len:
            _warn("title-too-long", f"title is {len(fm.title)} characters (recommended <= {max_len})")

        main = document.main_category
        fallback = self._registry.fallback.name
        if main is None:
            _warn("missing-category", f"no categories set; rendered as '{fallback}'")
        elif not self._registry.is_recognized(main):
            known = ", ".join(self._registry.names())
            _warn(
                "unknown-category",
                f"main category '{main}' is not recognised (known: {known}); rendered as '{fallback}'",
            )

        if len(fm.categories) > 2:
            extra = ", ".join(fm.categories[2:])
            _warn("too-many-categories", f"only main and sub category are used; ignoring: {extra}")

        if not document.steps:
            _warn("no-steps", "document has no {% step %} sections")
        elif fm.duration_seconds is not None and document.steps_duration_seconds != fm.duration_seconds:
            _warn(
                "duration-mismatch",
                f"front matter duration {format_duration(fm.duration_seconds)} differs from "
                f"the sum of step durations {format_duration(document.steps_duration_seconds)}",
            )

        for line, ref in iter_image_references(document):
            target = resolve_asset_path(ref, self._assets_root)
            if target is None:
                out.append(
                    Diagnostic(path, line, Severity.ERROR, "invalid-asset-path", f"image path escapes the asset tree: {ref}")
                )
            elif not target.is_file():
                out.append(
                    Diagnostic(path, line, Severity.ERROR, "missing-image", f"referenced image does not exist: {ref}")
                )

        return out


def lint_content(config: AppConfig, *, content_dir: Optional[str] = None) -> List[Diagnostic]:
    """Scan the content tree and return every diagnostic, sorted by location."""

    scan = scan_content(content_dir or config.content_dir, exclude_dirs=config.exclude_dirs)
    diagnostics = ContentLinter(config).lint(scan)
    logger.info(
        "Linted %d documents: %d errors, %d warnings",
        len(scan.documents),
        sum(1 for d in diagnostics if d.is_error),
        sum(1 for d in diagnostics if not d.is_error),
    )
    return diagnostics
