from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple

from core.content.front_matter import parse_front_matter, split_front_matter
from core.content.models import Diagnostic, Document, Severity
from core.content.steps import split_steps
from core.errors import FrontMatterError

logger = logging.getLogger(__name__)

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")


def slugify(text: str) -> str:
    """Convert a title or file stem into a URL-safe slug.

    Args:
        text: Input text.

    Returns:
        Lowercase slug made of [a-z0-9-].
    """

    s = (text or "").strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    s = re.sub(r"-+", "-", s).strip("-")
    return s or "untitled"


def slug_for_path(rel_path: str) -> str:
    """Derive the page slug from a content path relative to the content root.

    `2026-01-01-hello-world.md` becomes `hello-world`; nested folders are kept
    as path segments (`gcp/2026-01-01-run.md` -> `gcp/run`).
    """

    posix = PurePosixPath(rel_path.replace("\\", "/"))
    stem = _DATE_PREFIX_RE.sub("", posix.stem)
    parts = [slugify(p) for p in posix.parent.parts if p not in ("", ".")]
    parts.append(slugify(stem))
    return "/".join(parts)


def parse_document(text: str, *, rel_path: str) -> Tuple[Optional[Document], List[Diagnostic]]:
    """Parse the text of one content file.

    Args:
        text: File contents.
        rel_path: Path relative to the content root (used for slug + diagnostics).

    Returns:
        Tuple of (document, diagnostics). The document is None only when the
        front matter could not be read at all.
    """

    try:
        block = split_front_matter(text, path=rel_path)
    except FrontMatterError as e:
        return None, [Diagnostic(rel_path, e.line, Severity.ERROR, "invalid-front-matter", e.reason)]

    front_matter, diagnostics = parse_front_matter(block.data, path=rel_path, key_lines=block.key_lines)
    introduction, steps, step_diagnostics = split_steps(
        block.body,
        path=rel_path,
        line_offset=block.body_start_line,
    )
    diagnostics.extend(step_diagnostics)

    document = Document(
        source_path=rel_path,
        slug=slug_for_path(rel_path),
        front_matter=front_matter,
        introduction=introduction,
        steps=steps,
        body_start_line=block.body_start_line,
        body=block.body,
    )
    return document, diagnostics


def load_document(path: Path, content_root: Path) -> Tuple[Optional[Document], List[Diagnostic]]:
    """Read and parse a content file from disk."""

    try:
        rel_path = path.resolve().relative_to(content_root.resolve()).as_posix()
    except ValueError:
        rel_path = path.as_posix()

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable file %s: %s", path, e)
        return None, [Diagnostic(rel_path, None, Severity.ERROR, "unreadable-file", f"cannot read file: {e}")]

    return parse_document(text, rel_path=rel_path)
