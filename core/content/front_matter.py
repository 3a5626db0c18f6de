from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import yaml

from core.content.durations import parse_duration
from core.content.models import Diagnostic, FrontMatter, Severity
from core.errors import FrontMatterError

_DELIMITER = "---"
_CLOSING_DELIMITERS = {"---", "..."}
_KEY_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*:")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

KNOWN_KEYS = ("title", "date", "categories", "tags", "duration", "authors")


@dataclass
class FrontMatterBlock:
    """Raw front matter split off a document.

    Attributes:
        data: Parsed YAML mapping.
        body: Text following the closing delimiter.
        body_start_line: 1-based source line of the first body line.
        key_lines: Top-level key -> 1-based source line, for diagnostics.
    """

    data: Dict[str, Any]
    body: str
    body_start_line: int
    key_lines: Dict[str, int] = field(default_factory=dict)


def split_front_matter(text: str, *, path: Optional[str] = None) -> FrontMatterBlock:
    """Split a document into its YAML front matter and body.

    The block must start on the first line with `---` and end with a line
    holding `---` (or `...`).

    Raises:
        FrontMatterError: If the block is missing, unterminated, not valid
            YAML, or not a mapping.
    """

    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    lines = text.split("\n")

    if not lines or lines[0].strip() != _DELIMITER:
        raise FrontMatterError("document does not start with a '---' front-matter block", path=path, line=1)

    end: Optional[int] = None
    for idx in range(1, len(lines)):
        if lines[idx].strip() in _CLOSING_DELIMITERS:
            end = idx
            break

    if end is None:
        raise FrontMatterError("front-matter block is not closed with '---'", path=path, line=1)

    raw = "\n".join(lines[1:end])
    try:
        data = yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises ValueError for impossible timestamps such as 2026-13-01.
        mark = getattr(e, "problem_mark", None)
        line = (mark.line + 2) if mark is not None else 1
        raise FrontMatterError(f"front matter is not valid YAML: {e}", path=path, line=line) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"front matter must be a mapping, got {type(data).__name__}", path=path, line=2
        )

    key_lines: Dict[str, int] = {}
    for offset, line in enumerate(lines[1:end], start=2):
        match = _KEY_RE.match(line)
        if match and match.group(1) not in key_lines:
            key_lines[match.group(1)] = offset

    body = "\n".join(lines[end + 1 :])
    return FrontMatterBlock(
        data={str(k): v for k, v in data.items()},
        body=body,
        body_start_line=end + 2,
        key_lines=key_lines,
    )


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if _DATE_RE.match(text):
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise ValueError(f"invalid date {text!r} (expected YYYY-MM-DD)") from e


def _coerce_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value if v is not None]
    else:
        items = [str(value)]
    return [i.strip() for i in items if i.strip()]


def _dedupe(items: List[str]) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for item in items:
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def parse_front_matter(
    data: Mapping[str, Any],
    *,
    path: str,
    key_lines: Optional[Mapping[str, int]] = None,
) -> Tuple[FrontMatter, List[Diagnostic]]:
    """Normalize a raw front-matter mapping.

    Problems with individual fields are reported as diagnostics instead of
    exceptions so that a single lint run surfaces all of them.

    Args:
        data: Mapping produced by `split_front_matter`.
        path: Document path used in diagnostics.
        key_lines: Optional key -> line mapping for diagnostics.

    Returns:
        Tuple of (front matter, diagnostics).
    """

    lines = key_lines or {}
    diagnostics: List[Diagnostic] = []

    def _error(key: str, code: str, message: str) -> None:
        diagnostics.append(Diagnostic(path, lines.get(key, 1), Severity.ERROR, code, message))

    fm = FrontMatter()

    title = data.get("title")
    fm.title = str(title).strip() if title is not None else ""
    if not fm.title:
        _error("title", "missing-title", "front matter must define a non-empty 'title'")

    raw_date = data.get("date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        _error("date", "missing-date", "front matter must define a 'date'")
    else:
        try:
            fm.date = _coerce_date(raw_date)
        except ValueError as e:
            _error("date", "invalid-date", str(e))

    fm.categories = _coerce_str_list(data.get("categories"))
    fm.tags = _dedupe(_coerce_str_list(data.get("tags")))

    raw_duration = data.get("duration")
    if raw_duration is not None:
        try:
            fm.duration_seconds = parse_duration(raw_duration)
        except ValueError as e:
            _error("duration", "invalid-duration", str(e))

    authors = data.get("authors")
    if isinstance(authors, (list, tuple)):
        fm.authors = ", ".join(str(a).strip() for a in authors if str(a).strip())
    elif authors is not None:
        fm.authors = str(authors).strip()

    fm.extra = {k: v for k, v in data.items() if k not in KNOWN_KEYS}

    return fm, diagnostics
