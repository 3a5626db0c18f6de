from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from core.content.durations import parse_duration
from core.content.models import Diagnostic, Severity, Step
from core.errors import StepMarkerError

# {% step label="Intro" duration="05:00" %} ... {% endstep %}
_MARKER_RE = re.compile(r"\{%-?\s*(endstep|step)\b(.*?)-?%\}")
_ATTR_RE = re.compile(r"""([A-Za-z_][\w-]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_CODE_SPAN_RE = re.compile(r"(?<!`)(`+)(?!`).+?(?<!`)\1(?!`)")


def find_fenced_lines(lines: List[str]) -> Set[int]:
    """Return 0-based indices of lines inside fenced code blocks.

    Fence lines themselves are included. An unterminated fence extends to the
    end of the document, as in CommonMark.
    """

    fenced: Set[int] = set()
    open_fence: Optional[str] = None

    for idx, line in enumerate(lines):
        match = _FENCE_RE.match(line)
        if open_fence is None:
            if match:
                open_fence = match.group(1)
                fenced.add(idx)
            continue

        fenced.add(idx)
        if match:
            fence = match.group(1)
            if fence[0] == open_fence[0] and len(fence) >= len(open_fence) and not line.strip()[len(fence):].strip():
                open_fence = None

    return fenced


def mask_code_spans(line: str) -> str:
    """Blank out inline code spans, keeping every other character at its offset."""

    return _CODE_SPAN_RE.sub(lambda m: " " * len(m.group(0)), line)

def parse_marker_attributes(raw: str, *, path: Optional[str] = None, line: Optional[int] = None) -> Dict[str, str]:
    """Parse `key="value"` pairs from the inside of an opening step marker.

    Raises:
        StepMarkerError: If text other than attributes is present.
    """

    leftover = _ATTR_RE.sub("", raw).strip()
    if leftover:
        raise StepMarkerError(f"unexpected text in step marker: {leftover!r}", path=path, line=line)
    return _attributes(raw)


def _attributes(raw: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for match in _ATTR_RE.finditer(raw):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs[match.group(1)] = value
    return attrs


@dataclass
class _OpenStep:
    label: str
    duration_seconds: int
    line: int
    lines: List[str] = field(default_factory=list)


def _strip_blank_edges(lines: List[str]) -> str:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[start:end])


def split_steps(
    body: str,
    *,
    path: str,
    line_offset: int = 1,
) -> Tuple[str, List[Step], List[Diagnostic]]:
    """Split a document body into an introduction and ordered steps.

    Markers inside fenced code blocks or inline code spans are literal text.
    Malformed markers are reported as error diagnostics; parsing continues so
    every problem in a file is reported in one pass.

    Args:
        body: Document body (front matter already removed).
        path: Document path used in diagnostics.
        line_offset: 1-based source line of the first body line.

    Returns:
        Tuple of (introduction markdown, steps, diagnostics).
    """

    lines = body.split("\n")
    fenced = find_fenced_lines(lines)

    intro_lines: List[str] = []
    steps: List[Step] = []
    diagnostics: List[Diagnostic] = []
    current: Optional[_OpenStep] = None

    def _emit(text: str) -> None:
        if current is not None:
            current.lines.append(text)
        else:
            intro_lines.append(text)

    def _error(line_no: int, code: str, message: str) -> None:
        diagnostics.append(Diagnostic(path, line_no, Severity.ERROR, code, message))

    for idx, line in enumerate(lines):
        line_no = line_offset + idx

        if idx in fenced:
            _emit(line)
            continue

        pos = 0
        pieces: List[str] = []
        for match in _MARKER_RE.finditer(mask_code_spans(line)):
            pieces.append(line[pos : match.start()])
            pos = match.end()
            kind = match.group(1)
            raw_attrs = line[match.start(2) : match.end(2)]

            if kind == "endstep":
                if raw_attrs.strip():
                    _error(line_no, "malformed-step", "closing step marker takes no attributes")
                if current is None:
                    _error(line_no, "unmatched-endstep", "closing step marker without an opening marker")
                    continue
                if any(p.strip() for p in pieces):
                    current.lines.append("".join(pieces))
                pieces = []
                steps.append(
                    Step(
                        label=current.label,
                        duration_seconds=current.duration_seconds,
                        body=_strip_blank_edges(current.lines),
                        line=current.line,
                    )
                )
                current = None
                continue

            # Opening marker.
            if current is not None:
                _error(
                    line_no,
                    "nested-step",
                    f"step markers cannot be nested (step opened on line {current.line} is still open)",
                )
                continue

            if any(p.strip() for p in pieces):
                intro_lines.append("".join(pieces))
            pieces = []

            try:
                attrs = parse_marker_attributes(raw_attrs, path=path, line=line_no)
            except StepMarkerError as e:
                _error(line_no, "malformed-step", e.reason)
                attrs = _attributes(raw_attrs)

            label = (attrs.get("label") or "").strip()
            if not label:
                _error(line_no, "missing-step-label", "step marker must have a non-empty 'label'")

            duration_seconds = 0
            raw_duration = attrs.get("duration")
            if raw_duration is None or not raw_duration.strip():
                _error(line_no, "missing-step-duration", "step marker must have a 'duration'")
            else:
                try:
                    duration_seconds = parse_duration(raw_duration)
                except ValueError as e:
                    _error(line_no, "invalid-step-duration", str(e))

            current = _OpenStep(label=label, duration_seconds=duration_seconds, line=line_no)

        pieces.append(line[pos:])
        rest = "".join(pieces)
        if pos == 0:
            _emit(line)
        elif rest.strip():
            _emit(rest)

    if current is not None:
        _error(current.line, "unclosed-step", f"step '{current.label}' is never closed with {{% endstep %}}")
        steps.append(
            Step(
                label=current.label,
                duration_seconds=current.duration_seconds,
                body=_strip_blank_edges(current.lines),
                line=current.line,
            )
        )

    return _strip_blank_edges(intro_lines), steps, diagnostics
