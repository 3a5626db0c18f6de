from __future__ import annotations

import pytest

from core.content.steps import find_fenced_lines, mask_code_spans, parse_marker_attributes, split_steps
from core.errors import StepMarkerError


BODY = """Intro text.

{% step label="Setup" duration="05:00" %}
Do things.
{% endstep %}

{% step label="Run" duration="10:00" %}
Run it.
{% endstep %}
"""


def _codes(diagnostics):  # type: ignore[no-untyped-def]
    return [d.code for d in diagnostics]


def test_split_steps_preserves_order_and_bodies() -> None:
    intro, steps, diagnostics = split_steps(BODY, path="x.md", line_offset=5)

    assert diagnostics == []
    assert intro == "Intro text."
    assert [s.label for s in steps] == ["Setup", "Run"]
    assert [s.duration_seconds for s in steps] == [300, 600]
    assert [s.body for s in steps] == ["Do things.", "Run it."]
    # Line numbers are absolute source lines.
    assert [s.line for s in steps] == [7, 11]


def test_split_steps_keeps_duplicate_labels() -> None:
    body = (
        '{% step label="Same" duration="01:00" %}\none\n{% endstep %}\n'
        '{% step label="Same" duration="01:00" %}\ntwo\n{% endstep %}\n'
    )
    _, steps, diagnostics = split_steps(body, path="x.md")
    assert diagnostics == []
    assert [(s.label, s.body) for s in steps] == [("Same", "one"), ("Same", "two")]


def test_split_steps_accepts_markers_on_one_line() -> None:
    _, steps, diagnostics = split_steps('{% step label="A" duration="01:00" %}Hello{% endstep %}', path="x.md")
    assert diagnostics == []
    assert steps[0].body == "Hello"


def test_split_steps_rejects_nested_markers() -> None:
    body = (
        '{% step label="A" duration="01:00" %}\n'
        '{% step label="B" duration="01:00" %}\n'
        "{% endstep %}\n"
    )
    _, steps, diagnostics = split_steps(body, path="x.md")

    assert _codes(diagnostics) == ["nested-step"]
    assert diagnostics[0].line == 2
    assert [s.label for s in steps] == ["A"]


def test_split_steps_reports_unmatched_close() -> None:
    _, steps, diagnostics = split_steps("text\n{% endstep %}\n", path="x.md")
    assert steps == []
    assert _codes(diagnostics) == ["unmatched-endstep"]
    assert diagnostics[0].line == 2


def test_split_steps_reports_unclosed_step() -> None:
    _, steps, diagnostics = split_steps('{% step label="A" duration="01:00" %}\nbody\n', path="x.md", line_offset=10)
    assert _codes(diagnostics) == ["unclosed-step"]
    assert diagnostics[0].line == 10
    assert len(steps) == 1


def test_split_steps_reports_bad_attributes() -> None:
    body = (
        '{% step duration="01:00" %}\n{% endstep %}\n'
        '{% step label="B" %}\n{% endstep %}\n'
        '{% step label="C" duration="soon" %}\n{% endstep %}\n'
        '{% step label="D" duration="01:00" extra %}\n{% endstep %}\n'
    )
    _, steps, diagnostics = split_steps(body, path="x.md")

    assert _codes(diagnostics) == [
        "missing-step-label",
        "missing-step-duration",
        "invalid-step-duration",
        "malformed-step",
    ]
    assert len(steps) == 4


def test_split_steps_ignores_markers_in_fenced_code() -> None:
    body = (
        "Example:\n"
        "```liquid\n"
        '{% step label="X" duration="01:00" %}\n'
        "```\n"
    )
    intro, steps, diagnostics = split_steps(body, path="x.md")

    assert steps == []
    assert diagnostics == []
    assert '{% step label="X"' in intro


def test_find_fenced_lines_includes_fences() -> None:
    lines = ["a", "~~~", "b", "~~~", "c", "````", "```", "````"]
    assert find_fenced_lines(lines) == {1, 2, 3, 5, 6, 7}


def test_parse_marker_attributes_accepts_both_quote_styles() -> None:
    assert parse_marker_attributes(""" label='One' duration="02:00" """) == {"label": "One", "duration": "02:00"}


def test_parse_marker_attributes_rejects_stray_text() -> None:
    with pytest.raises(StepMarkerError):
        parse_marker_attributes('label="A" oops', path="x.md", line=3)


def test_split_steps_ignores_markers_in_inline_code() -> None:
    body = (
        'Open a step with `{% step label="..." duration="05:00" %}`.\n'
        '{% step label="Syntax" duration="01:00" %}\n'
        "Close it with `{% endstep %}` or ``{% endstep %}``.\n"
        "{% endstep %}\n"
    )
    intro, steps, diagnostics = split_steps(body, path="x.md")

    assert diagnostics == []
    assert intro.startswith("Open a step with `{% step")
    assert [s.label for s in steps] == ["Syntax"]
    assert steps[0].body == "Close it with `{% endstep %}` or ``{% endstep %}``."


def test_mask_code_spans_keeps_offsets() -> None:
    line = "a `code` b ``x`y`` c"
    masked = mask_code_spans(line)

    assert len(masked) == len(line)
    assert masked == "a" + " " * 8 + "b" + " " * 9 + "c"
    assert mask_code_spans("a single ` backtick") == "a single ` backtick"
