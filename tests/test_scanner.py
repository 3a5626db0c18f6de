from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

from core.scanning.scanner import FileSystemContentScanner, scan_content


VALID = "---\ntitle: {title}\ndate: 2026-01-01\n---\nBody\n"


def _make_tree(root: Path) -> None:
    (root / "sub").mkdir()
    (root / "_drafts").mkdir()
    (root / ".hidden").mkdir()
    (root / "node_modules").mkdir()
    (root / "archive").mkdir()

    (root / "b.md").write_text(VALID.format(title="B"), encoding="utf-8")
    (root / "a.md").write_text(VALID.format(title="A"), encoding="utf-8")
    (root / "sub" / "c.markdown").write_text(VALID.format(title="C"), encoding="utf-8")
    (root / "_drafts" / "d.md").write_text(VALID.format(title="D"), encoding="utf-8")
    (root / ".hidden" / "e.md").write_text(VALID.format(title="E"), encoding="utf-8")
    (root / "node_modules" / "f.md").write_text(VALID.format(title="F"), encoding="utf-8")
    (root / "archive" / "g.md").write_text(VALID.format(title="G"), encoding="utf-8")
    (root / "notes.txt").write_text("not content", encoding="utf-8")


def test_iter_files_is_sorted_and_skips_excluded_dirs() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _make_tree(root)

        files = FileSystemContentScanner(["archive"]).iter_files(root)
        rel = [p.relative_to(root).as_posix() for p in files]

        assert rel == ["a.md", "b.md", "sub/c.markdown"]


def test_scan_reports_progress_counts() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _make_tree(root)

        events: List[Tuple[int, int, Optional[str]]] = []

        def cb(processed: int, total: int, current: Optional[str]) -> None:
            events.append((processed, total, current))

        result = scan_content(str(root), exclude_dirs=["archive"], progress_callback=cb)

        assert result.files_scanned == 3
        assert [d.title for d in result.documents] == ["A", "B", "C"]
        assert result.diagnostics == []

        # First event declares the total, last event marks completion.
        assert events[0] == (0, 3, None)
        assert events[-1] == (3, 3, "")
        assert [e[0] for e in events[1:-1]] == [1, 2, 3]


def test_scan_keeps_diagnostics_for_broken_files() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "ok.md").write_text(VALID.format(title="OK"), encoding="utf-8")
        (root / "broken.md").write_text("no front matter\n", encoding="utf-8")

        result = FileSystemContentScanner().scan(root)

        assert [d.title for d in result.documents] == ["OK"]
        assert [(d.path, d.code) for d in result.diagnostics] == [("broken.md", "invalid-front-matter")]


def test_scan_of_missing_directory_is_empty() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        result = FileSystemContentScanner().scan(Path(tmp) / "missing")
        assert result.documents == []
        assert result.files_scanned == 0
