from __future__ import annotations

import tempfile
from pathlib import Path

import yaml

import build_site
import lint_content
import new_course


DOC = """---
title: X
date: 2026-01-01
categories: [gcp, tutorial]
tags: [a, b]
duration: 10:00
authors: A
---
{% step label="Setup" duration="10:00" %}
Text
{% endstep %}
"""


def _write_config(root: Path, **overrides) -> str:  # type: ignore[no-untyped-def]
    data = {
        "content_dir": str(root / "content"),
        "assets_dir": str(root / "assets"),
        "output_dir": str(root / "_site"),
    }
    data.update(overrides)
    path = root / "open-codelabs.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


def _write_doc(root: Path, text: str = DOC, name: str = "2026-01-01-x.md") -> None:
    content = root / "content"
    content.mkdir(exist_ok=True)
    (content / name).write_text(text, encoding="utf-8")


def test_build_cli_success(capsys) -> None:  # type: ignore[no-untyped-def]
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = _write_config(root)
        _write_doc(root)

        assert build_site.main(["--config", config_path]) == 0
        assert (root / "_site" / "x" / "index.html").is_file()
        assert "Built 1 documents" in capsys.readouterr().out


def test_build_cli_content_error_exit_code(capsys) -> None:  # type: ignore[no-untyped-def]
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = _write_config(root)
        _write_doc(root, DOC.replace("title: X\n", ""))

        assert build_site.main(["--config", config_path]) == 1
        assert "error [missing-title]" in capsys.readouterr().out


def test_build_cli_unexpected_failure_exit_code() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = _write_config(root)
        _write_doc(root)

        # Output directory overlapping the sources is refused.
        assert build_site.main(["--config", config_path, "--output-dir", str(root / "content")]) == 2


def test_watch_paths_include_theme_dir() -> None:
    from config import AppConfig

    config = AppConfig(content_dir="c", assets_dir="a", theme_dir="t")
    assert [p.as_posix() for p in build_site.watch_paths(config)] == ["c", "a", "t"]
    assert [p.as_posix() for p in build_site.watch_paths(config, "other")] == ["other", "a", "t"]


def test_lint_cli_exit_codes(capsys) -> None:  # type: ignore[no-untyped-def]
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = _write_config(root)
        _write_doc(root, DOC.replace("[gcp, tutorial]", "[cooking]"))

        assert lint_content.main(["--config", config_path]) == 0
        out = capsys.readouterr().out
        assert "warning [unknown-category]" in out
        assert "0 error(s), 1 warning(s)" in out

        assert lint_content.main(["--config", config_path, "--strict"]) == 1

        _write_doc(root, "no front matter\n", name="broken.md")
        assert lint_content.main(["--config", config_path]) == 1
        assert "broken.md:1: error [invalid-front-matter]" in capsys.readouterr().out


def test_new_course_cli(capsys) -> None:  # type: ignore[no-untyped-def]
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config_path = _write_config(root)
        argv = [
            "Hello World",
            "--config",
            config_path,
            "--category",
            "web",
            "--tag",
            "html",
            "--tag",
            "css",
            "--steps",
            "2",
            "--date",
            "2026-02-03",
        ]

        assert new_course.main(argv) == 0
        created = root / "content" / "2026-02-03-hello-world.md"
        assert created.is_file()
        assert f"Created {created}" in capsys.readouterr().out

        # Refuses to overwrite.
        assert new_course.main(argv) == 1
        # Invalid date.
        assert new_course.main(["Other", "--config", config_path, "--date", "03/02/2026"]) == 1

        assert lint_content.main(["--config", config_path]) == 0
