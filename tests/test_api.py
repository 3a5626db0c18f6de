from __future__ import annotations

import tempfile
from pathlib import Path

from fastapi.testclient import TestClient

from app import create_app
from config import AppConfig


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


def _config(root: Path, text: str = DOC) -> AppConfig:
    content = root / "content"
    content.mkdir()
    (content / "2026-01-01-x.md").write_text(text, encoding="utf-8")
    return AppConfig(
        content_dir=str(content),
        assets_dir=str(root / "assets"),
        output_dir=str(root / "_site"),
    )


def test_health_and_documents() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        app = create_app(_config(Path(tmp)))

        with TestClient(app) as client:
            health = client.get("/api/v1/health").json()
            assert health["status"] == "ok"
            assert health["site_built"] is True
            assert health["documents"] == 1
            assert health["build_error"] is None

            docs = client.get("/api/v1/documents").json()
            assert [d["slug"] for d in docs] == ["x"]
            assert docs[0]["category"] == "gcp"
            assert docs[0]["duration"] == "10:00"
            assert docs[0]["tags"] == ["a", "b"]

            assert client.get("/api/v1/documents", params={"category": "aws"}).json() == []
            assert len(client.get("/api/v1/documents", params={"tag": "A"}).json()) == 1

            detail = client.get("/api/v1/documents/x").json()
            assert detail["title"] == "X"
            assert detail["steps"] == [{"label": "Setup", "duration": "10:00", "line": 9}]

            missing = client.get("/api/v1/documents/nope")
            assert missing.status_code == 404


def test_categories_and_tags() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        app = create_app(_config(Path(tmp)))

        with TestClient(app) as client:
            categories = {c["name"]: c for c in client.get("/api/v1/categories").json()}
            assert categories["gcp"]["document_count"] == 1
            assert categories["gcp"]["color"] == "#4285f4"
            assert categories["aws"]["document_count"] == 0
            assert categories["uncategorized"]["recognized"] is False

            tags = client.get("/api/v1/tags").json()
            assert [(t["slug"], t["document_count"]) for t in tags] == [("a", 1), ("b", 1)]


def test_static_site_is_served() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        app = create_app(_config(Path(tmp)))

        with TestClient(app) as client:
            page = client.get("/x/")
            assert page.status_code == 200
            assert '<h1 class="codelab-title">X</h1>' in page.text

            index = client.get("/")
            assert index.status_code == 200
            assert 'data-category="gcp"' in index.text


def test_build_endpoint_reports_content_errors() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        app = create_app(_config(root))

        with TestClient(app) as client:
            ok = client.post("/api/v1/build")
            assert ok.status_code == 200
            assert ok.json()["documents"] == 1
            assert ok.json()["pages_written"] == 0

            (root / "content" / "2026-01-01-x.md").write_text(DOC.replace("title: X\n", ""), encoding="utf-8")

            failed = client.post("/api/v1/build", json={"clean": False})
            assert failed.status_code == 422
            codes = [d["code"] for d in failed.json()["detail"]["diagnostics"]]
            assert codes == ["missing-title"]

            health = client.get("/api/v1/health").json()
            assert health["build_error"] == "Build aborted: 1 content problem"

            lint = client.get("/api/v1/lint").json()
            assert lint["errors"] == 1


def test_startup_build_failure_keeps_server_up() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        app = create_app(_config(Path(tmp), DOC.replace("{% endstep %}\n", "")))

        with TestClient(app) as client:
            health = client.get("/api/v1/health").json()
            assert health["site_built"] is False
            assert "Build aborted" in health["build_error"]

            unavailable = client.get("/api/v1/documents")
            assert unavailable.status_code == 503


def test_build_on_startup_can_be_disabled() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        app = create_app(_config(root), build_on_startup=False)

        with TestClient(app) as client:
            assert client.get("/api/v1/health").json()["site_built"] is False
            assert not (root / "_site").exists()

            assert client.post("/api/v1/build").status_code == 200
            assert client.get("/api/v1/health").json()["site_built"] is True
