from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from fastapi import HTTPException, Request

from config import AppConfig
from core.content.durations import format_duration
from core.content.models import Diagnostic, Document
from core.errors import ContentBuildError
from core.site.builder import BuildResult, build_site
from router.schemas import DiagnosticInfo, DocumentDetail, DocumentSummary, StepInfo

logger = logging.getLogger(__name__)

_BUILD_LOCK = threading.Lock()


def rebuild_site(state: Any, *, clean: bool = False) -> BuildResult:
    """Build the site and record the outcome on the app state.

    The preview server and the watcher thread share this function; builds are
    serialized with a module-level lock.

    Args:
        state: `app.state` of the preview server.
        clean: Remove the output directory first.

    Returns:
        The new BuildResult.

    Raises:
        ContentBuildError: If the content has blocking diagnostics.
    """

    config: AppConfig = state.config
    with _BUILD_LOCK:
        try:
            result = build_site(config, clean=clean)
        except ContentBuildError as e:
            state.build_error = str(e)
            state.build_diagnostics = list(e.diagnostics)
            raise
        except Exception as e:
            state.build_error = f"{type(e).__name__}: {e}"
            state.build_diagnostics = []
            raise

        state.build_result = result
        state.build_error = None
        state.build_diagnostics = list(result.diagnostics)
        return result


def require_build(request: Request) -> BuildResult:
    """Return the last successful build or raise 503."""

    result: Optional[BuildResult] = getattr(request.app.state, "build_result", None)
    if result is None:
        error = getattr(request.app.state, "build_error", None) or "site has not been built yet"
        raise HTTPException(status_code=503, detail=f"Site unavailable: {error}")
    return result


def diagnostic_info(d: Diagnostic) -> DiagnosticInfo:
    return DiagnosticInfo(**d.to_dict())


def document_summary(document: Document, category: str) -> DocumentSummary:
    fm = document.front_matter
    return DocumentSummary(
        slug=document.slug,
        url=document.url,
        title=fm.title,
        date=fm.date.isoformat() if fm.date else None,
        category=category,
        sub_category=document.sub_category,
        tags=list(fm.tags),
        duration=format_duration(document.total_duration_seconds),
        authors=fm.authors,
        source_path=document.source_path,
    )


def document_detail(document: Document, category: str) -> DocumentDetail:
    summary = document_summary(document, category)
    return DocumentDetail(
        **summary.model_dump(),
        steps=[
            StepInfo(label=s.label, duration=format_duration(s.duration_seconds), line=s.line)
            for s in document.steps
        ],
    )
