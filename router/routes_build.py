from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from core.errors import ContentBuildError
from core.lint.linter import lint_content
from router.common import diagnostic_info, rebuild_site
from router.schemas import BuildRequest, BuildResponse, LintResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/build", response_model=BuildResponse)
def build(request: Request, payload: Optional[BuildRequest] = None) -> BuildResponse:
    """Rebuild the site from the content tree.

    Content errors are returned as a 422 whose detail lists the diagnostics.
    """

    clean = bool(payload.clean) if payload is not None else False
    try:
        result = rebuild_site(request.app.state, clean=clean)
    except ContentBuildError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(e),
                "diagnostics": [diagnostic_info(d).model_dump() for d in e.diagnostics],
            },
        )
    except Exception as e:
        logger.exception("Site build failed")
        raise HTTPException(status_code=500, detail=f"Site build failed: {type(e).__name__}: {e}")

    return BuildResponse(
        output_dir=str(result.output_dir),
        documents=len(result.documents),
        pages_written=result.pages_written,
        pages_unchanged=result.pages_unchanged,
        assets_copied=result.assets_copied,
        warnings=[diagnostic_info(d) for d in result.warnings],
    )


@router.get("/lint", response_model=LintResponse)
def lint(request: Request) -> LintResponse:
    """Lint the content tree without building."""

    diagnostics = lint_content(request.app.state.config)
    errors = sum(1 for d in diagnostics if d.is_error)
    return LintResponse(
        errors=errors,
        warnings=len(diagnostics) - errors,
        diagnostics=[diagnostic_info(d) for d in diagnostics],
    )
