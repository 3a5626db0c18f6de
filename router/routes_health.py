from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    """Lightweight health/status endpoint."""

    config = getattr(request.app.state, "config", None)
    result = getattr(request.app.state, "build_result", None)

    return {
        "status": "ok",
        "config_path": getattr(request.app.state, "config_path", "open-codelabs.yaml"),
        "debug_level": getattr(config, "debug_level", "INFO"),
        "content_dir": getattr(config, "content_dir", "content"),
        "output_dir": getattr(config, "output_dir", "_site"),
        "site_built": result is not None,
        "documents": len(result.documents) if result is not None else 0,
        "build_error": getattr(request.app.state, "build_error", None),
        "watching": bool(getattr(request.app.state, "watching", False)),
    }
