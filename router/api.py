"""API router aggregator.

This module exists only to keep the public import stable:

    `from router.api import router`

All endpoint implementations live in dedicated `router/routes_*.py` modules.
"""

from __future__ import annotations

from fastapi import APIRouter

from router.routes_build import router as build_router
from router.routes_content import router as content_router
from router.routes_health import router as health_router


router = APIRouter()
router.include_router(health_router, tags=["Health"])
router.include_router(content_router, tags=["Content"])
router.include_router(build_router, tags=["Build"])
