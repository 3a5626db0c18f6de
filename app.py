from __future__ import annotations

import argparse
import logging
import os
import threading
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from build_site import watch_paths
from config import DEFAULT_CONFIG_PATH, AppConfig, configure_logging, load_config
from core.site.watcher import ContentWatcher
from router.api import router as api_router
from router.common import rebuild_site


logger = logging.getLogger(__name__)


def _start_watcher(fastapi_app: FastAPI, config: AppConfig) -> None:
    stop_event = threading.Event()
    watcher = ContentWatcher(watch_paths(config), interval=config.watch_interval_seconds)

    def _on_change(changed: List[str]) -> None:
        try:
            rebuild_site(fastapi_app.state)
        except Exception as e:
            logger.error("Rebuild failed: %s", e)

    thread = threading.Thread(
        target=watcher.watch,
        args=(_on_change, stop_event),
        name="content-watcher",
        daemon=True,
    )
    thread.start()
    fastapi_app.state.watch_stop = stop_event
    fastapi_app.state.watching = True


def create_app(
    config: Optional[AppConfig] = None,
    *,
    build_on_startup: bool = True,
    watch: bool = False,
) -> FastAPI:
    """Create the preview server.

    Args:
        config: Configuration to serve. Loaded from `OPEN_CODELABS_CONFIG` (or
            the default YAML file) when omitted.
        build_on_startup: Build the site once when the server starts.
        watch: Rebuild in a background thread whenever sources change.
    """

    fastapi_app = FastAPI(title="open-codelabs", version="0.1.0")

    load_dotenv(override=False)
    config_path = os.getenv("OPEN_CODELABS_CONFIG")
    if config is None:
        config = load_config(config_path)

    # CORS middleware must be added before the application starts.
    if bool(getattr(config, "cors_enabled", False)):
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=False,
        )

    fastapi_app.state.config = config
    fastapi_app.state.config_path = config_path or DEFAULT_CONFIG_PATH
    fastapi_app.state.build_result = None
    fastapi_app.state.build_error = None
    fastapi_app.state.build_diagnostics = []
    fastapi_app.state.watching = False
    fastapi_app.state.watch_stop = None

    fastapi_app.include_router(api_router, prefix="/api/v1")

    @fastapi_app.on_event("startup")
    def _startup() -> None:
        configure_logging(config.debug_level)

        if build_on_startup:
            try:
                rebuild_site(fastapi_app.state)
            except Exception as e:
                # Keep the server up so /api/v1/health and /api/v1/lint can explain the failure.
                logger.error("Initial build failed: %s", e)

        if watch:
            _start_watcher(fastapi_app, config)

    @fastapi_app.on_event("shutdown")
    def _shutdown() -> None:
        stop_event = getattr(fastapi_app.state, "watch_stop", None)
        if stop_event is not None:
            stop_event.set()
            fastapi_app.state.watching = False

    # Mounted last so the API routes take precedence.
    fastapi_app.mount(
        "/",
        StaticFiles(directory=config.output_dir, html=True, check_dir=False),
        name="site",
    )

    return fastapi_app


app = create_app()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the generated site with a local preview API")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config (defaults to OPEN_CODELABS_CONFIG or open-codelabs.yaml)",
    )
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (defaults to config.api_port)")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--watch", action="store_true", help="Rebuild whenever sources change.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv(override=False)

    args = _parse_args(argv)
    config: AppConfig = load_config(args.config)
    configure_logging(config.debug_level)

    uvicorn.run(
        create_app(config, watch=bool(args.watch)),
        host=args.host,
        port=int(args.port or config.api_port),
        reload=False,
    )


if __name__ == "__main__":
    main()
