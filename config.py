from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field


DEFAULT_CONFIG_PATH = "open-codelabs.yaml"

# Main categories that receive colour coding on cards and sidebars.
DEFAULT_CATEGORY_COLORS: Dict[str, str] = {
    "gcp": "#4285f4",
    "aws": "#ff9900",
    "azure": "#0078d4",
    "ai": "#8e44ad",
    "web": "#16a085",
    "data": "#c0392b",
    "devops": "#2c3e50",
    "security": "#d35400",
    "mobile": "#27ae60",
}


class AppConfig(BaseModel):
    debug_level: str = "INFO"

    site_title: str = "Codelabs"

    # Prefix for every generated link. Use "/" when the site is served from the
    # host root, or e.g. "/codelabs/" for a project page.
    base_url: str = "/"

    # Source tree
    content_dir: str = "content"
    # Served under /assets/ (so /assets/images/<course>/<file> lives in
    # <assets_dir>/images/<course>/<file>).
    assets_dir: str = "assets"

    # Build output
    output_dir: str = "_site"

    # Optional theme directory. `templates/` overrides bundled templates
    # (page.html, index.html, ...) and `static/` adds or replaces theme files.
    theme_dir: Optional[str] = None

    # Directory names skipped while scanning the content tree, in addition to
    # anything starting with "." or "_".
    exclude_dirs: List[str] = Field(default_factory=lambda: ["node_modules", "__pycache__"])

    # Recognised main categories (name -> CSS colour).
    categories: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_COLORS))
    uncategorized_color: str = "#9e9e9e"

    # Titles longer than this are reported as warnings.
    title_max_length: int = 60

    # If True, warnings abort the build the same way errors do.
    fail_on_warnings: bool = False

    # FastAPI / Uvicorn preview server
    api_port: int = 4000

    # CORS
    # If True, enables permissive CORS headers for browser clients (dev-friendly).
    cors_enabled: bool = False

    # Watch mode polling interval.
    watch_interval_seconds: float = 1.0


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load application configuration from YAML.

    Precedence:
    1) explicit `path`
    2) env var `OPEN_CODELABS_CONFIG`
    3) `open-codelabs.yaml` in the current working directory

    Missing config file falls back to defaults.
    """

    config_path = path or os.getenv("OPEN_CODELABS_CONFIG") or DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        return AppConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return AppConfig()

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid YAML config (expected mapping), got: {type(raw).__name__}")

    data: Dict[str, Any] = dict(raw)
    return AppConfig(**data)


def configure_logging(debug_level: str) -> None:
    level_name = (debug_level or "INFO").upper().strip()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid debug_level: {debug_level!r} (expected DEBUG/INFO/WARNING/ERROR)")

    logging.basicConfig(level=level)
