from __future__ import annotations

import argparse
import logging
import threading
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from config import AppConfig, configure_logging, load_config
from core.errors import ContentBuildError
from core.site.builder import BuildResult, build_site
from core.site.watcher import ContentWatcher


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(description="Render the Markdown course tree into a static site")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config (defaults to OPEN_CODELABS_CONFIG or open-codelabs.yaml)",
    )
    parser.add_argument(
        "--content-dir",
        default=None,
        help="Directory holding the Markdown documents (defaults to config.content_dir)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Where to write the generated site (defaults to config.output_dir)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove the output directory before building.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and rebuild whenever content, assets or theme files change.",
    )

    return parser.parse_args(argv)


def run_build(config: AppConfig, *, content_dir: Optional[str], output_dir: Optional[str], clean: bool) -> BuildResult:
    """Build once and print every diagnostic."""

    try:
        result = build_site(config, content_dir=content_dir, output_dir=output_dir, clean=clean)
    except ContentBuildError as e:
        for d in e.diagnostics:
            print(d.format())
        raise

    for d in result.warnings:
        print(d.format())
    print(
        f"Built {len(result.documents)} documents into {result.output_dir} "
        f"({result.pages_written} pages written, {result.pages_unchanged} unchanged)"
    )
    return result


def watch_paths(config: AppConfig, content_dir: Optional[str] = None) -> List[Path]:
    paths = [Path(content_dir or config.content_dir), Path(config.assets_dir)]
    if config.theme_dir:
        paths.append(Path(config.theme_dir))
    return paths


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for site builds."""

    load_dotenv(override=False)

    args = _parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.debug_level)

    try:
        run_build(config, content_dir=args.content_dir, output_dir=args.output_dir, clean=bool(args.clean))
        exit_code = 0
    except ContentBuildError as e:
        logger.error("%s", e)
        exit_code = 1
    except Exception as e:
        logger.error("Site build failed: %s: %s", type(e).__name__, e)
        return 2

    if not args.watch:
        return exit_code

    def _rebuild(changed: List[str]) -> None:
        try:
            run_build(config, content_dir=args.content_dir, output_dir=args.output_dir, clean=False)
        except ContentBuildError as e:
            logger.error("%s", e)

    watcher = ContentWatcher(watch_paths(config, args.content_dir), interval=config.watch_interval_seconds)
    try:
        watcher.watch(_rebuild, threading.Event())
    except KeyboardInterrupt:
        pass
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
