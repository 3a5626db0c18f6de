from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from dotenv import load_dotenv

from config import configure_logging, load_config
from core.lint.linter import has_errors, lint_content


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the content linter.

    Args:
        argv: Optional argument list (defaults to sys.argv).

    Returns:
        Parsed argparse namespace.
    """

    parser = argparse.ArgumentParser(description="Check course documents for authoring errors")
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
        "--strict",
        action="store_true",
        help="Exit with status 1 on warnings too.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)

    args = _parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.debug_level)

    diagnostics = lint_content(config, content_dir=args.content_dir)
    for d in diagnostics:
        print(d.format())

    errors = sum(1 for d in diagnostics if d.is_error)
    warnings = len(diagnostics) - errors
    print(f"{errors} error(s), {warnings} warning(s)")

    if has_errors(diagnostics) or (args.strict and warnings):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
