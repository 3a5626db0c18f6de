from __future__ import annotations

import argparse
import logging
from datetime import date
from typing import List, Optional

from dotenv import load_dotenv

from config import configure_logging, load_config
from core.content.scaffold import create_document


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a new course document with empty steps")
    parser.add_argument("title", help="Course title (recommended <= 60 characters)")
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument("--category", default=None, help="Main category (e.g. gcp)")
    parser.add_argument("--subcategory", default=None, help="Sub category (e.g. tutorial)")
    parser.add_argument("--tag", dest="tags", action="append", default=[], help="Tag (repeatable)")
    parser.add_argument("--authors", default="", help="Attribution string")
    parser.add_argument("--steps", type=int, default=3, help="Number of empty steps to create")
    parser.add_argument("--date", default=None, help="Publication date YYYY-MM-DD (defaults to today)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)

    args = _parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.debug_level)

    try:
        on_date = date.fromisoformat(args.date) if args.date else None
        path = create_document(
            config,
            title=args.title,
            on_date=on_date,
            category=args.category,
            subcategory=args.subcategory,
            tags=args.tags,
            authors=args.authors,
            steps=args.steps,
        )
    except (FileExistsError, ValueError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    print(f"Created {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
