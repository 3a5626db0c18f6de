from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from config import AppConfig
from core.content.durations import format_duration
from core.content.loader import slugify

logger = logging.getLogger(__name__)

DEFAULT_STEP_SECONDS = 5 * 60


def render_new_document(
    *,
    title: str,
    on_date: date,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    tags: Sequence[str] = (),
    authors: str = "",
    steps: int = 3,
    step_seconds: int = DEFAULT_STEP_SECONDS,
) -> str:
    """Return the text of a new document with front matter and empty steps."""

    if steps < 1:
        raise ValueError("steps must be >= 1")

    categories: List[str] = [c for c in (category, subcategory) if c]
    front_matter = {
        "title": title,
        "date": on_date,
        "categories": categories,
        "tags": list(tags),
        "duration": format_duration(steps * step_seconds),
        "authors": authors,
    }
    header = yaml.safe_dump(front_matter, sort_keys=False, allow_unicode=True, default_flow_style=None)

    blocks: List[str] = []
    for n in range(1, steps + 1):
        label = "Overview" if n == 1 else f"Step {n}"
        blocks.append(
            f'{{% step label="{label}" duration="{format_duration(step_seconds)}" %}}\n'
            "_Describe this step._\n"
            "{% endstep %}\n"
        )

    return f"---\n{header}---\n\n" + "\n".join(blocks)


def create_document(
    config: AppConfig,
    *,
    title: str,
    on_date: Optional[date] = None,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    tags: Sequence[str] = (),
    authors: str = "",
    steps: int = 3,
) -> Path:
    """Write a new content file and create its image folder.

    The file is `<content_dir>/<YYYY-MM-DD>-<slug>.md`; images go to
    `<assets_dir>/images/<slug>/` and are referenced as
    `/assets/images/<slug>/<file>`.

    Raises:
        FileExistsError: If the target file already exists.
    """

    day = on_date or date.today()
    slug = slugify(title)
    path = Path(config.content_dir) / f"{day.isoformat()}-{slug}.md"
    if path.exists():
        raise FileExistsError(f"{path} already exists")

    text = render_new_document(
        title=title,
        on_date=day,
        category=category,
        subcategory=subcategory,
        tags=tags,
        authors=authors,
        steps=steps,
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")

    images_dir = Path(config.assets_dir) / "images" / slug
    images_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Created %s (images in %s)", path, images_dir)
    return path
