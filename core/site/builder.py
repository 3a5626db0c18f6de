from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from config import AppConfig
from core.content.categories import CategoryRegistry
from core.content.models import Diagnostic, Document
from core.errors import ContentBuildError
from core.lint.linter import ContentLinter
from core.ports.storage_port import SiteRepository
from core.rendering.templates import BUNDLED_STATIC_DIR, PageRenderer
from core.scanning.scanner import FileSystemContentScanner
from core.site.assets import copy_if_changed, iter_asset_files
from core.site.indexing import SiteIndex, build_site_index, search_entries

logger = logging.getLogger(__name__)


class FileSystemSiteRepository(SiteRepository):
    """Adapter for writing the generated site to a local directory.

    Files are only rewritten when their bytes change, so an unchanged rebuild
    leaves the output tree untouched.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def write_text(self, rel_path: str, content: str) -> bool:
        path = self.output_dir / rel_path
        data = content.encode("utf-8")
        if path.is_file() and path.read_bytes() == data:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Wrote %s", path)
        return True

    def copy_file(self, source: Path, rel_path: str) -> bool:
        return copy_if_changed(source, self.output_dir / rel_path)

    def clean(self) -> None:
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
            logger.info("Removed output directory %s", self.output_dir)


@dataclass
class BuildResult:
    """Summary of one site build."""

    output_dir: Path
    index: SiteIndex
    diagnostics: List[Diagnostic] = field(default_factory=list)
    pages_written: int = 0
    pages_unchanged: int = 0
    assets_copied: int = 0
    assets_unchanged: int = 0

    @property
    def documents(self) -> List[Document]:
        return self.index.documents

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]


def _check_output_dir(output_root: Path, content_root: Path) -> None:
    out = output_root.resolve()
    content = content_root.resolve()
    if out == Path.cwd().resolve() or out == content or out in content.parents:
        raise ValueError(f"Refusing to use {output_root} as output directory (it contains the sources)")


def _static_files(theme_dir: Optional[str]) -> Dict[str, Path]:
    files: Dict[str, Path] = {rel: path for path, rel in iter_asset_files(BUNDLED_STATIC_DIR)}
    if theme_dir:
        for path, rel in iter_asset_files(Path(theme_dir) / "static"):
            files[rel] = path
    return dict(sorted(files.items()))


def build_site(
    config: AppConfig,
    *,
    content_dir: Optional[str] = None,
    output_dir: Optional[str] = None,
    clean: bool = False,
    progress_callback: Optional[Callable[[int, int, Optional[str]], None]] = None,
    repository: Optional[SiteRepository] = None,
) -> BuildResult:
    """Render the content tree into a static site.

    Pipeline:
    1. Scan and parse every Markdown document.
    2. Lint the corpus; abort on errors (and on warnings when
       `config.fail_on_warnings`).
    3. Render one page per document plus index, category and tag pages.
    4. Write `search.json` and copy static assets unchanged.

    Output contains no timestamps and is produced in sorted order, so an
    unchanged content tree always yields byte-identical files.

    Raises:
        ContentBuildError: If the content has blocking diagnostics.
        ValueError: If the output directory overlaps the sources.
    """

    content_root = Path(content_dir or config.content_dir)
    output_root = Path(output_dir or config.output_dir)
    _check_output_dir(output_root, content_root)

    registry = CategoryRegistry.from_config(config)
    scanner = FileSystemContentScanner(config.exclude_dirs)
    scan = scanner.scan(content_root, progress_callback=progress_callback)

    diagnostics = ContentLinter(config, registry=registry).lint(scan)
    blocking = [d for d in diagnostics if d.is_error or bool(config.fail_on_warnings)]
    if blocking:
        for d in blocking:
            logger.error("%s", d.format())
        raise ContentBuildError(blocking)

    for d in diagnostics:
        logger.warning("%s", d.format())

    repo = repository or FileSystemSiteRepository(output_root)
    if clean:
        repo.clean()

    renderer = PageRenderer(
        registry,
        site_title=config.site_title,
        base_url=config.base_url,
        theme_dir=config.theme_dir,
    )
    index = build_site_index(scan.documents, registry)
    result = BuildResult(output_dir=output_root, index=index, diagnostics=diagnostics)

    def _write(rel_path: str, content: str) -> None:
        if repo.write_text(rel_path, content):
            result.pages_written += 1
        else:
            result.pages_unchanged += 1

    for document in index.documents:
        _write(f"{document.slug}/index.html", renderer.render_document(document))

    _write("index.html", renderer.render_index(index.documents))

    for name, (style, documents) in index.categories.items():
        _write(f"categories/{name}/index.html", renderer.render_category(style, documents))

    for slug, entry in index.tags.items():
        _write(f"tags/{slug}/index.html", renderer.render_tag(entry.label, slug, entry.documents))

    search_json = json.dumps(search_entries(index, registry), indent=2, ensure_ascii=False, sort_keys=True)
    _write("search.json", search_json + "\n")

    def _copy(source: Path, rel_path: str) -> None:
        if repo.copy_file(source, rel_path):
            result.assets_copied += 1
        else:
            result.assets_unchanged += 1

    for source, rel in iter_asset_files(Path(config.assets_dir)):
        _copy(source, f"assets/{rel}")

    for rel, source in _static_files(config.theme_dir).items():
        _copy(source, f"theme/{rel}")

    logger.info(
        "Built %d documents into %s (%d pages written, %d unchanged, %d assets copied)",
        len(index.documents),
        output_root,
        result.pages_written,
        result.pages_unchanged,
        result.assets_copied,
    )
    return result
