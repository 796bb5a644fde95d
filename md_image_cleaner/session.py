"""Session object tying document, image directory and catalog together."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from .catalog import find_dangling, reconcile, used_images
from .cleanup import delete_images, unused_images
from .config import CleanerConfig
from .images import scan_images
from .models import CatalogedImage, DeleteReport, ImageReference, RenameReport
from .references import extract_references, get_extractor, read_document
from .rename import rename_images
from .utils import describe_items, normalize_path

logger = logging.getLogger("md_image_cleaner")


def discover_image_dir(document_path: str | Path, suffixes: Sequence[str]) -> Optional[Path]:
    """Return the first existing ``<document without suffix><suffix>`` directory."""
    base = Path(document_path).with_suffix("")
    for suffix in suffixes:
        candidate = base.with_name(base.name + suffix)
        if candidate.is_dir():
            return candidate
    return None


class CleanerSession:
    """Working state for one document and its image directory.

    The catalog is rebuilt from scratch after every selection change and
    after every delete or rename; it is never patched in place.
    """

    def __init__(self, config: Optional[CleanerConfig] = None) -> None:
        self.config = config or CleanerConfig()
        self.document_path: Optional[Path] = None
        self.image_dir: Optional[Path] = None
        self.catalog: List[CatalogedImage] = []
        self.dangling: List[ImageReference] = []
        self._extractor = get_extractor(self.config.extractor)

    def select_document(self, path: str | Path) -> List[CatalogedImage]:
        self.document_path = Path(normalize_path(os.fspath(path)))
        image_dir = discover_image_dir(self.document_path, self.config.asset_dir_suffixes)
        if image_dir is not None:
            logger.info("Using image directory %s", image_dir)
            self.image_dir = image_dir
        return self.refresh()

    def select_image_dir(self, path: str | Path) -> List[CatalogedImage]:
        self.image_dir = Path(normalize_path(os.fspath(path)))
        return self.refresh()

    def _read_references(self) -> List[ImageReference]:
        if self.document_path is None:
            return []
        text = read_document(self.document_path, self.config.encoding)
        return extract_references(text, self.document_path.parent, self._extractor)

    def refresh(self) -> List[CatalogedImage]:
        """Rebuild the catalog from the current document and directory."""
        if self.image_dir is not None and self.image_dir.is_dir():
            discovered = scan_images(self.image_dir, self.config.image_extensions)
        else:
            discovered = []
        references = self._read_references()
        self.catalog = reconcile(discovered, references)
        self.dangling = find_dangling(discovered, references) if self.image_dir else []
        for reference in self.dangling:
            logger.warning("Broken image reference: %s", reference.raw_text)
        logger.debug(
            "Catalog rebuilt: %d image(s), %d used, %d broken reference(s)",
            len(self.catalog),
            len(self.list_used_ordered()),
            len(self.dangling),
        )
        return self.catalog

    def list_unused(self) -> List[str]:
        return unused_images(self.catalog)

    def delete(self, paths: Optional[Sequence[str]] = None) -> DeleteReport:
        """Delete ``paths`` (default: every unused image) and rebuild."""
        report = delete_images(self.list_unused() if paths is None else list(paths))
        if report.requested:
            self.refresh()
        return report

    def list_used_ordered(self) -> List[CatalogedImage]:
        return used_images(self.catalog)

    def rename(self, subset: Optional[Sequence[CatalogedImage]] = None) -> RenameReport:
        """Renumber ``subset`` (default: every used image) and rebuild."""
        if self.document_path is None:
            raise RuntimeError("No document selected")
        used = self.list_used_ordered() if subset is None else list(subset)
        text = read_document(self.document_path, self.config.encoding)
        report = rename_images(
            used,
            text,
            self.document_path,
            output_suffix=self.config.output_suffix,
            encoding=self.config.encoding,
        )
        self.refresh()
        return report

    def describe(self, items: Sequence[str]) -> str:
        return describe_items(items, self.config.preview_head, self.config.preview_tail)


def relative_name(path: str, root: Optional[Path]) -> str:
    """Display helper: path relative to ``root`` when possible."""
    if root is None:
        return path
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return path
