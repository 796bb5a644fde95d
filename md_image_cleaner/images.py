"""Directory scanning and image signature checks."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from filetype import guess

from .config import DEFAULT_IMAGE_EXTENSIONS
from .models import DiscoveredImage
from .utils import normalize_path

logger = logging.getLogger("md_image_cleaner")


def _extension_of(name: str) -> str:
    _, ext = os.path.splitext(name)
    return ext[1:].lower()


def scan_images(
    root: str | Path,
    extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
) -> List[DiscoveredImage]:
    """Recursively list image files under ``root`` in traversal order.

    Subdirectories are descended into as they are met, so the result is
    depth-first in ``os.scandir`` order. Any error raised while listing an
    entry aborts the whole scan.
    """
    allowed = {ext.lower().lstrip(".") for ext in extensions}
    images: List[DiscoveredImage] = []
    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_dir():
                images.extend(scan_images(entry.path, allowed))
                continue
            extension = _extension_of(entry.name)
            if extension not in allowed:
                continue
            images.append(
                DiscoveredImage(absolute_path=normalize_path(entry.path), extension=extension)
            )
    return images


def detect_image_format(path: str | Path) -> Optional[str]:
    """Detect image type from the file signature; returns a lowercase extension."""
    kind = guess(os.fspath(path))
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def find_format_mismatches(
    images: Iterable[DiscoveredImage],
) -> List[Tuple[DiscoveredImage, Optional[str]]]:
    """Return images whose content does not match their file extension."""
    mismatches: List[Tuple[DiscoveredImage, Optional[str]]] = []
    for image in images:
        detected = detect_image_format(image.absolute_path)
        declared = "jpg" if image.extension == "jpeg" else image.extension
        if detected != declared:
            logger.warning(
                "Extension of %s does not match its content (detected: %s)",
                image.absolute_path,
                detected or "unknown",
            )
            mismatches.append((image, detected))
    return mismatches
