"""Configuration objects and constants for the image cleaner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DEFAULT_IMAGE_EXTENSIONS: Tuple[str, ...] = ("png", "jpg", "jpeg", "gif", "webp")
DEFAULT_ASSET_DIR_SUFFIXES: Tuple[str, ...] = ("", ".assets")
DEFAULT_OUTPUT_SUFFIX = "_new"
DEFAULT_ENCODING = "utf-8"
DEFAULT_EXTRACTOR = "regex"
EXTRACTOR_CHOICES = ("regex", "soup")


@dataclass
class CleanerConfig:
    """Settings that control scanning, reconciliation and rewriting."""

    image_extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    asset_dir_suffixes: Tuple[str, ...] = DEFAULT_ASSET_DIR_SUFFIXES
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    encoding: str = DEFAULT_ENCODING
    extractor: str = DEFAULT_EXTRACTOR
    preview_head: int = 5
    preview_tail: int = 5

    def __post_init__(self) -> None:
        if self.extractor not in EXTRACTOR_CHOICES:
            raise ValueError(
                f"Unknown extractor {self.extractor!r}; expected one of {EXTRACTOR_CHOICES}"
            )
        self.image_extensions = tuple(ext.lower().lstrip(".") for ext in self.image_extensions)
