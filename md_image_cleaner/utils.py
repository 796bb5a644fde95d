"""Utility helpers for path handling and preview text."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Sequence

SEPARATOR_PATTERN = re.compile(r"[\\/]")


def normalize_path(value: str) -> str:
    """Return a canonical absolute path with separators in the host convention.

    Symlinks are followed so references and scanned files compare equal.
    """
    return os.path.realpath(SEPARATOR_PATTERN.sub(lambda _: os.sep, value))


def split_file_name(path_text: str) -> tuple[str, str]:
    """Split reference text into its directory prefix and file-name segment."""
    cut = max(path_text.rfind("/"), path_text.rfind("\\"))
    return path_text[: cut + 1], path_text[cut + 1 :]


def describe_items(items: Sequence[str], head: int = 5, tail: int = 5) -> str:
    """Join items one per line, eliding the middle of long lists."""
    if len(items) > head + tail:
        return "\n".join([*items[:head], "...", *items[len(items) - tail :]])
    return "\n".join(items)


def derive_output_path(document_path: str | Path, suffix: str = "_new") -> Path:
    """Build ``<stem><suffix><ext>`` beside the original document."""
    path = Path(document_path)
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")
