"""Data models shared by the scanner, reconciler and file operations."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class ImageReference:
    """Local image reference discovered in the document text."""

    raw_text: str
    path_text: str
    absolute_path: str
    syntax: str = "markdown"


@dataclass
class DiscoveredImage:
    """Image file found under the image root."""

    absolute_path: str
    extension: str


@dataclass
class CatalogedImage:
    """On-disk image annotated with the reference that uses it, if any."""

    absolute_path: str
    raw_reference: Optional[str] = None

    @property
    def used(self) -> bool:
        return self.raw_reference is not None

    @property
    def name(self) -> str:
        return os.path.basename(self.absolute_path)


@dataclass
class DeleteFailure:
    path: str
    error: str


@dataclass
class DeleteReport:
    """Outcome of a batch delete; failures never abort the batch."""

    requested: int = 0
    deleted: List[str] = field(default_factory=list)
    failures: List[DeleteFailure] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.deleted)


@dataclass
class RenameEntry:
    """One step of a rename plan."""

    index: int
    source: str
    target: str
    raw_reference: str
    new_reference: str

    @property
    def old_name(self) -> str:
        return os.path.basename(self.source)

    @property
    def new_name(self) -> str:
        return os.path.basename(self.target)


@dataclass
class RenameReport:
    """Result of renumbering the used images."""

    mapping: List[Tuple[str, str]]
    new_document_path: str
    replacements: int = 0
    overwritten: List[str] = field(default_factory=list)
