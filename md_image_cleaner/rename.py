"""Renumber used images and rewrite the document references to match."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .config import DEFAULT_ENCODING, DEFAULT_OUTPUT_SUFFIX
from .models import CatalogedImage, RenameEntry, RenameReport
from .references import split_target
from .utils import derive_output_path, split_file_name

logger = logging.getLogger("md_image_cleaner")

_STAGING_PREFIX = ".md-image-cleaner-"


class RenameError(ValueError):
    """Raised when a rename plan cannot be built from the catalog."""


def plan_rename(used: Sequence[CatalogedImage]) -> List[RenameEntry]:
    """Assign ``1..n`` to the used images in the order given.

    Only the file-name segment of each reference changes; the directory
    prefix and any wrapping (angle brackets, title) stay as written.
    """
    plan: List[RenameEntry] = []
    for index, image in enumerate(used, start=1):
        if image.raw_reference is None:
            raise RenameError(f"{image.absolute_path} has no reference in the document")
        directory, file_name = os.path.split(image.absolute_path)
        _, ext = os.path.splitext(file_name)
        if len(ext) < 2:
            raise RenameError(f"{image.absolute_path} has no file extension")
        new_name = f"{index}{ext}"

        path_text = split_target(image.raw_reference)
        prefix, _ = split_file_name(path_text)
        new_reference = image.raw_reference.replace(path_text, prefix + new_name, 1)

        plan.append(
            RenameEntry(
                index=index,
                source=image.absolute_path,
                target=os.path.join(directory, new_name),
                raw_reference=image.raw_reference,
                new_reference=new_reference,
            )
        )
    return plan


def rewrite_references(text: str, plan: Sequence[RenameEntry]) -> Tuple[str, int]:
    """Replace every occurrence of each raw reference in one pass.

    Substitution is simultaneous, so a name written for one entry is never
    picked up again by another. Longer raw texts win over their substrings,
    and a match must not sit inside a longer path or file name.
    """
    replacements: Dict[str, str] = {entry.raw_reference: entry.new_reference for entry in plan}
    if not replacements:
        return text, 0
    alternatives = "|".join(
        re.escape(raw) for raw in sorted(replacements, key=len, reverse=True)
    )
    pattern = re.compile(rf"(?<![\w./\\-])(?:{alternatives})(?![\w-])")
    return pattern.subn(lambda match: replacements[match.group(0)], text)


def _stage_copies(plan: Sequence[RenameEntry], staging: Dict[str, str]) -> Dict[int, str]:
    staged: Dict[int, str] = {}
    for entry in reversed(plan):
        directory = os.path.dirname(entry.target)
        if directory not in staging:
            staging[directory] = tempfile.mkdtemp(prefix=_STAGING_PREFIX, dir=directory)
        staged_path = os.path.join(staging[directory], entry.new_name)
        shutil.copy2(entry.source, staged_path)
        staged[entry.index] = staged_path
    return staged


def rename_images(
    used: Sequence[CatalogedImage],
    document_text: str,
    document_path: str | Path,
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX,
    encoding: str = DEFAULT_ENCODING,
) -> RenameReport:
    """Copy used images to ``<n>.<ext>`` and write ``<stem>_new`` beside the document.

    Copies are staged first and moved into place only once every copy has
    succeeded, so a failed copy leaves the image directories untouched. The
    original document and the original image files are not removed. A
    target that already existed as a different file is overwritten and
    listed in ``RenameReport.overwritten``.
    """
    plan = plan_rename(used)
    new_text, replacements = rewrite_references(document_text, plan)

    staging: Dict[str, str] = {}
    try:
        staged = _stage_copies(plan, staging)
        overwritten = [
            entry.target
            for entry in plan
            if entry.target != entry.source and os.path.exists(entry.target)
        ]
        for entry in reversed(plan):
            os.replace(staged[entry.index], entry.target)
            logger.debug("Copied %s -> %s", entry.source, entry.target)
    finally:
        for directory in staging.values():
            shutil.rmtree(directory, ignore_errors=True)

    for path in overwritten:
        logger.warning("Overwrote existing file %s", path)

    output_path = derive_output_path(document_path, output_suffix)
    output_path.write_text(new_text, encoding=encoding)
    logger.info(
        "Renamed %d image(s), rewrote %d reference(s); saved %s",
        len(plan),
        replacements,
        output_path,
    )
    return RenameReport(
        mapping=[(entry.old_name, entry.new_name) for entry in plan],
        new_document_path=str(output_path),
        replacements=replacements,
        overwritten=overwritten,
    )
