"""Removal of images that the document does not reference."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Sequence

from .models import CatalogedImage, DeleteFailure, DeleteReport

logger = logging.getLogger("md_image_cleaner")


def unused_images(catalog: Iterable[CatalogedImage]) -> List[str]:
    """Paths of catalog entries without a reference, in catalog order."""
    return [image.absolute_path for image in catalog if not image.used]


def delete_images(paths: Sequence[str]) -> DeleteReport:
    """Delete each path in turn, collecting failures instead of stopping."""
    report = DeleteReport(requested=len(paths))
    for path in paths:
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", path, exc)
            report.failures.append(DeleteFailure(path=path, error=str(exc)))
            continue
        logger.debug("Deleted %s", path)
        report.deleted.append(path)
    if paths:
        logger.info(
            "Deleted %d of %d image(s) (%d failed)",
            report.count,
            report.requested,
            len(report.failures),
        )
    return report
