"""Reconcile on-disk images with the references found in the document."""

from __future__ import annotations

import os
from typing import Dict, Iterable, List, Sequence

from .models import CatalogedImage, DiscoveredImage, ImageReference


def reconcile(
    discovered: Sequence[DiscoveredImage],
    references: Iterable[ImageReference],
) -> List[CatalogedImage]:
    """Annotate every discovered image with the reference that uses it.

    Output follows scanner order. When several raw texts resolve to the same
    path the last one wins.
    """
    lookup: Dict[str, str] = {}
    for reference in references:
        lookup[reference.absolute_path] = reference.raw_text
    return [
        CatalogedImage(
            absolute_path=image.absolute_path,
            raw_reference=lookup.get(image.absolute_path),
        )
        for image in discovered
    ]


def find_dangling(
    discovered: Iterable[DiscoveredImage],
    references: Iterable[ImageReference],
) -> List[ImageReference]:
    """References that resolve to no file on disk, first occurrence only.

    Files outside the scanned directory, or with an extension outside the
    allow-list, still count as existing.
    """
    on_disk = {image.absolute_path for image in discovered}
    seen = set()
    dangling: List[ImageReference] = []
    for reference in references:
        if reference.absolute_path in on_disk or reference.raw_text in seen:
            continue
        if os.path.isfile(reference.absolute_path):
            continue
        seen.add(reference.raw_text)
        dangling.append(reference)
    return dangling


def used_images(catalog: Iterable[CatalogedImage]) -> List[CatalogedImage]:
    return [image for image in catalog if image.used]
