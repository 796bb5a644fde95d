"""Pattern-based extraction of local image references from Markdown text."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterator, List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup

from .config import DEFAULT_ENCODING
from .models import ImageReference
from .utils import normalize_path

logger = logging.getLogger("md_image_cleaner")

MARKDOWN_IMAGE_PATTERN = re.compile(r"!\[.*?\]\((.*?)\)")
HTML_IMAGE_PATTERN = re.compile(
    r"""<img\b[^>]*?(?<![\w-])src\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))[^>]*>""",
    re.IGNORECASE,
)
_TITLE_PATTERN = re.compile(r"""\s+(?:"[^"]*"|'[^']*')$""")
_REMOTE_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]+:|//)")


def read_document(path: str | Path, encoding: str = DEFAULT_ENCODING) -> str:
    """Read the whole document; I/O errors are left to the caller."""
    return Path(path).read_text(encoding=encoding)


def split_target(raw_text: str) -> str:
    """Return the path portion of a markdown target as written.

    Surrounding whitespace, ``<...>`` wrapping and a trailing quoted title are
    dropped. The result is always a substring of ``raw_text``.
    """
    text = raw_text.strip()
    if text.startswith("<") and ">" in text:
        return text[1 : text.index(">")]
    return _TITLE_PATTERN.sub("", text)


def is_remote(path_text: str) -> bool:
    return bool(_REMOTE_PATTERN.match(path_text))


def resolve_reference(path_text: str, document_dir: str | Path) -> str:
    """Join a reference with the document directory and normalise it."""
    return normalize_path(os.path.join(os.fspath(document_dir), unquote(path_text)))


class RegexReferenceExtractor:
    """Find markdown and HTML image targets with regular expressions."""

    name = "regex"

    def _markdown_targets(self, text: str) -> Iterator[str]:
        for match in MARKDOWN_IMAGE_PATTERN.finditer(text):
            yield match.group(1)

    def _html_targets(self, text: str) -> Iterator[str]:
        for match in HTML_IMAGE_PATTERN.finditer(text):
            yield next(group for group in match.groups() if group is not None)

    def extract(self, text: str, document_dir: str | Path) -> List[ImageReference]:
        """Return markdown references first, then HTML ones, in appearance order."""
        references: List[ImageReference] = []
        for syntax, targets in (
            ("markdown", self._markdown_targets(text)),
            ("html", self._html_targets(text)),
        ):
            for raw_text in targets:
                path_text = split_target(raw_text) if syntax == "markdown" else raw_text.strip()
                if not path_text or is_remote(path_text):
                    logger.debug("Ignoring non-local image target %r", raw_text)
                    continue
                references.append(
                    ImageReference(
                        raw_text=raw_text,
                        path_text=path_text,
                        absolute_path=resolve_reference(path_text, document_dir),
                        syntax=syntax,
                    )
                )
        return references


class SoupReferenceExtractor(RegexReferenceExtractor):
    """Variant that reads ``<img>`` tags through BeautifulSoup."""

    name = "soup"

    def _html_targets(self, text: str) -> Iterator[str]:
        soup = BeautifulSoup(text, "html.parser")
        for img in soup.find_all("img"):
            src = img.get("src")
            if not src:
                continue
            if src not in text:
                # Entity-decoded values cannot be rewritten in place.
                logger.warning("Skipping <img> src %r: not present verbatim in the document", src)
                continue
            yield src


_EXTRACTORS = {
    RegexReferenceExtractor.name: RegexReferenceExtractor,
    SoupReferenceExtractor.name: SoupReferenceExtractor,
}


def get_extractor(name: str) -> RegexReferenceExtractor:
    try:
        return _EXTRACTORS[name]()
    except KeyError:
        raise ValueError(f"Unknown extractor {name!r}") from None


def extract_references(
    text: str,
    document_dir: str | Path,
    extractor: Optional[RegexReferenceExtractor] = None,
) -> List[ImageReference]:
    """Extract every local image reference from ``text``."""
    extractor = extractor or RegexReferenceExtractor()
    references = extractor.extract(text, document_dir)
    logger.debug("Found %d image reference(s) using %s extractor", len(references), extractor.name)
    return references
