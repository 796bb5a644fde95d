"""MCP server exposing the image cleaner as tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from .session import CleanerSession, relative_name

logger = logging.getLogger("md_image_cleaner.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="md-image-cleaner")


def _open_session(path: str, image_dir: Optional[str]) -> CleanerSession:
    document = Path(path).expanduser()
    if not document.is_file():
        raise FileNotFoundError(f"Document path does not exist: {document}")
    session = CleanerSession()
    session.select_document(document)
    if image_dir:
        session.select_image_dir(Path(image_dir).expanduser())
    if session.image_dir is None:
        raise FileNotFoundError(f"No image directory found for {document}")
    return session


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "- (none)"


def render_catalog(session: CleanerSession) -> str:
    """Markdown summary of the current catalog."""
    used = [
        relative_name(image.absolute_path, session.image_dir)
        for image in session.list_used_ordered()
    ]
    unused = [relative_name(path, session.image_dir) for path in session.list_unused()]
    sections = [
        f"# Images for {session.document_path.name}",
        f"Image directory: {session.image_dir}",
        f"## Used ({len(used)})\n{_bullets(used)}",
        f"## Unused ({len(unused)})\n{_bullets(unused)}",
    ]
    if session.dangling:
        broken = [reference.raw_text for reference in session.dangling]
        sections.append(f"## Broken references ({len(broken)})\n{_bullets(broken)}")
    return "\n\n".join(sections) + "\n"


@mcp.tool()
async def scan_document(path: str, image_dir: Optional[str] = None) -> str:
    """List the images under the document's image directory and whether they are used."""
    return render_catalog(_open_session(path, image_dir))


@mcp.tool()
async def remove_unused_images(path: str, image_dir: Optional[str] = None) -> str:
    """Delete every image the Markdown document does not reference."""
    session = _open_session(path, image_dir)
    unused = session.list_unused()
    if not unused:
        return "No images need to be removed.\n"
    report = session.delete(unused)
    lines = [f"Removed {report.count} image(s):", session.describe(report.deleted)]
    if report.failures:
        lines.append(f"\n{len(report.failures)} image(s) could not be removed:")
        lines.append(
            session.describe([f"{failure.path}: {failure.error}" for failure in report.failures])
        )
    return "\n".join(lines) + "\n"


@mcp.tool()
async def renumber_images(path: str, image_dir: Optional[str] = None) -> str:
    """Copy used images to 1.ext, 2.ext, ... and write <name>_new.md with updated links."""
    session = _open_session(path, image_dir)
    if not session.list_used_ordered():
        return "No images need to be renamed.\n"
    report = session.rename()
    mapping = session.describe([f"{old} -> {new}" for old, new in report.mapping])
    return (
        f"Renamed {len(report.mapping)} image(s):\n{mapping}\n\n"
        f"New document saved to: {report.new_document_path}\n"
    )


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
