"""Command-line entry point for the Markdown image cleaner."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .config import DEFAULT_EXTRACTOR, EXTRACTOR_CHOICES, CleanerConfig
from .images import find_format_mismatches
from .models import DiscoveredImage
from .rename import plan_rename
from .session import CleanerSession, relative_name

logger = logging.getLogger("md_image_cleaner.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("scan", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("document", type=Path, help="Markdown document to inspect")
    parser.add_argument(
        "--images",
        type=Path,
        default=None,
        help="Image directory (default: <document> or <document>.assets next to the file)",
    )
    parser.add_argument(
        "--extractor",
        choices=EXTRACTOR_CHOICES,
        default=DEFAULT_EXTRACTOR,
        help="How <img> tags are read: regular expressions or BeautifulSoup",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_confirm_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation before modifying files",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="md-image-cleaner",
        description="Find, delete or renumber the images referenced by a Markdown document.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan", help="List images and whether the document uses them"
    )
    _add_common_arguments(scan_parser)
    scan_parser.add_argument(
        "--verify",
        action="store_true",
        help="Also check that each image's content matches its extension",
    )

    clean_parser = subparsers.add_parser("clean", help="Delete images the document does not use")
    _add_common_arguments(clean_parser)
    _add_confirm_argument(clean_parser)

    rename_parser = subparsers.add_parser(
        "rename", help="Renumber used images and write <name>_new.md"
    )
    _add_common_arguments(rename_parser)
    _add_confirm_argument(rename_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _confirm(prompt: str, assume_yes: bool, ask: Callable[[str], str]) -> bool:
    if assume_yes:
        return True
    try:
        answer = ask(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _open_session(args: argparse.Namespace) -> CleanerSession:
    session = CleanerSession(CleanerConfig(extractor=args.extractor))
    session.select_document(args.document)
    if args.images is not None:
        session.select_image_dir(args.images)
    if session.image_dir is None:
        logger.warning("No image directory found for %s; use --images", args.document)
    return session


def _run_scan(args: argparse.Namespace, session: CleanerSession) -> int:
    for image in session.catalog:
        status = "used" if image.used else "unused"
        print(f"[{status:>6}] {relative_name(image.absolute_path, session.image_dir)}")
    used = len(session.list_used_ordered())
    print(
        f"\n{len(session.catalog)} image(s): {used} used, {len(session.catalog) - used} unused"
    )
    if session.dangling:
        print(f"\n{len(session.dangling)} broken reference(s):")
        print(session.describe([reference.raw_text for reference in session.dangling]))
    if args.verify:
        images = [
            DiscoveredImage(image.absolute_path, Path(image.absolute_path).suffix[1:].lower())
            for image in session.catalog
        ]
        mismatches = find_format_mismatches(images)
        if mismatches:
            print(f"\n{len(mismatches)} image(s) with a mismatched extension:")
            print(
                session.describe(
                    [
                        f"{relative_name(image.absolute_path, session.image_dir)} "
                        f"(content: {detected or 'unknown'})"
                        for image, detected in mismatches
                    ]
                )
            )
    return 0


def _run_clean(args: argparse.Namespace, session: CleanerSession, ask: Callable[[str], str]) -> int:
    unused = session.list_unused()
    if not unused:
        print("No images need to be removed.")
        return 0
    preview = session.describe([relative_name(path, session.image_dir) for path in unused])
    if not _confirm(
        f"Remove these {len(unused)} images?\n\n{preview}\n", args.yes, ask
    ):
        print("Aborted; nothing was removed.")
        return 1
    report = session.delete(unused)
    print(f"Removed {report.count} image(s).")
    if report.failures:
        print(f"{len(report.failures)} image(s) could not be removed:")
        print(session.describe([f"{failure.path}: {failure.error}" for failure in report.failures]))
        return 1
    return 0


def _run_rename(
    args: argparse.Namespace, session: CleanerSession, ask: Callable[[str], str]
) -> int:
    used = session.list_used_ordered()
    if not used:
        print("No images need to be renamed.")
        return 0
    plan = plan_rename(used)
    preview = session.describe([f"{entry.old_name} -> {entry.new_name}" for entry in plan])
    if not _confirm(f"Rename these {len(plan)} images?\n\n{preview}\n", args.yes, ask):
        print("Aborted; nothing was renamed.")
        return 1
    report = session.rename(used)
    print(f"Renamed {len(report.mapping)} image(s).\n\nNew document saved to:\n{report.new_document_path}")
    if report.overwritten:
        print(f"\nOverwrote {len(report.overwritten)} existing file(s):")
        print(session.describe(report.overwritten))
    return 0


def main(argv: Sequence[str] | None = None, ask: Callable[[str], str] = input) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    if not args.document.is_file():
        logger.error("Document not found: %s", args.document)
        return 1
    try:
        session = _open_session(args)
        if args.command == "clean":
            return _run_clean(args, session, ask)
        if args.command == "rename":
            return _run_rename(args, session, ask)
        return _run_scan(args, session)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
