#!/usr/bin/env python3
"""
BigRedact CLI - rotate, redact and export document pages from the terminal.

Usage:
    python -m bigredact.cli <command> [options]

Commands:
    export      Open images/PDFs, apply rotations and redactions, export pages
    info        Show the pages an input would produce

Examples:
    # Export every page of a PDF as PNG, long edge 3000 px
    bigredact-cli export scan.pdf -o out/

    # Rotate page 2 clockwise and black out a box on page 1
    bigredact-cli export a.png b.jpg -o out/ --rotate 2:90 --redact 1:50,60,200,40

    # Also bundle the result into one PDF
    bigredact-cli export scan.pdf -o out/ --pdf out/redacted.pdf

    # Info
    bigredact-cli info scan.pdf photo.jpg
"""

import argparse
import logging
import sys
from pathlib import Path

from bigredact import config
from bigredact.utils.i18n import _

# ---------------------------------------------------------------------------
# Argument parsers (shared)
# ---------------------------------------------------------------------------


def _parse_rotation(text: str) -> tuple[int, int]:
    """Parse ``PAGE:DEGREES`` into a 1-indexed page and a quarter-turn angle.

    Args:
        text: Rotation specification, e.g. "2:90" or "3:-90"

    Returns:
        (page, degrees) tuple
    """
    try:
        page_s, degrees_s = text.split(":", 1)
        page, degrees = int(page_s.strip()), int(degrees_s.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid rotation '{text}'. Use PAGE:DEGREES like '2:90'."
        ) from None
    if page < 1:
        raise argparse.ArgumentTypeError(f"Invalid page number in '{text}'.")
    if degrees % 90 != 0:
        raise argparse.ArgumentTypeError(f"Rotation must be a multiple of 90 in '{text}'.")
    return page, degrees


def _parse_redaction(text: str) -> tuple[int, tuple[float, float, float, float]]:
    """Parse ``PAGE:X,Y,W,H`` into a 1-indexed page and a box in page units.

    Args:
        text: Redaction specification, e.g. "1:50,60,200,40"

    Returns:
        (page, (x, y, width, height)) tuple
    """
    try:
        page_s, box_s = text.split(":", 1)
        page = int(page_s.strip())
        x, y, w, h = (float(v) for v in box_s.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid redaction '{text}'. Use PAGE:X,Y,W,H like '1:50,60,200,40'."
        ) from None
    if page < 1:
        raise argparse.ArgumentTypeError(f"Invalid page number in '{text}'.")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"Redaction size must be positive in '{text}'.")
    return page, (x, y, w, h)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog="bigredact-cli",
        description="BigRedact - rotate, redact and export document pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help=_("Verbose logging (DEBUG)"))
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help=_("Settings file (default: ~/.config/bigredact/settings.json)"),
    )

    sub = p.add_subparsers(dest="command", help=_("Available commands"))

    # --- export ---
    exp_p = sub.add_parser("export", help=_("Export pages as PNG images"))
    exp_p.add_argument("inputs", type=Path, nargs="+", help=_("Input images or PDF files"))
    exp_p.add_argument(
        "-o", "--output", type=Path, required=True, help=_("Output directory for PNG files")
    )
    exp_p.add_argument(
        "--long-edge",
        type=int,
        default=None,
        help=_("Pixels on the longer side of each page (default: from settings, 3000)"),
    )
    exp_p.add_argument(
        "--rotate",
        type=_parse_rotation,
        action="append",
        default=[],
        metavar="PAGE:DEG",
        help=_("Rotate a page clockwise by DEG (repeatable)"),
    )
    exp_p.add_argument(
        "--redact",
        type=_parse_redaction,
        action="append",
        default=[],
        metavar="PAGE:X,Y,W,H",
        help=_(
            "Draw a redaction box in upright page coordinates, before rotation (repeatable)"
        ),
    )
    exp_p.add_argument("--prefix", type=str, default=None, help=_("File name prefix"))
    exp_p.add_argument("--pdf", type=Path, default=None, help=_("Also save a combined PDF"))
    exp_p.add_argument(
        "--pdf-scale",
        type=float,
        default=None,
        help=_("Pixels per point when rasterizing PDF inputs (default: 2.0)"),
    )

    # --- info ---
    info_p = sub.add_parser("info", help=_("Show pages and sizes of the inputs"))
    info_p.add_argument("inputs", type=Path, nargs="+", help=_("Input images or PDF files"))

    return p


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _draw_redaction(session, page_number: int, box: tuple[float, float, float, float]) -> None:
    """Drag out a redaction rectangle through the annotation tool."""
    x, y, w, h = box
    session.go_to_page(page_number - 1)
    viewport = session.viewport
    session.activate_draw_mode()
    session.pointer_down(*viewport.to_stage_coords(x, y))
    session.pointer_move(*viewport.to_stage_coords(x + w, y + h))
    session.pointer_up()


def _cmd_export(args, logger) -> int:
    """Handle the 'export' command."""
    from bigredact.editor.editor_session import EditorSession
    from bigredact.services.export_service import save_pdf_file, save_png_files
    from bigredact.utils.config_manager import ConfigManager
    from bigredact.utils.exceptions import BigRedactError

    settings = ConfigManager(str(args.config)) if args.config else None
    session = EditorSession(config=settings)
    try:
        futures = session.open_files([str(p) for p in args.inputs], pdf_scale=args.pdf_scale)
        for future in futures:
            session.wait(future)

        page_count = len(session.pages)
        for page_number, _value in [*args.redact, *args.rotate]:
            if page_number > page_count:
                print(
                    f"Error: page {page_number} out of range (1-{page_count})", file=sys.stderr
                )
                return 1

        for page_number, box in args.redact:
            _draw_redaction(session, page_number, box)
        for page_number, degrees in args.rotate:
            session.go_to_page(page_number - 1)
            session.rotate(degrees)

        images = session.export_all(args.long_edge).result()
        prefix = args.prefix or session.config.get("export.prefix", "page")
        paths = save_png_files(images, str(args.output), prefix)
        if paths is None:
            print("Error: could not write page images", file=sys.stderr)
            return 1

        if args.pdf and save_pdf_file(images, str(args.pdf), session.frame_sizes()) is None:
            print(f"Error: could not write {args.pdf}", file=sys.stderr)
            return 1

    except BigRedactError as e:
        logger.debug(f"Export failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()

    print(f"Exported {len(paths)} page(s) → {args.output}")
    return 0


def _cmd_info(args, logger) -> int:
    """Handle the 'info' command."""
    from PIL import Image

    from bigredact.services.pdf_rasterizer import get_page_sizes, is_pdf_file
    from bigredact.utils.exceptions import BigRedactError

    for path in args.inputs:
        print(f"File:       {path}")
        if is_pdf_file(path):
            try:
                sizes = get_page_sizes(path)
            except BigRedactError as e:
                logger.debug(f"Info failed: {e!r}")
                print(f"Error: {e}", file=sys.stderr)
                return 1
            print(f"Pages:      {len(sizes)}")
            for number, (width, height) in enumerate(sizes, start=1):
                print(f"  {number:>4}: {width:g} x {height:g} pt")
        else:
            with Image.open(path) as img:
                print("Pages:      1")
                print(f"  {1:>4}: {img.width} x {img.height} px ({img.format})")
    return 0


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Configure logging
    config.set_debug(args.verbose)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
    )
    logger = logging.getLogger("bigredact.cli")

    # Validate input file existence
    for path in getattr(args, "inputs", []):
        if not path.exists():
            print(f"Error: {path} not found", file=sys.stderr)
            return 1

    handlers = {
        "export": _cmd_export,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args, logger)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
