"""
BigRedact - PDF Rasterizer

Turns PDF documents into page images for the editor. Rendering uses the
pdftoppm binary (poppler-utils); page geometry is read with pikepdf.
"""

import os
import re
import shutil
import subprocess
from pathlib import Path

import pikepdf

from bigredact.config import IMAGE_EXTENSIONS, PDF_EXTENSIONS
from bigredact.constants import PDF_POINTS_PER_INCH, PDFTOPPM_TIMEOUT
from bigredact.utils.exceptions import ConversionError, InvalidArgumentError
from bigredact.utils.logger import logger

_PAGE_NUMBER_RE = re.compile(r"-(\d+)\.png$")


def is_image_file(file_path: str | Path) -> bool:
    """Check if a file path has a supported image extension."""
    return str(file_path).lower().endswith(IMAGE_EXTENSIONS)


def is_pdf_file(file_path: str | Path) -> bool:
    return str(file_path).lower().endswith(PDF_EXTENSIONS)


def _resolve_rotation(page: pikepdf.Page) -> int:
    """Effective /Rotate of a page, including values inherited from the page tree."""
    node = page.obj
    while node is not None:
        if "/Rotate" in node:
            return int(node["/Rotate"]) % 360
        node = node.get("/Parent")
    return 0


def get_page_sizes(pdf_path: str | Path) -> list[tuple[float, float]]:
    """Displayed size of every page, in PDF points.

    The MediaBox is swapped for pages carrying a /Rotate of 90 or 270, which
    is how pdftoppm renders them.

    Raises:
        FileNotFoundError: If the file does not exist
        ConversionError: If the file is not a valid PDF
    """
    pdf_path = str(pdf_path)
    if not os.path.isfile(pdf_path):
        raise FileNotFoundError(f"File not found: {pdf_path}")

    sizes = []
    try:
        with pikepdf.open(pdf_path) as pdf:
            for page in pdf.pages:
                x0, y0, x1, y1 = (float(v) for v in page.mediabox)
                width, height = abs(x1 - x0), abs(y1 - y0)
                if _resolve_rotation(page) % 180 == 90:
                    width, height = height, width
                sizes.append((width, height))
    except pikepdf.PdfError as e:
        logger.error(f"Cannot read page sizes of {pdf_path}: {e}")
        raise ConversionError(pdf_path, str(e)) from e
    return sizes


def get_page_count(pdf_path: str | Path) -> int:
    try:
        with pikepdf.open(str(pdf_path)) as pdf:
            return len(pdf.pages)
    except pikepdf.PdfError as e:
        raise ConversionError(str(pdf_path), str(e)) from e


def _page_number(file_name: str) -> int:
    match = _PAGE_NUMBER_RE.search(file_name)
    return int(match.group(1)) if match else 0


def convert_pdf_to_png(
    pdf_path: str | Path,
    scale: float,
    output_dir: str | Path,
) -> list[str]:
    """Render every page of a PDF to PNG files.

    Args:
        pdf_path: Path to the PDF file
        scale: Output pixels per PDF point
        output_dir: Existing directory that receives the images

    Returns:
        PNG paths in page order

    Raises:
        InvalidArgumentError: If scale is not positive
        ConversionError: If pdftoppm is missing, fails or produces nothing
    """
    pdf_path = str(pdf_path)
    if scale <= 0:
        raise InvalidArgumentError("scale", scale, "must be positive")
    if shutil.which("pdftoppm") is None:
        raise ConversionError(pdf_path, "pdftoppm not found, install poppler-utils")

    dpi = round(PDF_POINTS_PER_INCH * scale)
    prefix = os.path.join(str(output_dir), "page")
    try:
        result = subprocess.run(
            ["pdftoppm", "-png", "-r", str(dpi), pdf_path, prefix],
            capture_output=True,
            timeout=PDFTOPPM_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise ConversionError(pdf_path, f"pdftoppm timed out after {e.timeout}s") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise ConversionError(pdf_path, stderr or None, exit_code=result.returncode)

    files = sorted(
        (f for f in os.listdir(output_dir) if f.startswith("page-") and f.endswith(".png")),
        key=_page_number,
    )
    if not files:
        raise ConversionError(pdf_path, "pdftoppm produced no pages")

    logger.info(f"Rasterized {len(files)} page(s) of {os.path.basename(pdf_path)} at {dpi} dpi")
    return [os.path.join(str(output_dir), f) for f in files]
