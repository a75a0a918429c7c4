"""
BigRedact - Export Service Module

Writes exported page images to disk, either as numbered PNG files or
bundled into a single PDF document.
"""

import io
import os

import pikepdf
from PIL import Image

from bigredact.config import APP_NAME
from bigredact.constants import DEFAULT_EXPORT_PREFIX, PDF_POINTS_PER_INCH
from bigredact.utils.i18n import _
from bigredact.utils.logger import logger


def save_png_files(
    images: list[Image.Image],
    output_dir: str,
    prefix: str = DEFAULT_EXPORT_PREFIX,
) -> list[str] | None:
    """Save page images as ``<prefix>-<n>.png`` with 1-based ``n``.

    Args:
        images: Page images in document order
        output_dir: Target directory, created if missing
        prefix: File name prefix

    Returns:
        Paths of the written files, or None on failure
    """
    try:
        os.makedirs(output_dir, exist_ok=True)
        paths = []
        for number, image in enumerate(images, start=1):
            path = os.path.join(output_dir, f"{prefix}-{number}.png")
            image.save(path, format="PNG")
            paths.append(path)

        logger.info(_("Saved {0} page image(s) to: {1}").format(len(paths), output_dir))
        return paths

    except OSError as e:
        logger.error(_("Failed to save page images: {0}").format(e))
        return None


def _image_to_pdf_page(image: Image.Image, resolution: float) -> pikepdf.Pdf:
    if image.mode != "RGB":
        background = Image.new("RGB", image.size, (255, 255, 255))
        if image.mode == "RGBA":
            background.paste(image, mask=image.getchannel("A"))
        else:
            background.paste(image.convert("RGB"))
        image = background

    pdf_bytes = io.BytesIO()
    image.save(pdf_bytes, format="PDF", resolution=resolution)
    pdf_bytes.seek(0)
    return pikepdf.Pdf.open(pdf_bytes)


def save_pdf_file(
    images: list[Image.Image],
    output_path: str,
    page_sizes: list[tuple[float, float]] | None = None,
) -> str | None:
    """Bundle page images into one PDF.

    Args:
        images: Page images in document order
        output_path: Destination PDF path
        page_sizes: Optional page size in points for every image; without
            it pages are 72 dpi, one point per pixel

    Returns:
        Path to the saved PDF, or None on failure
    """
    if not images:
        logger.error(_("No pages to save"))
        return None

    parts: list[pikepdf.Pdf] = []
    try:
        pdf = pikepdf.Pdf.new()
        for index, image in enumerate(images):
            resolution = float(PDF_POINTS_PER_INCH)
            if page_sizes and index < len(page_sizes):
                width_pt = page_sizes[index][0]
                if width_pt > 0:
                    resolution = PDF_POINTS_PER_INCH * image.width / width_pt
            part = _image_to_pdf_page(image, resolution)
            parts.append(part)
            pdf.pages.append(part.pages[0])

        pdf.docinfo["/Producer"] = APP_NAME
        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        pdf.save(output_path)
        pdf.close()

        logger.info(_("Saved PDF with {0} page(s) to: {1}").format(len(images), output_path))
        return output_path

    except (OSError, pikepdf.PdfError) as e:
        logger.error(_("Failed to save PDF file: {0}").format(e))
        return None
    finally:
        for part in parts:
            part.close()
