"""Conversions between raster images and PDF documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .documents import PageSelectionError, PdfToolsError
from .page_ranges import select_pages

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_FORMATS = {"PNG", "JPEG"}
DEFAULT_RENDER_SCALE = 1.5


@dataclass(frozen=True)
class ImageInput:
    data: bytes
    filename: str = "image"


@dataclass(frozen=True)
class RenderedPage:
    """One rasterized page; ``number`` is 1-based."""

    number: int
    width: int
    height: int
    png: bytes


def images_to_pdf(images: Iterable[ImageInput]) -> bytes:
    """Place each PNG/JPEG on its own page sized to the image's pixels.

    Images in any other format are skipped.
    """

    buf = BytesIO()
    pdf = canvas.Canvas(buf)
    pages = 0
    for item in images:
        try:
            image = Image.open(BytesIO(item.data))
            image.load()
        except (UnidentifiedImageError, OSError):
            logger.warning("Skipping unreadable image: %s", item.filename)
            continue
        if image.format not in SUPPORTED_IMAGE_FORMATS:
            logger.warning("Skipping unsupported file: %s (%s)", item.filename, image.format)
            continue

        width, height = image.size
        pdf.setPageSize((width, height))
        pdf.drawImage(ImageReader(image), 0, 0, width=width, height=height, mask="auto")
        pdf.showPage()
        pages += 1

    if pages == 0:
        raise PdfToolsError("No valid images were processed.")
    pdf.save()
    return buf.getvalue()


def _open_document(data: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise PdfToolsError("Unable to read PDF") from exc


def render_pages(
    data: bytes,
    *,
    scale: float = DEFAULT_RENDER_SCALE,
    expression: str | None = None,
) -> List[RenderedPage]:
    """Rasterize pages to PNG at ``scale`` (1.0 renders at 72 dpi).

    With ``expression`` only the selected pages are rendered; an expression
    selecting nothing is an error.
    """

    if scale <= 0:
        raise PdfToolsError("Scale must be positive")

    document = _open_document(data)
    try:
        if expression:
            indices = select_pages(expression, document.page_count)
            if not indices:
                raise PageSelectionError("Invalid page range or pages out of bounds.")
        else:
            indices = list(range(document.page_count))

        matrix = fitz.Matrix(scale, scale)
        rendered: List[RenderedPage] = []
        for index in indices:
            pix = document.load_page(index).get_pixmap(matrix=matrix, alpha=False)
            rendered.append(
                RenderedPage(
                    number=index + 1,
                    width=pix.width,
                    height=pix.height,
                    png=pix.tobytes("png"),
                )
            )
    finally:
        document.close()
    return rendered


__all__ = [
    "SUPPORTED_IMAGE_FORMATS",
    "DEFAULT_RENDER_SCALE",
    "ImageInput",
    "RenderedPage",
    "images_to_pdf",
    "render_pages",
]
