"""Stamp a rotated text watermark onto every page."""

from __future__ import annotations

import re
from dataclasses import dataclass
from io import BytesIO

from PyPDF2 import PdfReader, PdfWriter
from reportlab.pdfbase.pdfmetrics import getAscentDescent
from reportlab.pdfgen import canvas

from .documents import PdfToolsError, load_pdf

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")

DEFAULT_TEXT = "CONFIDENTIAL"
DEFAULT_COLOR = "#FF0000"
DEFAULT_OPACITY = 0.5
FONT_NAME = "Helvetica-Bold"
FONT_SIZE = 50
ANGLE = 45


@dataclass(frozen=True)
class WatermarkOptions:
    text: str = DEFAULT_TEXT
    color: str = DEFAULT_COLOR
    opacity: float = DEFAULT_OPACITY


def parse_hex_color(value: str) -> tuple[float, float, float]:
    """Convert ``#RRGGBB`` into reportlab's 0..1 RGB floats."""

    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise PdfToolsError(f"Invalid colour {value!r}; expected #RRGGBB")
    digits = match.group(1)
    return tuple(int(digits[i : i + 2], 16) / 255 for i in (0, 2, 4))  # type: ignore[return-value]


def _overlay(box, options: WatermarkOptions, rgb) -> PdfReader:
    """Draw the stamp centred on ``box``, which need not start at the origin."""

    left, bottom = float(box.left), float(box.bottom)
    width, height = float(box.width), float(box.height)
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(max(left + width, width), max(bottom + height, height)))
    c.saveState()
    c.setFillColorRGB(*rgb)
    c.setFillAlpha(options.opacity)
    c.setFont(FONT_NAME, FONT_SIZE)
    c.translate(left + width / 2.0, bottom + height / 2.0)
    c.rotate(ANGLE)
    ascent, descent = getAscentDescent(FONT_NAME, FONT_SIZE)
    c.drawCentredString(0, -(ascent + descent) / 2.0, options.text)
    c.restoreState()
    c.showPage()
    c.save()
    buf.seek(0)
    return PdfReader(buf)


def add_watermark(data: bytes, options: WatermarkOptions | None = None) -> bytes:
    options = options or WatermarkOptions()
    if not 0.0 <= options.opacity <= 1.0:
        raise PdfToolsError("Opacity must be between 0 and 1")
    text = options.text.strip() or DEFAULT_TEXT
    options = WatermarkOptions(text=text, color=options.color, opacity=options.opacity)
    rgb = parse_hex_color(options.color)

    reader = load_pdf(data)
    writer = PdfWriter()
    for page in reader.pages:
        stamp = _overlay(page.mediabox, options, rgb)
        page.merge_page(stamp.pages[0])
        writer.add_page(page)

    out = BytesIO()
    writer.write(out)
    return out.getvalue()


__all__ = ["WatermarkOptions", "parse_hex_color", "add_watermark"]
