"""Tesseract-backed text recognition that reports progress as events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Sequence

import pytesseract
from PIL import Image, UnidentifiedImageError

from common.imaging import open_image
from common.progress import ProgressEvent, done, drain, failed, progress
from common.validation import PDF_MIME, sniff_mime
from plugins.pdf_tools.core import PdfToolsError, render_pages

logger = logging.getLogger(__name__)

DEFAULT_LANG = "eng"
DEFAULT_OCR_SCALE = 2.0

Engine = Callable[[Image.Image, str], str]


class OcrError(RuntimeError):
    """Raised when recognition cannot produce text."""


@dataclass(frozen=True)
class PageImage:
    label: str
    image: Image.Image


@dataclass(frozen=True)
class OcrResult:
    text: str
    pages: List[str]
    events: List[ProgressEvent] = field(default_factory=list)


def tesseract(image: Image.Image, lang: str) -> str:
    return pytesseract.image_to_string(image, lang=lang)


def images_from_upload(data: bytes, *, scale: float = DEFAULT_OCR_SCALE) -> List[PageImage]:
    """Turn an uploaded PDF or PNG/JPEG into images ready for recognition."""

    if sniff_mime(data[:16]) == PDF_MIME:
        try:
            rendered = render_pages(data, scale=scale)
        except PdfToolsError as exc:
            raise OcrError(str(exc)) from exc
        return [
            PageImage(label=f"Page {page.number}", image=open_image(page.png))
            for page in rendered
        ]
    try:
        return [PageImage(label="Image", image=open_image(data))]
    except (UnidentifiedImageError, OSError) as exc:
        raise OcrError("Unsupported image file") from exc


def recognize(
    images: Sequence[PageImage],
    *,
    lang: str = DEFAULT_LANG,
    engine: Engine | None = None,
) -> Iterator[ProgressEvent]:
    """Yield a progress event per image, then a terminal event.

    The ``done`` event's result is the list of per-image texts. Engine
    failures end the stream with an ``error`` event instead of raising.
    """

    engine = engine or tesseract
    total = len(images)
    if total == 0:
        yield failed("Nothing to recognize")
        return

    texts: List[str] = []
    yield progress(0.0, "Recognizing text: 0%")
    for position, page in enumerate(images, start=1):
        try:
            texts.append(engine(page.image, lang).strip())
        except (pytesseract.TesseractError, OSError, RuntimeError) as exc:
            logger.warning("OCR failed on %s: %s", page.label, exc)
            yield failed(f"Error performing OCR: {exc}", (position - 1) / total)
            return
        fraction = position / total
        yield progress(fraction, f"Recognizing text: {round(fraction * 100)}%")
    yield done(texts, "Text extracted successfully!")


def collect(events: Iterable[ProgressEvent]) -> OcrResult:
    """Drain ``events`` into an :class:`OcrResult` or raise :class:`OcrError`."""

    terminal, log = drain(events)
    if terminal.kind == "error":
        raise OcrError(terminal.message)
    pages: List[str] = list(terminal.result)
    if len(pages) == 1:
        text = pages[0]
    else:
        text = "\n\n".join(f"Page {number}:\n{page}" for number, page in enumerate(pages, start=1))
    return OcrResult(text=text, pages=pages, events=log)


__all__ = [
    "DEFAULT_LANG",
    "DEFAULT_OCR_SCALE",
    "OcrError",
    "OcrResult",
    "PageImage",
    "collect",
    "images_from_upload",
    "recognize",
    "tesseract",
]
