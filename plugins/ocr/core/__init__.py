from __future__ import annotations

from .engine import (
    DEFAULT_LANG,
    DEFAULT_OCR_SCALE,
    OcrError,
    OcrResult,
    PageImage,
    collect,
    images_from_upload,
    recognize,
    tesseract,
)

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
