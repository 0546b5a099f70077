"""OCR API blueprint."""

from __future__ import annotations

import re

from flask import Blueprint, Response, current_app, request

from common.errors import UpstreamAppError, ValidationAppError
from common.forms import get_text
from common.responses import fail, ok
from common.validation import (
    IMAGE_MIMES,
    PDF_MIME,
    FileLimit,
    ValidationError,
    enforce_limits,
    validate_mime,
)

from ..core import DEFAULT_LANG, DEFAULT_OCR_SCALE, OcrError, collect, images_from_upload, recognize

api_bp = Blueprint("ocr_api", __name__, url_prefix="/api/ocr")

_LANG_RE = re.compile(r"^[A-Za-z_]{3,}(\+[A-Za-z_]{3,})*$")


def _settings() -> dict:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("ocr", {}) or {}


@api_bp.post("/extract")
def extract() -> Response:
    settings = _settings()
    file = request.files.get("file")
    if not file:
        return fail(ValidationAppError(message="Please select an image file.", code="ocr.file_missing"))

    limit = FileLimit.from_settings(settings.get("upload"), default_max_files=1, default_max_mb=10)
    try:
        enforce_limits([file], limit)
        validate_mime([file], IMAGE_MIMES | {PDF_MIME})
    except ValidationError as exc:
        return fail(
            ValidationAppError(message=str(exc), code="ocr.invalid_upload", details=exc.details)
        )

    lang = get_text(request.form, "lang", settings.get("lang", DEFAULT_LANG))
    if not _LANG_RE.match(lang):
        return fail(ValidationAppError(message="Invalid OCR language", code="ocr.invalid_lang"))

    try:
        images = images_from_upload(file.read(), scale=float(settings.get("scale", DEFAULT_OCR_SCALE)))
    except OcrError as exc:
        return fail(ValidationAppError(message=str(exc), code="ocr.invalid_upload"))

    try:
        result = collect(recognize(images, lang=lang))
    except OcrError as exc:
        return fail(UpstreamAppError(message=str(exc), code="ocr.engine_error"))

    return ok(
        {
            "text": result.text,
            "pages": result.pages,
            "lang": lang,
            "progress": [event.to_dict() for event in result.events],
        }
    )


blueprints = [api_bp]


__all__ = ["blueprints", "extract"]
