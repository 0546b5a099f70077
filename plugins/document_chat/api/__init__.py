"""Chat with PDF API blueprint."""

from __future__ import annotations

import os

from flask import Blueprint, Response, current_app, request

from common.errors import UpstreamAppError, ValidationAppError
from common.forms import get_int, get_text
from common.logging import get_logger
from common.responses import fail, ok
from common.validation import (
    PDF_MIME,
    FileLimit,
    ValidationError,
    enforce_limits,
    validate_mime,
)
from plugins.pdf_tools.core import PdfToolsError

from ..core import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    MAX_CONTEXT_CHARS,
    ChatServiceError,
    GeminiClient,
    TextCache,
    build_answer_prompt,
    build_cold_email_prompt,
    build_referral_prompt,
    document_text,
    fingerprint,
)

logger = get_logger(__name__)

api_bp = Blueprint("document_chat_api", __name__, url_prefix="/api/document_chat")


def _attach_cache(state) -> None:
    state.app.extensions.setdefault("text_cache", TextCache())


api_bp.record_once(_attach_cache)


def _settings() -> dict:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("document_chat", {}) or {}


def _int_setting(key: str, default: int) -> int:
    try:
        return get_int(_settings(), key, default, minimum=1)
    except ValidationError:
        logger.warning("Ignoring invalid document_chat setting %s", key)
        return default


def _cache() -> TextCache:
    return current_app.extensions["text_cache"]


def _field(name: str, message: str, code: str) -> str:
    try:
        return get_text(request.form, name, required=True, message=message)
    except ValidationError as exc:
        raise ValidationAppError(message=str(exc), code=code) from exc


def _client() -> GeminiClient:
    settings = _settings()
    api_key = get_text(request.form, "api_key") or os.environ.get(
        settings.get("api_key_env", "GEMINI_API_KEY"), ""
    )
    if not api_key.strip():
        raise ValidationAppError(
            message="Please enter your Gemini API Key.", code="chat.missing_api_key"
        )
    return GeminiClient(
        api_key,
        model=settings.get("model", DEFAULT_MODEL),
        endpoint=settings.get("endpoint", DEFAULT_ENDPOINT),
        timeout=float(settings.get("timeout_s", DEFAULT_TIMEOUT)),
    )


def _document() -> tuple[str, bool]:
    """Return the uploaded PDF's text and whether it came from the cache."""

    file = request.files.get("file")
    if not file:
        raise ValidationAppError(
            message="Please select a PDF file first.", code="chat.file_missing"
        )
    limit = FileLimit.from_settings(
        _settings().get("upload"), default_max_files=1, default_max_mb=20
    )
    try:
        enforce_limits([file], limit)
        validate_mime([file], {PDF_MIME})
    except ValidationError as exc:
        raise ValidationAppError(
            message=str(exc), code="chat.invalid_upload", details=exc.details
        ) from exc

    data = file.read()
    cached = fingerprint(data) in _cache()
    try:
        return document_text(data, _cache()), cached
    except PdfToolsError as exc:
        raise ValidationAppError(message=str(exc), code="chat.invalid_upload") from exc


def _generate(prompt: str, client: GeminiClient) -> str:
    try:
        return client.generate(prompt)
    except ChatServiceError as exc:
        raise UpstreamAppError(message=str(exc), code="chat.service_error") from exc


@api_bp.post("/ask")
def ask() -> Response:
    try:
        question = _field("question", "Please enter a question.", "chat.missing_question")
        client = _client()
        text, cached = _document()
        max_chars = _int_setting("max_context_chars", MAX_CONTEXT_CHARS)
        answer = _generate(build_answer_prompt(text, question, max_context_chars=max_chars), client)
    except (ValidationAppError, UpstreamAppError) as exc:
        return fail(exc)

    logger.info("answered question (context cached=%s)", cached)
    return ok({"question": question, "answer": answer, "context_cached": cached})


@api_bp.post("/referral")
def referral() -> Response:
    try:
        job_description = _field(
            "job_description", "Enter Job Description.", "chat.missing_job_description"
        )
        client = _client()
        resume, cached = _document()
        prompt = build_referral_prompt(
            resume,
            job_description,
            portfolio=get_text(request.form, "portfolio"),
            profile_name=get_text(request.form, "profile_name"),
        )
        message = _generate(prompt, client)
    except (ValidationAppError, UpstreamAppError) as exc:
        return fail(exc)
    return ok({"message": message, "context_cached": cached})


@api_bp.post("/cold-email")
def cold_email() -> Response:
    try:
        purpose = _field("purpose", "Enter email purpose.", "chat.missing_purpose")
        client = _client()
        resume, cached = _document()
        prompt = build_cold_email_prompt(
            resume,
            purpose,
            recipient=get_text(request.form, "recipient"),
            company=get_text(request.form, "company"),
        )
        email = _generate(prompt, client)
    except (ValidationAppError, UpstreamAppError) as exc:
        return fail(exc)
    return ok({"email": email, "context_cached": cached})


@api_bp.delete("/context")
def clear_context() -> Response:
    _cache().clear()
    return ok({"cleared": True})


blueprints = [api_bp]


__all__ = ["blueprints", "ask", "referral", "cold_email", "clear_context"]
