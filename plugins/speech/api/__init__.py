"""Text to speech API blueprint."""

from __future__ import annotations

import base64

from flask import Blueprint, Response, current_app, request

from common.errors import UpstreamAppError, ValidationAppError
from common.forms import get_int
from common.logging import get_logger
from common.progress import drain
from common.responses import attachment, download_requested, fail, ok
from common.validation import SchemaModel, ValidationError, parse_model

from ..core import DEFAULT_CHUNK_CHARS, SpeechError, list_voices, synthesize

logger = get_logger(__name__)

api_bp = Blueprint("speech_api", __name__, url_prefix="/api/speech")


class SynthesizePayload(SchemaModel):
    text: str = ""
    voice: str | None = None


def _settings() -> dict:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("speech", {}) or {}


def _int_setting(key: str, default: int) -> int:
    try:
        return get_int(_settings(), key, default, minimum=1)
    except ValidationError:
        logger.warning("Ignoring invalid speech setting %s", key)
        return default


def _voices():
    return list_voices(_settings().get("voices"))


@api_bp.get("/voices")
def voices() -> Response:
    return ok({"voices": [voice.to_dict() for voice in _voices()], "default": "en-us"})


@api_bp.post("/synthesize")
def synthesize_endpoint() -> Response:
    max_chars = _int_setting("max_text_chars", 20000)
    try:
        payload = parse_model(SynthesizePayload, request.get_json(silent=True))
    except ValidationError as exc:
        return fail(
            ValidationAppError(message=str(exc), code="speech.invalid_request", details=exc.details)
        )
    if len(payload.text) > max_chars:
        return fail(
            ValidationAppError(
                message=f"Text exceeds {max_chars} characters", code="speech.text_too_long"
            )
        )

    try:
        events = synthesize(
            payload.text,
            payload.voice,
            voices=_voices(),
            chunk_chars=_int_setting("chunk_chars", DEFAULT_CHUNK_CHARS),
        )
    except SpeechError as exc:
        return fail(ValidationAppError(message=str(exc), code="speech.invalid_request"))

    terminal, log = drain(events)
    if terminal.kind == "error":
        return fail(UpstreamAppError(message=terminal.message, code="speech.synthesis_failed"))

    audio: bytes = terminal.result
    if download_requested():
        return attachment(audio, filename="speech.mp3", mimetype="audio/mpeg")
    return ok(
        {
            "audio_base64": base64.b64encode(audio).decode("ascii"),
            "mimetype": "audio/mpeg",
            "progress": [event.to_dict() for event in log],
        }
    )


blueprints = [api_bp]


__all__ = ["blueprints", "voices", "synthesize_endpoint"]
