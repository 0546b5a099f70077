from __future__ import annotations

from .cache import TextCache, document_text, fingerprint
from .gemini import DEFAULT_ENDPOINT, DEFAULT_MODEL, DEFAULT_TIMEOUT, ChatServiceError, GeminiClient
from .prompts import (
    MAX_CONTEXT_CHARS,
    NOT_FOUND_ANSWER,
    TRUNCATION_MARKER,
    build_answer_prompt,
    build_cold_email_prompt,
    build_referral_prompt,
    truncate,
)

__all__ = [
    "ChatServiceError",
    "DEFAULT_ENDPOINT",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT",
    "GeminiClient",
    "MAX_CONTEXT_CHARS",
    "NOT_FOUND_ANSWER",
    "TRUNCATION_MARKER",
    "TextCache",
    "build_answer_prompt",
    "build_cold_email_prompt",
    "build_referral_prompt",
    "document_text",
    "fingerprint",
    "truncate",
]
