"""Minimal client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_TIMEOUT = 60.0


class ChatServiceError(RuntimeError):
    """Raised when the language model API fails or returns nothing usable."""


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("An API key is required")
        self.api_key = api_key.strip()
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Gemini request failed: %s", exc)
            raise ChatServiceError(f"Gemini API request failed: {exc}") from exc

        try:
            data: Any = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            error = data.get("error") if isinstance(data, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            if not isinstance(message, str):
                message = None
            raise ChatServiceError(message or "Gemini API Error")

        candidates = data.get("candidates") if isinstance(data, dict) else None
        try:
            return candidates[0]["content"]["parts"][0]["text"]
        except (TypeError, IndexError, KeyError):
            raise ChatServiceError("No response generated by AI.") from None


__all__ = ["ChatServiceError", "GeminiClient", "DEFAULT_ENDPOINT", "DEFAULT_MODEL", "DEFAULT_TIMEOUT"]
