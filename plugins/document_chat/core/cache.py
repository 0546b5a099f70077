"""Cache of extracted document text keyed by content fingerprint."""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import Optional

from plugins.pdf_tools.core import extract_text

logger = logging.getLogger(__name__)


def fingerprint(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class TextCache:
    """Holds the text of the most recently used document.

    Setting a new key replaces the previous entry, so selecting another file
    invalidates the old text. ``clear`` drops it explicitly.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: Optional[str] = None
        self._value: Optional[str] = None

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._value if key == self._key else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._key = key
            self._value = value

    def clear(self) -> None:
        with self._lock:
            self._key = None
            self._value = None

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def document_text(data: bytes, cache: TextCache) -> str:
    """Return the text of ``data``, extracting it only on a cache miss."""

    key = fingerprint(data)
    text = cache.get(key)
    if text is None:
        logger.info("extracting text for document %s", key[:12])
        text = extract_text(data)
        cache.set(key, text)
    return text


__all__ = ["TextCache", "fingerprint", "document_text"]
