"""Chunked speech synthesis with progress events."""

from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import Callable, Iterable, Iterator, List

from gtts import gTTS, gTTSError

from common.progress import ProgressEvent, done, failed, progress

from .voices import Voice, find_voice, list_voices

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_CHARS = 500

_SENTENCE_END = re.compile(r"(?<=[.!?;:])\s+")

Synthesizer = Callable[[str, Voice], bytes]


class SpeechError(ValueError):
    """Raised when a synthesis request is invalid."""


def gtts_synthesize(text: str, voice: Voice) -> bytes:
    buf = BytesIO()
    gTTS(text=text, lang=voice.lang, tld=voice.tld).write_to_fp(buf)
    return buf.getvalue()


def chunk_text(text: str, max_chars: int = DEFAULT_CHUNK_CHARS) -> List[str]:
    """Split ``text`` at sentence ends into chunks of at most ``max_chars``.

    A single sentence longer than the limit is split on whitespace, and a
    single word longer than the limit is cut.
    """

    max_chars = max(max_chars, 1)
    chunks: List[str] = []
    current = ""
    for sentence in _SENTENCE_END.split(" ".join(text.split())):
        pieces = [sentence]
        if len(sentence) > max_chars:
            pieces = []
            line = ""
            for word in sentence.split(" "):
                while len(word) > max_chars:
                    if line:
                        pieces.append(line)
                        line = ""
                    pieces.append(word[:max_chars])
                    word = word[max_chars:]
                if line and len(line) + 1 + len(word) > max_chars:
                    pieces.append(line)
                    line = word
                else:
                    line = f"{line} {word}" if line else word
            if line:
                pieces.append(line)
        for piece in pieces:
            if current and len(current) + 1 + len(piece) <= max_chars:
                current = f"{current} {piece}"
            else:
                if current:
                    chunks.append(current)
                current = piece
    if current:
        chunks.append(current)
    return chunks


def _run(chunks: List[str], voice: Voice, synthesizer: Synthesizer) -> Iterator[ProgressEvent]:
    audio = BytesIO()
    total = len(chunks)
    yield progress(0.0, f"Synthesizing with {voice.label}")
    for position, chunk in enumerate(chunks, start=1):
        try:
            audio.write(synthesizer(chunk, voice))
        except (gTTSError, ValueError, OSError) as exc:
            logger.warning("speech synthesis failed on chunk %s/%s: %s", position, total, exc)
            yield failed("Error playing audio.", (position - 1) / total)
            return
        yield progress(position / total, f"Synthesized {position} of {total}")
    yield done(audio.getvalue(), "Finished playing.")


def synthesize(
    text: str,
    voice_id: str | None = None,
    *,
    voices: Iterable[Voice] | None = None,
    chunk_chars: int = DEFAULT_CHUNK_CHARS,
    synthesizer: Synthesizer | None = None,
) -> Iterator[ProgressEvent]:
    """Validate the request, then return the lazy synthesis event stream.

    The ``done`` event carries the MP3 bytes of the whole text.
    """

    if not text or not text.strip():
        raise SpeechError("Please enter some text.")
    voice = find_voice(voice_id, voices if voices is not None else list_voices())
    if voice is None:
        raise SpeechError(f"Unknown voice {voice_id!r}")
    return _run(chunk_text(text, chunk_chars), voice, synthesizer or gtts_synthesize)


__all__ = [
    "DEFAULT_CHUNK_CHARS",
    "SpeechError",
    "chunk_text",
    "gtts_synthesize",
    "synthesize",
]
