from __future__ import annotations

from .synth import DEFAULT_CHUNK_CHARS, SpeechError, chunk_text, gtts_synthesize, synthesize
from .voices import BUILTIN_VOICES, DEFAULT_VOICE, Voice, find_voice, list_voices

__all__ = [
    "BUILTIN_VOICES",
    "DEFAULT_CHUNK_CHARS",
    "DEFAULT_VOICE",
    "SpeechError",
    "Voice",
    "chunk_text",
    "find_voice",
    "gtts_synthesize",
    "list_voices",
    "synthesize",
]
