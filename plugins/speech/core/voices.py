"""Voice catalogue for the gTTS synthesizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping


@dataclass(frozen=True)
class Voice:
    id: str
    lang: str
    tld: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "lang": self.lang, "tld": self.tld, "label": self.label}


DEFAULT_VOICE = Voice(id="en-us", lang="en", tld="com", label="English (United States)")

BUILTIN_VOICES: tuple[Voice, ...] = (
    DEFAULT_VOICE,
    Voice(id="en-gb", lang="en", tld="co.uk", label="English (United Kingdom)"),
    Voice(id="en-au", lang="en", tld="com.au", label="English (Australia)"),
    Voice(id="en-in", lang="en", tld="co.in", label="English (India)"),
    Voice(id="fr-fr", lang="fr", tld="fr", label="French (France)"),
    Voice(id="fr-ca", lang="fr", tld="ca", label="French (Canada)"),
    Voice(id="es-es", lang="es", tld="es", label="Spanish (Spain)"),
    Voice(id="es-mx", lang="es", tld="com.mx", label="Spanish (Mexico)"),
    Voice(id="pt-br", lang="pt", tld="com.br", label="Portuguese (Brazil)"),
    Voice(id="de-de", lang="de", tld="de", label="German"),
    Voice(id="hi-in", lang="hi", tld="co.in", label="Hindi"),
)


def list_voices(extra: Iterable[Mapping[str, str]] | None = None) -> List[Voice]:
    """Built-in voices followed by any well-formed ``extra`` entries from config."""

    voices = list(BUILTIN_VOICES)
    known = {voice.id for voice in voices}
    for entry in extra or ():
        try:
            voice = Voice(
                id=str(entry["id"]).lower(),
                lang=str(entry["lang"]),
                tld=str(entry.get("tld", "com")),
                label=str(entry.get("label", entry["id"])),
            )
        except (KeyError, TypeError, AttributeError):
            continue
        if voice.id not in known:
            voices.append(voice)
            known.add(voice.id)
    return voices


def find_voice(voice_id: str | None, voices: Iterable[Voice]) -> Voice | None:
    """Return the voice with ``voice_id``; blank ids select the default voice."""

    if not voice_id or not voice_id.strip():
        return DEFAULT_VOICE
    wanted = voice_id.strip().lower()
    for voice in voices:
        if voice.id == wanted:
            return voice
    return None


__all__ = ["Voice", "DEFAULT_VOICE", "BUILTIN_VOICES", "list_voices", "find_voice"]
