"""Text to speech plugin."""

manifest = {
    "title": "Text to Speech",
    "summary": "Read text aloud with a choice of voices and download the audio.",
    "blueprint": "speech",
    "category": "AI Tools",
}


__all__ = ["manifest"]
