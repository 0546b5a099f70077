"""Shared imaging helpers."""

from __future__ import annotations

from io import BytesIO

from PIL import Image


def open_image(data: bytes) -> Image.Image:
    """Decode ``data`` fully so the returned image outlives its buffer."""

    image = Image.open(BytesIO(data))
    image.load()
    return image


__all__ = ["open_image"]
