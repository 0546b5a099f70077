"""In-memory IO helpers for plugins."""

from __future__ import annotations

import os
import zipfile
from io import BytesIO
from typing import Iterable

SAFE_FILENAME_CHARS = {"-", "_", "."}


def secure_filename(filename: str | None, *, fallback: str = "upload") -> str:
    """Sanitize filenames without relying on Werkzeug internals."""

    if not filename:
        return fallback
    name, ext = os.path.splitext(filename)
    safe_name = "".join(
        ch if ch.isalnum() or ch in SAFE_FILENAME_CHARS else "_" for ch in name
    )
    safe_ext = "".join(ch for ch in ext if ch.isalnum() or ch in SAFE_FILENAME_CHARS)
    safe_name = safe_name.strip("._") or fallback
    safe_ext = safe_ext.strip("._")
    return f"{safe_name}{f'.{safe_ext}' if safe_ext else ''}"


def output_filename(requested: str | None, default: str, *, extension: str) -> str:
    """Sanitize a user supplied output name and force ``extension`` onto it."""

    safe_name = secure_filename(requested or default, fallback=default.rsplit(".", 1)[0])
    if not safe_name.lower().endswith(f".{extension}"):
        safe_name = f"{safe_name}.{extension}"
    return safe_name


def zip_files(entries: Iterable[tuple[str, bytes]]) -> bytes:
    """Pack ``(name, content)`` pairs into a deflated zip archive."""

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries:
            archive.writestr(name, content)
    return buffer.getvalue()


__all__ = ["secure_filename", "output_filename", "zip_files"]
