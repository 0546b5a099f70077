"""Validation primitives for plugin APIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, TypeVar

import pydantic
from pydantic import BaseModel
from werkzeug.datastructures import FileStorage

PDF_MIME = "application/pdf"
IMAGE_MIMES = frozenset({"image/png", "image/jpeg"})


class ValidationError(ValueError):
    """Raised when validation fails."""

    def __init__(self, message: str, *, details: Any | None = None):
        super().__init__(message)
        self.details = details


class SchemaModel(BaseModel):
    """Strict base model for request payloads."""

    model_config = pydantic.ConfigDict(extra="forbid", str_strip_whitespace=True)


TModel = TypeVar("TModel", bound=SchemaModel)


def parse_model(model: type[TModel], payload: Mapping[str, Any] | None) -> TModel:
    payload = payload or {}
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            "Invalid request payload", details=exc.errors(include_url=False)
        ) from exc


@dataclass(slots=True)
class FileLimit:
    max_files: int
    max_size: int

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any] | None,
        *,
        default_max_files: int,
        default_max_mb: int,
    ) -> "FileLimit":
        """Build a limit from a ``config.yml`` mapping.

        Missing or malformed values fall back to the supplied defaults so a
        bad config never breaks a request.
        """

        max_files = default_max_files
        max_mb = default_max_mb

        if settings:
            try:
                max_files = int(settings.get("max_files", default_max_files))
            except (TypeError, ValueError):
                max_files = default_max_files

            try:
                max_mb = int(float(settings.get("max_mb", default_max_mb)))
            except (TypeError, ValueError):
                max_mb = default_max_mb

        max_files = max(max_files, 1)
        max_mb = max(max_mb, 1)
        return cls(max_files=max_files, max_size=max_mb * 1024 * 1024)


def enforce_limits(files: Iterable[FileStorage], limit: FileLimit) -> None:
    files = list(files)
    if not files:
        raise ValidationError("At least one file is required")
    if len(files) > limit.max_files:
        raise ValidationError(
            "Too many files uploaded", details={"max_files": limit.max_files}
        )
    for file in files:
        file.seek(0, 2)
        size = file.tell()
        file.seek(0)
        if size > limit.max_size:
            raise ValidationError(
                "File exceeds allowed size",
                details={"filename": file.filename, "max_bytes": limit.max_size},
            )


_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    PDF_MIME: (b"%PDF-",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/jpeg": (b"\xff\xd8\xff",),
}


def sniff_mime(sample: bytes) -> str | None:
    """Return the MIME type whose magic bytes open ``sample``, if any."""

    for mime, signatures in _SIGNATURES.items():
        if any(sample.startswith(signature) for signature in signatures):
            return mime
    return None


def _peek(file: FileStorage, size: int = 1024) -> bytes:
    stream = file.stream
    try:
        current = stream.tell()
    except (AttributeError, OSError):
        current = None

    try:
        stream.seek(0)
    except (AttributeError, OSError):
        pass

    sample = stream.read(size)
    if isinstance(sample, str):  # pragma: no cover - text streams
        sample = sample.encode("utf-8", "ignore")

    try:
        stream.seek(current or 0)
    except (AttributeError, OSError):
        pass
    return sample or b""


def validate_mime(files: Iterable[FileStorage], allowed: Iterable[str]) -> None:
    allowed = set(allowed)
    for file in files:
        if sniff_mime(_peek(file)) not in allowed:
            raise ValidationError(
                "Unsupported or invalid file signature",
                details={"filename": file.filename, "allowed": sorted(allowed)},
            )


__all__ = [
    "PDF_MIME",
    "IMAGE_MIMES",
    "ValidationError",
    "SchemaModel",
    "parse_model",
    "FileLimit",
    "enforce_limits",
    "sniff_mime",
    "validate_mime",
]
