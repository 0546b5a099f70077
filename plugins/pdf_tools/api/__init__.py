"""PDF tools API blueprint with standardized responses."""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping

from flask import Blueprint, Response, current_app, request
from pydantic import Field
from werkzeug.datastructures import FileStorage

from common.errors import ValidationAppError
from common.forms import get_float, get_text
from common.io import output_filename, zip_files
from common.logging import get_logger
from common.responses import attachment, download_requested, fail, ok
from common.validation import (
    IMAGE_MIMES,
    PDF_MIME,
    FileLimit,
    SchemaModel,
    ValidationError,
    enforce_limits,
    parse_model,
    validate_mime,
)

from ..core import (
    DEFAULT_RENDER_SCALE,
    ImageInput,
    MergeSpec,
    PageSelectionError,
    PdfToolsError,
    SplitTask,
    WatermarkOptions,
    add_watermark,
    describe_pages,
    edit_pages,
    images_to_pdf,
    merge_pdfs,
    pdf_metadata,
    render_pages,
    split_pdf_plan,
)

logger = get_logger(__name__)

api_bp = Blueprint("pdf_tools_api", __name__, url_prefix="/api/pdf_tools")


class MergeItem(SchemaModel):
    filename: str | None = None
    pages: str = "all"


class SplitPlanItem(SchemaModel):
    name: str = Field(min_length=1)
    pages: str = Field(min_length=1)


class SplitRequest(SchemaModel):
    plan: list[SplitPlanItem] = Field(min_length=1)


def _settings() -> Mapping[str, Any]:
    return current_app.config.get("PLUGIN_SETTINGS", {}).get("pdf_tools", {}) or {}


def _limit(key: str, *, default_max_files: int, default_max_mb: int) -> FileLimit:
    return FileLimit.from_settings(
        _settings().get(key),
        default_max_files=default_max_files,
        default_max_mb=default_max_mb,
    )


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _invalid_upload(exc: ValidationError) -> ValidationAppError:
    return ValidationAppError(
        message=str(exc),
        code="pdf.invalid_upload",
        details=getattr(exc, "details", None),
    )


def _single_pdf(limit_key: str = "single_upload") -> bytes:
    """Read the ``file`` upload after size and signature checks."""

    file = request.files.get("file")
    if not file:
        raise ValidationAppError(message="Please select a PDF file.", code="pdf.file_missing")
    try:
        enforce_limits([file], _limit(limit_key, default_max_files=1, default_max_mb=25))
        validate_mime([file], {PDF_MIME})
    except ValidationError as exc:
        raise _invalid_upload(exc) from exc
    return file.read()


def _many(field: str, limit: FileLimit, allowed: set[str] | frozenset[str]) -> list[FileStorage]:
    files = [file for file in request.files.getlist(field) if file and file.filename]
    try:
        enforce_limits(files, limit)
        validate_mime(files, allowed)
    except ValidationError as exc:
        raise _invalid_upload(exc) from exc
    return files


def _required_pages(message: str) -> str:
    try:
        return get_text(request.form, "pages", required=True, message=message)
    except ValidationError as exc:
        raise ValidationAppError(message=str(exc), code="pdf.missing_pages") from exc


def _pdf_result(data: bytes, default_name: str, **extra: Any) -> Response:
    filename = output_filename(request.form.get("output_name"), default_name, extension="pdf")
    if download_requested():
        return attachment(data, filename=filename, mimetype=PDF_MIME)
    return ok({"filename": filename, "pdf_base64": _b64(data), **extra})


def _handle(exc: Exception) -> Response:
    if isinstance(exc, ValidationAppError):
        return fail(exc)
    if isinstance(exc, PageSelectionError):
        return fail(ValidationAppError(message=str(exc), code="pdf.invalid_page_range"))
    if isinstance(exc, PdfToolsError):
        return fail(ValidationAppError(message=str(exc), code="pdf.invalid_options"))
    raise exc


def _load_merge_manifest(count: int) -> list[MergeItem]:
    raw = request.form.get("manifest")
    if not raw:
        return [MergeItem() for _ in range(count)]
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationAppError(
            message="Invalid manifest format",
            code="pdf.invalid_manifest",
            details={"error": str(exc)},
        ) from exc
    if not isinstance(items, list) or len(items) != count:
        raise ValidationAppError(
            message="Manifest must list one entry per uploaded file",
            code="pdf.invalid_manifest",
        )
    try:
        return [parse_model(MergeItem, item if isinstance(item, dict) else {}) for item in items]
    except ValidationError as exc:
        raise ValidationAppError(
            message=str(exc), code="pdf.invalid_manifest", details=exc.details
        ) from exc


@api_bp.post("/merge")
def merge() -> Response:
    try:
        files = _many(
            "files",
            _limit("merge_upload", default_max_files=10, default_max_mb=10),
            {PDF_MIME},
        )
        if len(files) < 2:
            raise ValidationAppError(
                message="Please select at least two PDF files.", code="pdf.too_few_files"
            )
        manifest = _load_merge_manifest(len(files))
        specs = [
            MergeSpec(
                data=file.read(),
                page_range=item.pages,
                filename=item.filename or file.filename or "document.pdf",
            )
            for item, file in zip(manifest, files)
        ]
        merged = merge_pdfs(specs)
    except (ValidationAppError, PdfToolsError) as exc:
        return _handle(exc)

    logger.info("merged %s documents", len(specs))
    return _pdf_result(merged, "merged_document.pdf", total_files=len(specs))


def _parse_split_plan(raw: str) -> list[SplitTask]:
    try:
        plan_payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationAppError(
            message="Invalid split plan",
            code="pdf.invalid_split_plan",
            details={"error": str(exc)},
        ) from exc
    try:
        parsed = parse_model(SplitRequest, {"plan": plan_payload})
    except ValidationError as exc:
        raise ValidationAppError(
            message=str(exc), code="pdf.invalid_split_plan", details=exc.details
        ) from exc

    tasks: list[SplitTask] = []
    seen: set[str] = set()
    for item in parsed.plan:
        safe_name = output_filename(item.name, "split.pdf", extension="pdf")
        if safe_name.lower() in seen:
            raise ValidationAppError(
                message="Duplicate split output names", code="pdf.duplicate_split_name"
            )
        seen.add(safe_name.lower())
        tasks.append(SplitTask(name=safe_name, page_range=item.pages))
    return tasks


@api_bp.post("/split")
def split() -> Response:
    try:
        data = _single_pdf()
        raw_plan = request.form.get("plan")
        if raw_plan:
            outputs = split_pdf_plan(data, _parse_split_plan(raw_plan))
        else:
            pages = _required_pages("Please enter page ranges (e.g., 1-3, 5).")
            result, plan = edit_pages(data, pages, "keep")
    except (ValidationAppError, PdfToolsError) as exc:
        return _handle(exc)

    if not raw_plan:
        return _pdf_result(
            result,
            "split_document.pdf",
            page_count=plan.page_count,
            kept_pages=describe_pages(plan.kept),
        )

    if download_requested():
        return attachment(zip_files(outputs), filename="split_documents.zip", mimetype="application/zip")
    return ok({"files": [{"name": name, "pdf_base64": _b64(content)} for name, content in outputs]})


@api_bp.post("/remove")
def remove() -> Response:
    try:
        data = _single_pdf()
        pages = _required_pages("Please enter pages to remove.")
        result, plan = edit_pages(data, pages, "remove")
    except (ValidationAppError, PdfToolsError) as exc:
        return _handle(exc)

    return _pdf_result(
        result,
        "pages_removed.pdf",
        page_count=plan.page_count,
        removed_pages=describe_pages(plan.selected),
        kept_pages=describe_pages(plan.kept),
    )


@api_bp.post("/watermark")
def watermark() -> Response:
    try:
        data = _single_pdf()
        options = WatermarkOptions(
            text=get_text(request.form, "text", "CONFIDENTIAL"),
            color=get_text(request.form, "color", "#FF0000"),
            opacity=get_float(request.form, "opacity", 0.5, minimum=0.0, maximum=1.0),
        )
        result = add_watermark(data, options)
    except ValidationError as exc:
        return fail(ValidationAppError(message=str(exc), code="pdf.invalid_options"))
    except (ValidationAppError, PdfToolsError) as exc:
        return _handle(exc)

    return _pdf_result(result, "watermarked.pdf")


@api_bp.post("/images")
def images() -> Response:
    try:
        files = _many(
            "files",
            _limit("image_upload", default_max_files=20, default_max_mb=10),
            IMAGE_MIMES,
        )
        result = images_to_pdf(
            ImageInput(data=file.read(), filename=file.filename or "image") for file in files
        )
    except PdfToolsError as exc:
        return fail(ValidationAppError(message=str(exc), code="pdf.no_images"))
    except ValidationAppError as exc:
        return fail(exc)

    return _pdf_result(result, "images_converted.pdf", total_images=len(files))


@api_bp.post("/render")
def render() -> Response:
    max_scale = float(_settings().get("max_render_scale", 4.0))
    default_scale = float(_settings().get("render_scale", DEFAULT_RENDER_SCALE))
    try:
        data = _single_pdf()
        scale = get_float(request.form, "scale", default_scale, minimum=0.1, maximum=max_scale)
        pages = render_pages(data, scale=scale, expression=get_text(request.form, "pages"))
    except ValidationError as exc:
        return fail(ValidationAppError(message=str(exc), code="pdf.invalid_options"))
    except (ValidationAppError, PdfToolsError) as exc:
        return _handle(exc)

    if download_requested():
        entries = [(f"page_{page.number:04d}.png", page.png) for page in pages]
        return attachment(zip_files(entries), filename="pdf_images.zip", mimetype="application/zip")
    return ok(
        {
            "scale": scale,
            "pages": [
                {
                    "number": page.number,
                    "width": page.width,
                    "height": page.height,
                    "png_base64": _b64(page.png),
                }
                for page in pages
            ],
        }
    )


@api_bp.post("/metadata")
def metadata() -> Response:
    try:
        info = pdf_metadata(_single_pdf())
    except ValidationAppError as exc:
        return fail(exc)
    except PdfToolsError as exc:
        return fail(ValidationAppError(message=str(exc), code="pdf.metadata_error"))
    return ok({"pages": info.pages, "size_bytes": info.size_bytes})


blueprints = [api_bp]


__all__ = ["blueprints", "merge", "split", "remove", "watermark", "images", "render", "metadata"]
