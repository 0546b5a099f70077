from __future__ import annotations

from .convert import (
    DEFAULT_RENDER_SCALE,
    ImageInput,
    RenderedPage,
    images_to_pdf,
    render_pages,
)
from .documents import (
    MergeSpec,
    PagePlan,
    PageSelectionError,
    PdfMetadata,
    PdfToolsError,
    SplitTask,
    edit_pages,
    extract_text,
    merge_pdfs,
    pdf_metadata,
    remove_pages,
    select_page_plan,
    split_pdf,
    split_pdf_plan,
)
from .page_ranges import complement_pages, describe_pages, select_pages
from .watermark import WatermarkOptions, add_watermark, parse_hex_color

__all__ = [
    "DEFAULT_RENDER_SCALE",
    "ImageInput",
    "MergeSpec",
    "PagePlan",
    "PageSelectionError",
    "PdfMetadata",
    "PdfToolsError",
    "RenderedPage",
    "SplitTask",
    "WatermarkOptions",
    "add_watermark",
    "complement_pages",
    "describe_pages",
    "edit_pages",
    "extract_text",
    "images_to_pdf",
    "merge_pdfs",
    "parse_hex_color",
    "pdf_metadata",
    "remove_pages",
    "render_pages",
    "select_page_plan",
    "select_pages",
    "split_pdf",
    "split_pdf_plan",
]
