"""Page-level document operations backed by PyPDF2."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Literal, Sequence

from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError

from .page_ranges import complement_pages, describe_pages, select_pages

logger = logging.getLogger(__name__)

PlanMode = Literal["keep", "remove"]


class PdfToolsError(ValueError):
    """Raised when a document operation cannot be completed."""


class PageSelectionError(PdfToolsError):
    """Raised when a page selection leaves nothing to write."""


@dataclass(frozen=True)
class MergeSpec:
    """A single merge input and the pages it contributes."""

    data: bytes
    page_range: str = "all"
    filename: str = "document.pdf"


@dataclass(frozen=True)
class SplitTask:
    """A named output cut from one source document."""

    name: str
    page_range: str


@dataclass(frozen=True)
class PagePlan:
    """Pages chosen from a source document for one output document.

    ``selected`` holds the indices the expression named; ``kept`` the indices
    copied into the output, in output order.
    """

    mode: PlanMode
    page_count: int
    selected: tuple[int, ...]
    kept: tuple[int, ...]

    @property
    def empty(self) -> bool:
        return not self.kept


@dataclass(frozen=True)
class PdfMetadata:
    pages: int
    size_bytes: int


def load_pdf(data: bytes) -> PdfReader:
    try:
        return PdfReader(BytesIO(data))
    except (PdfReadError, ValueError, OSError) as exc:
        raise PdfToolsError("Unable to read PDF") from exc


def _write(writer: PdfWriter) -> bytes:
    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()


def copy_pages(reader: PdfReader, indices: Sequence[int]) -> bytes:
    """Write a new document holding ``reader``'s pages at ``indices`` in order."""

    writer = PdfWriter()
    for index in indices:
        writer.add_page(reader.pages[index])
    return _write(writer)


def select_page_plan(expression: str | None, page_count: int, mode: PlanMode) -> PagePlan:
    selected = select_pages(expression, page_count)
    kept = selected if mode == "keep" else complement_pages(selected, page_count)
    return PagePlan(
        mode=mode,
        page_count=page_count,
        selected=tuple(selected),
        kept=tuple(kept),
    )


def _is_all(page_range: str | None) -> bool:
    return not page_range or not page_range.strip() or page_range.strip().lower() == "all"


def merge_pdfs(specs: Iterable[MergeSpec]) -> bytes:
    specs = list(specs)
    if len(specs) < 2:
        raise PdfToolsError("Please select at least two PDF files.")

    writer = PdfWriter()
    for spec in specs:
        reader = load_pdf(spec.data)
        total = len(reader.pages)
        if _is_all(spec.page_range):
            indices = list(range(total))
        else:
            indices = select_pages(spec.page_range, total)
            if not indices:
                raise PageSelectionError(
                    f"Invalid page range or pages out of bounds for {spec.filename}."
                )
        for index in indices:
            writer.add_page(reader.pages[index])
        logger.debug("merged %s pages [%s] of %s", len(indices), describe_pages(indices), spec.filename)
    return _write(writer)


_EMPTY_PLAN_MESSAGES = {
    "keep": "Invalid page range or pages out of bounds.",
    "remove": "Cannot remove every page of the document.",
}


def edit_pages(data: bytes, expression: str, mode: PlanMode) -> tuple[bytes, PagePlan]:
    """Keep or drop the pages ``expression`` selects, in one pass over ``data``.

    Returns the new document together with the plan that produced it so
    callers can report which pages were kept.
    """

    reader = load_pdf(data)
    plan = select_page_plan(expression, len(reader.pages), mode)
    if plan.empty:
        raise PageSelectionError(_EMPTY_PLAN_MESSAGES[mode])
    if mode == "keep":
        logger.info("split kept pages %s of %s", describe_pages(plan.kept), plan.page_count)
    else:
        logger.info(
            "removed pages %s of %s",
            describe_pages(plan.selected) or "none",
            plan.page_count,
        )
    return copy_pages(reader, plan.kept), plan


def split_pdf(data: bytes, expression: str) -> bytes:
    return edit_pages(data, expression, "keep")[0]


def split_pdf_plan(data: bytes, tasks: Iterable[SplitTask]) -> List[tuple[str, bytes]]:
    reader = load_pdf(data)
    total_pages = len(reader.pages)
    outputs: List[tuple[str, bytes]] = []
    for task in tasks:
        plan = select_page_plan(task.page_range, total_pages, "keep")
        if plan.empty:
            raise PageSelectionError(
                f"Invalid page range or pages out of bounds for {task.name}."
            )
        outputs.append((task.name, copy_pages(reader, plan.kept)))
    return outputs


def remove_pages(data: bytes, expression: str) -> bytes:
    return edit_pages(data, expression, "remove")[0]


def extract_text(data: bytes) -> str:
    """Return every page's text as ``"Page n:\\n<text>\\n\\n"`` blocks."""

    reader = load_pdf(data)
    chunks: List[str] = []
    for number, page in enumerate(reader.pages, start=1):
        text = page.extract_text() or ""
        chunks.append(f"Page {number}:\n{text}\n\n")
    return "".join(chunks)


def pdf_metadata(data: bytes) -> PdfMetadata:
    reader = load_pdf(data)
    return PdfMetadata(pages=len(reader.pages), size_bytes=len(data))


__all__ = [
    "PdfToolsError",
    "PageSelectionError",
    "MergeSpec",
    "SplitTask",
    "PagePlan",
    "PdfMetadata",
    "load_pdf",
    "copy_pages",
    "select_page_plan",
    "edit_pages",
    "merge_pdfs",
    "split_pdf",
    "split_pdf_plan",
    "remove_pages",
    "extract_text",
    "pdf_metadata",
]
