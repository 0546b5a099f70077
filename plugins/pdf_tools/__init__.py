"""PDF tools plugin."""

manifest = {
    "title": "PDF Tools",
    "summary": "Merge, split, trim, watermark and rasterize PDFs, or build one from images.",
    "blueprint": "pdf_tools",
    "category": "Document Utilities",
}


__all__ = ["manifest"]
