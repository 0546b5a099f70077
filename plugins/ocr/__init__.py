"""OCR plugin."""

manifest = {
    "title": "OCR Text Extraction",
    "summary": "Recognize text in scanned pages and images with Tesseract.",
    "blueprint": "ocr",
    "category": "AI Tools",
}


__all__ = ["manifest"]
