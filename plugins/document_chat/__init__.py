"""Chat with PDF plugin."""

manifest = {
    "title": "Chat with PDF",
    "summary": "Ask questions about a document, or draft referral messages and cold emails from a resume.",
    "blueprint": "document_chat",
    "category": "AI Tools",
}


__all__ = ["manifest"]
