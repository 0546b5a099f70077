"""Prompt templates sent to the language model."""

from __future__ import annotations

ASSISTANT_NAME = "LuminaPDF AI"
NOT_FOUND_ANSWER = "I cannot find the answer in this document."
TRUNCATION_MARKER = "\n...(Text truncated)..."

MAX_CONTEXT_CHARS = 30000
MAX_RESUME_CHARS = 10000
MAX_JOB_DESCRIPTION_CHARS = 5000


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def build_answer_prompt(context: str, question: str, *, max_context_chars: int = MAX_CONTEXT_CHARS) -> str:
    return (
        f"You are a helpful AI assistant called {ASSISTANT_NAME}.\n"
        "Answer the user's question based ONLY on the provided PDF content below.\n"
        f'If the answer is not in the context, say "{NOT_FOUND_ANSWER}"\n'
        "\n"
        "PDF Content:\n"
        f"{truncate(context, max_context_chars)}\n"
        "\n"
        f"User Question: {question}\n"
    )


def build_referral_prompt(
    resume: str,
    job_description: str,
    *,
    portfolio: str | None = None,
    profile_name: str | None = None,
) -> str:
    return (
        "You are an expert career coach. Write a LinkedIn message.\n"
        "Context:\n"
        f"- Resume: {resume[:MAX_RESUME_CHARS]}\n"
        f"- Job Desc: {job_description.strip()[:MAX_JOB_DESCRIPTION_CHARS]}\n"
        f"- Portfolio: {portfolio or 'N/A'}\n"
        f"- My Profile Name: {profile_name or 'Candidate'}\n"
        "\n"
        "Output:\n"
        "1. Connection Request (< 300 chars)\n"
        "2. Direct Message (Longer, professional)\n"
    )


def build_cold_email_prompt(
    resume: str,
    purpose: str,
    *,
    recipient: str | None = None,
    company: str | None = None,
) -> str:
    return (
        "Write a cold email.\n"
        f"- Recipient: {recipient or 'Hiring Manager'}\n"
        f"- Company: {company or 'Target Company'}\n"
        f"- Purpose: {purpose}\n"
        f"- Resume: {resume[:MAX_RESUME_CHARS]}\n"
        "\n"
        "Guidelines: Catchy subject, concise body, clear CTA.\n"
    )


__all__ = [
    "NOT_FOUND_ANSWER",
    "TRUNCATION_MARKER",
    "MAX_CONTEXT_CHARS",
    "truncate",
    "build_answer_prompt",
    "build_referral_prompt",
    "build_cold_email_prompt",
]
