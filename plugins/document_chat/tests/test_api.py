from io import BytesIO

import pytest
import requests
from reportlab.pdfgen import canvas

from app import create_app
from plugins.document_chat.core import ChatServiceError, GeminiClient


def _text_pdf(text: str) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(300, 300))
    c.drawString(40, 150, text)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def prompts(monkeypatch):
    sent = []

    def fake_generate(self, prompt):
        sent.append(prompt)
        return "The total is 42."

    monkeypatch.setattr(GeminiClient, "generate", fake_generate)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return sent


def _post(client, path, data):
    return client.post(path, data=data, content_type="multipart/form-data")


def test_ask_answers_from_document_and_caches_text(prompts):
    client = create_app("TestingConfig").test_client()
    pdf = _text_pdf("Invoice total 42 EUR")

    first = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(pdf), "invoice.pdf"),
        "question": "What is the total?",
        "api_key": "k",
    })
    assert first.status_code == 200
    data = first.get_json()["data"]
    assert data["answer"] == "The total is 42."
    assert data["context_cached"] is False
    assert "Invoice total 42 EUR" in prompts[0]
    assert "User Question: What is the total?" in prompts[0]

    second = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(pdf), "invoice.pdf"),
        "question": "Again?",
        "api_key": "k",
    })
    assert second.get_json()["data"]["context_cached"] is True

    cleared = client.delete("/api/document_chat/context")
    assert cleared.get_json()["data"] == {"cleared": True}

    third = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(pdf), "invoice.pdf"),
        "question": "Once more?",
        "api_key": "k",
    })
    assert third.get_json()["data"]["context_cached"] is False


def test_ask_reads_api_key_from_environment(prompts, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(_text_pdf("hello")), "a.pdf"),
        "question": "Hi?",
    })
    assert response.status_code == 200


def test_ask_requires_api_key(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(_text_pdf("hello")), "a.pdf"),
        "question": "Hi?",
    })
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "chat.missing_api_key"


def test_ask_requires_question(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(_text_pdf("hello")), "a.pdf"),
        "question": " ",
        "api_key": "k",
    })
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Please enter a question."


def test_ask_requires_file(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {"question": "Hi?", "api_key": "k"})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "chat.file_missing"


def test_service_failure_maps_to_bad_gateway(monkeypatch):
    def broken(self, prompt):
        raise ChatServiceError("quota exceeded")

    monkeypatch.setattr(GeminiClient, "generate", broken)
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(_text_pdf("hello")), "a.pdf"),
        "question": "Hi?",
        "api_key": "k",
    })
    assert response.status_code == 502
    error = response.get_json()["error"]
    assert error["code"] == "chat.service_error"
    assert error["message"] == "quota exceeded"


def test_plain_string_error_body_maps_to_bad_gateway(monkeypatch):
    class _Rejected:
        ok = False
        status_code = 400

        def json(self):
            return {"error": "API key not valid"}

    monkeypatch.setattr(requests.Session, "post", lambda self, url, **kwargs: _Rejected())
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/ask", {
        "file": (BytesIO(_text_pdf("hello")), "a.pdf"),
        "question": "Hi?",
        "api_key": "k",
    })
    assert response.status_code == 502
    error = response.get_json()["error"]
    assert error["code"] == "chat.service_error"
    assert error["message"] == "Gemini API Error"


def test_referral_builds_prompt_from_resume(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/referral", {
        "file": (BytesIO(_text_pdf("Python developer")), "resume.pdf"),
        "job_description": "Senior Python role",
        "profile_name": "Sam",
        "api_key": "k",
    })
    assert response.status_code == 200
    assert response.get_json()["data"]["message"] == "The total is 42."
    assert "Python developer" in prompts[0]
    assert "- My Profile Name: Sam" in prompts[0]


def test_cold_email_requires_purpose(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/cold-email", {
        "file": (BytesIO(_text_pdf("resume")), "resume.pdf"),
        "api_key": "k",
    })
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "chat.missing_purpose"


def test_cold_email_returns_generated_text(prompts):
    client = create_app("TestingConfig").test_client()
    response = _post(client, "/api/document_chat/cold-email", {
        "file": (BytesIO(_text_pdf("resume")), "resume.pdf"),
        "purpose": "Ask about internships",
        "company": "Acme",
        "api_key": "k",
    })
    assert response.status_code == 200
    assert response.get_json()["data"]["email"] == "The total is 42."
    assert "- Company: Acme" in prompts[0]
