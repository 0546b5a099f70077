from io import BytesIO

from app import create_app


def test_home_lists_plugins():
    app = create_app("TestingConfig")
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    titles = [item["title"] for item in payload["data"]["plugins"]]
    assert titles == sorted(titles, key=str.lower)
    assert {"PDF Tools", "OCR Text Extraction", "Text to Speech", "Chat with PDF"} <= set(titles)
    assert response.headers.get("Content-Security-Policy")
    assert response.headers.get("X-Request-ID")


def test_health_and_unknown_routes_use_json_envelopes():
    client = create_app("TestingConfig").test_client()
    assert client.get("/health").get_json() == {"success": True, "data": {"status": "ok"}}

    missing = client.get("/nope")
    assert missing.status_code == 404
    assert missing.get_json()["error"]["code"] == "not_found"

    wrong_method = client.get("/api/pdf_tools/split")
    assert wrong_method.status_code == 405
    assert wrong_method.get_json()["success"] is False


def test_oversized_upload_is_rejected():
    app = create_app("TestingConfig")
    app.config["MAX_CONTENT_LENGTH"] = 1024
    client = app.test_client()
    response = client.post(
        "/api/pdf_tools/metadata",
        data={"file": (BytesIO(b"%PDF-" + b"0" * 4096), "big.pdf")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 413
    assert response.get_json()["error"]["code"] == "payload_too_large"
