import base64
import json
import zipfile
from io import BytesIO

from PIL import Image
from PyPDF2 import PdfReader, PdfWriter

from app import create_app


def _make_client():
    app = create_app("TestingConfig")
    return app.test_client()


def _dummy_pdf(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for number in range(1, pages + 1):
        writer.add_blank_page(width=100 + number, height=200)
    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()


def _page_numbers(data: bytes) -> list[int]:
    reader = PdfReader(BytesIO(data))
    return [int(float(page.mediabox.width)) - 100 for page in reader.pages]


def _png() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (20, 10), (0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


def _post(client, path, data):
    return client.post(path, data=data, content_type="multipart/form-data")


def test_split_endpoint_returns_selected_pages():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/split",
        {"file": (BytesIO(_dummy_pdf(10)), "sample.pdf"), "pages": "2-4,9"},
    )
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["filename"] == "split_document.pdf"
    assert data["page_count"] == 10
    assert data["kept_pages"] == "2-4, 9"
    assert _page_numbers(base64.b64decode(data["pdf_base64"])) == [2, 3, 4, 9]


def test_split_requires_pages():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/split",
        {"file": (BytesIO(_dummy_pdf(2)), "sample.pdf"), "pages": "  "},
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.missing_pages"


def test_split_rejects_out_of_range_selection():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/split",
        {"file": (BytesIO(_dummy_pdf(2)), "sample.pdf"), "pages": "5-6"},
    )
    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "pdf.invalid_page_range"
    assert "out of bounds" in payload["error"]["message"]


def test_split_clips_very_long_page_numbers():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/split",
        {"file": (BytesIO(_dummy_pdf(3)), "sample.pdf"), "pages": "2-" + "9" * 5000},
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["kept_pages"] == "2-3"
    assert _page_numbers(base64.b64decode(data["pdf_base64"])) == [2, 3]


def test_split_plan_download_zip_uses_custom_names():
    client = _make_client()
    plan = [{"name": "alpha", "pages": "1"}, {"name": "beta.pdf", "pages": "2"}]
    response = _post(
        client,
        "/api/pdf_tools/split?download=1",
        {"file": (BytesIO(_dummy_pdf(2)), "sample.pdf"), "plan": json.dumps(plan)},
    )
    assert response.status_code == 200
    assert response.headers.get("Content-Type") == "application/zip"
    with zipfile.ZipFile(BytesIO(response.data), "r") as zf:
        assert set(zf.namelist()) == {"alpha.pdf", "beta.pdf"}


def test_split_plan_rejects_duplicate_names():
    client = _make_client()
    plan = [{"name": "a.pdf", "pages": "1"}, {"name": "A.pdf", "pages": "2"}]
    response = _post(
        client,
        "/api/pdf_tools/split",
        {"file": (BytesIO(_dummy_pdf(2)), "sample.pdf"), "plan": json.dumps(plan)},
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.duplicate_split_name"


def test_remove_endpoint_keeps_complement():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/remove",
        {"file": (BytesIO(_dummy_pdf(10)), "sample.pdf"), "pages": "2-4,9"},
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["filename"] == "pages_removed.pdf"
    assert data["removed_pages"] == "2-4, 9"
    assert _page_numbers(base64.b64decode(data["pdf_base64"])) == [1, 5, 6, 7, 8, 10]


def test_remove_download_returns_pdf_attachment():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/remove?download=1",
        {"file": (BytesIO(_dummy_pdf(3)), "sample.pdf"), "pages": "2"},
    )
    assert response.status_code == 200
    assert response.headers.get("Content-Disposition", "").startswith("attachment;")
    assert _page_numbers(response.data) == [1, 3]


def test_merge_endpoint_concatenates_files():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/merge",
        {
            "files": [
                (BytesIO(_dummy_pdf(2)), "a.pdf"),
                (BytesIO(_dummy_pdf(1)), "b.pdf"),
            ],
            "output_name": "combined",
        },
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["filename"] == "combined.pdf"
    assert data["total_files"] == 2
    assert _page_numbers(base64.b64decode(data["pdf_base64"])) == [1, 2, 1]


def test_merge_applies_manifest_page_ranges():
    client = _make_client()
    manifest = [{"pages": "2"}, {"pages": "all"}]
    response = _post(
        client,
        "/api/pdf_tools/merge",
        {
            "files": [
                (BytesIO(_dummy_pdf(2)), "a.pdf"),
                (BytesIO(_dummy_pdf(1)), "b.pdf"),
            ],
            "manifest": json.dumps(manifest),
        },
    )
    assert response.status_code == 200
    assert _page_numbers(base64.b64decode(response.get_json()["data"]["pdf_base64"])) == [2, 1]


def test_merge_needs_two_files():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/merge",
        {"files": [(BytesIO(_dummy_pdf(1)), "a.pdf")]},
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.too_few_files"


def test_merge_respects_file_limit():
    client = _make_client()
    files = [(BytesIO(_dummy_pdf()), f"doc-{index}.pdf") for index in range(21)]
    response = _post(client, "/api/pdf_tools/merge", {"files": files})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.invalid_upload"


def test_watermark_endpoint_validates_opacity():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/watermark",
        {"file": (BytesIO(_dummy_pdf(1)), "a.pdf"), "opacity": "3"},
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.invalid_options"


def test_watermark_endpoint_returns_pdf():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/watermark",
        {"file": (BytesIO(_dummy_pdf(2)), "a.pdf"), "text": "SECRET", "color": "#336699"},
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["filename"] == "watermarked.pdf"
    assert len(PdfReader(BytesIO(base64.b64decode(data["pdf_base64"]))).pages) == 2


def test_images_endpoint_builds_pdf():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/images",
        {"files": [(BytesIO(_png()), "a.png"), (BytesIO(_png()), "b.png")]},
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["filename"] == "images_converted.pdf"
    assert len(PdfReader(BytesIO(base64.b64decode(data["pdf_base64"]))).pages) == 2


def test_images_endpoint_rejects_pdf_upload():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/images",
        {"files": [(BytesIO(_dummy_pdf()), "a.png")]},
    )
    assert response.status_code == 400
    assert "signature" in response.get_json()["error"]["message"].lower()


def test_render_endpoint_returns_pngs():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/render",
        {"file": (BytesIO(_dummy_pdf(2)), "a.pdf"), "scale": "1"},
    )
    assert response.status_code == 200
    pages = response.get_json()["data"]["pages"]
    assert [page["number"] for page in pages] == [1, 2]
    assert base64.b64decode(pages[0]["png_base64"]).startswith(b"\x89PNG")


def test_render_download_zip():
    client = _make_client()
    response = _post(
        client,
        "/api/pdf_tools/render?download=1",
        {"file": (BytesIO(_dummy_pdf(2)), "a.pdf"), "pages": "2"},
    )
    assert response.status_code == 200
    with zipfile.ZipFile(BytesIO(response.data), "r") as zf:
        assert zf.namelist() == ["page_0002.png"]


def test_metadata_endpoint_reports_pages_and_size():
    client = _make_client()
    response = _post(client, "/api/pdf_tools/metadata", {"file": (BytesIO(_dummy_pdf(3)), "meta.pdf")})
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["data"]["pages"] == 3
    assert payload["data"]["size_bytes"] > 0


def test_metadata_rejects_fake_pdf_signature():
    client = _make_client()
    response = _post(client, "/api/pdf_tools/metadata", {"file": (BytesIO(b"not really a pdf"), "fake.pdf")})
    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert "signature" in payload["error"]["message"].lower()


def test_missing_file_is_reported():
    client = _make_client()
    response = _post(client, "/api/pdf_tools/split", {"pages": "1"})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "pdf.file_missing"
