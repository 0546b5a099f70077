import base64

from plugins.speech.core import synth

from app import create_app


class _FakeTTS:
    def __init__(self, text, lang, tld):
        self.text = text

    def write_to_fp(self, fp):
        fp.write(b"ID3" + self.text.encode())


def _client():
    app = create_app("TestingConfig")
    return app.test_client()


def test_voices_endpoint_lists_default():
    response = _client().get("/api/speech/voices")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["default"] == "en-us"
    assert any(voice["id"] == "en-gb" for voice in data["voices"])


def test_synthesize_returns_audio(monkeypatch):
    monkeypatch.setattr(synth, "gTTS", _FakeTTS)
    response = _client().post("/api/speech/synthesize", json={"text": "Hi there", "voice": "en-au"})
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert base64.b64decode(data["audio_base64"]) == b"ID3Hi there"
    assert data["mimetype"] == "audio/mpeg"
    assert data["progress"][-1]["kind"] == "done"


def test_synthesize_download_returns_mp3(monkeypatch):
    monkeypatch.setattr(synth, "gTTS", _FakeTTS)
    response = _client().post("/api/speech/synthesize?download=1", json={"text": "Hi"})
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "audio/mpeg"
    assert response.data == b"ID3Hi"


def test_synthesize_rejects_empty_text():
    response = _client().post("/api/speech/synthesize", json={"text": ""})
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Please enter some text."


def test_synthesize_rejects_unknown_fields():
    response = _client().post("/api/speech/synthesize", json={"text": "hi", "rate": 2})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "speech.invalid_request"


def test_synthesize_reads_integer_settings(monkeypatch):
    monkeypatch.setattr(synth, "gTTS", _FakeTTS)
    app = create_app("TestingConfig")
    app.config["PLUGIN_SETTINGS"]["speech"] = {"max_text_chars": "5", "chunk_chars": "lots"}
    client = app.test_client()

    response = client.post("/api/speech/synthesize", json={"text": "Hi"})
    assert response.status_code == 200

    response = client.post("/api/speech/synthesize", json={"text": "Too long"})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "speech.text_too_long"
