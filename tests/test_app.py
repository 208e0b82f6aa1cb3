import base64
import json

import pytest

from app import create_app, load_config
from generator import DEFAULT_MODEL, ArtifactGenerator
from input_collector import CollectorState
from system_prompt import EXAMPLE_PROMPT, REJECTION_NOTICE
from tests.fakes import FakeGenerator


def data_url(mime_type, data=b"\x89PNG\r\n"):
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


class TestIndex:
    """The studio page."""

    def test_page_injects_words_and_example(self, client):
        res = client.get("/")
        body = res.get_data(as_text=True)

        assert res.status_code == 200
        assert body.startswith("<!DOCTYPE html>")
        assert "/*__CYCLING_TEXT__*/" not in body
        assert "a napkin sketch" in body
        assert json.dumps(EXAMPLE_PROMPT) in body
        assert 'accept="image/*,application/pdf"' in body
        assert '<span id="cyclingWord" class="cycling-word">a napkin sketch</span>' in body
        assert "__CYCLING_WORD__" not in body


class TestHealth:
    def test_reports_model_and_state(self, client):
        res = client.get("/api/health")

        assert res.get_json() == {"status": "ok", "model": "fake-model", "state": "idle"}


class TestGenerateEndpoint:
    """POST /api/generate."""

    def test_text_prompt(self, client, fake_generator):
        res = client.post("/api/generate", json={"prompt": "a snake game"})

        assert res.status_code == 200
        assert res.get_json()["html"] == fake_generator.html
        assert "elapsed" in res.get_json()
        assert fake_generator.calls == [("a snake game", None, None)]

    def test_empty_prompt_is_rejected(self, client, fake_generator):
        res = client.post("/api/generate", json={"prompt": "   "})

        assert res.status_code == 400
        assert res.get_json() == {"error": "Prompt cannot be empty"}
        assert fake_generator.calls == []

    def test_missing_body_is_rejected(self, client, fake_generator):
        res = client.post("/api/generate", data="nope", content_type="text/plain")

        assert res.status_code == 400
        assert fake_generator.calls == []

    @pytest.mark.parametrize("body", [
        ["x"],
        "just a string",
        42,
        {"prompt": 5},
        {"prompt": ["a", "b"]},
        {"file": {"data": "abc"}},
        {"prompt": "ok", "file_name": 3},
    ])
    def test_wrongly_typed_body(self, client, fake_generator, body):
        res = client.post("/api/generate", json=body)

        assert res.status_code == 400
        assert res.get_json() == {"error": "Invalid request"}
        assert fake_generator.calls == []

    def test_null_fields_are_treated_as_absent(self, client, fake_generator):
        res = client.post("/api/generate", json={"prompt": "a maze", "file": None})

        assert res.status_code == 200
        assert fake_generator.calls == [("a maze", None, None)]

    def test_image_upload(self, client, fake_generator):
        res = client.post("/api/generate", json={
            "prompt": "make it playable",
            "file": data_url("image/png"),
            "file_name": "sketch.png",
        })

        assert res.status_code == 200
        assert fake_generator.calls == [("make it playable", b"\x89PNG\r\n", "image/png")]

    def test_pdf_upload_without_prompt(self, client, fake_generator):
        res = client.post("/api/generate", json={"file": data_url("application/pdf", b"%PDF")})

        assert res.status_code == 200
        assert fake_generator.calls == [("", b"%PDF", "application/pdf")]

    def test_unsupported_type(self, client, fake_generator):
        res = client.post("/api/generate", json={"file": data_url("text/plain", b"hello")})

        assert res.status_code == 415
        assert res.get_json() == {"error": REJECTION_NOTICE}
        assert fake_generator.calls == []

    def test_malformed_file(self, client, fake_generator):
        res = client.post("/api/generate", json={"file": "data:image/png;base64,***"})

        assert res.status_code == 400
        assert res.get_json() == {"error": "Invalid file data"}
        assert fake_generator.calls == []

    def test_busy(self, app, client, fake_generator):
        app.extensions["input_collector"].state = CollectorState.PENDING

        text_res = client.post("/api/generate", json={"prompt": "again"})
        file_res = client.post("/api/generate", json={"file": data_url("image/png")})

        assert text_res.status_code == 409
        assert file_res.status_code == 409
        assert fake_generator.calls == []

    def test_generation_failure(self):
        generator = FakeGenerator(error=PermissionError("API key not valid"))
        app = create_app(generator=generator, config={})
        client = app.test_client()

        res = client.post("/api/generate", json={"prompt": "x"})

        assert res.status_code == 502
        assert res.get_json() == {"error": "API key not valid"}
        assert app.extensions["input_collector"].state is CollectorState.IDLE


class TestConfig:
    """Environment-driven configuration."""

    def test_load_config(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "abc")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-flash")

        assert load_config() == {"GEMINI_API_KEY": "abc", "GEMINI_MODEL": "gemini-2.5-flash"}

    def test_default_model(self, monkeypatch):
        monkeypatch.delenv("GEMINI_MODEL", raising=False)

        assert load_config()["GEMINI_MODEL"] == DEFAULT_MODEL

    def test_builds_generator_from_config(self):
        app = create_app(config={"GEMINI_API_KEY": "abc", "GEMINI_MODEL": "gemini-x"})
        generator = app.extensions["generator"]

        assert isinstance(generator, ArtifactGenerator)
        assert generator.api_key == "abc"
        assert generator.model == "gemini-x"
