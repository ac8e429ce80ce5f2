import pytest
import requests

from core.gemini_client import GeminiClient, GeminiError
from core.models import Source


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, params=None, json=None, timeout=None):
        self.requests.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def _client(session):
    return GeminiClient(
        api_key="test-key",
        model="gemini-test",
        base_url="https://example.test/v1beta/",
        timeout=12,
        session=session,
    )


def _candidate_response(parts, chunks=None):
    candidate = {"content": {"parts": parts}}
    if chunks is not None:
        candidate["groundingMetadata"] = {"groundingChunks": chunks}
    return FakeResponse(payload={"candidates": [candidate]})


def test_generate_builds_schema_request():
    session = FakeSession(_candidate_response([{"text": '{"a": '}, {"text": "1}"}]))
    schema = {"type": "OBJECT"}

    result = _client(session).generate("hello", schema=schema)

    sent = session.requests[0]
    assert sent["url"] == "https://example.test/v1beta/models/gemini-test:generateContent"
    assert sent["params"] == {"key": "test-key"}
    assert sent["timeout"] == 12
    assert sent["json"]["contents"][0]["parts"][0]["text"] == "hello"
    assert sent["json"]["generationConfig"] == {
        "responseMimeType": "application/json",
        "responseSchema": schema,
    }
    assert "tools" not in sent["json"]
    assert result.text == '{"a": 1}'


def test_generate_with_grounding_collects_usable_sources():
    session = FakeSession(_candidate_response(
        [{"text": "sunny"}],
        chunks=[
            {"web": {"title": "Weather site", "uri": "https://w.example"}},
            {"web": {"title": "Duplicate", "uri": "https://w.example"}},
            {"web": {"title": "No link"}},
            {"web": {"uri": "https://untitled.example"}},
            {},
        ],
    ))

    result = _client(session).generate("weather?", grounding=True)

    assert session.requests[0]["json"]["tools"] == [{"google_search": {}}]
    assert "generationConfig" not in session.requests[0]["json"]
    assert result.sources == [
        Source("Weather site", "https://w.example"),
        Source("https://untitled.example", "https://untitled.example"),
    ]


def test_http_error_raises_gemini_error():
    session = FakeSession(FakeResponse(
        status_code=403,
        payload={"error": {"message": "API key not valid"}},
    ))

    with pytest.raises(GeminiError, match="403: API key not valid"):
        _client(session).generate("hello")


def test_connection_error_raises_gemini_error():
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(GeminiError, match="connection error"):
        _client(session).generate("hello")


def test_timeout_raises_gemini_error():
    session = FakeSession(error=requests.exceptions.Timeout())

    with pytest.raises(GeminiError, match="timed out"):
        _client(session).generate("hello")


def test_missing_candidates_raises_gemini_error():
    session = FakeSession(FakeResponse(payload={"promptFeedback": {"blockReason": "SAFETY"}}))

    with pytest.raises(GeminiError, match="no candidates"):
        _client(session).generate("hello")


def test_non_json_body_raises_gemini_error():
    session = FakeSession(FakeResponse(payload=None, text="<html>"))

    with pytest.raises(GeminiError, match="non-JSON"):
        _client(session).generate("hello")


@pytest.mark.parametrize(
    "payload, detail",
    [
        ([{"error": {"code": 503, "message": "overloaded"}}], "Service Unavailable"),
        ({"error": "Backend unavailable"}, "Backend unavailable"),
        ({"error": {"message": None}}, "Service Unavailable"),
    ],
)
def test_odd_error_bodies_still_raise_gemini_error(payload, detail):
    session = FakeSession(FakeResponse(status_code=503, payload=payload, text="Service Unavailable"))

    with pytest.raises(GeminiError, match=f"503: {detail}"):
        _client(session).generate("hello")


def test_null_text_parts_are_ignored():
    session = FakeSession(_candidate_response([{"text": None}, {"text": "ok"}, "junk"]))

    assert _client(session).generate("hello").text == "ok"


def test_malformed_candidate_raises_gemini_error():
    session = FakeSession(FakeResponse(payload={"candidates": ["not a candidate"]}))

    with pytest.raises(GeminiError, match="malformed candidate"):
        _client(session).generate("hello")


def test_malformed_grounding_chunks_are_skipped():
    session = FakeSession(_candidate_response(
        [{"text": "sunny"}],
        chunks=["junk", {"web": "https://w.example"}, {"web": {"uri": 7}},
                {"web": {"title": 5, "uri": "https://ok.example"}}],
    ))

    result = _client(session).generate("weather?", grounding=True)

    assert result.sources == [Source("https://ok.example", "https://ok.example")]
