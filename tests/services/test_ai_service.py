import json

import requests

from fieldforce.ai.service import (
    FALLBACK_ADVICE,
    FALLBACK_SUMMARY,
    GeminiTextService,
    StaticTextService,
    build_text_service,
)


class FakeResponse:
    def __init__(self, payload=None, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.exc:
            raise self.exc
        return self.response


def _text_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_insight_parses_json_schema_response():
    session = FakeSession(FakeResponse(_text_payload(json.dumps({"summary": "Team is punctual", "punctualityRating": 9}))))
    svc = GeminiTextService("key", model="gemini-test", session=session)

    insight = svc.summarize_attendance([{"user": "A", "status": "present", "time": "09:00"}])

    assert insight.summary == "Team is punctual"
    assert insight.punctuality_rating == 9.0
    assert insight.fallback is False
    call = session.calls[0]
    assert call["url"].endswith("/models/gemini-test:generateContent")
    assert call["headers"]["x-goog-api-key"] == "key"
    assert call["json"]["generationConfig"]["responseMimeType"] == "application/json"


def test_malformed_json_falls_back():
    svc = GeminiTextService("key", session=FakeSession(FakeResponse(_text_payload("not json"))))
    insight = svc.summarize_attendance([])
    assert insight.summary == FALLBACK_SUMMARY
    assert insight.fallback is True


def test_http_error_falls_back():
    svc = GeminiTextService("key", session=FakeSession(FakeResponse({}, status=500)))
    assert svc.field_advice("A", "officer") == FALLBACK_ADVICE


def test_timeout_falls_back():
    svc = GeminiTextService("key", session=FakeSession(exc=requests.exceptions.Timeout("slow")))
    assert svc.field_advice("A", "officer", "Downtown") == FALLBACK_ADVICE


def test_missing_key_never_calls_out():
    session = FakeSession()
    svc = GeminiTextService("", session=session)
    assert svc.summarize_attendance([]).fallback is True
    assert session.calls == []


def test_advice_returns_model_text():
    svc = GeminiTextService("key", session=FakeSession(FakeResponse(_text_payload("  1. Stay safe  "))))
    assert svc.field_advice("A", "officer") == "1. Stay safe"


def test_build_without_key_is_static():
    assert isinstance(build_text_service(""), StaticTextService)
