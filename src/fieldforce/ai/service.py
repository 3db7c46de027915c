"""AI text helpers (attendance insight, field advice) backed by Gemini.

Every failure degrades to a static fallback; callers never see an error.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

import requests

from ..core.exceptions import AIServiceError

logger = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.0-flash"

FALLBACK_ADVICE = "Keep GPS on, stay hydrated and send regular status updates from the field."
FALLBACK_SUMMARY = "Attendance analysis is currently unavailable."


@dataclass(frozen=True)
class AttendanceInsight:
    summary: str
    punctuality_rating: float
    fallback: bool = False

    def as_dict(self) -> dict:
        return {
            "summary": self.summary,
            "punctuality_rating": self.punctuality_rating,
            "fallback": self.fallback,
        }


class AITextService(Protocol):
    def summarize_attendance(self, rows: Sequence[dict]) -> AttendanceInsight:
        raise NotImplementedError

    def field_advice(self, name: str, role: str, context: Optional[str] = None) -> str:
        raise NotImplementedError


class StaticTextService(AITextService):
    """Used when no API key is configured."""

    def summarize_attendance(self, rows: Sequence[dict]) -> AttendanceInsight:
        return AttendanceInsight(summary=FALLBACK_SUMMARY, punctuality_rating=0.0, fallback=True)

    def field_advice(self, name: str, role: str, context: Optional[str] = None) -> str:
        return FALLBACK_ADVICE


class GeminiTextService(AITextService):
    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = 15.0,
        language: str = "Bengali",
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key or ""
        self._model = model or DEFAULT_MODEL
        self._timeout = timeout
        self._language = language
        self._session = session or requests.Session()

    def _generate(self, prompt: str, generation_config: dict) -> str:
        if not self._api_key:
            raise AIServiceError("GEMINI_API_KEY is not configured")

        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        try:
            response = self._session.post(
                GEMINI_ENDPOINT.format(model=self._model),
                json=body,
                headers={"x-goog-api-key": self._api_key, "Content-Type": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise AIServiceError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise AIServiceError("Gemini returned a non-JSON body") from e

        try:
            parts = payload["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts).strip()
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError("Gemini response has no text") from e
        if not text:
            raise AIServiceError("Gemini returned empty text")
        return text

    def field_advice(self, name: str, role: str, context: Optional[str] = None) -> str:
        prompt = (
            f"User {name} with role {role} is asking for field management advice. "
            f"Current location context: {context or 'unknown'}. "
            f"Provide 3 brief, actionable professional tips in {self._language} for a field "
            "force officer or admin to improve efficiency or safety today."
        )
        try:
            return self._generate(prompt, {"temperature": 0.7})
        except AIServiceError as e:
            logger.warning("Field advice fallback: %s", e)
            return FALLBACK_ADVICE

    def summarize_attendance(self, rows: Sequence[dict]) -> AttendanceInsight:
        prompt = (
            f"Analyze this attendance data: {json.dumps(list(rows), default=str)}. "
            f"Provide a one-sentence summary in {self._language} of overall team punctuality "
            "and any concerns, and a punctuality rating from 0 to 10."
        )
        config = {
            "responseMimeType": "application/json",
            "responseSchema": {
                "type": "OBJECT",
                "properties": {
                    "summary": {"type": "STRING"},
                    "punctualityRating": {"type": "NUMBER"},
                },
                "required": ["summary", "punctualityRating"],
            },
        }
        try:
            return self._parse_insight(self._generate(prompt, config))
        except AIServiceError as e:
            logger.warning("Attendance insight fallback: %s", e)
            return AttendanceInsight(summary=FALLBACK_SUMMARY, punctuality_rating=0.0, fallback=True)

    @staticmethod
    def _parse_insight(text: str) -> AttendanceInsight:
        try:
            data: Any = json.loads(text)
            summary = str(data["summary"]).strip()
            rating = float(data["punctualityRating"])
        except (ValueError, KeyError, TypeError) as e:
            raise AIServiceError("Malformed insight JSON") from e
        if not summary:
            raise AIServiceError("Empty insight summary")
        return AttendanceInsight(summary=summary, punctuality_rating=rating)


def build_text_service(api_key: str, *, model: str = DEFAULT_MODEL, timeout: float = 15.0) -> AITextService:
    if not api_key:
        logger.info("GEMINI_API_KEY not set; AI texts use static fallbacks")
        return StaticTextService()
    return GeminiTextService(api_key, model=model, timeout=timeout)
