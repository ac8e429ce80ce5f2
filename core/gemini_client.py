# core/gemini_client.py
"""
Thin transport for the Gemini generateContent REST endpoint.

One call = one prompt. Returns the response text plus any
search-grounding citations. Knows nothing about quotes or weather.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from core.models import Source

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Transport failure, non-2xx status, or a response without candidates."""


@dataclass
class Generation:
    text: str
    sources: List[Source] = field(default_factory=list)


def grounding_sources(candidate: Dict[str, Any]) -> List[Source]:
    """
    Citations from groundingMetadata, keeping only entries with a usable URI.
    """
    metadata = candidate.get("groundingMetadata")
    if not isinstance(metadata, dict):
        return []
    sources = []
    seen = set()

    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not isinstance(web, dict) or not isinstance(web.get("uri"), str):
            continue
        uri = web["uri"].strip()
        if not uri or uri == "#" or uri in seen:
            continue
        seen.add(uri)
        title = web.get("title")
        title = title.strip() if isinstance(title, str) else ""
        sources.append(Source(title=title or uri, uri=uri))

    return sources


class GeminiClient:
    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 30, session=None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests

    def _payload(self, prompt: str, schema: Optional[Dict[str, Any]], grounding: bool) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            }
        if grounding:
            payload["tools"] = [{"google_search": {}}]
        return payload

    def generate(self, prompt: str, schema: Optional[Dict[str, Any]] = None, grounding: bool = False) -> Generation:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        logger.debug("Gemini: calling model=%s schema=%s grounding=%s", self.model, schema is not None, grounding)

        try:
            r = self.session.post(
                url,
                params={"key": self.api_key},
                json=self._payload(prompt, schema, grounding),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise GeminiError("Gemini request timed out") from e
        except requests.exceptions.RequestException as e:
            raise GeminiError(f"Gemini connection error: {str(e)[:150]}") from e

        if r.status_code != 200:
            detail = r.text
            try:
                body = r.json()
            except ValueError:
                body = None
            err = body.get("error") if isinstance(body, dict) else None
            if isinstance(err, dict) and isinstance(err.get("message"), str):
                detail = err["message"] or detail
            elif isinstance(err, str) and err:
                detail = err
            raise GeminiError(f"Gemini API error {r.status_code}: {detail[:200]}")

        try:
            data = r.json()
        except ValueError as e:
            raise GeminiError("Gemini returned a non-JSON body") from e

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise GeminiError("Gemini returned no candidates")

        candidate = candidates[0] if isinstance(candidates, list) else None
        if not isinstance(candidate, dict):
            raise GeminiError("Gemini returned a malformed candidate")

        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        texts = [p.get("text") for p in parts or [] if isinstance(p, dict)]
        text = "".join(t for t in texts if isinstance(t, str))

        return Generation(text=text, sources=grounding_sources(candidate))
