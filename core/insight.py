# core/insight.py
"""
Daily insight: quote, "on this day" history, and local weather.

Each piece is requested independently from Gemini. A piece that fails
to arrive or to validate is simply absent from the bundle; fetch()
itself never raises.
"""

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Dict, List, Optional

from core.gemini_client import GeminiClient, GeminiError, Generation
from core.models import HistoryEvent, InsightBundle, Quote, Source, WeatherData

logger = logging.getLogger(__name__)

# ==================================================
# RESPONSE SCHEMAS
# ==================================================
SOURCE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "uri": {"type": "STRING"},
    },
    "required": ["title", "uri"],
}

QUOTE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "text": {"type": "STRING"},
        "author": {"type": "STRING"},
    },
    "required": ["text", "author"],
}

HISTORY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "year": {"type": "STRING"},
        "event": {"type": "STRING"},
        "description": {"type": "STRING"},
        "sources": {"type": "ARRAY", "items": SOURCE_SCHEMA},
    },
    "required": ["year", "event", "description", "sources"],
}

_JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)


# ==================================================
# DECODING
# ==================================================
def extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """
    Fallback for free-text answers: parse the outermost {...} span.
    """
    match = _JSON_BLOCK.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def parse_structured(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads((text or "").strip())
        if isinstance(data, dict):
            return data
    except ValueError:
        pass
    return extract_json_block(text)


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _decode_sources(raw) -> List[Source]:
    sources = []
    for s in raw if isinstance(raw, list) else []:
        if not isinstance(s, dict):
            continue
        uri = _text(s, "uri")
        if not uri or uri == "#":
            continue
        sources.append(Source(title=_text(s, "title") or uri, uri=uri))
    return sources


def _merge_sources(*groups: List[Source]) -> List[Source]:
    merged = []
    seen = set()
    for group in groups:
        for s in group:
            if s.uri not in seen:
                seen.add(s.uri)
                merged.append(s)
    return merged


def decode_quote(data: Optional[Dict[str, Any]]) -> Optional[Quote]:
    if not data:
        return None
    text, author = _text(data, "text"), _text(data, "author")
    if not text or not author:
        return None
    return Quote(text=text, author=author)


def decode_history(data: Optional[Dict[str, Any]], grounded: List[Source] = ()) -> Optional[HistoryEvent]:
    if not data:
        return None
    year, event, description = _text(data, "year"), _text(data, "event"), _text(data, "description")
    if not year or not event or not description:
        return None
    return HistoryEvent(
        year=year,
        event=event,
        description=description,
        sources=_merge_sources(_decode_sources(data.get("sources")), list(grounded)),
    )


def decode_weather(data: Optional[Dict[str, Any]], grounded: List[Source] = ()) -> Optional[WeatherData]:
    if not data:
        return None

    temp = data.get("temp")
    if isinstance(temp, bool):
        return None
    try:
        temp = float(temp)
    except (TypeError, ValueError):
        return None

    condition, location = _text(data, "condition"), _text(data, "location")
    if not condition or not location:
        return None

    return WeatherData(
        temp=temp,
        condition=condition,
        location=location,
        description=_text(data, "description") or "",
        sources=list(grounded),
    )


# ==================================================
# CLIENT
# ==================================================
class DailyInsightClient:
    def __init__(self, gemini: Optional[GeminiClient], language: str = "English", max_workers: int = 3):
        self.gemini = gemini
        self.language = language
        self.max_workers = max_workers

    # ---------------- Prompts ----------------
    def quote_prompt(self) -> str:
        return (
            "Give me one inspiring quote for today. "
            f"Respond in {self.language}. Return JSON with 'text' and 'author'."
        )

    def history_prompt(self, today: date) -> str:
        return (
            f"Today is {today.isoformat()}. What is the single most important historical event "
            f"that happened on {today.strftime('%B')} {today.day}? Give the year, a short event title, "
            "a brief description, and a list of sources (title and URL). "
            f"Respond in {self.language}."
        )

    def weather_prompt(self, coords) -> str:
        return (
            f"What is the current weather at latitude {coords.lat}, longitude {coords.lon}? "
            "Provide the temperature in Celsius, the condition, and the location name. "
            f"Respond in {self.language}. Return only JSON: "
            '{ "temp": number, "condition": "sunny/cloudy/rainy...", '
            '"location": "City Name", "description": "short description" }'
        )

    # ---------------- Requests ----------------
    def _generate(self, label: str, prompt: str, schema=None, grounding=False) -> Optional[Generation]:
        try:
            return self.gemini.generate(prompt, schema=schema, grounding=grounding)
        except GeminiError as e:
            logger.warning("Insight %s request failed: %s", label, e)
            return None

    def fetch_quote(self) -> Optional[Quote]:
        result = self._generate("quote", self.quote_prompt(), schema=QUOTE_SCHEMA)
        if result is None:
            return None
        quote = decode_quote(parse_structured(result.text))
        if quote is None:
            logger.warning("Discarding unparseable quote response")
        return quote

    def fetch_history(self, today: date) -> Optional[HistoryEvent]:
        result = self._generate("history", self.history_prompt(today), schema=HISTORY_SCHEMA)
        if result is None:
            return None
        history = decode_history(parse_structured(result.text), result.sources)
        if history is None:
            logger.warning("Discarding unparseable history response")
        return history

    def fetch_weather(self, coords) -> Optional[WeatherData]:
        # search grounding cannot be combined with a response schema
        result = self._generate("weather", self.weather_prompt(coords), grounding=True)
        if result is None:
            return None
        weather = decode_weather(extract_json_block(result.text), result.sources)
        if weather is None:
            logger.warning("Discarding unparseable weather response")
        return weather

    def fetch(self, coords=None, today: Optional[date] = None) -> InsightBundle:
        """
        Returns whatever pieces could be fetched and validated.
        Weather is only requested when coordinates are given.
        """
        if self.gemini is None:
            logger.warning("Gemini API key not configured; insights disabled")
            return InsightBundle()

        if today is None:
            today = date.today()

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                quote = pool.submit(self.fetch_quote)
                history = pool.submit(self.fetch_history, today)
                weather = pool.submit(self.fetch_weather, coords) if coords is not None else None

                return InsightBundle(
                    quote=quote.result(),
                    history=history.result(),
                    weather=weather.result() if weather else None,
                )
        except Exception:
            logger.exception("Unexpected error while fetching insights")
            return InsightBundle()


def build_insight_client(settings) -> DailyInsightClient:
    gemini = None
    if settings.insights_enabled:
        gemini = GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.ai_timeout,
        )
    return DailyInsightClient(gemini, language=settings.language)
