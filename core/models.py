# core/models.py
"""
Daybrief data model.

Persisted: ScheduleItem, Memo, Goal (with GoalEntry), AppState.
Transient: WeatherData, Quote, HistoryEvent, InsightBundle.

Every `from_dict` is strict: it returns a fully populated value or
raises ValueError. Collection-level tolerance lives in AppState.from_dict.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# ==================================================
# CONSTANTS (SCHEMA)
# ==================================================
RECURRENCES = ("none", "daily", "weekly", "monthly")
DEFAULT_UNIT = "count"


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' must be a non-empty string")
    return value


def _require_number(data: Dict[str, Any], key: str):
    value = data.get(key)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    return value


# ==================================================
# PERSISTED ENTITIES
# ==================================================
@dataclass
class ScheduleItem:
    id: str
    title: str
    time: str = ""
    recurrence: str = "none"
    completed_dates: List[str] = field(default_factory=list)

    def is_done_on(self, day: str) -> bool:
        return day in self.completed_dates

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "time": self.time,
            "recurrence": self.recurrence,
            "completed_dates": list(self.completed_dates),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleItem":
        recurrence = data.get("recurrence", "none")
        if recurrence not in RECURRENCES:
            recurrence = "none"

        dates = []
        for d in data.get("completed_dates") or []:
            if isinstance(d, str) and d not in dates:
                dates.append(d)

        return cls(
            id=_require_str(data, "id"),
            title=_require_str(data, "title"),
            time=data.get("time") or "",
            recurrence=recurrence,
            completed_dates=dates,
        )


@dataclass
class Memo:
    id: str
    content: str
    updated_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "content": self.content, "updated_at": self.updated_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Memo":
        return cls(
            id=_require_str(data, "id"),
            content=_require_str(data, "content"),
            updated_at=int(_require_number(data, "updated_at")),
        )


@dataclass
class GoalEntry:
    date: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "value": self.value}


@dataclass
class Goal:
    id: str
    title: str
    target: float
    unit: str = DEFAULT_UNIT
    entries: List[GoalEntry] = field(default_factory=list)

    def entry_for(self, day: str) -> Optional[GoalEntry]:
        return next((e for e in self.entries if e.date == day), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "target": self.target,
            "unit": self.unit,
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        entries: List[GoalEntry] = []
        for raw in data.get("entries") or []:
            if not isinstance(raw, dict):
                continue
            day = raw.get("date")
            value = raw.get("value")
            if not isinstance(day, str) or isinstance(value, bool) or not isinstance(value, (int, float)):
                continue

            # one entry per date
            existing = next((e for e in entries if e.date == day), None)
            if existing:
                existing.value += value
            else:
                entries.append(GoalEntry(date=day, value=value))

        return cls(
            id=_require_str(data, "id"),
            title=_require_str(data, "title"),
            target=_require_number(data, "target"),
            unit=data.get("unit") or DEFAULT_UNIT,
            entries=entries,
        )


@dataclass
class AppState:
    schedules: List[ScheduleItem] = field(default_factory=list)
    memos: List[Memo] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schedules": [s.to_dict() for s in self.schedules],
            "memos": [m.to_dict() for m in self.memos],
            "goals": [g.to_dict() for g in self.goals],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AppState":
        """
        Tolerant decode.
        Invalid records are skipped, missing collections default to empty.
        """
        if not isinstance(data, dict):
            logger.warning("Saved state is not an object; starting empty")
            return cls()

        return cls(
            schedules=_decode_records(data.get("schedules"), ScheduleItem, "schedule"),
            memos=_decode_records(data.get("memos"), Memo, "memo"),
            goals=_decode_records(data.get("goals"), Goal, "goal"),
        )


def _decode_records(raw, model, label):
    if not isinstance(raw, list):
        return []

    records = []
    seen_ids = set()
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object %s record", label)
            continue
        try:
            record = model.from_dict(item)
        except (ValueError, TypeError) as e:
            logger.warning("Skipping invalid %s record: %s", label, e)
            continue
        if record.id in seen_ids:
            logger.warning("Skipping duplicate %s id %s", label, record.id)
            continue
        seen_ids.add(record.id)
        records.append(record)

    return records


# ==================================================
# TRANSIENT INSIGHT VALUES
# ==================================================
@dataclass
class Source:
    title: str
    uri: str


@dataclass
class Quote:
    text: str
    author: str


@dataclass
class HistoryEvent:
    year: str
    event: str
    description: str
    sources: List[Source] = field(default_factory=list)


@dataclass
class WeatherData:
    temp: float
    condition: str
    location: str
    description: str
    sources: List[Source] = field(default_factory=list)


@dataclass
class InsightBundle:
    weather: Optional[WeatherData] = None
    quote: Optional[Quote] = None
    history: Optional[HistoryEvent] = None

    def is_empty(self) -> bool:
        return self.weather is None and self.quote is None and self.history is None
