# core/planner.py
"""
Schedule, memo and goal operations for Daybrief.

Pure logic only.
No UI. No Streamlit. No file access.

Every write operation takes an AppState and returns a new one;
the input is never modified. Unknown ids are silent no-ops.
"""

import math
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional

from core.models import (
    DEFAULT_UNIT,
    AppState,
    Goal,
    GoalEntry,
    Memo,
    ScheduleItem,
)
from utils.dates import now_millis, today_str
from utils.ids import new_id


# ==================================================
# SCHEDULES
# ==================================================
def add_schedule(state: AppState, title: str, time: str = "", recurrence: str = "none") -> AppState:
    item = ScheduleItem(
        id=new_id(s.id for s in state.schedules),
        title=title,
        time=time or "",
        recurrence=recurrence,
        completed_dates=[],
    )
    return replace(state, schedules=[*state.schedules, item])


def toggle_schedule(state: AppState, item_id: str, today: Optional[date] = None) -> AppState:
    day = today_str(today)

    schedules = []
    for s in state.schedules:
        if s.id == item_id:
            if day in s.completed_dates:
                dates = [d for d in s.completed_dates if d != day]
            else:
                dates = [*s.completed_dates, day]
            s = replace(s, completed_dates=dates)
        schedules.append(s)

    return replace(state, schedules=schedules)


def remove_schedule(state: AppState, item_id: str) -> AppState:
    return replace(state, schedules=[s for s in state.schedules if s.id != item_id])


# ==================================================
# MEMOS
# ==================================================
def add_memo(state: AppState, content: str, now_ms: Optional[int] = None) -> AppState:
    memo = Memo(
        id=new_id(m.id for m in state.memos),
        content=content,
        updated_at=now_ms if now_ms is not None else now_millis(),
    )
    # newest first
    return replace(state, memos=[memo, *state.memos])


def remove_memo(state: AppState, memo_id: str) -> AppState:
    return replace(state, memos=[m for m in state.memos if m.id != memo_id])


# ==================================================
# GOALS
# ==================================================
def add_goal(state: AppState, title: str, target: float, unit: Optional[str] = None) -> AppState:
    goal = Goal(
        id=new_id(g.id for g in state.goals),
        title=title,
        target=target,
        unit=(unit or "").strip() or DEFAULT_UNIT,
        entries=[],
    )
    return replace(state, goals=[*state.goals, goal])


def update_goal(state: AppState, goal_id: str, value: float, today: Optional[date] = None) -> AppState:
    """
    Same-day updates accumulate into one entry.
    """
    day = today_str(today)

    goals = []
    for g in state.goals:
        if g.id == goal_id:
            entries = []
            found = False
            for e in g.entries:
                if e.date == day:
                    e = GoalEntry(date=e.date, value=e.value + value)
                    found = True
                entries.append(e)
            if not found:
                entries.append(GoalEntry(date=day, value=value))
            g = replace(g, entries=entries)
        goals.append(g)

    return replace(state, goals=goals)


def remove_goal(state: AppState, goal_id: str) -> AppState:
    return replace(state, goals=[g for g in state.goals if g.id != goal_id])


# ==================================================
# METRICS (READ-ONLY)
# ==================================================
def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def goal_total(goal: Goal) -> float:
    return sum(e.value for e in goal.entries)


def goal_percent(goal: Goal) -> int:
    if goal.target <= 0:
        return 0
    return min(100, _round_half_up(goal_total(goal) / goal.target * 100))


def progress_fraction(percent: int) -> float:
    """
    Percent as a 0.0-1.0 bar value. Negative totals show an empty bar.
    """
    return max(0, min(100, percent)) / 100


def goal_is_complete(goal: Goal) -> bool:
    return goal_total(goal) >= goal.target


def goal_history(goal: Goal, limit: int = 7) -> List[Dict]:
    return [{"date": e.date, "value": e.value} for e in goal.entries[-limit:]]


def completed_today(state: AppState, today: Optional[date] = None) -> int:
    day = today_str(today)
    return sum(1 for s in state.schedules if s.is_done_on(day))


def schedule_progress(state: AppState, today: Optional[date] = None) -> int:
    if not state.schedules:
        return 0
    return _round_half_up(completed_today(state, today) / len(state.schedules) * 100)


def dashboard_stats(state: AppState) -> Dict[str, int]:
    return {
        "schedules": len(state.schedules),
        "memos": len(state.memos),
        "goals": len(state.goals),
        "completed_goals": sum(1 for g in state.goals if goal_is_complete(g)),
    }
