# core/controller.py
"""
Application controller for Daybrief.

Owns the AppState, applies mutations through the StateStore, and
runs the startup / refresh sequence:

    idle -> loading -> ready | errored
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import date
from enum import Enum
from typing import Optional

from core import planner
from core.models import AppState, HistoryEvent, Quote, WeatherData

logger = logging.getLogger(__name__)

VIEWS = ("home", "schedule", "memo", "goals")

REFRESH_ERROR_MESSAGE = "Could not load today's briefing. Please try again."


class Status(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class BriefingController:
    def __init__(self, store, insight_client, locator=None, geo_timeout: float = 5):
        self.store = store
        self.insight_client = insight_client
        self.locator = locator
        self.geo_timeout = geo_timeout

        self.state = AppState()
        self.status = Status.IDLE
        self.error: Optional[str] = None
        self.active_view = "home"

        self.weather: Optional[WeatherData] = None
        self.quote: Optional[Quote] = None
        self.history: Optional[HistoryEvent] = None

    # ==================================================
    # STARTUP / REFRESH
    # ==================================================
    def start(self):
        self.state = self.store.load()
        self.refresh()

    def _locate(self):
        if self.locator is None:
            logger.info("Geolocation not available; skipping weather")
            return None

        pool = ThreadPoolExecutor(max_workers=1)
        future = pool.submit(self.locator.locate)
        try:
            return future.result(timeout=self.geo_timeout)
        except FutureTimeout:
            logger.info("Geolocation timed out after %ss", self.geo_timeout)
            return None
        except Exception as e:
            logger.info("Geolocation failed: %s", e)
            return None
        finally:
            # a timed-out lookup is left to finish on its own
            pool.shutdown(wait=False)

    def refresh(self):
        self.status = Status.LOADING
        self.error = None

        try:
            coords = self._locate()
            bundle = self.insight_client.fetch(coords)
        except Exception:
            logger.exception("Briefing refresh failed")
            self.status = Status.ERRORED
            self.error = REFRESH_ERROR_MESSAGE
            return

        self.weather = bundle.weather
        self.quote = bundle.quote
        self.history = bundle.history
        self.status = Status.READY

    @property
    def loading(self) -> bool:
        return self.status == Status.LOADING

    def set_view(self, view: str):
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.active_view = view

    # ==================================================
    # WRITE OPERATIONS
    # ==================================================
    def _apply(self, fn, *args, **kwargs) -> AppState:
        self.state = self.store.mutate(self.state, fn, *args, **kwargs)
        return self.state

    def add_schedule(self, title: str, time: str = "", recurrence: str = "none"):
        return self._apply(planner.add_schedule, title, time, recurrence)

    def toggle_schedule(self, item_id: str, today: Optional[date] = None):
        return self._apply(planner.toggle_schedule, item_id, today=today)

    def remove_schedule(self, item_id: str):
        return self._apply(planner.remove_schedule, item_id)

    def add_memo(self, content: str):
        return self._apply(planner.add_memo, content)

    def remove_memo(self, memo_id: str):
        return self._apply(planner.remove_memo, memo_id)

    def add_goal(self, title: str, target: float, unit: Optional[str] = None):
        return self._apply(planner.add_goal, title, target, unit)

    def update_goal(self, goal_id: str, value: float, today: Optional[date] = None):
        return self._apply(planner.update_goal, goal_id, value, today=today)

    def remove_goal(self, goal_id: str):
        return self._apply(planner.remove_goal, goal_id)


def build_controller(settings) -> BriefingController:
    from core.geolocation import build_locator
    from core.insight import build_insight_client
    from core.state_store import StateStore

    store = StateStore(settings.data_file, backup_dir=settings.backup_dir, max_backups=settings.max_backups)
    return BriefingController(
        store=store,
        insight_client=build_insight_client(settings),
        locator=build_locator(settings),
        geo_timeout=settings.geo_timeout,
    )
