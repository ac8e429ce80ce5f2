import time
from datetime import date
from typing import Optional


def today_str(today: Optional[date] = None) -> str:
    """
    Calendar date as YYYY-MM-DD.
    Defaults to the local date.
    """
    if today is None:
        today = date.today()
    return today.isoformat()


def now_millis() -> int:
    return int(time.time() * 1000)
