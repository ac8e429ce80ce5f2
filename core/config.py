# core/config.py
"""
Runtime configuration for Daybrief.

Values come from environment variables. A `.env` file next to app.py
is read first and never overrides variables already set.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

GEOLOCATION_MODES = {"ip", "off"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    ai_timeout: float = 30
    language: str = "English"

    data_file: Path = Path("data/daybrief.json")
    backup_dir: Path = Path("data/backups")
    max_backups: int = 10

    geolocation: str = "ip"
    geo_ip_url: str = "https://ipapi.co/json/"
    geo_timeout: float = 5
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def insights_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def fixed_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _number(key: str, default, cast, errors):
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        errors.append(f"{key} must be a number, got {raw!r}")
        return default


def load_settings(env_file: Optional[Path] = ENV_PATH) -> Settings:
    """
    Build Settings from the environment.
    Raises ValueError listing every invalid value.
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)

    errors = []

    settings = Settings(
        gemini_api_key=(os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip() or None,
        gemini_model=os.getenv("GEMINI_MODEL", Settings.gemini_model),
        gemini_base_url=os.getenv("GEMINI_BASE_URL", Settings.gemini_base_url).rstrip("/"),
        ai_timeout=_number("AI_TIMEOUT", Settings.ai_timeout, float, errors),
        language=os.getenv("BRIEFING_LANGUAGE", Settings.language),
        data_file=Path(os.getenv("DATA_FILE", str(Settings.data_file))),
        backup_dir=Path(os.getenv("BACKUP_DIR", str(Settings.backup_dir))),
        max_backups=_number("MAX_BACKUPS", Settings.max_backups, int, errors),
        geolocation=os.getenv("GEOLOCATION", Settings.geolocation).strip().lower(),
        geo_ip_url=os.getenv("GEO_IP_URL", Settings.geo_ip_url),
        geo_timeout=_number("GEO_TIMEOUT_SECONDS", Settings.geo_timeout, float, errors),
        latitude=_number("LATITUDE", None, float, errors),
        longitude=_number("LONGITUDE", None, float, errors),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level).strip().upper(),
        log_file=os.getenv("LOG_FILE") or None,
    )

    # ---- VALIDATE ----
    if settings.geolocation not in GEOLOCATION_MODES:
        errors.append(f"GEOLOCATION must be one of {sorted(GEOLOCATION_MODES)}")
    if settings.log_level not in LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}")
    if settings.ai_timeout <= 0:
        errors.append("AI_TIMEOUT must be positive")
    if settings.geo_timeout <= 0:
        errors.append("GEO_TIMEOUT_SECONDS must be positive")
    if settings.max_backups < 0:
        errors.append("MAX_BACKUPS cannot be negative")
    if (settings.latitude is None) != (settings.longitude is None):
        errors.append("LATITUDE and LONGITUDE must be set together")

    if errors:
        raise ValueError("Invalid configuration:\n" + "\n".join(f"• {e}" for e in errors))

    return settings
