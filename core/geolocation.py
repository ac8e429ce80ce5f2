# core/geolocation.py

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


class FixedLocator:
    """Coordinates configured by the user."""

    def __init__(self, coords: Coordinates):
        self.coords = coords

    def locate(self) -> Optional[Coordinates]:
        return self.coords


class IpLocator:
    """
    Approximate position from an IP geolocation service.
    Returns None when the lookup fails; callers treat that as "denied".
    """

    def __init__(self, url: str, timeout: float = 5):
        self.url = url
        self.timeout = timeout

    def locate(self) -> Optional[Coordinates]:
        try:
            r = requests.get(self.url, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.info("IP geolocation unavailable: %s", e)
            return None

        if not isinstance(data, dict):
            return None

        lat = data.get("latitude", data.get("lat"))
        lon = data.get("longitude", data.get("lon"))
        try:
            return Coordinates(lat=float(lat), lon=float(lon))
        except (TypeError, ValueError):
            logger.info("IP geolocation returned no coordinates")
            return None


def build_locator(settings):
    """
    Fixed coordinates win; otherwise IP lookup unless geolocation is off.
    None means the capability is absent.
    """
    if settings.fixed_coordinates:
        return FixedLocator(Coordinates(lat=settings.latitude, lon=settings.longitude))
    if settings.geolocation == "off":
        return None
    return IpLocator(settings.geo_ip_url, timeout=settings.geo_timeout)
