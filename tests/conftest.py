# shared fixtures and fakes so tests never hit the network

from __future__ import annotations
import json
import threading
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from weacli.client import NetworkError, ParseError, build_forecast_params, parse_weather
from weacli.models import ResolvedLocation, WeatherRecord

DATA = Path(__file__).parent / "data"
TODAY = date(2024, 5, 14)


def load_json(name: str):
    return json.loads((DATA / name).read_text(encoding="utf-8"))


def daily_payload(params: Dict[str, str]) -> dict:
    # build an open-meteo style payload whose daily arrays span start_date..end_date
    start = date.fromisoformat(params["start_date"])
    end = date.fromisoformat(params["end_date"])
    days = [(start + timedelta(days=i)).isoformat() for i in range((end - start).days + 1)]
    n = len(days)
    return {
        "timezone": "UTC",
        "timezone_abbreviation": "UTC",
        "utc_offset_seconds": 0,
        "current": {"time": f"{params['start_date']}T12:00", "temperature_2m": 20.0, "weather_code": 0},
        "daily": {
            "time": days,
            "weather_code": [0] * n,
            "temperature_2m_max": [22.0] * n,
            "temperature_2m_min": [12.0] * n,
        },
    }


class FakeGeocoder:
    def __init__(self, locations: Dict[str, ResolvedLocation], barrier: Optional[threading.Barrier] = None):
        self.locations = locations
        self.barrier = barrier
        self.calls: List[str] = []

    def resolve(self, city: str) -> ResolvedLocation:
        self.calls.append(city)
        if self.barrier is not None:
            # every city must be in flight at the same time to get past this
            self.barrier.wait(timeout=5)
        if city not in self.locations:
            raise ParseError(f"No geocoding match for {city!r}")
        return self.locations[city]


class FakeForecaster:
    def __init__(self, offline: bool = False):
        self.offline = offline
        self.calls: List[ResolvedLocation] = []

    def fetch(
        self,
        latitude: float,
        longitude: float,
        forecast_days: int = 0,
        today: Optional[date] = None,
        address: str = "",
    ) -> WeatherRecord:
        location = ResolvedLocation(latitude, longitude, address)
        self.calls.append(location)
        if self.offline:
            raise NetworkError("Request error for forecast: connection refused")
        params = build_forecast_params(location.latitude, location.longitude, forecast_days, today or TODAY)
        return parse_weather(daily_payload(params), location)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.requests: List[dict] = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def locations() -> Dict[str, ResolvedLocation]:
    return {
        "Paris": ResolvedLocation(48.8588897, 2.3200410, "Paris, Île-de-France, France métropolitaine, France"),
        "Tokyo": ResolvedLocation(35.6768601, 139.7638947, "東京都, 日本"),
        "Boise": ResolvedLocation(43.6166163, -116.2008166, "Boise, Ada County, Idaho, United States"),
    }


@pytest.fixture
def paris_record() -> WeatherRecord:
    location = ResolvedLocation(48.8588897, 2.3200410, "Paris, Île-de-France, France métropolitaine, France")
    return parse_weather(load_json("openmeteo_paris.json"), location)
