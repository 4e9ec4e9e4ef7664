# OOP boundary for external i/o
# all http/headers/retries live here, so the rest of the code is pure and testable
# use a thread-local session per ThreadPoolExecutor worker

from __future__ import annotations
import logging
import os
import threading
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from dotenv import load_dotenv

from .models import CurrentConditions, DailyForecast, ResolvedLocation, WeatherRecord

load_dotenv()

logger = logging.getLogger(__name__)

MAX_FORECAST_DAYS = 15

CURRENT_VARIABLES = (
    "temperature_2m",
    "relative_humidity_2m",
    "precipitation",
    "rain",
    "weather_code",
    "pressure_msl",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
)

DAILY_VARIABLES = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "sunrise",
    "sunset",
    "daylight_duration",
    "precipitation_sum",
    "precipitation_hours",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "wind_gusts_10m_max",
    "wind_direction_10m_dominant",
)


class WeatherClientError(RuntimeError):
    # base type used to propagate clear messages from this layer
    kind = "error"


class NetworkError(WeatherClientError):
    kind = "network"


class ParseError(WeatherClientError):
    kind = "parse"


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise WeatherClientError(f"{name} must be a number (got {raw!r})") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise WeatherClientError(f"{name} must be an integer (got {raw!r})") from exc


class _HTTPClient:
    # shared session handling for both upstream services
    DEFAULT_USER_AGENT = "weacli/0.1 (command-line weather report)"

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_factor: float = 0.5,
        user_agent: Optional[str] = None,
    ):
        # None means the transport default, which never times out
        self.timeout = timeout if timeout is not None else _env_float("WEACLI_TIMEOUT")
        self.user_agent = user_agent or os.getenv("WEACLI_USER_AGENT") or self.DEFAULT_USER_AGENT
        if max_retries is None:
            max_retries = _env_int("WEACLI_MAX_RETRIES", 0)

        self._local = threading.local()

        # 0 retries keeps it at exactly one attempt per request
        self._retry = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

    def _get_json(self, url: str, params: Dict[str, Any], what: str) -> Any:
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Request error for {what}: {exc}") from exc

        if resp.status_code >= 400:
            snippet = (resp.text or "")[:300]
            raise NetworkError(f"HTTP {resp.status_code} for {what}. Body: {snippet}")

        try:
            return resp.json()
        except ValueError as exc:
            raise ParseError(f"Invalid JSON for {what}: {exc}") from exc


def parse_location(data: Any, city: str = "") -> ResolvedLocation:
    # nominatim shape: [{"display_name": ..., "lat": "48.85", "lon": "2.35", ...}]
    if not isinstance(data, list) or not data:
        raise ParseError(f"No geocoding match for {city!r}")
    top = data[0]
    try:
        return ResolvedLocation(
            latitude=float(top["lat"]),
            longitude=float(top["lon"]),
            display_address=str(top.get("display_name", "")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ParseError(f"Unexpected geocoding shape for {city!r}: {exc}") from exc


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _column(daily: Dict[str, Any], key: str, size: int, cast) -> Tuple[Any, ...]:
    values = daily.get(key)
    if values is None:
        return (None,) * size
    if len(values) != size:
        # parallel arrays must line up with daily.time
        raise ParseError(f"daily.{key} has {len(values)} entries, expected {size}")
    return tuple(cast(v) if v is not None else None for v in values)


def parse_weather(data: Any, location: ResolvedLocation) -> WeatherRecord:
    # open-meteo shape: {"timezone": ..., "current": {...}, "daily": {"time": [...], ...}}
    if not isinstance(data, dict):
        raise ParseError("Unsupported payload shape for parse_weather()")
    try:
        cur = data["current"]
        current = CurrentConditions(
            time=str(cur["time"]),
            temperature=float(cur["temperature_2m"]),
            weather_code=int(cur["weather_code"]),
            relative_humidity=_opt_float(cur.get("relative_humidity_2m")),
            precipitation=_opt_float(cur.get("precipitation")),
            rain=_opt_float(cur.get("rain")),
            pressure_msl=_opt_float(cur.get("pressure_msl")),
            wind_speed=_opt_float(cur.get("wind_speed_10m")),
            wind_gusts=_opt_float(cur.get("wind_gusts_10m")),
            wind_direction=_opt_float(cur.get("wind_direction_10m")),
        )

        raw_daily = data.get("daily") or {"time": []}
        days = tuple(str(t) for t in raw_daily["time"])
        n = len(days)
        daily = DailyForecast(
            time=days,
            weather_code=_column(raw_daily, "weather_code", n, int),
            temperature_max=_column(raw_daily, "temperature_2m_max", n, float),
            temperature_min=_column(raw_daily, "temperature_2m_min", n, float),
            sunrise=_column(raw_daily, "sunrise", n, str),
            sunset=_column(raw_daily, "sunset", n, str),
            daylight_duration=_column(raw_daily, "daylight_duration", n, float),
            precipitation_sum=_column(raw_daily, "precipitation_sum", n, float),
            precipitation_hours=_column(raw_daily, "precipitation_hours", n, float),
            precipitation_probability_max=_column(raw_daily, "precipitation_probability_max", n, float),
            wind_speed_max=_column(raw_daily, "wind_speed_10m_max", n, float),
            wind_gusts_max=_column(raw_daily, "wind_gusts_10m_max", n, float),
            wind_direction_dominant=_column(raw_daily, "wind_direction_10m_dominant", n, float),
        )

        return WeatherRecord(
            location=location,
            timezone=str(data.get("timezone", "")),
            timezone_abbreviation=str(data.get("timezone_abbreviation", "")),
            utc_offset_seconds=int(data.get("utc_offset_seconds", 0)),
            current=current,
            daily=daily,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ParseError(f"Unexpected forecast shape: {exc}") from exc


class GeocoderClient(_HTTPClient):
    # resolves free text place names to coordinates with OpenStreetMap Nominatim
    BASE_URL = "https://nominatim.openstreetmap.org/search"

    def search(self, city: str) -> List[Dict[str, Any]]:
        # requesting exactly one best match
        params = {"q": city, "format": "json", "limit": 1}
        return self._get_json(self.BASE_URL, params, f"geocoding {city!r}")

    def resolve(self, city: str) -> ResolvedLocation:
        return parse_location(self.search(city), city)


def clamp_forecast_days(days: int) -> int:
    # out of range horizons fall back to today only
    if not isinstance(days, int) or days < 0 or days > MAX_FORECAST_DAYS:
        return 0
    return days


def build_forecast_params(
    latitude: float, longitude: float, forecast_days: int, today: Optional[date] = None
) -> Dict[str, Any]:
    today = today or date.today()
    days = clamp_forecast_days(forecast_days)
    return {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARIABLES),
        "daily": ",".join(DAILY_VARIABLES),
        "timezone": "auto",
        "start_date": today.isoformat(),
        "end_date": (today + timedelta(days=days)).isoformat(),
    }


class ForecastClient(_HTTPClient):
    # current conditions plus daily arrays from Open-Meteo
    BASE_URL = "https://api.open-meteo.com/v1/forecast"

    def forecast(
        self, latitude: float, longitude: float, forecast_days: int = 0, today: Optional[date] = None
    ) -> Dict[str, Any]:
        params = build_forecast_params(latitude, longitude, forecast_days, today)
        data = self._get_json(self.BASE_URL, params, f"forecast at ({latitude}, {longitude})")
        if not isinstance(data, dict) or "current" not in data:
            raise ParseError("Unexpected API shape: missing current")
        return data

    def fetch(
        self,
        latitude: float,
        longitude: float,
        forecast_days: int = 0,
        today: Optional[date] = None,
        address: str = "",
    ) -> WeatherRecord:
        payload = self.forecast(latitude, longitude, forecast_days, today)
        return parse_weather(payload, ResolvedLocation(latitude, longitude, address))
