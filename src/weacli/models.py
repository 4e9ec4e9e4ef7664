# models and a tiny conversion helper to keep data shapes explicit and reusable across the app

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ResolvedLocation:
    # best match returned by the geocoder
    latitude: float
    longitude: float
    display_address: str


@dataclass(frozen=True)
class CurrentConditions:
    time: str
    temperature: float  # °C, as received
    weather_code: int
    relative_humidity: Optional[float] = None
    precipitation: Optional[float] = None
    rain: Optional[float] = None
    pressure_msl: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_gusts: Optional[float] = None
    wind_direction: Optional[float] = None


@dataclass(frozen=True)
class DailyForecast:
    # parallel sequences, index 0 is today
    time: Tuple[str, ...]
    weather_code: Tuple[Optional[int], ...]
    temperature_max: Tuple[Optional[float], ...]
    temperature_min: Tuple[Optional[float], ...]
    sunrise: Tuple[Optional[str], ...]
    sunset: Tuple[Optional[str], ...]
    daylight_duration: Tuple[Optional[float], ...]
    precipitation_sum: Tuple[Optional[float], ...]
    precipitation_hours: Tuple[Optional[float], ...]
    precipitation_probability_max: Tuple[Optional[float], ...]
    wind_speed_max: Tuple[Optional[float], ...]
    wind_gusts_max: Tuple[Optional[float], ...]
    wind_direction_dominant: Tuple[Optional[float], ...]

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class WeatherRecord:
    location: ResolvedLocation
    timezone: str
    timezone_abbreviation: str
    utc_offset_seconds: int
    current: CurrentConditions
    daily: DailyForecast


@dataclass(frozen=True)
class CityResult:
    # outcome of one city pipeline: either a record or an error kind + message
    city: str
    record: Optional[WeatherRecord] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, city: str, record: WeatherRecord) -> "CityResult":
        return cls(city=city, record=record)

    @classmethod
    def failure(cls, city: str, error_kind: str, message: str) -> "CityResult":
        return cls(city=city, error_kind=error_kind, message=message)


def to_fahrenheit(celsius: float) -> float:
    # display-only conversion, stored data stays in Celsius
    return celsius * 9.0 / 5.0 + 32.0
