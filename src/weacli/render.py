# text rendering of the collected results, pure functions only so the output is easy to test

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional
from .models import CityResult, CurrentConditions, DailyForecast, WeatherRecord, to_fahrenheit

UNKNOWN_WEATHER_CODE = "Unknown weather code"

# WMO weather interpretation codes, grouped by family
WEATHER_CODES: Dict[int, str] = {
    0: "Clear sky",
    **dict.fromkeys((1, 2, 3), "Mainly clear, partly cloudy, and overcast"),
    **dict.fromkeys((45, 48), "Fog and depositing rime fog"),
    **dict.fromkeys((51, 53, 55), "Drizzle: Light, moderate, and dense intensity"),
    **dict.fromkeys((56, 57), "Freezing Drizzle: Light and dense intensity"),
    **dict.fromkeys((61, 63, 65), "Rain: Slight, moderate and heavy intensity"),
    **dict.fromkeys((66, 67), "Freezing Rain: Light and heavy intensity"),
    **dict.fromkeys((71, 73, 75), "Snow fall: Slight, moderate, and heavy intensity"),
    77: "Snow grains",
    **dict.fromkeys((80, 81, 82), "Rain showers: Slight, moderate, and violent"),
    **dict.fromkeys((85, 86), "Snow showers slight and heavy"),
    95: "Thunderstorm: Slight or moderate",
    **dict.fromkeys((96, 99), "Thunderstorm with slight and heavy hail"),
}

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class RenderOptions:
    show_all: bool = False
    show_extended: bool = False
    show_sun: bool = False
    fahrenheit: bool = False

    @property
    def extended(self) -> bool:
        return self.show_all or self.show_extended

    @property
    def sun(self) -> bool:
        return self.show_all or self.show_sun


def describe_weather_code(code: Optional[int]) -> str:
    if code is None:
        return UNKNOWN_WEATHER_CODE
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER_CODE)


def weekday_name(value: str) -> str:
    # "2024-05-14" -> "Tuesday", anything unparseable -> ""
    try:
        return datetime.strptime(value, DATE_FORMAT).strftime("%A")
    except (TypeError, ValueError):
        return ""


def _num(value: Optional[float], unit: str = "", fmt: str = ".1f") -> str:
    if value is None:
        return "n/a"
    return f"{value:{fmt}}{unit}"


def _temp(value: Optional[float], fahrenheit: bool) -> str:
    if value is None:
        return "n/a"
    if fahrenheit:
        return f"{to_fahrenheit(value):.2f}F"
    return f"{value:.2f}C"


def _clock(value: Optional[str]) -> str:
    # "2024-05-14T06:21" -> "06:21"
    if not value:
        return "n/a"
    try:
        return datetime.fromisoformat(value).strftime("%H:%M")
    except ValueError:
        return value


def _duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "n/a"
    minutes = int(round(seconds / 60))
    return f"{minutes // 60}h {minutes % 60:02d}m"


def _weather(code: Optional[int]) -> str:
    label = "n/a" if code is None else str(code)
    return f"{label} - {describe_weather_code(code)}"


def _day_label(daily: DailyForecast, i: int) -> str:
    if i == 1:
        return "Tomorrow"
    day = daily.time[i]
    name = weekday_name(day)
    return f"{name} {day}" if name else day


def _sun_line(daily: DailyForecast, i: int) -> str:
    return (
        f"Sunrise: {_clock(daily.sunrise[i])}, Sunset: {_clock(daily.sunset[i])}, "
        f"Daylight: {_duration(daily.daylight_duration[i])}"
    )


def _current_lines(record: WeatherRecord, options: RenderOptions) -> List[str]:
    cur: CurrentConditions = record.current
    tz = record.timezone
    if record.timezone_abbreviation:
        tz = f"{tz} ({record.timezone_abbreviation})"
    lines = [
        f"Time: {cur.time} {tz}".rstrip(),
        f"Temperature: {_temp(cur.temperature, options.fahrenheit)}",
        f"Weather code: {_weather(cur.weather_code)}",
    ]
    if options.extended:
        lines += [
            f"Precipitation: {_num(cur.precipitation, 'mm', '.2f')}, rain {_num(cur.rain, 'mm', '.2f')}",
            f"Humidity: {_num(cur.relative_humidity, '%', '.0f')}",
            f"Pressure: {_num(cur.pressure_msl, ' hPa')}",
            f"Wind: {_num(cur.wind_speed, ' km/h')}, gusts {_num(cur.wind_gusts, ' km/h')}, "
            f"direction {_num(cur.wind_direction, '°', '.0f')}",
        ]
    if options.sun and len(record.daily) > 0:
        lines.append(_sun_line(record.daily, 0))
    return lines


def _day_lines(daily: DailyForecast, i: int, options: RenderOptions) -> List[str]:
    lines = [
        f"{_day_label(daily, i)}: {_weather(daily.weather_code[i])}",
        f"  Max/Min: {_temp(daily.temperature_max[i], options.fahrenheit)} / "
        f"{_temp(daily.temperature_min[i], options.fahrenheit)}",
    ]
    if options.extended:
        lines += [
            f"  Precipitation: {_num(daily.precipitation_sum[i], 'mm', '.2f')} "
            f"({_num(daily.precipitation_probability_max[i], '%', '.0f')}), "
            f"{_num(daily.precipitation_hours[i], ' h')}",
            f"  Wind: max {_num(daily.wind_speed_max[i], ' km/h')}, "
            f"gusts {_num(daily.wind_gusts_max[i], ' km/h')}, "
            f"direction {_num(daily.wind_direction_dominant[i], '°', '.0f')}",
        ]
    if options.sun:
        lines.append(f"  {_sun_line(daily, i)}")
    return lines


def render_city(city: str, record: WeatherRecord, options: RenderOptions) -> str:
    loc = record.location
    lines = [
        f"City: {city}",
        f"Address: {loc.display_address}",
        f"Lat, lon: {loc.latitude:f}, {loc.longitude:f}",
    ]
    lines += _current_lines(record, options)
    # index 0 is today, already shown as current
    for i in range(1, len(record.daily)):
        lines += _day_lines(record.daily, i, options)
    return "\n".join(lines)


def render(results: Dict[str, CityResult], options: Optional[RenderOptions] = None) -> str:
    options = options or RenderOptions()
    blocks = [
        render_city(city, result.record, options)
        for city, result in results.items()
        if result.record is not None
    ]
    return "\n\n".join(blocks)


def render_failures(results: Dict[str, CityResult]) -> Iterator[str]:
    for city, result in results.items():
        if not result.ok:
            yield f"Warning: {city}: {result.message} ({result.error_kind} error)"
