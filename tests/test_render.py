# renderer tests on a fixed Open-Meteo payload

import pytest

from weacli.models import CityResult
from weacli.render import (
    UNKNOWN_WEATHER_CODE,
    RenderOptions,
    describe_weather_code,
    render,
    render_city,
    render_failures,
    weekday_name,
)


@pytest.mark.parametrize(
    "code, text",
    [
        (0, "Clear sky"),
        (1, "Mainly clear, partly cloudy, and overcast"),
        (3, "Mainly clear, partly cloudy, and overcast"),
        (48, "Fog and depositing rime fog"),
        (51, "Drizzle: Light, moderate, and dense intensity"),
        (57, "Freezing Drizzle: Light and dense intensity"),
        (65, "Rain: Slight, moderate and heavy intensity"),
        (66, "Freezing Rain: Light and heavy intensity"),
        (73, "Snow fall: Slight, moderate, and heavy intensity"),
        (77, "Snow grains"),
        (82, "Rain showers: Slight, moderate, and violent"),
        (86, "Snow showers slight and heavy"),
        (95, "Thunderstorm: Slight or moderate"),
        (96, "Thunderstorm with slight and heavy hail"),
        (99, "Thunderstorm with slight and heavy hail"),
    ],
)
def test_describe_weather_code(code, text):
    assert describe_weather_code(code) == text


@pytest.mark.parametrize("code", [12345, -1, 4, None])
def test_describe_unknown_weather_code(code):
    assert describe_weather_code(code) == UNKNOWN_WEATHER_CODE


def test_weekday_name():
    assert weekday_name("2024-05-14") == "Tuesday"
    assert weekday_name("2024-02-29") == "Thursday"
    # never crashes on garbage
    assert weekday_name("not-a-date") == ""
    assert weekday_name("2024-13-01") == ""


def test_render_city_default(paris_record):
    text = render_city("Paris", paris_record, RenderOptions())
    lines = text.splitlines()

    assert lines[:6] == [
        "City: Paris",
        "Address: Paris, Île-de-France, France métropolitaine, France",
        "Lat, lon: 48.858890, 2.320041",
        "Time: 2024-05-14T10:15 Europe/Paris (CEST)",
        "Temperature: 16.40C",
        "Weather code: 3 - Mainly clear, partly cloudy, and overcast",
    ]
    # today is not repeated in the daily loop
    assert "Tomorrow: 61 - Rain: Slight, moderate and heavy intensity" in lines
    assert "Thursday 2024-05-16: 95 - Thunderstorm: Slight or moderate" in lines
    assert "  Max/Min: 21.30C / 13.40C" in lines
    assert "Humidity" not in text
    assert "Sunrise" not in text


def test_render_city_fahrenheit(paris_record):
    text = render_city("Paris", paris_record, RenderOptions(fahrenheit=True))
    assert "Temperature: 61.52F" in text
    assert "  Max/Min: 62.78F / 53.60F" in text


def test_render_city_extended(paris_record):
    lines = render_city("Paris", paris_record, RenderOptions(show_extended=True)).splitlines()
    assert "Humidity: 72%" in lines
    assert "Pressure: 1012.6 hPa" in lines
    assert "Wind: 11.2 km/h, gusts 25.6 km/h, direction 238°" in lines
    # a null probability is shown as n/a
    assert "  Precipitation: 1.20mm (n/a), 2.0 h" in lines
    assert not any(line.strip().startswith("Sunrise") for line in lines)


def test_render_city_sun(paris_record):
    lines = render_city("Paris", paris_record, RenderOptions(show_sun=True)).splitlines()
    assert "Sunrise: 06:21, Sunset: 21:17, Daylight: 14h 56m" in lines
    assert "  Sunrise: 06:20, Sunset: 21:19, Daylight: 14h 59m" in lines
    assert "Humidity" not in "\n".join(lines)


def test_render_all_enables_everything(paris_record):
    text = render_city("Paris", paris_record, RenderOptions(show_all=True))
    assert "Humidity: 72%" in text
    assert "Sunrise: 06:21" in text


def test_render_separates_cities_and_skips_failures(paris_record):
    results = {
        "Paris": CityResult.success("Paris", paris_record),
        "Atlantis": CityResult.failure("Atlantis", "parse", "No geocoding match for 'Atlantis'"),
        "Paris, TX": CityResult.success("Paris, TX", paris_record),
    }
    text = render(results)
    blocks = text.split("\n\n")
    assert len(blocks) == 2
    assert blocks[0].startswith("City: Paris\n")
    assert blocks[1].startswith("City: Paris, TX\n")
    assert "Atlantis" not in text

    warnings = list(render_failures(results))
    assert warnings == ["Warning: Atlantis: No geocoding match for 'Atlantis' (parse error)"]


def test_render_empty_results():
    assert render({}) == ""
