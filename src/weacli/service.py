# orchestration and business rules.
# use ThreadPoolExecutor to run one geocode -> forecast pipeline per city concurrently
# each pipeline returns a CityResult through its future, so nothing shared is mutated

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import Dict, Iterable, Optional
from .models import CityResult
from .client import ForecastClient, GeocoderClient, WeatherClientError, clamp_forecast_days

logger = logging.getLogger(__name__)


# single city path: geocode -> forecast -> record
def fetch_city(
    geocoder: GeocoderClient,
    forecaster: ForecastClient,
    city: str,
    days: int = 0,
    today: Optional[date] = None,
) -> CityResult:
    # submitted to the thread pool, never raises for upstream failures
    try:
        location = geocoder.resolve(city)
        logger.debug("%s resolved to %s, %s", city, location.latitude, location.longitude)
        record = forecaster.fetch(
            location.latitude, location.longitude, days, today, address=location.display_address
        )
    except WeatherClientError as exc:
        logger.warning("%s: %s", city, exc)
        return CityResult.failure(city, exc.kind, str(exc))
    return CityResult.success(city, record)


def compute_all(
    cities: Iterable[str],
    days: int = 0,
    max_workers: Optional[int] = None,
    geocoder: Optional[GeocoderClient] = None,
    forecaster: Optional[ForecastClient] = None,
    today: Optional[date] = None,
) -> Dict[str, CityResult]:
    # duplicate arguments collapse into one entry, argument order is kept
    unique = list(dict.fromkeys(cities))
    if not unique:
        return {}

    days = clamp_forecast_days(days)
    geocoder = geocoder or GeocoderClient()
    forecaster = forecaster or ForecastClient()
    collected: Dict[str, CityResult] = {}

    # one worker per city by default, every pipeline runs in parallel
    with ThreadPoolExecutor(max_workers=max_workers or len(unique)) as pool:
        futures = {
            pool.submit(fetch_city, geocoder, forecaster, city, days, today): city
            for city in unique
        }
        for fut in as_completed(futures):
            city = futures[fut]
            collected[city] = fut.result()

    # the pool is joined here; reorder to match the command line
    return {city: collected[city] for city in unique}
