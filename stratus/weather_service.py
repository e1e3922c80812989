# ABOUTME: Service layer for geocoding and weather provider API calls.
# ABOUTME: Geocodes, fetches from the configured provider, and normalizes into a WeatherSnapshot.

import logging

import httpx

from stratus.config import Settings
from stratus.models import Location, ProviderKind, WeatherSnapshot
from stratus.normalizer import normalize

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
WEATHERAPI_URL = "https://api.weatherapi.com/v1/forecast.json"
TOMORROW_IO_URL = "https://api.tomorrow.io/v4/weather/forecast"

CURRENT_PARAMS = "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,wind_speed_10m"
HOURLY_PARAMS = "temperature_2m,weather_code,relative_humidity_2m,wind_speed_10m"
DAILY_PARAMS = "weather_code,temperature_2m_max,temperature_2m_min"


async def geocode(client: httpx.AsyncClient, query: str, count: int = 1) -> Location | None:
    """Geocode a city name or postal code using the Open-Meteo geocoding API."""
    resp = await client.get(
        GEOCODING_URL,
        params={"name": query, "count": count, "language": "en", "format": "json"},
    )
    resp.raise_for_status()
    data = resp.json()

    results = data.get("results")
    if not results:
        return None

    r = results[0]
    return Location(
        name=r["name"],
        region=r.get("admin1"),
        country=r.get("country"),
        latitude=r["latitude"],
        longitude=r["longitude"],
        timezone=r.get("timezone"),
    )


async def fetch_open_meteo(client: httpx.AsyncClient, location: Location, forecast_days: int = 7) -> dict:
    """Fetch current, hourly, and daily columns from the Open-Meteo forecast API."""
    resp = await client.get(
        OPEN_METEO_URL,
        params={
            "latitude": location.latitude,
            "longitude": location.longitude,
            "current": CURRENT_PARAMS,
            "hourly": HOURLY_PARAMS,
            "daily": DAILY_PARAMS,
            "forecast_days": forecast_days,
            "timezone": "auto",
            "timeformat": "iso8601",
        },
    )
    resp.raise_for_status()
    return resp.json()


async def fetch_weatherapi(client: httpx.AsyncClient, api_key: str, query: str, days: int = 7) -> dict:
    """Fetch a forecast.json payload from WeatherAPI.com.

    WeatherAPI.com answers unknown locations with HTTP 400 and an `error` body, which is
    returned as-is so the normalizer can report the miss.
    """
    resp = await client.get(
        WEATHERAPI_URL,
        params={"key": api_key, "q": query, "days": days, "aqi": "no", "alerts": "no"},
    )
    if resp.status_code == 400:
        return resp.json()
    resp.raise_for_status()
    return resp.json()


async def fetch_tomorrow_io(client: httpx.AsyncClient, api_key: str, location: Location) -> dict:
    """Fetch minutely/hourly/daily timelines from Tomorrow.io in metric units."""
    resp = await client.get(
        TOMORROW_IO_URL,
        params={
            "location": f"{location.latitude},{location.longitude}",
            "apikey": api_key,
            "units": "metric",
        },
    )
    resp.raise_for_status()
    return resp.json()


async def get_weather(client: httpx.AsyncClient, settings: Settings, query: str) -> WeatherSnapshot | None:
    """Resolve a free-text location to a WeatherSnapshot from the configured provider.

    Returns None on a geocoding miss, an HTTP failure, or a malformed payload. A missing
    provider key raises ConfigError before any request is made.
    """
    provider = settings.weather_provider
    api_key = settings.require_weather_key()

    try:
        if provider is ProviderKind.WEATHERAPI:
            raw = await fetch_weatherapi(client, api_key, query, settings.forecast_days)
            return normalize(raw, provider)

        location = await geocode(client, query)
        if location is None:
            logger.warning("City not found: %s", query)
            return None

        if provider is ProviderKind.TOMORROW_IO:
            raw = await fetch_tomorrow_io(client, api_key, location)
        else:
            raw = await fetch_open_meteo(client, location, settings.forecast_days)
        return normalize(raw, provider, location)
    except httpx.HTTPError as e:
        logger.warning("%s request failed for %r: %s", provider.value, query, e)
        return None
    except (KeyError, ValueError) as e:
        # Body was not JSON or lacked required fields.
        logger.warning("%s returned an unreadable body for %r: %s", provider.value, query, e)
        return None
