# ABOUTME: Normalizes Open-Meteo, WeatherAPI.com, and Tomorrow.io payloads into one WeatherSnapshot.
# ABOUTME: Dispatches on the tagged ProviderResponse; malformed or not-found payloads yield None.

import logging
from typing import Any, Callable

from pydantic import TypeAdapter

from stratus.conditions import tomorrow_io_condition, weatherapi_condition, wmo_condition
from stratus.models import (
    CurrentConditions,
    DaySummary,
    Forecast,
    ForecastDay,
    HourPoint,
    Location,
    OpenMeteoResponse,
    ProviderKind,
    ProviderResponse,
    TomorrowIoResponse,
    WeatherApiResponse,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)

MS_TO_KPH = 3.6

_provider_response_adapter = TypeAdapter(ProviderResponse)

# Shapes that signal a payload missing fields or holding the wrong types.
_MALFORMED = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9 / 5 + 32


def normalize(raw: Any, kind: ProviderKind | str, location: Location | None = None) -> WeatherSnapshot | None:
    """Normalize a raw provider payload into a WeatherSnapshot.

    `location` is the geocoded place, required for providers whose payload does not
    name the place (Open-Meteo, Tomorrow.io). Returns None instead of raising when the
    payload is malformed or the provider reports that the location was not found.
    """
    kind = ProviderKind(kind)
    try:
        response = _provider_response_adapter.validate_python({"kind": kind, "location": location, "payload": raw})
    except ValueError as e:
        logger.warning("Rejected %s payload: %s", kind.value, e)
        return None
    return normalize_response(response)


def normalize_response(response: ProviderResponse) -> WeatherSnapshot | None:
    """Run the normalizer registered for the response's provider kind."""
    normalizer = _NORMALIZERS[response.kind]
    try:
        return normalizer(response)
    except _MALFORMED as e:
        logger.warning("Malformed %s payload: %r", response.kind.value, e)
        return None


def normalize_open_meteo(response: OpenMeteoResponse) -> WeatherSnapshot | None:
    """Rebuild per-day groupings from Open-Meteo's parallel current/hourly/daily arrays."""
    data = response.payload
    hourly = data.get("hourly") or {}
    daily = data.get("daily") or {}
    if not hourly.get("time") or not daily.get("time"):
        logger.warning("Open-Meteo payload has no hourly or daily time axis")
        return None

    current = data["current"]
    temp_c = current["temperature_2m"]
    feelslike_c = current.get("apparent_temperature")
    if feelslike_c is None:
        # No apparent temperature column requested or returned.
        feelslike_c = temp_c - 1

    hours = [
        HourPoint(
            time=t,
            temp_c=_get_at(hourly, "temperature_2m", i),
            humidity=_get_at(hourly, "relative_humidity_2m", i),
            wind_kph=_get_at(hourly, "wind_speed_10m", i),
            condition=wmo_condition(_get_at(hourly, "weather_code", i)),
        )
        for i, t in enumerate(hourly["time"])
    ]

    days = []
    for i, d in enumerate(daily["time"]):
        days.append(
            ForecastDay(
                date=d,
                day=DaySummary(
                    maxtemp_c=_get_at(daily, "temperature_2m_max", i),
                    mintemp_c=_get_at(daily, "temperature_2m_min", i),
                    condition=wmo_condition(_get_at(daily, "weather_code", i)),
                ),
                hour=_hours_for_date(hours, d),
            )
        )

    location = response.location
    if location.timezone is None and data.get("timezone"):
        location = location.model_copy(update={"timezone": data["timezone"]})

    return WeatherSnapshot(
        location=location,
        current=CurrentConditions(
            temp_c=temp_c,
            temp_f=round(celsius_to_fahrenheit(temp_c)),
            humidity=current["relative_humidity_2m"],
            wind_kph=current["wind_speed_10m"],
            feelslike_c=feelslike_c,
            condition=wmo_condition(current.get("weather_code")),
        ),
        forecast=Forecast(forecastday=days),
    )


def normalize_weatherapi(response: WeatherApiResponse) -> WeatherSnapshot | None:
    """Pass WeatherAPI.com's pre-grouped forecast through, renaming fields only."""
    data = response.payload
    if "error" in data:
        logger.info("WeatherAPI.com reported: %s", (data["error"] or {}).get("message", "unknown error"))
        return None

    loc = data["location"]
    location = response.location or Location(
        name=loc["name"],
        region=loc.get("region") or None,
        country=loc.get("country"),
        latitude=loc["lat"],
        longitude=loc["lon"],
        timezone=loc.get("tz_id"),
    )

    current = data["current"]
    temp_c = current["temp_c"]
    temp_f = current.get("temp_f")
    if temp_f is None:
        temp_f = round(celsius_to_fahrenheit(temp_c))

    days = []
    for raw_day in data.get("forecast", {}).get("forecastday", []):
        day = raw_day.get("day", {})
        hours = [
            HourPoint(
                time=h["time"],
                temp_c=h.get("temp_c"),
                humidity=h.get("humidity"),
                wind_kph=h.get("wind_kph"),
                condition=weatherapi_condition(h.get("condition")),
            )
            for h in raw_day.get("hour", [])
        ]
        days.append(
            ForecastDay(
                date=raw_day["date"],
                day=DaySummary(
                    maxtemp_c=day.get("maxtemp_c"),
                    mintemp_c=day.get("mintemp_c"),
                    condition=weatherapi_condition(day.get("condition")),
                ),
                hour=_hours_for_date(hours, raw_day["date"]),
            )
        )

    return WeatherSnapshot(
        location=location,
        current=CurrentConditions(
            temp_c=temp_c,
            temp_f=temp_f,
            humidity=current["humidity"],
            wind_kph=current["wind_kph"],
            feelslike_c=current.get("feelslike_c", temp_c),
            condition=weatherapi_condition(current.get("condition")),
        ),
        forecast=Forecast(forecastday=days),
    )


def normalize_tomorrow_io(response: TomorrowIoResponse) -> WeatherSnapshot | None:
    """Map Tomorrow.io timelines (metric units) onto the canonical shape."""
    timelines = response.payload["timelines"]
    minutely = timelines.get("minutely") or timelines.get("hourly")
    if not minutely:
        logger.warning("Tomorrow.io payload has no minutely or hourly timeline")
        return None

    now = minutely[0]["values"]
    temp_c = now["temperature"]

    hours = [
        HourPoint(
            time=h["time"],
            temp_c=h["values"].get("temperature"),
            humidity=h["values"].get("humidity"),
            wind_kph=_ms_to_kph(h["values"].get("windSpeed")),
            condition=tomorrow_io_condition(h["values"].get("weatherCode")),
        )
        for h in timelines.get("hourly", [])
    ]

    days = []
    for raw_day in timelines.get("daily", []):
        d = raw_day["time"].split("T")[0]
        values = raw_day["values"]
        code = values.get("weatherCodeMax", values.get("weatherCode"))
        days.append(
            ForecastDay(
                date=d,
                day=DaySummary(
                    maxtemp_c=values.get("temperatureMax"),
                    mintemp_c=values.get("temperatureMin"),
                    condition=tomorrow_io_condition(code),
                ),
                hour=_hours_for_date(hours, d),
            )
        )

    return WeatherSnapshot(
        location=response.location,
        current=CurrentConditions(
            temp_c=temp_c,
            temp_f=celsius_to_fahrenheit(temp_c),
            humidity=now["humidity"],
            wind_kph=_ms_to_kph(now["windSpeed"]),
            feelslike_c=now.get("temperatureApparent", temp_c),
            condition=tomorrow_io_condition(now.get("weatherCode")),
        ),
        forecast=Forecast(forecastday=days),
    )


_NORMALIZERS: dict[ProviderKind, Callable[[Any], WeatherSnapshot | None]] = {
    ProviderKind.OPEN_METEO: normalize_open_meteo,
    ProviderKind.WEATHERAPI: normalize_weatherapi,
    ProviderKind.TOMORROW_IO: normalize_tomorrow_io,
}


def _hours_for_date(hours: list[HourPoint], day: str) -> list[HourPoint]:
    """Hours whose timestamp falls on `day`. Entries from other days are dropped."""
    return [h for h in hours if h.time.startswith(day)]


def _ms_to_kph(speed: float | None) -> float | None:
    if speed is None:
        return None
    return speed * MS_TO_KPH


def _get_at(data: dict, key: str, index: int):
    """Safely get value at index from a column array, returning None if missing."""
    col = data.get(key)
    if col is None or index >= len(col):
        return None
    return col[index]
