# ABOUTME: Pydantic BaseModels for the canonical weather snapshot, chat turns, and provider payloads.
# ABOUTME: Every weather provider is normalized into WeatherSnapshot; ProviderResponse tags the raw shapes.

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ProviderKind(str, Enum):
    """Weather data providers the normalizer understands."""

    OPEN_METEO = "open-meteo"
    WEATHERAPI = "weatherapi"
    TOMORROW_IO = "tomorrow-io"


class Location(BaseModel):
    """Resolved place with coordinates, produced by geocoding or by the provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    region: str | None = None
    country: str | None = None
    latitude: float
    longitude: float
    timezone: str | None = None


class Condition(BaseModel):
    """Human-readable weather condition with a display icon."""

    model_config = ConfigDict(frozen=True)

    text: str
    icon: str


class CurrentConditions(BaseModel):
    """Conditions at fetch time."""

    model_config = ConfigDict(frozen=True)

    temp_c: float
    temp_f: float
    humidity: float = Field(ge=0, le=100)
    wind_kph: float
    feelslike_c: float
    condition: Condition


class DaySummary(BaseModel):
    """Daily extremes and the representative condition for one forecast day."""

    model_config = ConfigDict(frozen=True)

    maxtemp_c: float | None = None
    mintemp_c: float | None = None
    condition: Condition


class HourPoint(BaseModel):
    """One hourly forecast point. `time` is the provider's ISO-8601 local time."""

    model_config = ConfigDict(frozen=True)

    time: str
    temp_c: float | None = None
    condition: Condition
    humidity: float | None = None
    wind_kph: float | None = None


class ForecastDay(BaseModel):
    """One calendar day of forecast. Every hour's `time` starts with `date`; `hour` may be empty."""

    model_config = ConfigDict(frozen=True)

    date: str
    day: DaySummary
    hour: list[HourPoint] = []


class Forecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    forecastday: list[ForecastDay] = []


class WeatherSnapshot(BaseModel):
    """Canonical weather shape consumed by prompt building and the HTTP surface."""

    model_config = ConfigDict(frozen=True)

    location: Location
    current: CurrentConditions
    forecast: Forecast = Forecast()


class ConversationTurn(BaseModel):
    """One message in the replayed conversation history."""

    role: Literal["user", "assistant"]
    content: str


class ChatTurnResult(BaseModel):
    """Outcome of one chat turn.

    `location` is the place the reply was grounded on and is None when no weather
    was resolved; `extracted_location` is what the extractor (or an override) produced.
    """

    reply: str
    location: str | None = None
    extracted_location: str | None = None
    weather: WeatherSnapshot | None = None


class ScheduleItem(BaseModel):
    """One timed entry parsed out of a schedule-style assistant reply."""

    time: str
    activity: str
    weather: str = ""
    outfit: str = ""


class Schedule(BaseModel):
    title: str = "Daily Schedule"
    items: list[ScheduleItem] = []


# Raw provider payloads, tagged by `kind` so normalization dispatches explicitly.


class OpenMeteoResponse(BaseModel):
    """Open-Meteo forecast payload. The place comes from the prior geocoding step."""

    kind: Literal[ProviderKind.OPEN_METEO] = ProviderKind.OPEN_METEO
    location: Location
    payload: dict[str, Any]


class WeatherApiResponse(BaseModel):
    """WeatherAPI.com forecast.json payload, which names the place itself."""

    kind: Literal[ProviderKind.WEATHERAPI] = ProviderKind.WEATHERAPI
    location: Location | None = None
    payload: dict[str, Any]


class TomorrowIoResponse(BaseModel):
    """Tomorrow.io v4 forecast payload. The place comes from the prior geocoding step."""

    kind: Literal[ProviderKind.TOMORROW_IO] = ProviderKind.TOMORROW_IO
    location: Location
    payload: dict[str, Any]


ProviderResponse = Annotated[
    Union[OpenMeteoResponse, WeatherApiResponse, TomorrowIoResponse],
    Field(discriminator="kind"),
]
