# ABOUTME: Shared test fixtures for the weather assistant test suite.
# ABOUTME: Blocks real LLM calls and provides settings plus canned provider payloads.

import pydantic_ai.models
import pytest

from stratus.config import Settings

# Prevent accidental LLM calls during testing
pydantic_ai.models.ALLOW_MODEL_REQUESTS = False


@pytest.fixture
def settings() -> Settings:
    return Settings(llm_api_key="sk-test")


@pytest.fixture
def geocode_payload() -> dict:
    return {
        "results": [
            {
                "latitude": 35.6895,
                "longitude": 139.69171,
                "name": "Tokyo",
                "admin1": "Tokyo",
                "country": "Japan",
                "timezone": "Asia/Tokyo",
            }
        ]
    }


@pytest.fixture
def open_meteo_payload() -> dict:
    """Two forecast days; one hourly point leaks in from the following day."""
    return {
        "latitude": 35.7,
        "longitude": 139.69,
        "timezone": "Asia/Tokyo",
        "current": {
            "time": "2025-01-15T12:00",
            "temperature_2m": 20.3,
            "relative_humidity_2m": 55,
            "apparent_temperature": 19.1,
            "weather_code": 2,
            "wind_speed_10m": 11.6,
        },
        "hourly": {
            "time": ["2025-01-15T12:00", "2025-01-15T13:00", "2025-01-16T00:00", "2025-01-17T00:00"],
            "temperature_2m": [20.3, 21.0, 9.5, 8.0],
            "weather_code": [2, 3, 61, 0],
            "relative_humidity_2m": [55, 52, 80, 70],
            "wind_speed_10m": [11.6, 12.0, 5.0, 4.0],
        },
        "daily": {
            "time": ["2025-01-15", "2025-01-16"],
            "weather_code": [2, 61],
            "temperature_2m_max": [21.4, 12.0],
            "temperature_2m_min": [8.2, 6.5],
        },
    }
