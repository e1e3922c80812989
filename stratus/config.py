# ABOUTME: Settings for the weather assistant, read from the environment after loading .env.
# ABOUTME: Validates values with pydantic and fails fast with ConfigError when a required key is missing.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from stratus.exceptions import ConfigError
from stratus.models import ProviderKind

# Settings field -> environment variable.
ENV_VARS = {
    "llm_api_key": "OPENAI_API_KEY",
    "llm_model": "OPENAI_MODEL",
    "llm_base_url": "OPENAI_BASE_URL",
    "llm_temperature": "LLM_TEMPERATURE",
    "llm_max_tokens": "LLM_MAX_TOKENS",
    "weather_provider": "WEATHER_PROVIDER",
    "weatherapi_key": "WEATHERAPI_KEY",
    "tomorrow_io_key": "TOMORROW_IO_API_KEY",
    "forecast_days": "FORECAST_DAYS",
    "http_timeout": "HTTP_TIMEOUT",
    "history_limit": "HISTORY_LIMIT",
}


class Settings(BaseModel):
    """Runtime configuration. Secrets are excluded from repr."""

    llm_api_key: str | None = Field(default=None, repr=False)
    llm_model: str = "gpt-4o-mini"
    llm_base_url: str = "https://api.openai.com/v1"
    llm_temperature: float = Field(default=0.7, ge=0, le=2)
    llm_max_tokens: int = Field(default=500, gt=0)

    weather_provider: ProviderKind = ProviderKind.OPEN_METEO
    weatherapi_key: str | None = Field(default=None, repr=False)
    tomorrow_io_key: str | None = Field(default=None, repr=False)
    forecast_days: int = Field(default=7, ge=1, le=16)

    http_timeout: float = Field(default=30.0, gt=0)
    # None replays the whole conversation on every turn.
    history_limit: int | None = Field(default=None, ge=1)

    def require_llm_key(self) -> str:
        if not self.llm_api_key:
            raise ConfigError(f"OpenAI API key not configured. Please add {ENV_VARS['llm_api_key']} to .env")
        return self.llm_api_key

    def require_weather_key(self) -> str | None:
        """API key for the configured weather provider; None for providers that need no key."""
        if self.weather_provider is ProviderKind.WEATHERAPI:
            field = "weatherapi_key"
        elif self.weather_provider is ProviderKind.TOMORROW_IO:
            field = "tomorrow_io_key"
        else:
            return None
        key = getattr(self, field)
        if not key:
            raise ConfigError(
                f"{self.weather_provider.value} API key not configured. Please add {ENV_VARS[field]} to .env"
            )
        return key

    def validate_keys(self) -> None:
        """Check every key the configured providers need before any request is made."""
        self.require_llm_key()
        self.require_weather_key()


def load_settings() -> Settings:
    """Build Settings from the process environment, loading .env first."""
    load_dotenv()
    values = {field: os.environ[var] for field, var in ENV_VARS.items() if os.environ.get(var)}
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
