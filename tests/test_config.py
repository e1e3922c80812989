# ABOUTME: Contract tests for environment-driven settings.
# ABOUTME: Validates defaults, environment parsing, and fail-fast key checks.

import pytest

from stratus.config import ENV_VARS, Settings, load_settings
from stratus.exceptions import ConfigError
from stratus.models import ProviderKind


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting from the environment so tests start from defaults."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self):
        """Default settings use Open-Meteo and gpt-4o-mini.

        Implementation: Constructs Settings with no arguments.
        Passing implies: The keyless provider works out of the box.
        """
        settings = Settings()
        assert settings.weather_provider is ProviderKind.OPEN_METEO
        assert settings.llm_model == "gpt-4o-mini"
        assert settings.llm_temperature == 0.7
        assert settings.llm_max_tokens == 500
        assert settings.history_limit is None

    def test_repr_hides_keys(self):
        """API keys never appear in the settings repr.

        Implementation: Builds settings with secret values and inspects repr.
        Passing implies: Logging settings cannot leak credentials.
        """
        settings = Settings(llm_api_key="sk-secret", weatherapi_key="wa-secret")
        assert "sk-secret" not in repr(settings)
        assert "wa-secret" not in repr(settings)

    def test_open_meteo_needs_no_weather_key(self):
        """Open-Meteo requires no provider key.

        Implementation: Calls require_weather_key on default settings.
        Passing implies: Only the chat key is mandatory by default.
        """
        assert Settings().require_weather_key() is None

    def test_keyed_provider_requires_its_key(self):
        """Tomorrow.io without its key raises ConfigError naming the variable.

        Implementation: Configures Tomorrow.io with no key.
        Passing implies: The user is told exactly which variable to set.
        """
        settings = Settings(llm_api_key="sk-test", weather_provider=ProviderKind.TOMORROW_IO)
        with pytest.raises(ConfigError, match="TOMORROW_IO_API_KEY"):
            settings.validate_keys()

    def test_missing_chat_key(self):
        """validate_keys raises the documented message without a chat key.

        Implementation: Calls validate_keys on default settings.
        Passing implies: The user sees how to fix the configuration.
        """
        with pytest.raises(ConfigError, match="OpenAI API key not configured. Please add OPENAI_API_KEY to .env"):
            Settings().validate_keys()


class TestLoadSettings:
    def test_reads_environment(self, clean_env):
        """Environment variables populate and coerce settings.

        Implementation: Sets provider, model, temperature, and history limit variables.
        Passing implies: Every documented variable reaches its field with the right type.
        """
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("OPENAI_MODEL", "gpt-4o")
        clean_env.setenv("WEATHER_PROVIDER", "weatherapi")
        clean_env.setenv("WEATHERAPI_KEY", "wa-env")
        clean_env.setenv("LLM_TEMPERATURE", "0.2")
        clean_env.setenv("HISTORY_LIMIT", "10")

        settings = load_settings()

        assert settings.llm_api_key == "sk-env"
        assert settings.llm_model == "gpt-4o"
        assert settings.weather_provider is ProviderKind.WEATHERAPI
        assert settings.require_weather_key() == "wa-env"
        assert settings.llm_temperature == 0.2
        assert settings.history_limit == 10

    def test_empty_values_use_defaults(self, clean_env):
        """Empty variables are treated as unset.

        Implementation: Sets OPENAI_MODEL to an empty string.
        Passing implies: A blank line in .env does not break startup.
        """
        clean_env.setenv("OPENAI_MODEL", "")
        assert load_settings().llm_model == "gpt-4o-mini"

    def test_invalid_value_raises_config_error(self, clean_env):
        """An unparseable value raises ConfigError.

        Implementation: Sets an unknown weather provider.
        Passing implies: Bad configuration fails at startup with a readable error.
        """
        clean_env.setenv("WEATHER_PROVIDER", "darksky")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings()
