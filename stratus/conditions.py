# ABOUTME: Weather condition lookup tables for each provider's condition codes.
# ABOUTME: Maps WMO (Open-Meteo) and Tomorrow.io codes to text/icon pairs, with an Unknown fallback.

from stratus.models import Condition

UNKNOWN_TEXT = "Unknown"
FALLBACK_ICON = "🌍"

WMO_CONDITIONS: dict[int, tuple[str, str]] = {
    # Clear and cloud cover
    0: ("Clear sky", "☀️"),
    1: ("Mainly clear", "🌤️"),
    2: ("Partly cloudy", "⛅"),
    3: ("Overcast", "☁️"),
    # Fog
    45: ("Foggy", "🌫️"),
    48: ("Depositing rime fog", "🌫️"),
    # Drizzle
    51: ("Light drizzle", "🌦️"),
    53: ("Moderate drizzle", "🌦️"),
    55: ("Dense drizzle", "🌦️"),
    56: ("Light freezing drizzle", "🧊"),
    57: ("Dense freezing drizzle", "🧊"),
    # Rain
    61: ("Slight rain", "🌧️"),
    63: ("Moderate rain", "🌧️"),
    65: ("Heavy rain", "🌧️"),
    66: ("Light freezing rain", "🧊"),
    67: ("Heavy freezing rain", "🧊"),
    # Snow
    71: ("Slight snow", "🌨️"),
    73: ("Moderate snow", "🌨️"),
    75: ("Heavy snow", "❄️"),
    77: ("Snow grains", "🌨️"),
    # Showers
    80: ("Slight rain showers", "🌦️"),
    81: ("Moderate rain showers", "🌧️"),
    82: ("Violent rain showers", "⛈️"),
    85: ("Slight snow showers", "🌨️"),
    86: ("Heavy snow showers", "❄️"),
    # Thunderstorms
    95: ("Thunderstorm", "⛈️"),
    96: ("Thunderstorm with slight hail", "⛈️"),
    99: ("Thunderstorm with heavy hail", "⛈️"),
}

TOMORROW_IO_CONDITIONS: dict[int, tuple[str, str]] = {
    1000: ("Clear", "☀️"),
    1100: ("Mostly Clear", "🌤️"),
    1101: ("Partly Cloudy", "⛅"),
    1102: ("Mostly Cloudy", "🌥️"),
    1001: ("Cloudy", "☁️"),
    2000: ("Fog", "🌫️"),
    2100: ("Light Fog", "🌫️"),
    4000: ("Drizzle", "🌦️"),
    4001: ("Rain", "🌧️"),
    4200: ("Light Rain", "🌦️"),
    4201: ("Heavy Rain", "🌧️"),
    5000: ("Snow", "❄️"),
    5001: ("Flurries", "🌨️"),
    5100: ("Light Snow", "🌨️"),
    5101: ("Heavy Snow", "❄️"),
    6000: ("Freezing Drizzle", "🧊"),
    6001: ("Freezing Rain", "🧊"),
    6200: ("Light Freezing Rain", "🧊"),
    6201: ("Heavy Freezing Rain", "🧊"),
    7000: ("Ice Pellets", "🧊"),
    7101: ("Heavy Ice Pellets", "🧊"),
    7102: ("Light Ice Pellets", "🧊"),
    8000: ("Thunderstorm", "⛈️"),
}


def _lookup(table: dict[int, tuple[str, str]], code) -> Condition:
    try:
        text, icon = table[int(code)]
    except (KeyError, TypeError, ValueError):
        return Condition(text=UNKNOWN_TEXT, icon=FALLBACK_ICON)
    return Condition(text=text, icon=icon)


def wmo_condition(code) -> Condition:
    """Condition for a WMO weather code (Open-Meteo). Unmapped or missing codes give Unknown."""
    return _lookup(WMO_CONDITIONS, code)


def tomorrow_io_condition(code) -> Condition:
    """Condition for a Tomorrow.io weatherCode. Unmapped or missing codes give Unknown."""
    return _lookup(TOMORROW_IO_CONDITIONS, code)


def weatherapi_condition(raw: dict | None) -> Condition:
    """Condition from a WeatherAPI.com `condition` object, which already carries text and icon."""
    if not raw:
        return Condition(text=UNKNOWN_TEXT, icon=FALLBACK_ICON)
    icon = raw.get("icon") or FALLBACK_ICON
    if icon.startswith("//"):
        icon = f"https:{icon}"
    return Condition(text=raw.get("text") or UNKNOWN_TEXT, icon=icon)
