# ABOUTME: Renders the canonical weather snapshot as compact text for the LLM system prompt.
# ABOUTME: Rounds current temperatures in both units alongside humidity, wind, and feels-like.

from stratus.models import WeatherSnapshot


def format_location(snapshot: WeatherSnapshot) -> str:
    loc = snapshot.location
    return ", ".join(part for part in (loc.name, loc.region, loc.country) if part)


def format_weather_context(snapshot: WeatherSnapshot) -> str:
    """Summarize current conditions as a block the model is told to rely on."""
    current = snapshot.current
    lines = [
        f"[REAL-TIME WEATHER DATA for {format_location(snapshot)}]",
        f"Current: {round(current.temp_c)}°C ({round(current.temp_f)}°F), {current.condition.text}",
        f"Humidity: {round(current.humidity)}%",
        f"Wind: {round(current.wind_kph)} kph",
        f"Feels like: {round(current.feelslike_c)}°C",
    ]
    if snapshot.forecast.forecastday:
        today = snapshot.forecast.forecastday[0]
        if today.day.maxtemp_c is not None and today.day.mintemp_c is not None:
            lines.append(
                f"Today ({today.date}): high {round(today.day.maxtemp_c)}°C, "
                f"low {round(today.day.mintemp_c)}°C, {today.day.condition.text}"
            )
    return "\n".join(lines)
