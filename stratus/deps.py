# ABOUTME: Dependency container for the chat agent and the shared HTTP client factory.
# ABOUTME: ChatDeps carries the per-turn weather snapshot into the agent's dynamic instructions.

import httpx
from pydantic import BaseModel

from stratus.models import WeatherSnapshot


class ChatDeps(BaseModel):
    """Dependencies injected into agent instructions via RunContext."""

    weather: WeatherSnapshot | None = None


def create_http_client(timeout: float = 30.0) -> httpx.AsyncClient:
    """Create the httpx client shared by geocoding, weather, and chat-completion calls.

    Failed requests are not retried; errors propagate to the caller.
    """
    return httpx.AsyncClient(timeout=timeout)
