# ABOUTME: Exception classes raised by the weather assistant.
# ABOUTME: Separates fatal configuration problems from upstream chat-completion failures.


class StratusError(Exception):
    """Base class for errors surfaced to the chat user."""


class ConfigError(StratusError):
    """Raised when configuration is missing or invalid, before any network call."""


class ChatCompletionError(StratusError):
    """Raised when the chat-completion endpoint rejects a request.

    The message is the upstream `error.message` when the provider supplies one.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
