"""Exception hierarchy for actionkit.

All errors inherit from ActionKitError so callers can catch everything the
SDK raises in one place. Extra keyword arguments are kept as context and
rendered into the message.
"""

from typing import Any


class ActionKitError(Exception):
    """Base class for all actionkit errors."""

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ConfigError(ActionKitError):
    """Raised when configuration is invalid."""


class ActionError(ActionKitError):
    """Raised when action execution fails."""


class ActionRegistrationError(ActionError):
    """Raised when an action cannot be registered."""


class MissingHandlerError(ActionError):
    """Raised when a request names an action with no registered handler."""

    def __init__(self, action: str) -> None:
        super().__init__(f"received request for action [{action}] with no configured handler")
        self.action = action


class InvalidRequestError(ActionError):
    """Raised when an incoming request payload is malformed."""


class HandlerError(ActionError):
    """Wraps an unexpected error raised inside an action handler."""

    def __init__(self, action: str, cause: BaseException) -> None:
        super().__init__(f"error occurred when handling action [{action}]: {cause}")
        self.action = action
        self.cause = cause


class ExecutionRejection(ActionError):
    """Raised to stop the dialogue engine from applying an action.

    Forms raise it when the user's message did not fill the requested slot;
    the engine is expected to predict another action and re-prompt.
    """

    def __init__(self, action: str, reason: str, slot: str | None = None) -> None:
        super().__init__(f"rejected execution of [{action}] for reason [{reason}]")
        self.action = action
        self.reason = reason
        self.slot = slot


class ValidationError(ActionKitError):
    """Raised when validation fails."""


class SlotValidationError(ValidationError):
    """Raised by slot validators that refuse a value outright."""

    def __init__(self, slot: str, value: Any, reason: str = "invalid value") -> None:
        super().__init__(reason, slot=slot, value=value)
        self.slot = slot
        self.value = value
        self.reason = reason
