"""Flamelink domain errors.

Every domain error message starts with ERROR_PREFIX so that SDK failures can
be told apart from store/transport failures by message alone. Store errors are
never wrapped in these types.
"""
from typing import Type

ERROR_PREFIX = "[FLAMELINK]"


class FlamelinkError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str):
        self.raw_message = message
        super().__init__(f"{ERROR_PREFIX} {message}")


class MissingArgumentError(FlamelinkError):
    """Raised when a required path component is absent."""


class InvalidOrderByChildError(FlamelinkError):
    """Raised when `order_by_child` is not a non-empty string."""


class UnsupportedLocaleError(FlamelinkError):
    """Raised when a locale is not in the project's locale list."""


class UnsupportedEnvironmentError(FlamelinkError):
    """Raised when an environment is not in the project's environment list."""


class ConfigurationError(FlamelinkError):
    """Raised when required client configuration is missing or invalid."""


class CircuitOpenError(FlamelinkError):
    """Raised when the store circuit is open."""

    def __init__(self, name: str, cooldown_remaining: int):
        self.name = name
        self.cooldown_remaining = cooldown_remaining
        super().__init__(f"Circuit '{name}' is open. Retry in {cooldown_remaining}s")


def make_error(message: str, error_class: Type[FlamelinkError] = FlamelinkError) -> FlamelinkError:
    """Build a prefixed domain error."""
    return error_class(message)
