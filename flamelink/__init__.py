"""Flamelink SDK for Python.

Typed, queryable access to Flamelink CMS content, navigation, schemas and
settings stored in the Firebase Realtime Database, with live subscriptions.
"""
from .client import ClientContext, Flamelink, create_client
from .config import DEFAULT_ENV, DEFAULT_LOCALE, Settings, get_settings
from .core.subscriptions import Subscription
from .errors import (
    CircuitOpenError,
    ConfigurationError,
    FlamelinkError,
    InvalidOrderByChildError,
    MissingArgumentError,
    UnsupportedEnvironmentError,
    UnsupportedLocaleError,
    make_error,
)
from .services.store import EventType, Snapshot

__version__ = "0.9.0"

__all__ = [
    "__version__",
    "ClientContext",
    "Flamelink",
    "create_client",
    "DEFAULT_ENV",
    "DEFAULT_LOCALE",
    "Settings",
    "get_settings",
    "Subscription",
    "EventType",
    "Snapshot",
    "CircuitOpenError",
    "ConfigurationError",
    "FlamelinkError",
    "InvalidOrderByChildError",
    "MissingArgumentError",
    "UnsupportedEnvironmentError",
    "UnsupportedLocaleError",
    "make_error",
]
