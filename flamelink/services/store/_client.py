"""Firebase app initialization for the Realtime Database store."""
import json
import os

import firebase_admin
from firebase_admin import credentials

from flamelink.config import Settings
from flamelink.errors import ConfigurationError
from flamelink.utils.logging import get_logger

logger = get_logger()


def _load_credentials(raw: str):
    """Service account from JSON text or a file path; application default if empty."""
    if not raw:
        return credentials.ApplicationDefault()
    if raw.lstrip().startswith("{"):
        try:
            return credentials.Certificate(json.loads(raw))
        except ValueError as e:
            raise ConfigurationError(f"Invalid service account JSON: {e}") from e
    if not os.path.exists(raw):
        raise ConfigurationError(f"Firebase credentials file not found at: {raw}")
    return credentials.Certificate(raw)


def init_app(settings: Settings) -> firebase_admin.App:
    """Get or initialize the named Firebase app for these settings.

    Raises:
        ConfigurationError: If database_url is not configured
    """
    try:
        return firebase_admin.get_app(settings.app_name)
    except ValueError:
        pass

    if not settings.database_url:
        raise ConfigurationError(
            'The following config properties are mandatory: "database_url"'
        )

    app = firebase_admin.initialize_app(
        _load_credentials(settings.credentials),
        {"databaseURL": settings.database_url},
        name=settings.app_name,
    )
    logger.info("firebase_initialized", app=settings.app_name, database_url=settings.database_url)
    return app
