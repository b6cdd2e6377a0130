"""Flamelink client: one store connection plus the locale/environment context.

Each client holds its own context, circuit breaker and subscriptions, so
several independent clients can live in one process.

Usage:
    app = Flamelink(database_url="https://my-project.firebaseio.com", locale="en-US")
    product = await app.content.get("products", 1491827711368, fields=["titleA", "price"])
    await app.close()
"""
import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import firebase_admin

from flamelink.config import Settings, get_settings
from flamelink.core.resilience import CircuitBreaker
from flamelink.core.subscriptions import SubscriptionRegistry
from flamelink.errors import UnsupportedEnvironmentError, UnsupportedLocaleError
from flamelink.resources import Content, Navigation, Schemas
from flamelink.resources import Settings as SettingsAPI
from flamelink.services.store import FirebaseStore, Store, init_app
from flamelink.utils.logging import get_logger, log_duration, setup_logging

T = TypeVar("T")


@dataclass(frozen=True)
class ClientContext:
    """Environment and locale that content and navigation paths resolve against."""
    env: str
    locale: str


class Flamelink:
    """Entry point to content, navigation, schemas and settings."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        store: Optional[Store] = None,
        firebase_app: Optional[firebase_admin.App] = None,
        **overrides
    ):
        self.config = config or get_settings(**overrides)
        if self.config.configure_logging:
            setup_logging(self.config.log_level)
        self.logger = get_logger("client")

        if store is None:
            firebase_app = firebase_app or init_app(self.config)
            store = FirebaseStore(firebase_app)
        self.store = store
        self.firebase_app = firebase_app or getattr(store, "app", None)

        self.context = ClientContext(env=self.config.env, locale=self.config.locale)
        self.circuit = CircuitBreaker(
            "database",
            threshold=self.config.circuit_threshold,
            cooldown=self.config.circuit_cooldown,
        )
        self.subscriptions = SubscriptionRegistry()

        self.content = Content(self)
        self.nav = Navigation(self)
        self.schemas = Schemas(self)
        self.settings = SettingsAPI(self)

    async def call(
        self,
        func: Callable[..., T],
        *args,
        action: str = "database_call",
        timed: bool = True,
        **extra
    ) -> T:
        """Run a blocking store call off the event loop, through the circuit breaker.

        `timed=False` skips `request_timeout` for calls whose result must not
        be abandoned, such as attaching a listener.
        """
        timeout = self.config.request_timeout if timed else None
        with log_duration(self.logger, action, **extra):
            return await self.circuit.call(asyncio.to_thread, func, *args, timeout=timeout)

    # ==================== Context ====================

    def get_locale(self) -> str:
        return self.context.locale

    def get_env(self) -> str:
        return self.context.env

    async def _supported(self, configured: List[str], load: Callable[[], Awaitable[List[str]]]) -> List[str]:
        if configured:
            return list(configured)
        return await load()

    async def set_locale(self, locale: Optional[str] = None) -> str:
        """Switch the locale for subsequent calls.

        Raises:
            UnsupportedLocaleError: If the locale is not in the allow-list
        """
        locale = locale or self.context.locale
        supported = await self._supported(self.config.locales, self.settings.get_locales)
        if locale not in supported:
            raise UnsupportedLocaleError(
                f'"{locale}" is not a supported locale. Supported locales: {", ".join(supported)}'
            )
        self.context = replace(self.context, locale=locale)
        self.logger.info("locale_set", locale=locale)
        return locale

    async def set_env(self, env: Optional[str] = None) -> str:
        """Switch the environment for subsequent calls.

        Raises:
            UnsupportedEnvironmentError: If the environment is not in the allow-list
        """
        env = env or self.context.env
        supported = await self._supported(self.config.environments, self.settings.get_environments)
        if env not in supported:
            raise UnsupportedEnvironmentError(
                f'"{env}" is not a supported environment. Supported environments: {", ".join(supported)}'
            )
        self.context = replace(self.context, env=env)
        self.logger.info("env_set", env=env)
        return env

    # ==================== Lifecycle ====================

    async def close(self) -> int:
        """Close every live subscription of this client."""
        closed = await asyncio.to_thread(self.subscriptions.close_all)
        self.logger.info("client_closed", subscriptions=closed)
        return closed

    async def __aenter__(self) -> "Flamelink":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def create_client(config: Optional[Settings] = None, **kwargs) -> Flamelink:
    """Build a client from settings and keyword overrides."""
    return Flamelink(config, **kwargs)
