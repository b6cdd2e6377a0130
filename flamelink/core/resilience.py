"""Circuit breaker for store round trips.

Each client owns one breaker. Failures are counted, never retried: the
original exception is re-raised to the caller every time.
"""
import asyncio
import math
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from flamelink.errors import CircuitOpenError
from flamelink.utils.logging import get_logger

logger = get_logger()

T = TypeVar("T")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"  # cooldown passed, next call decides


@dataclass
class CircuitBreaker:
    """Fails fast once the store has failed `threshold` times in a row.

    Usage:
        circuit = CircuitBreaker("database", threshold=3, cooldown=30)
        snapshot = await circuit.call(asyncio.to_thread, ref.once)
    """
    name: str
    threshold: int = 3
    cooldown: float = 30

    _state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _failures: int = field(default=0, init=False)
    _opened_at: Optional[float] = field(default=None, init=False)

    def __post_init__(self):
        self.logger = logger.bind(circuit=self.name)
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        with self._lock:
            if self._state == CircuitState.OPEN and self._cooldown_remaining() == 0:
                self._state = CircuitState.HALF_OPEN
                self.logger.info("circuit_half_open")
            return self._state

    def _cooldown_remaining(self) -> int:
        if self._opened_at is None:
            return 0
        remaining = self.cooldown - (time.monotonic() - self._opened_at)
        return max(0, math.ceil(remaining))

    def _succeeded(self) -> None:
        with self._lock:
            recovered = self._state == CircuitState.HALF_OPEN
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._opened_at = None
        if recovered:
            self.logger.info("circuit_closed", reason="recovery")

    def _failed(self, error: Exception) -> None:
        with self._lock:
            self._failures += 1
            if self._state == CircuitState.HALF_OPEN:
                reason = "half_open_failure"
            elif self._failures >= self.threshold:
                reason = "threshold"
            else:
                return
            self._state = CircuitState.OPEN
            self._opened_at = time.monotonic()
        self.logger.warning(
            "circuit_opened", reason=reason, failures=self._failures, error=str(error)[:50]
        )

    async def call(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        timeout: Optional[float] = None,
        **kwargs
    ) -> T:
        """Await `func(*args, **kwargs)` unless the circuit is open.

        Raises:
            CircuitOpenError: If circuit is open
            asyncio.TimeoutError: If `timeout` elapsed
            Exception: Whatever `func` raised, unchanged
        """
        if self.state == CircuitState.OPEN:
            remaining = self._cooldown_remaining()
            self.logger.debug("circuit_rejected", cooldown_remaining=remaining)
            raise CircuitOpenError(self.name, remaining)

        try:
            if timeout:
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            else:
                result = await func(*args, **kwargs)
        except Exception as e:
            self._failed(e)
            raise

        self._succeeded()
        return result
