"""Circuit breaker: fail fast while a downstream keeps failing.

State machine over ``CLOSED → OPEN → HALF_OPEN → CLOSED``:

* ``CLOSED``: calls pass through; ``failure_threshold`` consecutive failures
  open the circuit.
* ``OPEN``: calls raise :class:`ServiceUnavailableError` without invoking the
  wrapped coroutine, until ``timeout_ms`` has elapsed since the last failure.
  The first call after that moves the circuit to ``HALF_OPEN``.
* ``HALF_OPEN``: calls pass through; ``success_threshold`` consecutive
  successes close the circuit, any failure re-opens it.

Counter updates are guarded by a lock so one instance can be shared by all
in-flight requests.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from registry_fetcher.domain.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    """Observable breaker state."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True, slots=True)
class CircuitBreakerConfig:
    failure_threshold: int = 5
    timeout_ms: int = 60_000
    success_threshold: int = 2

    def __post_init__(self) -> None:
        for name in ("failure_threshold", "timeout_ms", "success_threshold"):
            if getattr(self, name) < 1:
                msg = f"{name} must be a positive integer."
                raise ValueError(msg)


class CircuitBreaker:
    """Wraps coroutine factories with fail-fast protection.

    Parameters
    ----------
    config:
        Thresholds and open-state timeout.
    name:
        Label used in log messages.
    excluded_exceptions:
        Exception types that propagate without counting as a failure or a
        success (e.g. a caller asking for something that does not exist).
    clock:
        Monotonic time source in seconds; injectable for tests.
    """

    def __init__(
        self,
        config: CircuitBreakerConfig | None = None,
        *,
        name: str = "default",
        excluded_exceptions: tuple[type[BaseException], ...] = (),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or CircuitBreakerConfig()
        self.name = name
        self._excluded = excluded_exceptions
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._successes = 0
        self._last_failure_time: float | None = None

    # ── Introspection ───────────────────────────────────────────────────

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    @property
    def success_count(self) -> int:
        return self._successes

    @property
    def last_failure_time(self) -> float | None:
        return self._last_failure_time

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failures": self._failures,
                "successes": self._successes,
                "failure_threshold": self.config.failure_threshold,
                "timeout_ms": self.config.timeout_ms,
                "success_threshold": self.config.success_threshold,
            }

    # ── Execution ───────────────────────────────────────────────────────

    async def call(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``await fn()`` under breaker protection."""
        self._before_call()
        try:
            result = await fn()
        except self._excluded:
            raise
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def reset(self) -> None:
        """Force ``CLOSED`` with all counters zeroed."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._successes = 0
            self._last_failure_time = None
        logger.info("Circuit breaker '%s' reset", self.name)

    # ── Transitions ─────────────────────────────────────────────────────

    def _before_call(self) -> None:
        with self._lock:
            if self._state is not CircuitState.OPEN:
                return
            elapsed_ms = (self._clock() - (self._last_failure_time or 0.0)) * 1000
            if elapsed_ms < self.config.timeout_ms:
                raise ServiceUnavailableError(
                    "Service temporarily unavailable due to previous failures. "
                    f"Retry in {max(0, int(self.config.timeout_ms - elapsed_ms)) // 1000 + 1}s."
                )
            self._state = CircuitState.HALF_OPEN
            self._successes = 0
        logger.info("Circuit breaker '%s' half-open, probing downstream", self.name)

    def _on_success(self) -> None:
        closed = False
        with self._lock:
            self._failures = 0
            if self._state is CircuitState.HALF_OPEN:
                self._successes += 1
                if self._successes >= self.config.success_threshold:
                    self._state = CircuitState.CLOSED
                    self._successes = 0
                    closed = True
        if closed:
            logger.info("Circuit breaker '%s' closed", self.name)

    def _on_failure(self) -> None:
        opened = False
        with self._lock:
            self._failures += 1
            self._last_failure_time = self._clock()
            if self._state is CircuitState.HALF_OPEN:
                self._state = CircuitState.OPEN
                self._successes = 0
                opened = True
            elif (
                self._state is CircuitState.CLOSED
                and self._failures >= self.config.failure_threshold
            ):
                self._state = CircuitState.OPEN
                opened = True
        if opened:
            logger.warning(
                "Circuit breaker '%s' opened after %d failure(s)",
                self.name,
                self._failures,
            )
