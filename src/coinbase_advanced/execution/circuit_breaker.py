"""Circuit breaker pattern for fault tolerance.

Prevents hammering the exchange when it is failing by failing fast after a
run of consecutive failed calls.

States:
    CLOSED: Normal operation, requests pass through
    OPEN: Failing fast, requests rejected immediately
    HALF_OPEN: One trial request tests whether the service recovered

Transitions::

    CLOSED    --(failure_threshold consecutive failures)--> OPEN
    OPEN      --(recovery_timeout elapsed)--------------->  HALF_OPEN
    HALF_OPEN --(trial succeeds)------------------------->  CLOSED
    HALF_OPEN --(trial fails)---------------------------->  OPEN

Only failures matching ``should_trip`` (transport failures by default) are
counted. Other exceptions propagate without affecting the state, and a
success in CLOSED resets the consecutive-failure counter.

Example:
    >>> from coinbase_advanced.execution.circuit_breaker import CircuitBreaker
    >>>
    >>> breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=120.0)
    >>> accounts = await breaker.call_async(api.list_accounts)
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from ..core.errors import CircuitOpenError, is_transport_failure

T = TypeVar("T")


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Rejecting requests
    HALF_OPEN = "half_open"  # Testing recovery


@dataclass
class CircuitStats:
    """Statistics for circuit breaker monitoring."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    ignored_errors: int = 0
    rejected_requests: int = 0
    state_changes: int = 0
    last_failure_time: datetime | None = None
    last_success_time: datetime | None = None
    last_state_change: datetime | None = None

    @property
    def failure_rate(self) -> float:
        """Calculate failure rate as percentage."""
        total = self.successful_requests + self.failed_requests
        if total == 0:
            return 0.0
        return (self.failed_requests / total) * 100


@dataclass(frozen=True)
class Admission:
    """Result of ``allow_request``; truthy when the call may proceed.

    ``trial`` is the half-open generation the call was admitted into, or
    ``None`` for calls admitted while closed. Passing the admission back to
    the ``record_*`` methods lets the breaker tell the half-open trial apart
    from a call that started before the circuit opened.
    """

    allowed: bool
    trial: int | None = None

    def __bool__(self) -> bool:
        return self.allowed


@dataclass
class CircuitBreaker:
    """Circuit breaker for fault tolerance.

    State is guarded by an ``RLock`` that is never held across an ``await``,
    so one breaker can be shared by concurrent tasks (and threads).

    Attributes:
        name: Identifier for this circuit
        failure_threshold: Consecutive failures before opening
        recovery_timeout: Seconds to stay open before the half-open trial
        success_threshold: Trial successes needed in half-open to close
        half_open_max_calls: Trial calls admitted while half-open
        should_trip: Predicate selecting the failures that count
        on_break: Hook fired on opening with (error, open_seconds)
        on_reset: Hook fired on closing
        on_half_open: Hook fired on entering half-open
        clock: Monotonic time source in seconds
    """

    name: str = "default"
    failure_threshold: int = 5
    recovery_timeout: float = 120.0
    success_threshold: int = 1
    half_open_max_calls: int = 1
    should_trip: Callable[[BaseException], bool] = is_transport_failure
    on_break: Callable[[BaseException | None, float], None] | None = None
    on_reset: Callable[[], None] | None = None
    on_half_open: Callable[[], None] | None = None
    clock: Callable[[], float] = time.monotonic

    # Internal state
    _state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _failure_count: int = field(default=0, init=False)
    _success_count: int = field(default=0, init=False)
    _opened_at: float | None = field(default=None, init=False)
    _half_open_calls: int = field(default=0, init=False)
    _half_open_generation: int = field(default=0, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)
    _stats: CircuitStats = field(default_factory=CircuitStats, init=False)

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        with self._lock:
            self._check_state_transition()
            return self._state

    @property
    def failure_count(self) -> int:
        """Consecutive counted failures since the last success or reset."""
        with self._lock:
            return self._failure_count

    @property
    def stats(self) -> CircuitStats:
        """Get circuit statistics."""
        return self._stats

    def remaining_open_seconds(self) -> float:
        """Seconds until an open circuit admits its trial call (0 if not open)."""
        with self._lock:
            self._check_state_transition()
            if self._state != CircuitState.OPEN or self._opened_at is None:
                return 0.0
            return max(0.0, self.recovery_timeout - (self.clock() - self._opened_at))

    def _check_state_transition(self) -> None:
        """Check if state should transition based on timeout."""
        if self._state == CircuitState.OPEN and self._opened_at is not None:
            elapsed = self.clock() - self._opened_at
            if elapsed >= self.recovery_timeout:
                self._transition_to(CircuitState.HALF_OPEN)

    def _transition_to(self, new_state: CircuitState, error: BaseException | None = None) -> None:
        """Transition to a new state."""
        self._state = new_state
        self._stats.state_changes += 1
        self._stats.last_state_change = utcnow()

        if new_state == CircuitState.CLOSED:
            self._failure_count = 0
            self._success_count = 0
            self._opened_at = None
            if self.on_reset:
                self.on_reset()
        elif new_state == CircuitState.OPEN:
            self._opened_at = self.clock()
            self._half_open_calls = 0
            if self.on_break:
                self.on_break(error, self.recovery_timeout)
        elif new_state == CircuitState.HALF_OPEN:
            self._success_count = 0
            self._half_open_calls = 0
            self._half_open_generation += 1
            if self.on_half_open:
                self.on_half_open()

    def allow_request(self) -> Admission:
        """Check if a request should be allowed.

        Returns:
            An ``Admission`` that is truthy if the request can proceed and
            falsy if the circuit is open or the trial slot is taken
        """
        with self._lock:
            self._check_state_transition()
            self._stats.total_requests += 1

            if self._state == CircuitState.CLOSED:
                return Admission(True)

            if self._state == CircuitState.OPEN:
                self._stats.rejected_requests += 1
                return Admission(False)

            # Half-open: admit the trial call(s) only
            if self._half_open_calls < self.half_open_max_calls:
                self._half_open_calls += 1
                return Admission(True, trial=self._half_open_generation)

            self._stats.rejected_requests += 1
            return Admission(False)

    def _holds_trial(self, admission: Admission | None) -> bool:
        """Whether the outcome being recorded belongs to the current trial.

        Without an admission the caller is taken to be the trial, which keeps
        manual ``allow_request``/``record_*`` sequences working.
        """
        if self._state != CircuitState.HALF_OPEN:
            return False
        if admission is None:
            return self._half_open_calls > 0
        return admission.trial == self._half_open_generation

    def record_success(self, admission: Admission | None = None) -> None:
        """Record a successful request.

        In half-open only the trial call may close the circuit. A call that
        was admitted before the circuit opened does not.
        """
        with self._lock:
            self._stats.successful_requests += 1
            self._stats.last_success_time = utcnow()

            if self._holds_trial(admission):
                self._success_count += 1
                if self._success_count >= self.success_threshold:
                    self._transition_to(CircuitState.CLOSED)
                else:
                    self._half_open_calls -= 1
            elif self._state == CircuitState.CLOSED:
                self._failure_count = 0

    def record_failure(self, error: BaseException | None = None) -> None:
        """Record a counted failure.

        Any counted failure in half-open reopens the circuit, whether or not
        it came from the trial.
        """
        with self._lock:
            self._failure_count += 1
            self._stats.failed_requests += 1
            self._stats.last_failure_time = utcnow()

            if self._state == CircuitState.CLOSED:
                if self._failure_count >= self.failure_threshold:
                    self._transition_to(CircuitState.OPEN, error)

            elif self._state == CircuitState.HALF_OPEN:
                self._transition_to(CircuitState.OPEN, error)

    def record_ignored(self, admission: Admission | None = None) -> None:
        """Record an outcome that neither counts as failure nor success.

        When it belongs to the half-open trial, frees the trial slot so the
        next caller can run the trial.
        """
        with self._lock:
            self._stats.ignored_errors += 1
            if self._holds_trial(admission):
                self._half_open_calls -= 1

    def reset(self) -> None:
        """Manually reset circuit to closed state."""
        with self._lock:
            self._transition_to(CircuitState.CLOSED)

    def force_open(self) -> None:
        """Manually force circuit to open state."""
        with self._lock:
            self._transition_to(CircuitState.OPEN)

    async def call_async(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Execute an async function through the circuit breaker.

        Raises:
            CircuitOpenError: If circuit is open; ``func`` is not called
        """
        admission = self.allow_request()
        if not admission:
            remaining = self.remaining_open_seconds()
            raise CircuitOpenError(
                f"Circuit '{self.name}' is open, rejecting request"
            ).with_context(circuit=self.name, retry_in_seconds=round(remaining, 1))

        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            self.record_ignored(admission)
            raise
        except Exception as e:
            if self.should_trip(e):
                self.record_failure(e)
            else:
                self.record_ignored(admission)
            raise

        self.record_success(admission)
        return result


__all__ = [
    "Admission",
    "CircuitState",
    "CircuitStats",
    "CircuitBreaker",
]
