"""Bounded exponential-backoff retry around a single upstream call.

The controller is an explicit state machine::

    ATTEMPTING -> SUCCEEDED | RETRY_WAIT | FAILED_TERMINAL
    RETRY_WAIT -> ATTEMPTING

Only statuses in ``RetryPolicy.retryable_status_codes`` are retried. Every other
failure ends the invocation on the attempt that produced it. The sleep primitive
is injected so tests never wait on the wall clock.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from tutor_relay.config import ResolvedConfig
from tutor_relay.constants import (
    INITIAL_RETRY_DELAY_MS,
    MAX_RETRIES,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
)
from tutor_relay.errors import (
    EmptyOutputError,
    NonRetryableUpstreamError,
    RelayError,
    RetryableUpstreamError,
    UnexpectedFault,
)
from tutor_relay.observability import LoggingRelayObserver, RelayObserver
from tutor_relay.providers.base import UpstreamCaller, UpstreamResponse

Sleep = Callable[[float], Awaitable[None]]


class RetryPhase(Enum):
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCEEDED = "succeeded"
    FAILED_TERMINAL = "failed_terminal"


TERMINAL_PHASES = frozenset({RetryPhase.SUCCEEDED, RetryPhase.FAILED_TERMINAL})


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = MAX_RETRIES
    initial_delay_ms: int = INITIAL_RETRY_DELAY_MS
    backoff_factor: int = RETRY_BACKOFF_FACTOR
    retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")


@dataclass
class RetryState:
    delay_ms: int
    attempt_count: int = 0
    phase: RetryPhase = RetryPhase.ATTEMPTING
    calls: int = 0
    total_delay_ms: int = 0
    text: str | None = None
    error: RelayError | None = None

    def succeed(self, text: str) -> None:
        self.text = text
        self.phase = RetryPhase.SUCCEEDED

    def fail(self, error: RelayError) -> None:
        self.error = error
        self.phase = RetryPhase.FAILED_TERMINAL


@dataclass(frozen=True)
class RetryOutcome:
    phase: RetryPhase
    attempts: int
    total_delay_ms: int
    text: str | None = None
    error: RelayError | None = None

    @property
    def succeeded(self) -> bool:
        return self.phase is RetryPhase.SUCCEEDED


def extract_candidate_text(payload: dict) -> str | None:
    """Return the first candidate's text, or ``None`` when no usable candidate exists."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    try:
        # Blocked candidates carry a finishReason but no content.
        return candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


class RetryController:
    def __init__(
        self,
        caller: UpstreamCaller,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        observer: RelayObserver | None = None,
    ) -> None:
        self._caller = caller
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._observer = observer or LoggingRelayObserver()

    async def run(self, prompt: str, config: ResolvedConfig) -> RetryOutcome:
        state = RetryState(delay_ms=self._policy.initial_delay_ms)
        while state.phase not in TERMINAL_PHASES:
            if state.phase is RetryPhase.ATTEMPTING:
                await self._attempt(state, prompt, config)
            else:
                await self._wait(state)

        return RetryOutcome(
            phase=state.phase,
            attempts=state.calls,
            total_delay_ms=state.total_delay_ms,
            text=state.text,
            error=state.error,
        )

    async def _attempt(self, state: RetryState, prompt: str, config: ResolvedConfig) -> None:
        state.calls += 1
        self._observer.attempt_started(state.calls)
        try:
            response = await self._caller.call(prompt, config)
            if response.ok:
                self._accept(state, response)
                return
        except Exception as exc:
            self._observer.fault(exc)
            state.fail(UnexpectedFault(f"{type(exc).__name__}: {exc}"))
            return

        self._reject(state, response)

    def _accept(self, state: RetryState, response: UpstreamResponse) -> None:
        text = extract_candidate_text(response.json())
        if text is None:
            # Safety filtering and other upstream policies are not distinguished.
            state.fail(EmptyOutputError())
        else:
            state.succeed(text)

    def _reject(self, state: RetryState, response: UpstreamResponse) -> None:
        status_code = response.status_code
        self._observer.upstream_rejected(status_code, response.text())

        if status_code not in self._policy.retryable_status_codes:
            state.fail(NonRetryableUpstreamError(status_code=status_code))
        elif state.attempt_count >= self._policy.max_retries:
            state.fail(RetryableUpstreamError())
        else:
            state.attempt_count += 1
            self._observer.retry_scheduled(state.attempt_count, status_code, state.delay_ms)
            state.phase = RetryPhase.RETRY_WAIT

    async def _wait(self, state: RetryState) -> None:
        await self._sleep(state.delay_ms / 1000)
        state.total_delay_ms += state.delay_ms
        state.delay_ms *= self._policy.backoff_factor
        state.phase = RetryPhase.ATTEMPTING
