"""Named, independently retried units of work.

A :class:`Step` bundles a name, a :class:`StepPolicy` and a zero-argument
callable. :class:`StepExecutor` runs it in a single bounded retry loop. Step
bodies may run more than once, including after a failure that happened after
their side effect took hold (a write that succeeded but whose attempt then timed
out), so every body has to converge when re-executed.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from tenacity import RetryError, Retrying, stop_after_attempt, wait_exponential, wait_fixed

if TYPE_CHECKING:
    from collections.abc import Callable

    from tenacity import RetryCallState
    from tenacity.wait import wait_base

log = getLogger(__name__)


class Backoff(StrEnum):
    CONSTANT = "constant"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True, slots=True)
class StepPolicy:
    """Retry budget of one step."""

    max_attempts: int = 3
    delay: timedelta = timedelta(seconds=2)
    backoff: Backoff = Backoff.EXPONENTIAL
    timeout: timedelta | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < timedelta(0):
            raise ValueError("delay must be non-negative")
        if self.timeout is not None and self.timeout <= timedelta(0):
            raise ValueError("timeout must be positive")


@dataclass(frozen=True, slots=True)
class Step[T]:
    name: str
    policy: StepPolicy
    fn: Callable[[], T]


class StepTimeoutError(TimeoutError):
    """An attempt did not finish within the step timeout and was abandoned."""


class StepFailedError(RuntimeError):
    """Raised once a step has exhausted its retry budget."""

    def __init__(self, step_name: str, *, attempts: int, cause: Exception) -> None:
        super().__init__(f"Step {step_name!r} failed after {attempts} attempt(s): {cause}")
        self.step_name = step_name
        self.attempts = attempts
        self.cause = cause

    @property
    def root_cause(self) -> Exception:
        """Innermost error, unwrapping failures of nested steps."""

        cause: Exception = self.cause
        while isinstance(cause, StepFailedError):
            cause = cause.cause
        return cause


class StepExecutor:
    """Run steps with bounded retries, backoff and per-attempt timeouts."""

    def __init__(self, *, sleep: Callable[[float], None] = time.sleep) -> None:
        self._sleep = sleep

    def do[T](self, name: str, policy: StepPolicy, fn: Callable[[], T]) -> T:
        return self.run(Step(name=name, policy=policy, fn=fn))

    def run[T](self, step: Step[T]) -> T:
        policy = step.policy
        retrying = Retrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=_wait_strategy(policy),
            sleep=self._sleep,
            before=lambda state: log.debug(
                "Step %s: attempt %s/%s", step.name, state.attempt_number, policy.max_attempts
            ),
            before_sleep=_log_retry(step.name, policy.max_attempts),
        )
        try:
            return retrying(self._attempt, step)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            assert isinstance(last_error, Exception)
            log.error(
                "Step %s: giving up after %s attempt(s): %s",
                step.name,
                policy.max_attempts,
                last_error,
            )
            raise StepFailedError(
                step.name, attempts=policy.max_attempts, cause=last_error
            ) from last_error

    @staticmethod
    def _attempt[T](step: Step[T]) -> T:
        timeout = step.policy.timeout
        if timeout is None:
            return step.fn()

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"step-{step.name}")
        try:
            future = pool.submit(step.fn)
            done, _ = wait([future], timeout=timeout.total_seconds())
            if not done:
                # the worker keeps running; its result is discarded
                raise StepTimeoutError(f"Step {step.name!r} timed out after {timeout}")
            return future.result()
        finally:
            pool.shutdown(wait=False, cancel_futures=True)


def _wait_strategy(policy: StepPolicy) -> wait_base:
    base = policy.delay.total_seconds()
    if policy.backoff is Backoff.EXPONENTIAL:
        return wait_exponential(multiplier=base, exp_base=2)
    return wait_fixed(base)


def _log_retry(name: str, max_attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome is not None else None
        log.warning(
            "Step %s: attempt %s/%s failed (%s), retrying in %.1fs",
            name,
            state.attempt_number,
            max_attempts,
            error,
            state.upcoming_sleep,
        )

    return before_sleep


__all__ = [
    "Backoff",
    "Step",
    "StepExecutor",
    "StepFailedError",
    "StepPolicy",
    "StepTimeoutError",
]
