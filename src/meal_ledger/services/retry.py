"""Backoff policy and attempt tracking for remote calls."""

from dataclasses import dataclass
from enum import StrEnum


class RetryPhase(StrEnum):
    """Lifecycle of a retried call."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    DELAYING = "delaying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class BackoffPolicy:
    """Bounded exponential backoff with additive jitter."""

    max_attempts: int = 5
    base_delay_seconds: float = 1.0
    max_jitter_seconds: float = 1.0

    def delay_for(self, attempt: int, jitter_seconds: float) -> float:
        """Return the delay after failed attempt ``attempt`` (zero-based)."""
        return (2**attempt) * self.base_delay_seconds + jitter_seconds


@dataclass
class RetryState:
    """Mutable state of one retried call."""

    policy: BackoffPolicy
    phase: RetryPhase = RetryPhase.IDLE
    attempts: int = 0
    next_delay_seconds: float | None = None

    def begin_attempt(self) -> None:
        """Move into ATTEMPTING for the next attempt."""
        if self.phase not in {RetryPhase.IDLE, RetryPhase.DELAYING}:
            raise RuntimeError(f"Cannot start an attempt while {self.phase}")
        self.phase = RetryPhase.ATTEMPTING
        self.attempts += 1
        self.next_delay_seconds = None

    def succeed(self) -> None:
        """Mark the call as succeeded."""
        self._require_attempting()
        self.phase = RetryPhase.SUCCEEDED

    def fail(self) -> None:
        """Mark the call as failed without further attempts."""
        self._require_attempting()
        self.phase = RetryPhase.FAILED

    def record_transient_failure(self, jitter_seconds: float) -> float | None:
        """Schedule the next attempt and return its delay.

        Returns None and moves to FAILED once the attempt budget is spent.
        """
        self._require_attempting()
        if self.attempts >= self.policy.max_attempts:
            self.phase = RetryPhase.FAILED
            return None
        self.phase = RetryPhase.DELAYING
        self.next_delay_seconds = self.policy.delay_for(
            self.attempts - 1, jitter_seconds
        )
        return self.next_delay_seconds

    def _require_attempting(self) -> None:
        if self.phase is not RetryPhase.ATTEMPTING:
            raise RuntimeError(f"No attempt in progress (phase is {self.phase})")
