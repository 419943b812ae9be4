"""Retry Policy — timeout-only retry expressed as a small state machine.

States:
    Attempting(n) ─ response ──────────────► Succeeded
                  ─ timeout, n < max ──────► Attempting(n + 1)   (after delay)
                  ─ timeout, n == max ─────► Exhausted

Invariants:
    - n starts at 1 and never exceeds max_attempts (3 by default)
    - Only timeouts advance the machine; any other failure is not its concern
      and propagates out of the transport loop untouched
    - Pure: no sleeping, no IO; the transport drives transitions
"""

from dataclasses import dataclass
from enum import Enum


class AttemptOutcome(str, Enum):
    """What happened on one upstream attempt."""
    RESPONSE = "response"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Succeeded:
    attempt: int


@dataclass(frozen=True)
class Exhausted:
    attempts: int


RetryState = Attempting | Succeeded | Exhausted


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry on transient (timeout) failures with a fixed delay."""
    max_retries: int = 2
    delay_seconds: float = 3.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def start(self) -> Attempting:
        return Attempting(1)

    def advance(self, state: Attempting, outcome: AttemptOutcome) -> RetryState:
        """Transition from an in-flight attempt given its outcome."""
        if outcome is AttemptOutcome.RESPONSE:
            return Succeeded(state.attempt)
        if state.attempt >= self.max_attempts:
            return Exhausted(state.attempt)
        return Attempting(state.attempt + 1)
