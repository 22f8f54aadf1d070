# =============================================================================
# lib/rate_gate.py - Fixed-Interval Send Gate
# =============================================================================
# Paces outgoing provider calls so a batch stays under the provider's rate
# limit. The gate guarantees at least `interval` seconds between the end of
# one attempt and the start of the next.
#
# The clock and sleep functions are injectable so tests can drive the gate
# without real wall-clock delays.
#
# Usage:
#   gate = FixedIntervalGate(0.1)
#   for item in batch:
#       gate.wait()
#       try:
#           send(item)
#       finally:
#           gate.mark()
# =============================================================================

import time
from typing import Callable


class FixedIntervalGate:
    """
    Blocks callers until the configured interval has passed since the last
    attempt was marked.

    Not thread-safe: one gate belongs to one sequential batch.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last_mark: float | None = None

    def wait(self) -> float:
        """
        Block until the next attempt may start.

        Returns:
            Seconds slept (0.0 for the first attempt of a batch)
        """
        if self._last_mark is None:
            return 0.0

        remaining = self.interval - (self._clock() - self._last_mark)
        if remaining > 0:
            self._sleep(remaining)
            return remaining
        return 0.0

    def mark(self) -> None:
        """Record that an attempt just finished (successfully or not)."""
        self._last_mark = self._clock()
