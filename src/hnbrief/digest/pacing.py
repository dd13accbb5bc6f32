"""Minimum-interval pacing for sequential calls to rate-limited services."""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Pacer:
    """Keeps at least ``interval`` seconds between the starts of paced calls.

    The first call never waits. Later calls sleep only for whatever part
    of the interval has not already elapsed.
    """

    def __init__(
        self,
        interval: float,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval = interval
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def wait(self) -> None:
        """Block until the next call may start, then mark it as started."""
        if self._last is not None and self.interval > 0:
            remaining = self.interval - (self._clock() - self._last)
            if remaining > 0:
                logger.debug("Pacing %s: sleeping %.2fs", self.name or "call", remaining)
                self._sleep(remaining)
        self._last = self._clock()
