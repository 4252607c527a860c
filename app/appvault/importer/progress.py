"""Cross-thread progress reporting.

The import worker pushes fractional progress values into a channel and
the observer drains them on its own thread.
"""

import queue
from collections.abc import Callable
from typing import Protocol


class ProgressSink(Protocol):
    """Anything that accepts fractional progress updates (0.0 to 1.0)."""

    def __call__(self, fraction: float) -> None: ...


def clamp(fraction: float) -> float:
    """Clamp a progress value into [0.0, 1.0]."""
    if fraction != fraction:  # NaN
        return 0.0
    return max(0.0, min(1.0, fraction))


class ProgressChannel:
    """Thread-safe channel of progress updates.

    Producers call the channel like a sink. Consumers call drain() to
    fetch the newest value. Regressions are ignored, so the reported value
    never goes backwards.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[float] = queue.SimpleQueue()
        self._latest = 0.0

    def __call__(self, fraction: float) -> None:
        self.put(fraction)

    def put(self, fraction: float) -> None:
        """Publish a progress value from any thread."""
        self._queue.put(clamp(fraction))

    def drain(self) -> float:
        """Consume pending updates and return the latest progress.

        Returns:
            Highest progress seen so far.
        """
        while True:
            try:
                value = self._queue.get_nowait()
            except queue.Empty:
                break
            if value > self._latest:
                self._latest = value
        return self._latest

    @property
    def latest(self) -> float:
        """Latest drained value, without consuming pending updates."""
        return self._latest


class FanOut:
    """Forwards each update to several sinks, e.g. a channel and a download task."""

    def __init__(self, *sinks: Callable[[float], None] | None) -> None:
        self._sinks = [s for s in sinks if s is not None]

    def __call__(self, fraction: float) -> None:
        value = clamp(fraction)
        for sink in self._sinks:
            sink(value)
