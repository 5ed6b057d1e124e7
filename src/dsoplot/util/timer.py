"""Interval timer for instrument exchanges and other slow calls."""

import time


class Timer:
    """Measure time since creation or since the last `elapsed()` call.

    Parameters
    ----------
    fmt : str
        Format applied to the elapsed seconds, default ``"%.3f"``.
    reset : bool
        If True (default) every `elapsed()` call restarts the timer, otherwise
        the time accumulates since creation.

    Examples
    --------
    ```python
    timer = Timer(fmt="Passed %.1f sec", reset=False)
    ...
    timer.elapsed()  # "Passed 1.2 sec"
    ```
    """

    def __init__(self, fmt: str = "%.3f", reset: bool = True):
        self.fmt = fmt
        self.reset = reset
        self._start = time.perf_counter()

    def seconds(self) -> float:
        return time.perf_counter() - self._start

    def elapsed(self, fmt: str | None = None, reset: bool | None = None) -> str:
        ela = (fmt or self.fmt) % self.seconds()
        if self.reset if reset is None else reset:
            self._start = time.perf_counter()
        return ela
