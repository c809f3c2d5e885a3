"""Wall clock helpers."""

import time


def now() -> float:
    """Current value of the performance counter in seconds."""
    return time.perf_counter()


def elapsed(begin: float) -> float:
    """Seconds elapsed since ``begin``."""
    return time.perf_counter() - begin
