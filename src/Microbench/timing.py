"""Wall-clock timing of workload callables."""

import time
from typing import Callable, Optional

from .datastructures import TimingSeries


def time_callable(
    fn: Callable,
    *args,
    repeats: int = 5,
    warmup: int = 1,
    timer: Callable[[], float] = time.perf_counter,
    setup: Optional[Callable[[], tuple]] = None,
):
    """Time ``repeats`` calls of ``fn``.

    Parameters
    ----------
    fn : callable
        Function under test.
    *args
        Positional arguments passed to ``fn`` when ``setup`` is None.
    repeats : int
        Number of timed calls (default: 5).
    warmup : int
        Untimed calls made first, e.g. to trigger JIT compilation (default: 1).
    timer : callable
        Clock returning seconds (default: ``time.perf_counter``).
    setup : callable, optional
        Called before every call, outside the timed region. Its return value
        (a tuple) is used as the arguments, so each run gets fresh inputs.

    Returns
    -------
    tuple
        (TimingSeries, result of the last timed call)
    """
    if repeats < 1:
        raise ValueError(f"repeats must be at least 1, got {repeats}")
    if warmup < 0:
        raise ValueError(f"warmup must be non-negative, got {warmup}")

    def _args():
        return setup() if setup is not None else args

    for _ in range(warmup):
        fn(*_args())

    series = TimingSeries()
    result = None
    for _ in range(repeats):
        call_args = _args()
        t0 = timer()
        result = fn(*call_args)
        series.run_times.append(timer() - t0)

    return series, result


def speedup(baseline_time: float, candidate_time: float) -> float:
    """Ratio baseline / candidate (> 1 means the candidate is faster)."""
    if candidate_time <= 0:
        raise ValueError(f"Candidate time must be positive, got {candidate_time}")
    return baseline_time / candidate_time


def format_duration(seconds: float) -> str:
    """Format a duration with a unit suited to its magnitude.

    >>> format_duration(0.00123)
    '1.23 ms'
    """
    if seconds < 1e-6:
        return f"{seconds * 1e9:.2f} ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.2f} us"
    if seconds < 1.0:
        return f"{seconds * 1e3:.2f} ms"
    return f"{seconds:.2f} s"
