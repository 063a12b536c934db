"""Answer speed classification relative to the question's expected duration.

    ratio <  70%         → fast
    70% <= ratio <= 110% → medium
    ratio >  110%        → slow
"""

from app.models.adaptive import SpeedClass

FAST_BELOW_PERCENT = 70
SLOW_ABOVE_PERCENT = 110


def speed_ratio(time_taken_seconds: float, median_time_seconds: float) -> float:
    """Time taken as a percentage of the expected duration.

    A non-positive expected duration has no meaningful ratio and is treated
    as infinitely slow.
    """
    if median_time_seconds <= 0:
        return float("inf")
    # Scale first so exact boundaries (e.g. 110 of 100) stay exact
    return time_taken_seconds * 100 / median_time_seconds


def classify_speed(time_taken_seconds: float, median_time_seconds: float) -> SpeedClass:
    ratio = speed_ratio(time_taken_seconds, median_time_seconds)
    if ratio < FAST_BELOW_PERCENT:
        return SpeedClass.FAST
    if ratio <= SLOW_ABOVE_PERCENT:
        return SpeedClass.MEDIUM
    return SpeedClass.SLOW
