from app.models.adaptive import SpeedClass

# (correct, speed) -> point delta
POINT_TABLE = {
    (True, SpeedClass.FAST): 2,
    (True, SpeedClass.MEDIUM): 1,
    (True, SpeedClass.SLOW): 0,
    # Fast and wrong reads as carelessness, not a knowledge gap
    (False, SpeedClass.FAST): 0,
    (False, SpeedClass.MEDIUM): -1,
    (False, SpeedClass.SLOW): -2,
}


def points_for(correct: bool, speed: SpeedClass) -> int:
    """Signed point delta for one answer."""
    return POINT_TABLE[(bool(correct), SpeedClass(speed))]
