from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

MIN_LEVEL = 1
MAX_LEVEL = 6
WINDOW_SIZE = 5

# Point balances are whole numbers in practice, but callers may store fractions
Points = Union[int, float]


class SpeedClass(str, Enum):
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class LevelChange(str, Enum):
    UP = "up"
    DOWN = "down"
    STAY = "stay"


class AnswerRecord(BaseModel):
    """One previously answered question in a quiz session."""

    model_config = ConfigDict(frozen=True)

    correct: bool
    time_taken_seconds: float = Field(ge=0)
    # Expected duration of the question; the speed baseline
    median_time_seconds: float = Field(ge=0)
    question_level: int = Field(ge=MIN_LEVEL, le=MAX_LEVEL)


class AnswerBreakdown(BaseModel):
    index: int
    correct: bool
    speed: SpeedClass
    points: int
    question_level: int
    time_taken_seconds: float
    median_time_seconds: float


class WindowAnalysis(BaseModel):
    consecutive_correct: int = 0
    consecutive_wrong: int = 0
    consecutive_fast_correct: int = 0
    consecutive_medium_correct: int = 0
    consecutive_slow_correct: int = 0
    consecutive_points: int = 0
    # Diagnostic only: stored balance plus every delta in the window
    total_points: Points = 0
    answers: list[AnswerBreakdown] = []


class LevelDecision(BaseModel):
    new_level: int
    level_change: LevelChange
    reason: str
    points: Points
    rule: Optional[str] = None
    analysis: WindowAnalysis = WindowAnalysis()
