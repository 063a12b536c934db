"""Adaptive difficulty decision engine.

After every answered question, decides whether the student's next question
should be one level easier, the same, or one level harder.

The decision is a pure function of (current level, the last few answers,
stored point balance). Rules are evaluated in the order of ``RULES``; the
first one that matches wins. Promotion rules are never offered at the top
level and demotion rules never at the bottom one.

Every level change discharges the point balance back to 0, and so does a
wrong answer without a level change. That keeps a student from bouncing
between two adjacent levels on a single lucky or unlucky answer.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from app.models.adaptive import (
    MAX_LEVEL,
    MIN_LEVEL,
    WINDOW_SIZE,
    AnswerRecord,
    LevelChange,
    LevelDecision,
    Points,
    SpeedClass,
    WindowAnalysis,
)
from app.services.streak_analyzer import StreakAnalyzer

logger = logging.getLogger(__name__)

STREAK_TO_PROMOTE = 3
POINTS_TO_PROMOTE = 5
WRONG_STREAK_TO_DEMOTE = 2


class InvalidLevelError(ValueError):
    """Raised when the caller passes a level outside MIN_LEVEL..MAX_LEVEL."""


@dataclass(frozen=True)
class WindowFacts:
    """Everything the rules look at, computed once per decision."""

    current_level: int
    last: AnswerRecord
    last_speed: SpeedClass
    consecutive_correct: int
    consecutive_wrong: int
    fast_streak: int
    medium_streak: int
    slow_streak: int
    consecutive_points: int


@dataclass(frozen=True)
class Rule:
    name: str
    change: LevelChange
    applies: Callable[[WindowFacts], bool]
    reason: Callable[[WindowFacts], str]

    def matches(self, facts: WindowFacts) -> bool:
        if self.change == LevelChange.UP and facts.current_level >= MAX_LEVEL:
            return False
        if self.change == LevelChange.DOWN and facts.current_level <= MIN_LEVEL:
            return False
        return self.applies(facts)


RULES: tuple[Rule, ...] = (
    # ── Promotion ──
    Rule(
        name="harder_question_fast",
        change=LevelChange.UP,
        applies=lambda f: (
            f.last.correct
            and f.last_speed == SpeedClass.FAST
            and f.last.question_level > f.current_level
        ),
        reason=lambda f: (
            f"correct+fast on a harder question (level {f.last.question_level} "
            f"> {f.current_level}) → up one level"
        ),
    ),
    Rule(
        name="correct_fast",
        change=LevelChange.UP,
        applies=lambda f: f.last.correct and f.last_speed == SpeedClass.FAST,
        reason=lambda f: "correct+fast → up one level",
    ),
    Rule(
        name="medium_streak",
        change=LevelChange.UP,
        applies=lambda f: f.medium_streak >= STREAK_TO_PROMOTE,
        reason=lambda f: f"{f.medium_streak}× correct+medium streak → up one level",
    ),
    Rule(
        name="slow_streak_points",
        change=LevelChange.UP,
        applies=lambda f: (
            f.last.correct
            and f.consecutive_points >= POINTS_TO_PROMOTE
            and f.slow_streak >= STREAK_TO_PROMOTE
        ),
        reason=lambda f: (
            f"{f.slow_streak}× correct+slow streak with accumulated points "
            f"{f.consecutive_points} (≥ {POINTS_TO_PROMOTE}) → up one level"
        ),
    ),
    Rule(
        name="stabilizer",
        change=LevelChange.UP,
        applies=lambda f: f.last.correct and f.consecutive_points >= POINTS_TO_PROMOTE,
        reason=lambda f: (
            f"stabilizer: accumulated points {f.consecutive_points} "
            f"(≥ {POINTS_TO_PROMOTE}) → up one level"
        ),
    ),
    # ── Demotion ──
    Rule(
        name="wrong_easier_question",
        change=LevelChange.DOWN,
        applies=lambda f: (
            not f.last.correct and f.last.question_level < f.current_level
        ),
        reason=lambda f: (
            f"wrong on an easier question (level {f.last.question_level} "
            f"< {f.current_level}) → down one level"
        ),
    ),
    Rule(
        name="wrong_fast",
        change=LevelChange.DOWN,
        applies=lambda f: not f.last.correct and f.last_speed == SpeedClass.FAST,
        reason=lambda f: "wrong+fast (likely careless) → down one level",
    ),
    Rule(
        name="wrong_slow",
        change=LevelChange.DOWN,
        applies=lambda f: not f.last.correct and f.last_speed == SpeedClass.SLOW,
        reason=lambda f: "wrong+slow → down one level",
    ),
    Rule(
        name="wrong_streak",
        change=LevelChange.DOWN,
        applies=lambda f: f.consecutive_wrong >= WRONG_STREAK_TO_DEMOTE,
        reason=lambda f: f"{f.consecutive_wrong}× wrong in a row → down one level",
    ),
)


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def validate_level(level: int) -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevelError(f"Level must be an integer, got {level!r}")
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidLevelError(
            f"Level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}"
        )
    return level


def _stay_reason(f: WindowFacts) -> str:
    """Describe the pattern that came closest to moving the level."""
    speed = f.last_speed.value
    if f.last.correct:
        if f.current_level >= MAX_LEVEL:
            return f"correct+{speed} at the highest level ({MAX_LEVEL}) → stay"
        if f.last_speed == SpeedClass.MEDIUM:
            return (
                f"correct+medium ({f.medium_streak}/{STREAK_TO_PROMOTE} toward promotion, "
                f"points {f.consecutive_points}/{POINTS_TO_PROMOTE}) → stay"
            )
        return (
            f"correct+slow ({f.slow_streak}/{STREAK_TO_PROMOTE} toward promotion, "
            f"points {f.consecutive_points}/{POINTS_TO_PROMOTE}) → stay"
        )
    if f.current_level <= MIN_LEVEL:
        return f"wrong+{speed} at the lowest level ({MIN_LEVEL}) → stay, points reset"
    return (
        f"wrong+{speed} ({f.consecutive_wrong}/{WRONG_STREAK_TO_DEMOTE} toward demotion) "
        f"→ stay, points reset"
    )


def gather_facts(current_level: int, analyzer: StreakAnalyzer) -> WindowFacts:
    return WindowFacts(
        current_level=current_level,
        last=analyzer.window[-1],
        last_speed=analyzer.speeds[-1],
        consecutive_correct=analyzer.consecutive_correct(),
        consecutive_wrong=analyzer.consecutive_wrong(),
        fast_streak=analyzer.consecutive_correct_at_speed(SpeedClass.FAST),
        medium_streak=analyzer.consecutive_correct_at_speed(SpeedClass.MEDIUM),
        slow_streak=analyzer.consecutive_correct_at_speed(SpeedClass.SLOW),
        consecutive_points=analyzer.consecutive_points(),
    )


def decide(
    current_level: int,
    window: Sequence[AnswerRecord],
    accumulated_points: Points = 0,
) -> LevelDecision:
    """Pick the level for the next question.

    Args:
        current_level: level the session is at, 1..6.
        window: recent answers, oldest first. Only the last WINDOW_SIZE are used.
        accumulated_points: balance stored after the previous decision; may be
            fractional. It is returned as-is when the window is empty and
            otherwise only feeds ``analysis.total_points``.

    Returns:
        LevelDecision whose ``points`` must be stored as the new balance.

    Raises:
        InvalidLevelError: current_level is outside 1..6.
    """
    validate_level(current_level)
    recent = list(window)[-WINDOW_SIZE:]

    if not recent:
        return LevelDecision(
            new_level=current_level,
            level_change=LevelChange.STAY,
            reason="no answer data → stay",
            points=accumulated_points,
            analysis=WindowAnalysis(total_points=accumulated_points),
        )

    analyzer = StreakAnalyzer(recent)
    facts = gather_facts(current_level, analyzer)
    analysis = WindowAnalysis(
        consecutive_correct=facts.consecutive_correct,
        consecutive_wrong=facts.consecutive_wrong,
        consecutive_fast_correct=facts.fast_streak,
        consecutive_medium_correct=facts.medium_streak,
        consecutive_slow_correct=facts.slow_streak,
        consecutive_points=facts.consecutive_points,
        total_points=accumulated_points + analyzer.window_points(),
        answers=analyzer.breakdown(),
    )

    for rule in RULES:
        if rule.matches(facts):
            step = 1 if rule.change == LevelChange.UP else -1
            decision = LevelDecision(
                new_level=clamp_level(current_level + step),
                level_change=rule.change,
                reason=rule.reason(facts),
                points=0,
                rule=rule.name,
                analysis=analysis,
            )
            logger.debug(
                "Rule %s fired: level %d → %d", rule.name, current_level, decision.new_level
            )
            return decision

    return LevelDecision(
        new_level=current_level,
        level_change=LevelChange.STAY,
        reason=_stay_reason(facts),
        points=facts.consecutive_points if facts.last.correct else 0,
        analysis=analysis,
    )
