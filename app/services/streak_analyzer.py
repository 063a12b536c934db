"""
streak_analyzer.py - Run-length analysis over a window of recent answers

The window is ordered oldest → newest. Every count scans from the newest
answer backward and stops at the first answer that breaks the run.
"""

from typing import Sequence

from app.models.adaptive import AnswerBreakdown, AnswerRecord, SpeedClass
from app.services.point_calculator import points_for
from app.services.speed_classifier import classify_speed


class StreakAnalyzer:
    def __init__(self, window: Sequence[AnswerRecord]):
        self.window = list(window)
        self.speeds = [
            classify_speed(a.time_taken_seconds, a.median_time_seconds)
            for a in self.window
        ]

    def _trailing_run(self, matches) -> int:
        count = 0
        for answer, speed in zip(reversed(self.window), reversed(self.speeds)):
            if not matches(answer, speed):
                break
            count += 1
        return count

    def consecutive_correct(self) -> int:
        return self._trailing_run(lambda a, s: a.correct)

    def consecutive_wrong(self) -> int:
        return self._trailing_run(lambda a, s: not a.correct)

    def consecutive_correct_at_speed(self, speed: SpeedClass) -> int:
        return self._trailing_run(lambda a, s: a.correct and s == speed)

    def consecutive_points(self) -> int:
        """Sum of point deltas over the trailing run of correct answers.

        Recomputed from the window every time; it is never the stored balance.
        """
        total = 0
        for answer, speed in zip(reversed(self.window), reversed(self.speeds)):
            if not answer.correct:
                break
            total += points_for(True, speed)
        return total

    def window_points(self) -> int:
        """Sum of every answer's point delta in the window."""
        return sum(points_for(a.correct, s) for a, s in zip(self.window, self.speeds))

    def breakdown(self) -> list[AnswerBreakdown]:
        return [
            AnswerBreakdown(
                index=i,
                correct=answer.correct,
                speed=speed,
                points=points_for(answer.correct, speed),
                question_level=answer.question_level,
                time_taken_seconds=answer.time_taken_seconds,
                median_time_seconds=answer.median_time_seconds,
            )
            for i, (answer, speed) in enumerate(zip(self.window, self.speeds), start=1)
        ]
