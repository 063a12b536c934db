"""
adaptive_quiz.py - Answer submission for adaptive quiz sessions

Provides:
- start_session(db, student_id, quiz_id) - new session at the configured initial level
- submit_answer(db, session_id, ...) - check, store, and pick the next question's level
"""

import logging
from typing import Any, Dict, Optional

import aiosqlite

from app.config import settings
from app.db import quiz_sessions as qs
from app.services.answer_checker import check_answer
from app.services.level_engine import decide
from app.services.session_locks import session_lock

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    pass


class QuestionNotFound(LookupError):
    pass


class SessionFinished(Exception):
    """The session no longer accepts answers."""


class DecisionConflict(Exception):
    """Another decision for the same session was stored first."""


async def start_session(
    db: aiosqlite.Connection, student_id: int, quiz_id: Optional[int] = None
) -> Dict[str, Any]:
    session_id = await qs.create_session(db, student_id, settings.initial_level, quiz_id=quiz_id)
    logger.info(
        "Started session %d for student %d at level %d",
        session_id, student_id, settings.initial_level,
    )
    return await qs.get_session(db, session_id)


async def finish_session(db: aiosqlite.Connection, session_id: int) -> None:
    async with session_lock(session_id):
        await qs.finish_session(db, session_id)


async def submit_answer(
    db: aiosqlite.Connection,
    session_id: int,
    question_id: int,
    time_taken_seconds: float,
    option_id: Optional[int] = None,
    answer_text: str = "",
) -> Dict[str, Any]:
    """
    Store one answer and decide the level of the session's next question.

    Returns:
        dict with: answer_id, is_correct, speed, next_level, level_change,
        reasoning, rule, points, analysis

    Raises:
        SessionNotFound / QuestionNotFound: unknown ids
        SessionFinished: the session was already finished
        DecisionConflict: a concurrent decision for this session won the write
    """
    async with session_lock(session_id):
        session = await qs.get_session(db, session_id)
        if not session:
            raise SessionNotFound(f"Session {session_id} not found")
        if session["finished"]:
            raise SessionFinished(f"Session {session_id} is already finished")

        question = await qs.get_question(db, question_id)
        if not question:
            raise QuestionNotFound(f"Question {question_id} not found")

        options = await qs.get_question_options(db, question_id)
        is_correct = check_answer(question, options, option_id=option_id, answer_text=answer_text)

        # Answer row and decision are committed together
        answer_id = await qs.insert_answer(
            db, session_id, question, is_correct, time_taken_seconds,
            option_id=option_id, answer_text=answer_text, commit=False,
        )
        window = await qs.get_answer_window(
            db, session_id,
            limit=settings.answer_window_size,
            default_duration=settings.default_question_duration,
        )
        decision = decide(session["current_level"], window, session["accumulated_points"])

        saved = await qs.save_decision(
            db, session_id, session["version"], decision.new_level, decision.points
        )
        if not saved:
            await db.rollback()
            logger.warning(
                "Session %d changed while deciding (version %d); answer discarded",
                session_id, session["version"],
            )
            raise DecisionConflict(f"Session {session_id} was updated concurrently")

    logger.info(
        "Session %d: answer %d %s, level %d → %d (%s)",
        session_id, answer_id, "correct" if is_correct else "wrong",
        session["current_level"], decision.new_level, decision.rule or "stay",
    )

    return {
        "answer_id": answer_id,
        "is_correct": is_correct,
        # The window always ends with the answer just stored
        "speed": decision.analysis.answers[-1].speed.value,
        "next_level": decision.new_level,
        "level_change": decision.level_change.value,
        "reasoning": decision.reason,
        "rule": decision.rule,
        "points": decision.points,
        "analysis": decision.analysis.model_dump(mode="json"),
    }
