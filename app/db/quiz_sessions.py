"""
quiz_sessions.py - Database helper queries for adaptive quiz sessions

Provides insert/fetch functions for:
- quiz_sessions (current level, point balance, write version)
- questions / question_options (read only)
- session_answers
"""

from typing import Optional, List, Dict, Any
import aiosqlite

from app.models.adaptive import AnswerRecord, WINDOW_SIZE


def _row_to_dict(row) -> Optional[Dict[str, Any]]:
    return dict(row) if row else None


def _duration_or_default(duration, default_duration: int):
    if duration is None or duration <= 0:
        return default_duration
    return duration


# ══════════════════════════════════════════════════════════════════════════════
# QUIZ SESSIONS
# ══════════════════════════════════════════════════════════════════════════════

async def create_session(
    db: aiosqlite.Connection,
    student_id: int,
    initial_level: int,
    quiz_id: Optional[int] = None,
) -> int:
    """Start a quiz session. Returns the new session ID."""
    cursor = await db.execute(
        """INSERT INTO quiz_sessions (student_id, quiz_id, current_level)
           VALUES (?, ?, ?)""",
        (student_id, quiz_id, initial_level)
    )
    await db.commit()
    return cursor.lastrowid


async def get_session(db: aiosqlite.Connection, session_id: int) -> Optional[Dict[str, Any]]:
    cursor = await db.execute(
        """SELECT id, student_id, quiz_id, current_level, accumulated_points,
                  version, finished, created_at, updated_at
           FROM quiz_sessions WHERE id = ?""",
        (session_id,)
    )
    session = _row_to_dict(await cursor.fetchone())
    if session:
        session["finished"] = bool(session["finished"])
    return session


async def save_decision(
    db: aiosqlite.Connection,
    session_id: int,
    expected_version: int,
    new_level: int,
    points: float,
) -> bool:
    """
    Store the level and point balance produced by the level engine.

    The write only applies if the session is still at ``expected_version``.
    Returns False when another decision was stored first; the open
    transaction is then left uncommitted for the caller to roll back.
    """
    cursor = await db.execute(
        """UPDATE quiz_sessions
           SET current_level = ?, accumulated_points = ?,
               version = version + 1, updated_at = CURRENT_TIMESTAMP
           WHERE id = ? AND version = ?""",
        (new_level, points, session_id, expected_version)
    )
    if cursor.rowcount != 1:
        return False
    await db.commit()
    return True


async def finish_session(db: aiosqlite.Connection, session_id: int) -> None:
    await db.execute(
        "UPDATE quiz_sessions SET finished = 1, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (session_id,)
    )
    await db.commit()


# ══════════════════════════════════════════════════════════════════════════════
# QUESTIONS
# ══════════════════════════════════════════════════════════════════════════════

async def get_question(db: aiosqlite.Connection, question_id: int) -> Optional[Dict[str, Any]]:
    cursor = await db.execute(
        "SELECT id, quiz_id, content, level, answer_type, duration_seconds FROM questions WHERE id = ?",
        (question_id,)
    )
    return _row_to_dict(await cursor.fetchone())


async def get_question_options(db: aiosqlite.Connection, question_id: int) -> List[Dict[str, Any]]:
    cursor = await db.execute(
        "SELECT id, content, is_correct FROM question_options WHERE question_id = ? ORDER BY id",
        (question_id,)
    )
    rows = await cursor.fetchall()
    return [dict(r) for r in rows]


# ══════════════════════════════════════════════════════════════════════════════
# SESSION ANSWERS
# ══════════════════════════════════════════════════════════════════════════════

async def insert_answer(
    db: aiosqlite.Connection,
    session_id: int,
    question: Dict[str, Any],
    is_correct: bool,
    time_taken_seconds: float,
    option_id: Optional[int] = None,
    answer_text: Optional[str] = None,
    commit: bool = True,
) -> int:
    """Log one answer. Returns the new answer ID.

    Pass ``commit=False`` to leave the insert in the open transaction.
    """
    cursor = await db.execute(
        """INSERT INTO session_answers
           (session_id, question_id, option_id, question_level, answer_type,
            answer_text, is_correct, time_taken_seconds)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            session_id,
            question["id"],
            option_id,
            question["level"],
            question["answer_type"],
            answer_text,
            1 if is_correct else 0,
            time_taken_seconds,
        )
    )
    if commit:
        await db.commit()
    return cursor.lastrowid


async def get_answer_window(
    db: aiosqlite.Connection,
    session_id: int,
    limit: int = WINDOW_SIZE,
    default_duration: int = 60,
) -> List[AnswerRecord]:
    """
    The session's most recent answers as engine input, oldest first.

    Questions without a positive duration fall back to ``default_duration``.
    """
    cursor = await db.execute(
        """SELECT sa.is_correct, sa.time_taken_seconds, sa.question_level,
                  q.duration_seconds
           FROM session_answers sa
           JOIN questions q ON q.id = sa.question_id
           WHERE sa.session_id = ?
           ORDER BY sa.id DESC
           LIMIT ?""",
        (session_id, limit)
    )
    rows = await cursor.fetchall()
    return [
        AnswerRecord(
            correct=bool(row["is_correct"]),
            time_taken_seconds=row["time_taken_seconds"],
            median_time_seconds=_duration_or_default(row["duration_seconds"], default_duration),
            question_level=row["question_level"],
        )
        for row in reversed(rows)
    ]


async def list_answers(db: aiosqlite.Connection, session_id: int) -> List[Dict[str, Any]]:
    """All answers of a session in the order they were given."""
    cursor = await db.execute(
        """SELECT id, question_id, option_id, question_level, answer_type, answer_text,
                  is_correct, time_taken_seconds, created_at
           FROM session_answers
           WHERE session_id = ?
           ORDER BY id""",
        (session_id,)
    )
    rows = await cursor.fetchall()
    answers = []
    for r in rows:
        answer = dict(r)
        answer["is_correct"] = bool(answer["is_correct"])
        answers.append(answer)
    return answers
