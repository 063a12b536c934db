"""initial_quiz_schema

Question bank rows the engine reads, quiz sessions with their level and
point balance, and the per-answer log.

Revision ID: 9c1d2e3f4a5b
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "9c1d2e3f4a5b"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(sa.text("""
        CREATE TABLE IF NOT EXISTS questions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            quiz_id INTEGER,
            content TEXT NOT NULL,
            level INTEGER NOT NULL CHECK (level BETWEEN 1 AND 6),
            answer_type TEXT NOT NULL,
            duration_seconds INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """))
    op.execute(sa.text("""
        CREATE TABLE IF NOT EXISTS question_options (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            question_id INTEGER NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
            content TEXT NOT NULL,
            is_correct INTEGER NOT NULL DEFAULT 0
        )
    """))
    op.execute(sa.text("""
        CREATE TABLE IF NOT EXISTS quiz_sessions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL,
            quiz_id INTEGER,
            current_level INTEGER NOT NULL CHECK (current_level BETWEEN 1 AND 6),
            accumulated_points INTEGER NOT NULL DEFAULT 0,
            version INTEGER NOT NULL DEFAULT 0,
            finished INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """))
    op.execute(sa.text("""
        CREATE TABLE IF NOT EXISTS session_answers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            session_id INTEGER NOT NULL REFERENCES quiz_sessions(id) ON DELETE CASCADE,
            question_id INTEGER NOT NULL REFERENCES questions(id),
            option_id INTEGER,
            question_level INTEGER NOT NULL,
            answer_type TEXT NOT NULL,
            answer_text TEXT,
            is_correct INTEGER NOT NULL DEFAULT 0,
            time_taken_seconds REAL NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """))
    op.execute(sa.text(
        "CREATE INDEX IF NOT EXISTS idx_session_answers_session "
        "ON session_answers(session_id, id)"
    ))
    op.execute(sa.text(
        "CREATE INDEX IF NOT EXISTS idx_question_options_question "
        "ON question_options(question_id)"
    ))


def downgrade() -> None:
    op.execute(sa.text("DROP TABLE IF EXISTS session_answers"))
    op.execute(sa.text("DROP TABLE IF EXISTS quiz_sessions"))
    op.execute(sa.text("DROP TABLE IF EXISTS question_options"))
    op.execute(sa.text("DROP TABLE IF EXISTS questions"))
