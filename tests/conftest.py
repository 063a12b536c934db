import asyncio
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are validated at import time
os.environ.setdefault("JWT_SECRET", "test-secret-for-the-adaptive-quiz-suite-0123456789")


@pytest.fixture(autouse=True)
def fresh_session_locks():
    # Each test runs its own event loop
    from app.services.session_locks import reset_session_locks

    reset_session_locks()
    yield
    reset_session_locks()


@pytest.fixture
def temp_db(monkeypatch, tmp_path):
    """Point the app at a fresh SQLite file migrated to head."""
    from app.config import settings
    from app.db import database

    db_path = tmp_path / "test.db"
    monkeypatch.setattr(settings, "database_path", str(db_path))
    asyncio.run(database.init_db())
    return str(db_path)


async def _insert_question(db_path, level, answer_type, duration, options, content):
    import aiosqlite

    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            """INSERT INTO questions (content, level, answer_type, duration_seconds)
               VALUES (?, ?, ?, ?)""",
            (content, level, answer_type, duration),
        )
        question_id = cursor.lastrowid
        option_ids = []
        for text, is_correct in options:
            cursor = await db.execute(
                "INSERT INTO question_options (question_id, content, is_correct) VALUES (?, ?, ?)",
                (question_id, text, 1 if is_correct else 0),
            )
            option_ids.append(cursor.lastrowid)
        await db.commit()
    return question_id, option_ids


@pytest.fixture
def add_question(temp_db):
    """Insert a question with options; returns (question_id, [option ids])."""

    def _add(level=3, answer_type="single_choice", duration=60, options=None, content="2 + 3 = ?"):
        if options is None:
            options = [("5", True), ("6", False)]
        return asyncio.run(
            _insert_question(temp_db, level, answer_type, duration, options, content)
        )

    return _add
