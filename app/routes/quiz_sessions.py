"""Adaptive quiz session endpoints: start, answer, review, finish."""

import logging
from typing import Optional

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from app.db.database import get_db
from app.db import quiz_sessions as qs
from app.models.adaptive import MAX_LEVEL, MIN_LEVEL, AnswerRecord, LevelDecision, Points
from app.routes.auth import get_current_user, require_role
from app.services.adaptive_quiz import (
    DecisionConflict,
    QuestionNotFound,
    SessionFinished,
    SessionNotFound,
    finish_session,
    start_session,
    submit_answer,
)
from app.services.answer_checker import AnswerCheckError, AnswerKeyNotFound
from app.services.level_engine import decide

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quiz-sessions"])

STAFF_ROLES = ("teacher", "admin")


# ── Request / response models ───────────────────────────────────────

class SessionCreate(BaseModel):
    quiz_id: Optional[int] = None


class AnswerSubmission(BaseModel):
    question_id: int
    option_id: Optional[int] = None
    # Free text, or comma-separated option ids for multiple choice
    answer_text: str = ""
    time_taken_seconds: float = Field(ge=0)


class DecideRequest(BaseModel):
    current_level: int = Field(ge=MIN_LEVEL, le=MAX_LEVEL)
    answers: list[AnswerRecord] = []
    accumulated_points: Points = 0


# ── Helpers ──────────────────────────────────────────────────────────

async def _load_session_for(db: aiosqlite.Connection, session_id: int, user: dict) -> dict:
    """Fetch a session the user may see: its student, or any teacher/admin."""
    session = await qs.get_session(db, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if user["role"] not in STAFF_ROLES and session["student_id"] != user["id"]:
        raise HTTPException(status_code=403, detail="Not your session")
    return session


# ── Student endpoints ────────────────────────────────────────────────

@router.post("/api/sessions", status_code=201)
async def create_session(
    body: SessionCreate, request: Request, db: aiosqlite.Connection = Depends(get_db)
):
    """Start a quiz session; the first question is served at the initial level."""
    user = await require_role("student")(request)
    return await start_session(db, user["id"], quiz_id=body.quiz_id)


@router.post("/api/sessions/{session_id}/answers", status_code=201)
async def answer_question(
    session_id: int,
    body: AnswerSubmission,
    request: Request,
    db: aiosqlite.Connection = Depends(get_db),
):
    """Submit one answer and get the level of the next question."""
    user = await require_role("student")(request)
    await _load_session_for(db, session_id, user)

    try:
        return await submit_answer(
            db,
            session_id,
            body.question_id,
            body.time_taken_seconds,
            option_id=body.option_id,
            answer_text=body.answer_text,
        )
    except (SessionNotFound, QuestionNotFound, AnswerKeyNotFound) as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (SessionFinished, AnswerCheckError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DecisionConflict as exc:
        raise HTTPException(status_code=409, detail=str(exc))


# ── Shared endpoints ─────────────────────────────────────────────────

@router.get("/api/sessions/{session_id}")
async def get_session(session_id: int, request: Request, db: aiosqlite.Connection = Depends(get_db)):
    user = await get_current_user(request)
    return await _load_session_for(db, session_id, user)


@router.get("/api/sessions/{session_id}/answers")
async def get_session_answers(
    session_id: int, request: Request, db: aiosqlite.Connection = Depends(get_db)
):
    """Answers of a session in the order they were given."""
    user = await get_current_user(request)
    await _load_session_for(db, session_id, user)
    answers = await qs.list_answers(db, session_id)
    return {"session_id": session_id, "answers": answers, "count": len(answers)}


@router.post("/api/sessions/{session_id}/finish")
async def finish(session_id: int, request: Request, db: aiosqlite.Connection = Depends(get_db)):
    user = await get_current_user(request)
    session = await _load_session_for(db, session_id, user)
    if session["finished"]:
        raise HTTPException(status_code=400, detail="Session already finished")
    await finish_session(db, session_id)
    return await qs.get_session(db, session_id)


@router.post("/api/adaptive/decide", response_model=LevelDecision)
async def decide_level(body: DecideRequest, request: Request):
    """Run the level engine on caller-supplied answers without touching storage."""
    await get_current_user(request)
    return decide(body.current_level, body.answers, body.accumulated_points)
