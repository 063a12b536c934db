"""API tests for quiz session endpoints."""

import pytest
from fastapi.testclient import TestClient

from app.routes.auth import create_token


def auth(user_id=1, role="student"):
    return {"Authorization": f"Bearer {create_token(user_id, role)}"}


@pytest.fixture
def client(temp_db):
    from app.server import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_id(client):
    resp = client.post("/api/sessions", json={"quiz_id": 1}, headers=auth())
    assert resp.status_code == 201
    return resp.json()["id"]


class TestAuth:
    def test_health_is_public(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_api_requires_token(self, client):
        resp = client.post("/api/sessions", json={})
        assert resp.status_code == 401

    def test_invalid_token(self, client):
        resp = client.post("/api/sessions", json={}, headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token"

    def test_expired_token(self, client):
        token = create_token(1, "student", expiry_hours=-1)
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token expired"

    def test_me(self, client):
        assert client.get("/api/auth/me", headers=auth(5, "teacher")).json() == {
            "id": 5,
            "role": "teacher",
        }

    def test_teachers_cannot_start_sessions(self, client):
        resp = client.post("/api/sessions", json={}, headers=auth(2, "teacher"))
        assert resp.status_code == 403


class TestSessionFlow:
    def test_start_session(self, client):
        resp = client.post("/api/sessions", json={}, headers=auth(3))
        assert resp.status_code == 201
        data = resp.json()
        assert data["current_level"] == 3
        assert data["accumulated_points"] == 0
        assert data["student_id"] == 3

    def test_answer_and_promotion(self, client, session_id, add_question):
        question_id, options = add_question(level=3, duration=60)
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "option_id": options[0], "time_taken_seconds": 40},
            headers=auth(),
        )
        assert resp.status_code == 201
        feedback = resp.json()
        assert feedback["is_correct"] is True
        assert feedback["speed"] == "fast"
        assert feedback["next_level"] == 4
        assert feedback["level_change"] == "up"
        assert feedback["points"] == 0
        assert feedback["analysis"]["answers"][0]["speed"] == "fast"

        session = client.get(f"/api/sessions/{session_id}", headers=auth()).json()
        assert session["current_level"] == 4

    def test_short_answer_with_number_word(self, client, session_id, add_question):
        question_id, _ = add_question(
            level=2, answer_type="short_answer", duration=30, options=[("7", True)]
        )
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "answer_text": "tujuh", "time_taken_seconds": 10},
            headers=auth(),
        )
        assert resp.status_code == 201
        assert resp.json()["is_correct"] is True

    def test_answers_listed_in_order(self, client, session_id, add_question):
        question_id, options = add_question(level=3, duration=60)
        for option_id, seconds in ((options[1], 60), (options[0], 50)):
            client.post(
                f"/api/sessions/{session_id}/answers",
                json={"question_id": question_id, "option_id": option_id, "time_taken_seconds": seconds},
                headers=auth(),
            )

        data = client.get(f"/api/sessions/{session_id}/answers", headers=auth(9, "teacher")).json()
        assert data["count"] == 2
        assert [a["is_correct"] for a in data["answers"]] == [False, True]
        assert [a["time_taken_seconds"] for a in data["answers"]] == [60, 50]

    def test_finish_blocks_further_answers(self, client, session_id, add_question):
        question_id, options = add_question()
        resp = client.post(f"/api/sessions/{session_id}/finish", headers=auth())
        assert resp.status_code == 200
        assert resp.json()["finished"] is True

        assert client.post(f"/api/sessions/{session_id}/finish", headers=auth()).status_code == 400
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "option_id": options[0], "time_taken_seconds": 5},
            headers=auth(),
        )
        assert resp.status_code == 400


class TestSessionErrors:
    def test_other_students_session(self, client, session_id):
        assert client.get(f"/api/sessions/{session_id}", headers=auth(2)).status_code == 403

    def test_unknown_session(self, client):
        assert client.get("/api/sessions/404", headers=auth()).status_code == 404

    def test_unknown_question(self, client, session_id):
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": 12345, "time_taken_seconds": 5},
            headers=auth(),
        )
        assert resp.status_code == 404

    def test_missing_option_for_single_choice(self, client, session_id, add_question):
        question_id, _ = add_question()
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "time_taken_seconds": 5},
            headers=auth(),
        )
        assert resp.status_code == 400

    def test_unsupported_answer_type(self, client, session_id, add_question):
        question_id, _ = add_question(answer_type="essay")
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "answer_text": "...", "time_taken_seconds": 5},
            headers=auth(),
        )
        assert resp.status_code == 400

    def test_negative_time_rejected(self, client, session_id, add_question):
        question_id, options = add_question()
        resp = client.post(
            f"/api/sessions/{session_id}/answers",
            json={"question_id": question_id, "option_id": options[0], "time_taken_seconds": -1},
            headers=auth(),
        )
        assert resp.status_code == 422


class TestDecideEndpoint:
    def test_stateless_decision(self, client):
        resp = client.post(
            "/api/adaptive/decide",
            json={
                "current_level": 4,
                "answers": [
                    {
                        "correct": False,
                        "time_taken_seconds": 50,
                        "median_time_seconds": 60,
                        "question_level": 2,
                    }
                ],
                "accumulated_points": 3,
            },
            headers=auth(),
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["new_level"] == 3
        assert data["level_change"] == "down"
        assert data["points"] == 0
        assert data["rule"] == "wrong_easier_question"

    def test_fractional_balance(self, client):
        resp = client.post(
            "/api/adaptive/decide",
            json={"current_level": 3, "answers": [], "accumulated_points": 1.5},
            headers=auth(),
        )
        assert resp.status_code == 200
        assert resp.json()["points"] == 1.5

    def test_out_of_range_level(self, client):
        resp = client.post(
            "/api/adaptive/decide",
            json={"current_level": 7, "answers": []},
            headers=auth(),
        )
        assert resp.status_code == 422
