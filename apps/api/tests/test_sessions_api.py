"""
Tests for training sessions, session exercises and set logs
"""

import pytest
from uuid import uuid4

from routers.sessions import apply_completion_totals
from models import SessionExercise, SetLog, TrainingSession


@pytest.fixture
def session_data(client, test_user, sample_date):
    response = client.post("/v1/sessions", json={
        "user_id": str(test_user.id),
        "date": sample_date.isoformat(),
        "session_type": "am",
        "week_number": 1,
        "day_number": 1,
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def session_exercise(client, session_data, test_exercise):
    response = client.post(f"/v1/sessions/{session_data['id']}/exercises", json={
        "exercise_id": str(test_exercise.id),
        "sets": 3,
        "reps": 10,
        "weight": 12.5,
    })
    assert response.status_code == 201
    return response.json()


def _log(client, session_id, se_id, set_number, rpe, reps=10, weight=12.5):
    return client.post(f"/v1/sessions/{session_id}/exercises/{se_id}/sets", json={
        "set_number": set_number,
        "reps_completed": reps,
        "weight_used": weight,
        "rpe": rpe,
    })


class TestSessions:

    def test_create_defaults_to_planned(self, session_data):
        assert session_data["status"] == "planned"
        assert session_data["average_rpe"] is None

    def test_duplicate_slot_is_409(self, client, session_data, test_user, sample_date):
        response = client.post("/v1/sessions", json={
            "user_id": str(test_user.id),
            "date": sample_date.isoformat(),
            "session_type": "am",
            "week_number": 1,
            "day_number": 1,
        })

        assert response.status_code == 409

    def test_pm_slot_same_day_allowed(self, client, session_data, test_user, sample_date):
        response = client.post("/v1/sessions", json={
            "user_id": str(test_user.id),
            "date": sample_date.isoformat(),
            "session_type": "pm",
            "week_number": 1,
            "day_number": 1,
        })

        assert response.status_code == 201

    def test_unknown_user_is_404(self, client, sample_date):
        response = client.post("/v1/sessions", json={
            "user_id": str(uuid4()),
            "date": sample_date.isoformat(),
            "session_type": "am",
            "week_number": 1,
            "day_number": 1,
        })

        assert response.status_code == 404

    def test_list_filters(self, client, session_data, test_user):
        client.put(f"/v1/sessions/{session_data['id']}", json={"status": "skipped"})

        all_sessions = client.get("/v1/sessions", params={"user_id": str(test_user.id)}).json()
        skipped = client.get("/v1/sessions", params={"user_id": str(test_user.id), "status": "skipped"}).json()
        week_two = client.get("/v1/sessions", params={"user_id": str(test_user.id), "week_number": 2}).json()

        assert len(all_sessions) == 1
        assert len(skipped) == 1
        assert week_two == []

    def test_get_missing_is_404(self, client):
        assert client.get(f"/v1/sessions/{uuid4()}").status_code == 404

    def test_delete(self, client, session_data, session_exercise):
        _log(client, session_data["id"], session_exercise["id"], 1, 6)

        response = client.delete(f"/v1/sessions/{session_data['id']}")

        assert response.status_code == 204
        assert client.get(f"/v1/sessions/{session_data['id']}").status_code == 404


class TestSetLogging:

    def test_log_and_list_sets(self, client, session_data, session_exercise):
        for n, rpe in [(2, 7), (1, 6)]:
            assert _log(client, session_data["id"], session_exercise["id"], n, rpe).status_code == 201

        response = client.get(f"/v1/sessions/{session_data['id']}/exercises/{session_exercise['id']}/sets")

        assert response.status_code == 200
        assert [s["set_number"] for s in response.json()] == [1, 2]

    def test_duplicate_set_number_is_409(self, client, session_data, session_exercise):
        _log(client, session_data["id"], session_exercise["id"], 1, 6)

        response = _log(client, session_data["id"], session_exercise["id"], 1, 7)

        assert response.status_code == 409

    def test_rpe_out_of_range_is_422(self, client, session_data, session_exercise):
        assert _log(client, session_data["id"], session_exercise["id"], 1, 11).status_code == 422
        assert _log(client, session_data["id"], session_exercise["id"], 1, 0).status_code == 422

    def test_unknown_exercise_is_404(self, client, session_data):
        response = client.post(f"/v1/sessions/{session_data['id']}/exercises", json={
            "exercise_id": str(uuid4()),
            "sets": 3,
            "reps": 10,
        })

        assert response.status_code == 404

    def test_session_exercise_from_other_session_is_404(self, client, session_exercise):
        response = _log(client, str(uuid4()), session_exercise["id"], 1, 6)

        assert response.status_code == 404

    def test_detail_includes_exercises_and_sets(self, client, session_data, session_exercise):
        _log(client, session_data["id"], session_exercise["id"], 1, 6)

        data = client.get(f"/v1/sessions/{session_data['id']}").json()

        assert len(data["session_exercises"]) == 1
        assert data["session_exercises"][0]["exercise"]["name"] == "Goblet Squat"
        assert len(data["session_exercises"][0]["set_logs"]) == 1


class TestCompletion:

    def test_completing_rolls_up_totals(self, client, session_data, session_exercise):
        for n, rpe in enumerate([6, 7, 8], start=1):
            _log(client, session_data["id"], session_exercise["id"], n, rpe)

        response = client.put(f"/v1/sessions/{session_data['id']}", json={
            "status": "completed",
            "duration_minutes": 45,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["duration_minutes"] == 45
        assert data["total_sets"] == 3
        assert data["total_reps"] == 30
        assert data["average_rpe"] == 7.0

    def test_completing_without_logs_leaves_rpe_empty(self, client, session_data, session_exercise):
        data = client.put(f"/v1/sessions/{session_data['id']}", json={"status": "completed"}).json()

        assert data["total_sets"] == 3
        assert data["average_rpe"] is None

    def test_apply_completion_totals_directly(self):
        session = TrainingSession(session_exercises=[
            SessionExercise(sets=3, reps=8, set_logs=[SetLog(rpe=6), SetLog(rpe=7)]),
            SessionExercise(sets=2, reps=12, set_logs=[SetLog(rpe=9)]),
        ])

        apply_completion_totals(session)

        assert session.total_sets == 5
        assert session.total_reps == 48
        assert session.average_rpe == pytest.approx(7.33)
