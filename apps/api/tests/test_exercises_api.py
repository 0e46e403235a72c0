"""
Tests for the exercise library endpoints
"""

import pytest

from models import Exercise


@pytest.fixture
def library(db_session, test_exercise):
    db_session.add_all([
        Exercise(
            name="Push-up",
            description="Bodyweight press from the floor",
            category="strength",
            muscle_groups=["chest", "triceps"],
            equipment=[],
            difficulty_level="beginner",
            instructions=["Brace", "Lower", "Press"],
        ),
        Exercise(
            name="Box Jump",
            description="Explosive jump onto a box",
            category="plyometric",
            muscle_groups=["quadriceps", "calves"],
            equipment=["box"],
            difficulty_level="intermediate",
            instructions=["Swing arms", "Jump", "Land softly"],
        ),
    ])
    db_session.commit()


class TestListExercises:

    def test_ordered_by_name_with_pagination(self, client, library):
        data = client.get("/v1/exercises").json()

        assert [e["name"] for e in data["data"]] == ["Box Jump", "Goblet Squat", "Push-up"]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 3, "total_pages": 1}

    def test_second_page(self, client, library):
        data = client.get("/v1/exercises", params={"page": 2, "limit": 2}).json()

        assert [e["name"] for e in data["data"]] == ["Push-up"]
        assert data["pagination"]["total_pages"] == 2

    @pytest.mark.parametrize("params, expected", [
        ({"category": "plyometric"}, ["Box Jump"]),
        ({"difficulty": "beginner"}, ["Goblet Squat", "Push-up"]),
        ({"muscle_group": "quadriceps"}, ["Box Jump", "Goblet Squat"]),
        ({"equipment": "dumbbell"}, ["Goblet Squat"]),
        ({"search": "jump"}, ["Box Jump"]),
        ({"search": "floor"}, ["Push-up"]),
    ])
    def test_filters(self, client, library, params, expected):
        data = client.get("/v1/exercises", params=params).json()

        assert [e["name"] for e in data["data"]] == expected

    def test_invalid_difficulty_is_422(self, client):
        assert client.get("/v1/exercises", params={"difficulty": "elite"}).status_code == 422


class TestCreateExercise:

    def test_created_exercises_are_custom(self, client, library):
        response = client.post("/v1/exercises", json={
            "name": "Band Pull-apart",
            "category": "mobility",
            "muscle_groups": ["upper back"],
            "equipment": ["band"],
            "difficulty_level": "beginner",
            "instructions": ["Hold band at shoulder height", "Pull apart"],
        })

        assert response.status_code == 201
        assert response.json()["is_custom"] is True

        custom = client.get("/v1/exercises", params={"is_custom": "true"}).json()
        assert [e["name"] for e in custom["data"]] == ["Band Pull-apart"]
