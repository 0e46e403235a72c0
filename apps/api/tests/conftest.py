"""
Pytest configuration and fixtures

Tests run against a throwaway SQLite database migrated to Alembic head once
per session. Every test's rows are deleted when the test finishes, so
nothing leaks between tests.
"""
import pytest
import sys
import os
import tempfile
from datetime import datetime, date, timezone
from pathlib import Path
from uuid import uuid4

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Must be set before core.config is imported anywhere.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="youthlift-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture(scope="session", autouse=True)
def _ensure_db_schema_is_at_head():
    """
    Build the test database from the Alembic migrations, not create_all,
    so a model change without a migration fails here.
    """
    try:
        from alembic import command
        from alembic.config import Config

        api_root = Path(__file__).resolve().parents[1]
        alembic_ini = api_root / "alembic.ini"

        cfg = Config(str(alembic_ini))
        # Alembic's script_location in alembic.ini is relative ("alembic")
        # so we set the working directory explicitly.
        cfg.set_main_option("script_location", str(api_root / "alembic"))
        command.upgrade(cfg, "head")
    except Exception as e:
        # Tests should fail loudly if migrations cannot be applied.
        raise RuntimeError(f"Failed to upgrade DB to Alembic head: {e}") from e


from core.clock import FixedClock, get_clock  # noqa: E402
from core.database import Base, SessionLocal, get_db  # noqa: E402
from models import User, Exercise  # noqa: E402


FIXED_NOW = datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """
    Database session for one test.

    All rows written during the test are deleted afterwards.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture
def fixed_clock():
    return FixedClock(FIXED_NOW)


@pytest.fixture
def client(db_session, fixed_clock):
    """TestClient sharing the test's DB session and a frozen clock."""
    from fastapi.testclient import TestClient
    from main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def test_user(db_session):
    """A 14-year-old athlete."""
    user = User(
        email=f"athlete_{uuid4()}@example.com",
        full_name="Test Athlete",
        age=14,
        sport="volleyball",
        experience_level="beginner",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_exercise(db_session):
    exercise = Exercise(
        name="Goblet Squat",
        description="Front-loaded squat holding a dumbbell at the chest",
        category="strength",
        muscle_groups=["quadriceps", "glutes"],
        equipment=["dumbbell"],
        difficulty_level="beginner",
        instructions=["Hold the dumbbell at your chest", "Squat to depth", "Stand up"],
        is_custom=False,
    )
    db_session.add(exercise)
    db_session.commit()
    db_session.refresh(exercise)
    return exercise


@pytest.fixture
def sample_date():
    return date(2026, 3, 2)
