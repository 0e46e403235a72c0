from sqlalchemy import Column, Integer, Boolean, CheckConstraint, Float, Date, DateTime, ForeignKey, Text, String, Index, JSON, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text, nullable=True)
    age = Column(Integer, nullable=True)  # Drives the safety threshold bucket
    sport = Column(Text, nullable=True)
    experience_level = Column(String(16), nullable=True)  # beginner | intermediate | advanced
    profile_data = Column(JSON, nullable=True)  # height, weight, goals, preferences
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    check_ins = relationship("DailyCheckIn", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("TrainingSession", back_populates="user", cascade="all, delete-orphan")
    safety_alerts = relationship("SafetyAlert", back_populates="user", cascade="all, delete-orphan")


class DailyCheckIn(Base):
    """
    Daily wellness self-report.

    Immutable once written; one per user per calendar day.
    """
    __tablename__ = "daily_check_ins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    mood = Column(Integer, nullable=False)  # 1-5
    energy_level = Column(Integer, nullable=False)  # 1-10
    sleep_hours = Column(Float, nullable=False)  # 0-24
    muscle_soreness = Column(Integer, nullable=False)  # 1-5
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="check_ins")

    __table_args__ = (
        Index("uq_check_in_user_date", "user_id", "date", unique=True),
        CheckConstraint("mood BETWEEN 1 AND 5", name="ck_check_in_mood"),
        CheckConstraint("energy_level BETWEEN 1 AND 10", name="ck_check_in_energy"),
        CheckConstraint("sleep_hours >= 0 AND sleep_hours <= 24", name="ck_check_in_sleep"),
        CheckConstraint("muscle_soreness BETWEEN 1 AND 5", name="ck_check_in_soreness"),
    )


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(Text, nullable=False, index=True)
    muscle_groups = Column(JSON, nullable=False, default=list)
    equipment = Column(JSON, nullable=False, default=list)
    difficulty_level = Column(String(16), nullable=False)  # beginner | intermediate | advanced
    instructions = Column(JSON, nullable=False, default=list)
    video_url = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    is_custom = Column(Boolean, default=False, nullable=False)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class TrainingSession(Base):
    """
    A planned or completed training session (AM or PM slot on a program day).

    total_sets, total_reps and average_rpe are filled in when the session
    is marked completed.
    """
    __tablename__ = "sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    session_type = Column(String(2), nullable=False)  # am | pm
    week_number = Column(Integer, nullable=False)
    day_number = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="planned")  # planned | in_progress | completed | skipped
    duration_minutes = Column(Integer, nullable=True)
    total_sets = Column(Integer, nullable=True)
    total_reps = Column(Integer, nullable=True)
    average_rpe = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="sessions")
    session_exercises = relationship(
        "SessionExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionExercise.order_index",
    )

    __table_args__ = (
        Index("uq_session_user_date_type", "user_id", "date", "session_type", unique=True),
    )


class SessionExercise(Base):
    __tablename__ = "session_exercises"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id = Column(Uuid, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Uuid, ForeignKey("exercises.id"), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    sets = Column(Integer, nullable=False)
    reps = Column(Integer, nullable=False)
    weight = Column(Float, nullable=True)
    rest_seconds = Column(Integer, nullable=False, default=60)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    session = relationship("TrainingSession", back_populates="session_exercises")
    exercise = relationship("Exercise")
    set_logs = relationship(
        "SetLog",
        back_populates="session_exercise",
        cascade="all, delete-orphan",
        order_by="SetLog.set_number",
    )


class SetLog(Base):
    """Append-only record of one performed set."""
    __tablename__ = "set_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    session_exercise_id = Column(Uuid, ForeignKey("session_exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    set_number = Column(Integer, nullable=False)
    reps_completed = Column(Integer, nullable=False)
    weight_used = Column(Float, nullable=True)
    rpe = Column(Integer, nullable=False)  # 1-10
    rest_taken_seconds = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    session_exercise = relationship("SessionExercise", back_populates="set_logs")

    __table_args__ = (
        Index("uq_set_log_exercise_set", "session_exercise_id", "set_number", unique=True),
        CheckConstraint("rpe BETWEEN 1 AND 10", name="ck_set_log_rpe"),
    )


class SafetyAlert(Base):
    """
    Persisted safety concern raised by the alert generator.

    Only ever mutated by resolve (is_resolved/resolved_at); never deleted
    by the monitoring code.
    """
    __tablename__ = "safety_alerts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    alert_type = Column(String(16), nullable=False)  # fatigue | form | load | injury_risk
    severity = Column(String(16), nullable=False)  # low | medium | high | critical
    message = Column(Text, nullable=False)
    is_resolved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="safety_alerts")

    __table_args__ = (
        Index("ix_safety_alert_user_resolved", "user_id", "is_resolved"),
    )
