"""
Safety data repository.

The only place the safety monitor touches the database. Routes receive a
SafetyRepository through FastAPI's Depends; the analysis functions only ever
see the plain records this class returns.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from models import DailyCheckIn, SafetyAlert, SessionExercise, SetLog, TrainingSession, User
from services.safety_monitoring import (
    CheckInRecord,
    SafetyAlertDraft,
    SessionSummary,
    SetLogRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    resolved_count: int
    already_resolved_count: int


def _number(value, default: float = 0.0) -> float:
    """Coerce a stored numeric to float; missing values count as 0."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class SafetyRepository:
    """Reads recent training data and reads/writes safety alerts for one DB session."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads feeding the analysis
    # ------------------------------------------------------------------

    def user_exists(self, user_id: UUID) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def get_user_age(self, user_id: UUID) -> Optional[int]:
        row = self.db.query(User.age).filter(User.id == user_id).first()
        return row[0] if row else None

    def recent_check_ins(self, user_id: UUID, limit: int) -> List[CheckInRecord]:
        rows = (
            self.db.query(DailyCheckIn)
            .filter(DailyCheckIn.user_id == user_id)
            .order_by(DailyCheckIn.date.desc())
            .limit(limit)
            .all()
        )
        return [
            CheckInRecord(
                date=row.date,
                mood=_number(row.mood),
                energy_level=_number(row.energy_level),
                sleep_hours=_number(row.sleep_hours),
                muscle_soreness=_number(row.muscle_soreness),
            )
            for row in rows
        ]

    def recent_sessions(self, user_id: UUID, limit: int) -> List[TrainingSession]:
        return (
            self.db.query(TrainingSession)
            .filter(TrainingSession.user_id == user_id)
            .order_by(TrainingSession.date.desc(), TrainingSession.session_type.desc())
            .limit(limit)
            .all()
        )

    def recent_set_logs(self, session_ids: Sequence[UUID], limit: int) -> List[SetLogRecord]:
        if not session_ids:
            return []
        rows = (
            self.db.query(SetLog, SessionExercise.exercise_id)
            .join(SessionExercise, SetLog.session_exercise_id == SessionExercise.id)
            .filter(SessionExercise.session_id.in_(list(session_ids)))
            .order_by(SetLog.created_at.desc(), SetLog.set_number.desc())
            .limit(limit)
            .all()
        )
        return [
            SetLogRecord(
                rpe=_number(row.rpe),
                reps_completed=int(_number(row.reps_completed)),
                weight_used=float(row.weight_used) if row.weight_used is not None else None,
                created_at=row.created_at,
                exercise_id=exercise_id,
            )
            for row, exercise_id in rows
        ]

    @staticmethod
    def to_session_summaries(sessions: Iterable[TrainingSession]) -> List[SessionSummary]:
        return [
            SessionSummary(
                date=s.date,
                status=s.status,
                average_rpe=float(s.average_rpe) if s.average_rpe is not None else None,
            )
            for s in sessions
        ]

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def add_alerts(self, drafts: Sequence[SafetyAlertDraft], created_at: datetime) -> List[SafetyAlert]:
        alerts = [
            SafetyAlert(
                user_id=draft.user_id,
                alert_type=draft.alert_type.value,
                severity=draft.severity.value,
                message=draft.message,
                is_resolved=draft.is_resolved,
                created_at=created_at,
            )
            for draft in drafts
        ]
        self.db.add_all(alerts)
        self.db.commit()
        return alerts

    def list_alerts(self, user_id: UUID, include_resolved: bool = False) -> List[SafetyAlert]:
        query = self.db.query(SafetyAlert).filter(SafetyAlert.user_id == user_id)
        if not include_resolved:
            query = query.filter(SafetyAlert.is_resolved.is_(False))
        return query.order_by(SafetyAlert.created_at.desc()).all()

    def resolve_alerts(self, user_id: UUID, alert_ids: Sequence[UUID], resolved_at: datetime) -> ResolveResult:
        """
        Resolve the user's alerts among alert_ids.

        Ids belonging to other users are ignored. Alerts that are already
        resolved keep their original resolved_at.
        """
        if not alert_ids:
            return ResolveResult(resolved_count=0, already_resolved_count=0)

        alerts = (
            self.db.query(SafetyAlert)
            .filter(SafetyAlert.user_id == user_id, SafetyAlert.id.in_(list(alert_ids)))
            .all()
        )
        resolved = 0
        already = 0
        for alert in alerts:
            if alert.is_resolved:
                already += 1
                continue
            alert.is_resolved = True
            alert.resolved_at = resolved_at
            resolved += 1

        if resolved:
            self.db.commit()
        return ResolveResult(resolved_count=resolved, already_resolved_count=already)

    def rollback(self) -> None:
        self.db.rollback()


def get_safety_repository(db: Session = Depends(get_db)) -> SafetyRepository:
    """FastAPI dependency."""
    return SafetyRepository(db)
