"""
Training Sessions API Router

Sessions, the exercises planned within them, and the sets logged against
those exercises. Marking a session completed rolls its set logs up into
total_sets, total_reps and average_rpe, which the safety monitor reads.
"""

from typing import List, Optional
from uuid import UUID

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session, selectinload

from core.database import get_db
from core.exceptions import ConflictError, NotFoundError
from models import Exercise, SessionExercise, SetLog, TrainingSession, User
from schemas import (
    SessionCreate,
    SessionDetailResponse,
    SessionExerciseCreate,
    SessionExerciseResponse,
    SessionResponse,
    SessionStatus,
    SessionUpdate,
    SetLogCreate,
    SetLogResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/sessions", tags=["Sessions"])


def _get_session_or_404(db: Session, session_id: UUID) -> TrainingSession:
    session = (
        db.query(TrainingSession)
        .options(
            selectinload(TrainingSession.session_exercises).selectinload(SessionExercise.set_logs),
            selectinload(TrainingSession.session_exercises).selectinload(SessionExercise.exercise),
        )
        .filter(TrainingSession.id == session_id)
        .execution_options(populate_existing=True)
        .first()
    )
    if not session:
        raise NotFoundError("Session", str(session_id))
    return session


def _get_session_exercise_or_404(db: Session, session_id: UUID, session_exercise_id: UUID) -> SessionExercise:
    session_exercise = db.query(SessionExercise).filter(
        SessionExercise.id == session_exercise_id,
        SessionExercise.session_id == session_id,
    ).first()
    if not session_exercise:
        raise NotFoundError("Session exercise", str(session_exercise_id))
    return session_exercise


def apply_completion_totals(session: TrainingSession) -> None:
    """
    Fill total_sets, total_reps and average_rpe from the session's exercises.

    Totals come from the prescription (sets, sets x reps); average_rpe comes
    from the logged sets and stays None when nothing was logged.
    """
    exercises = session.session_exercises
    session.total_sets = sum(se.sets for se in exercises)
    session.total_reps = sum(se.sets * se.reps for se in exercises)

    rpes = [log.rpe for se in exercises for log in se.set_logs]
    session.average_rpe = round(sum(rpes) / len(rpes), 2) if rpes else None


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    user_id: UUID,
    week_number: Optional[int] = None,
    status: Optional[SessionStatus] = None,
    db: Session = Depends(get_db),
):
    query = db.query(TrainingSession).filter(TrainingSession.user_id == user_id)
    if week_number is not None:
        query = query.filter(TrainingSession.week_number == week_number)
    if status:
        query = query.filter(TrainingSession.status == status)
    return query.order_by(TrainingSession.date.asc(), TrainingSession.session_type.asc()).all()


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(payload: SessionCreate, db: Session = Depends(get_db)):
    if not db.query(User.id).filter(User.id == payload.user_id).first():
        raise NotFoundError("User", str(payload.user_id))

    existing = db.query(TrainingSession.id).filter(
        TrainingSession.user_id == payload.user_id,
        TrainingSession.date == payload.date,
        TrainingSession.session_type == payload.session_type,
    ).first()
    if existing:
        raise ConflictError("Session already exists for this date and type")

    session = TrainingSession(**payload.model_dump(), status="planned")
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(session_id: UUID, db: Session = Depends(get_db)):
    return _get_session_or_404(db, session_id)


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(session_id: UUID, payload: SessionUpdate, db: Session = Depends(get_db)):
    session = _get_session_or_404(db, session_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(session, field, value)

    if payload.status == "completed":
        apply_completion_totals(session)
        logger.info(
            f"Session {session_id} completed: sets={session.total_sets}, "
            f"reps={session.total_reps}, average_rpe={session.average_rpe}"
        )

    db.commit()
    db.refresh(session)
    return session


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: UUID, db: Session = Depends(get_db)):
    session = _get_session_or_404(db, session_id)
    db.delete(session)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/exercises",
    response_model=SessionExerciseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_session_exercise(
    session_id: UUID,
    payload: SessionExerciseCreate,
    db: Session = Depends(get_db),
):
    _get_session_or_404(db, session_id)
    if not db.query(Exercise.id).filter(Exercise.id == payload.exercise_id).first():
        raise NotFoundError("Exercise", str(payload.exercise_id))

    session_exercise = SessionExercise(session_id=session_id, **payload.model_dump())
    db.add(session_exercise)
    db.commit()
    db.refresh(session_exercise)
    return session_exercise


@router.post(
    "/{session_id}/exercises/{session_exercise_id}/sets",
    response_model=SetLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def log_set(
    session_id: UUID,
    session_exercise_id: UUID,
    payload: SetLogCreate,
    db: Session = Depends(get_db),
):
    """Append one set. Set numbers are unique within a session exercise."""
    _get_session_exercise_or_404(db, session_id, session_exercise_id)

    existing = db.query(SetLog.id).filter(
        SetLog.session_exercise_id == session_exercise_id,
        SetLog.set_number == payload.set_number,
    ).first()
    if existing:
        raise ConflictError("Set already logged for this set number")

    set_log = SetLog(session_exercise_id=session_exercise_id, **payload.model_dump())
    db.add(set_log)
    db.commit()
    db.refresh(set_log)
    return set_log


@router.get(
    "/{session_id}/exercises/{session_exercise_id}/sets",
    response_model=List[SetLogResponse],
)
async def list_sets(
    session_id: UUID,
    session_exercise_id: UUID,
    db: Session = Depends(get_db),
):
    _get_session_exercise_or_404(db, session_id, session_exercise_id)
    return (
        db.query(SetLog)
        .filter(SetLog.session_exercise_id == session_exercise_id)
        .order_by(SetLog.set_number.asc())
        .all()
    )
