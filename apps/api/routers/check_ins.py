"""
Daily Check-in API Router

One check-in per user per day. Check-ins are immutable: a second POST for
the same date is a conflict, not an update.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from uuid import UUID

import logging

from core.database import get_db
from core.exceptions import ConflictError, NotFoundError
from models import DailyCheckIn, User
from schemas import CheckInCreate, CheckInResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/check-ins", tags=["Daily Check-in"])


@router.get("")
async def list_check_ins(
    user_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 30,
    db: Session = Depends(get_db),
):
    """
    List a user's check-ins, newest first.
    """
    query = db.query(DailyCheckIn).filter(DailyCheckIn.user_id == user_id)

    if start_date:
        query = query.filter(DailyCheckIn.date >= start_date)
    if end_date:
        query = query.filter(DailyCheckIn.date <= end_date)

    check_ins = query.order_by(DailyCheckIn.date.desc()).limit(limit).all()

    return {
        "check_ins": [CheckInResponse.model_validate(c) for c in check_ins],
        "count": len(check_ins),
    }


@router.post("", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
async def create_check_in(
    check_in: CheckInCreate,
    db: Session = Depends(get_db),
):
    """
    Record today's (or a given day's) check-in.

    Range validation (mood 1-5, energy 1-10, sleep 0-24, soreness 1-5)
    happens in the request schema.
    """
    if not db.query(User.id).filter(User.id == check_in.user_id).first():
        raise NotFoundError("User", str(check_in.user_id))

    existing = db.query(DailyCheckIn.id).filter(
        DailyCheckIn.user_id == check_in.user_id,
        DailyCheckIn.date == check_in.date
    ).first()
    if existing:
        raise ConflictError("Check-in already exists for this date")

    db_check_in = DailyCheckIn(**check_in.model_dump())
    db.add(db_check_in)
    db.commit()
    db.refresh(db_check_in)

    logger.info(f"Check-in recorded for {check_in.user_id} on {check_in.date}")
    return db_check_in
