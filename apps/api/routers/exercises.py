"""
Exercise Library API Router

Filtered, paginated catalog plus custom exercise creation.
"""

import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.database import get_db
from models import Exercise
from schemas import DifficultyLevel, ExerciseCreate, ExercisePage, ExerciseResponse, Pagination

router = APIRouter(prefix="/v1/exercises", tags=["Exercises"])


@router.get("", response_model=ExercisePage)
async def list_exercises(
    category: Optional[str] = None,
    muscle_group: Optional[str] = None,
    equipment: Optional[str] = None,
    difficulty: Optional[DifficultyLevel] = None,
    search: Optional[str] = None,
    is_custom: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    List exercises ordered by name.

    muscle_group and equipment match any element of the stored lists.
    """
    query = db.query(Exercise)

    if category:
        query = query.filter(Exercise.category == category)
    if difficulty:
        query = query.filter(Exercise.difficulty_level == difficulty)
    if is_custom is not None:
        query = query.filter(Exercise.is_custom.is_(is_custom))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Exercise.name.ilike(pattern), Exercise.description.ilike(pattern)))

    exercises = query.order_by(Exercise.name.asc()).all()

    # JSON list containment differs per backend; filter these in Python.
    if muscle_group:
        exercises = [e for e in exercises if muscle_group in (e.muscle_groups or [])]
    if equipment:
        exercises = [e for e in exercises if equipment in (e.equipment or [])]

    total = len(exercises)
    start = (page - 1) * limit
    page_items = exercises[start:start + limit]

    return ExercisePage(
        data=[ExerciseResponse.model_validate(e) for e in page_items],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db)):
    """Create a custom exercise."""
    exercise = Exercise(**payload.model_dump(), is_custom=True)
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    return exercise
