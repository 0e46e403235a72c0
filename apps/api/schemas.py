from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, date
from uuid import UUID
from typing import Optional, List, Literal

from services.safety_monitoring import AlertSeverity, AlertType, Recommendation, RpeTrend


DifficultyLevel = Literal["beginner", "intermediate", "advanced"]
SessionType = Literal["am", "pm"]
SessionStatus = Literal["planned", "in_progress", "completed", "skipped"]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    email: str = Field(min_length=3)
    full_name: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=5, le=100)
    sport: Optional[str] = None
    experience_level: Optional[DifficultyLevel] = None
    profile_data: Optional[dict] = None


class UserResponse(BaseModel):
    id: UUID
    email: str
    full_name: Optional[str] = None
    age: Optional[int] = None
    sport: Optional[str] = None
    experience_level: Optional[str] = None
    profile_data: Optional[dict] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Daily check-ins
# ---------------------------------------------------------------------------

class CheckInCreate(BaseModel):
    user_id: UUID
    date: date
    mood: int = Field(ge=1, le=5)
    energy_level: int = Field(ge=1, le=10)
    sleep_hours: float = Field(ge=0, le=24)
    muscle_soreness: int = Field(ge=1, le=5)
    notes: Optional[str] = None


class CheckInResponse(BaseModel):
    id: UUID
    user_id: UUID
    date: date
    mood: int
    energy_level: int
    sleep_hours: float
    muscle_soreness: int
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Exercises
# ---------------------------------------------------------------------------

class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    muscle_groups: List[str]
    equipment: List[str]
    difficulty_level: DifficultyLevel
    instructions: List[str]
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    created_by: Optional[UUID] = None


class ExerciseResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    category: str
    muscle_groups: List[str]
    equipment: List[str]
    difficulty_level: str
    instructions: List[str]
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    is_custom: bool
    created_by: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ExercisePage(BaseModel):
    data: List[ExerciseResponse]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Sessions, session exercises, set logs
# ---------------------------------------------------------------------------

class SessionCreate(BaseModel):
    user_id: UUID
    date: date
    session_type: SessionType
    week_number: int = Field(ge=1)
    day_number: int = Field(ge=1)


class SessionUpdate(BaseModel):
    status: Optional[SessionStatus] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class SetLogCreate(BaseModel):
    set_number: int = Field(ge=1)
    reps_completed: int = Field(ge=0)
    weight_used: Optional[float] = Field(default=None, ge=0)
    rpe: int = Field(ge=1, le=10)
    rest_taken_seconds: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class SetLogResponse(BaseModel):
    id: UUID
    session_exercise_id: UUID
    set_number: int
    reps_completed: int
    weight_used: Optional[float] = None
    rpe: int
    rest_taken_seconds: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionExerciseCreate(BaseModel):
    exercise_id: UUID
    order_index: int = Field(default=0, ge=0)
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)
    weight: Optional[float] = Field(default=None, ge=0)
    rest_seconds: int = Field(default=60, ge=0)
    notes: Optional[str] = None


class SessionExerciseResponse(BaseModel):
    id: UUID
    session_id: UUID
    exercise_id: UUID
    order_index: int
    sets: int
    reps: int
    weight: Optional[float] = None
    rest_seconds: int
    notes: Optional[str] = None
    exercise: Optional[ExerciseResponse] = None
    set_logs: List[SetLogResponse] = []

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    id: UUID
    user_id: UUID
    date: date
    session_type: str
    week_number: int
    day_number: int
    status: str
    duration_minutes: Optional[int] = None
    total_sets: Optional[int] = None
    total_reps: Optional[int] = None
    average_rpe: Optional[float] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SessionDetailResponse(SessionResponse):
    session_exercises: List[SessionExerciseResponse] = []


# ---------------------------------------------------------------------------
# Safety monitoring
# ---------------------------------------------------------------------------

class SafetyMonitorRequest(BaseModel):
    user_id: UUID
    analysis_type: str = "comprehensive"


class SafetyMetricsResponse(BaseModel):
    average_energy: float
    average_mood: float
    average_soreness: float
    average_sleep: float
    average_session_rpe: float
    rpe_trend: RpeTrend
    rpe_trend_delta: float
    recent_frequency: int
    max_consecutive_high_intensity: int
    average_set_rpe: float
    high_rpe_share: float
    load_progression: float
    overtraining_score: float
    fatigue_level: float
    form_quality: float
    check_in_count: int
    session_count: int
    set_log_count: int
    user_age: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class SafetyAlertDraftResponse(BaseModel):
    user_id: UUID
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    is_resolved: bool

    model_config = ConfigDict(from_attributes=True)


class SessionModificationResponse(BaseModel):
    recommendation: Recommendation
    rationale: str
    reduce_intensity: bool
    reduce_volume: bool
    add_rest: bool
    focus_on_form: bool
    recommendations: List[str]

    model_config = ConfigDict(from_attributes=True)


class SafetyAnalysisResponse(BaseModel):
    metrics: SafetyMetricsResponse
    alerts: List[SafetyAlertDraftResponse]
    session_modification: SessionModificationResponse
    analysis_timestamp: datetime
    user_age: int
    alerts_persisted: bool = True

    model_config = ConfigDict(from_attributes=True)


class SafetyAlertResponse(BaseModel):
    id: UUID
    user_id: UUID
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    is_resolved: bool
    created_at: datetime
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SafetySummaryMetrics(BaseModel):
    recent_energy: float
    recent_soreness: float
    recent_sleep: float
    recent_rpe: float
    rpe_trend: RpeTrend
    active_alerts: int
    total_alerts: int


class SafetyStatusResponse(BaseModel):
    alerts: List[SafetyAlertResponse]
    summary_metrics: SafetySummaryMetrics
    last_updated: datetime


class ResolveAlertsRequest(BaseModel):
    alert_ids: List[UUID] = Field(min_length=1)
    user_id: UUID


class ResolveAlertsResponse(BaseModel):
    resolved_count: int
    already_resolved_count: int
    message: str
