"""
Safety Monitor API Router

POST runs the full analysis over the user's most recent records and stores
any alerts it raises. GET reports open (or all) alerts with a short rolling
summary. PUT resolves alerts.

Alert storage is best-effort: if writing the alerts fails the analysis is
still returned, flagged with alerts_persisted=false.
"""

from fastapi import APIRouter, Depends

import logging
from uuid import UUID

from core.clock import Clock, get_clock
from core.config import settings
from core.exceptions import NotFoundError
from schemas import (
    ResolveAlertsRequest,
    ResolveAlertsResponse,
    SafetyAlertResponse,
    SafetyAnalysisResponse,
    SafetyMonitorRequest,
    SafetyStatusResponse,
    SafetySummaryMetrics,
)
from services.safety_monitoring import analyze_safety_metrics, run_safety_analysis
from services.safety_repository import SafetyRepository, get_safety_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/safety", tags=["Safety Monitoring"])


@router.post("/monitor", response_model=SafetyAnalysisResponse)
async def analyze_safety(
    payload: SafetyMonitorRequest,
    repo: SafetyRepository = Depends(get_safety_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Analyze recent check-ins, sessions and set logs and raise alerts.

    Windows: last SAFETY_CHECKIN_WINDOW check-ins, SAFETY_SESSION_WINDOW
    sessions, and up to SAFETY_SETLOG_WINDOW set logs from those sessions.
    """
    user_id = payload.user_id
    if not repo.user_exists(user_id):
        raise NotFoundError("User", str(user_id))

    age = repo.get_user_age(user_id) or settings.SAFETY_DEFAULT_AGE
    check_ins = repo.recent_check_ins(user_id, settings.SAFETY_CHECKIN_WINDOW)
    sessions = repo.recent_sessions(user_id, settings.SAFETY_SESSION_WINDOW)
    set_logs = repo.recent_set_logs([s.id for s in sessions], settings.SAFETY_SETLOG_WINDOW)

    analysis = run_safety_analysis(
        user_id=user_id,
        check_ins=check_ins,
        sessions=repo.to_session_summaries(sessions),
        set_logs=set_logs,
        age=age,
        analysis_timestamp=clock.now(),
        rpe_trend_tolerance=settings.SAFETY_RPE_TREND_TOLERANCE,
    )

    alerts_persisted = True
    if analysis.alerts:
        try:
            repo.add_alerts(analysis.alerts, created_at=analysis.analysis_timestamp)
        except Exception as e:
            repo.rollback()
            alerts_persisted = False
            logger.error(
                f"Failed to save safety alerts for {user_id}: {e}",
                exc_info=True,
                extra={
                    "extra_fields": {
                        "user_id": str(user_id),
                        "alert_count": len(analysis.alerts),
                        "analysis_type": payload.analysis_type,
                    }
                },
            )

    response = SafetyAnalysisResponse.model_validate(analysis)
    response.alerts_persisted = alerts_persisted
    return response


@router.get("/monitor", response_model=SafetyStatusResponse)
async def get_safety_status(
    user_id: UUID,
    include_resolved: bool = False,
    repo: SafetyRepository = Depends(get_safety_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Current alerts plus a rolling summary over the last few records.

    The summary is the same aggregation as the full analysis, run over the
    shorter SAFETY_SUMMARY_WINDOW.
    """
    alerts = repo.list_alerts(user_id, include_resolved=include_resolved)

    window = settings.SAFETY_SUMMARY_WINDOW
    age = repo.get_user_age(user_id) or settings.SAFETY_DEFAULT_AGE
    summary = analyze_safety_metrics(
        repo.recent_check_ins(user_id, window),
        repo.to_session_summaries(repo.recent_sessions(user_id, window)),
        [],
        age,
        settings.SAFETY_RPE_TREND_TOLERANCE,
    )

    return SafetyStatusResponse(
        alerts=[SafetyAlertResponse.model_validate(a) for a in alerts],
        summary_metrics=SafetySummaryMetrics(
            recent_energy=summary.average_energy,
            recent_soreness=summary.average_soreness,
            recent_sleep=summary.average_sleep,
            recent_rpe=summary.average_session_rpe,
            rpe_trend=summary.rpe_trend,
            active_alerts=sum(1 for a in alerts if not a.is_resolved),
            total_alerts=len(alerts),
        ),
        last_updated=clock.now(),
    )


@router.put("/monitor", response_model=ResolveAlertsResponse)
async def resolve_safety_alerts(
    payload: ResolveAlertsRequest,
    repo: SafetyRepository = Depends(get_safety_repository),
    clock: Clock = Depends(get_clock),
):
    """
    Resolve alerts. Ids that are not the user's are ignored; resolving an
    already-resolved alert succeeds and leaves its resolved_at untouched.
    """
    result = repo.resolve_alerts(payload.user_id, payload.alert_ids, resolved_at=clock.now())

    logger.info(
        f"Resolved {result.resolved_count} safety alert(s) for {payload.user_id} "
        f"({result.already_resolved_count} already resolved)"
    )

    return ResolveAlertsResponse(
        resolved_count=result.resolved_count,
        already_resolved_count=result.already_resolved_count,
        message="Safety alerts resolved successfully",
    )
