"""
Safety Monitoring

Turns an athlete's recent check-ins, session RPE and set logs into
safety alerts and a session recommendation.

Pipeline:
    recent records -> analyze_safety_metrics() -> SafetyMetrics
                                                  |            |
                               generate_safety_alerts()   should_modify_session()

Both consumers evaluate the same rule list (evaluate_safety_conditions), so
an alert of a given severity always has a matching recommendation: a
critical alert can never come with "proceed".

Everything here is pure. Records come in as plain dataclasses, most recent
first and already bounded by the caller; nothing is fetched, persisted or
timestamped from the wall clock in this module.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import logging

from services.safety_thresholds import (
    FREQUENCY_WINDOW_DAYS,
    HIGH_INTENSITY_SESSION_RPE,
    HIGH_SET_RPE,
    MAX_CONSECUTIVE_HIGH_INTENSITY,
    MAX_WEEKLY_SESSIONS,
    MIN_SET_LOGS_FOR_PROGRESSION,
    OVERTRAINING_CONSECUTIVE_WEIGHT,
    OVERTRAINING_DECLINING_ENERGY_WEIGHT,
    OVERTRAINING_FREQUENCY_WEIGHT,
    OVERTRAINING_RISING_SORENESS_WEIGHT,
    OVERTRAINING_TREND_CHECK_INS,
    SafetyThresholds,
    thresholds_for_age,
)

logger = logging.getLogger(__name__)

DEFAULT_RPE_TREND_TOLERANCE = 0.5


class RpeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class AlertType(str, Enum):
    FATIGUE = "fatigue"
    FORM = "form"
    LOAD = "load"
    INJURY_RISK = "injury_risk"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SEVERITY_RANK = {
    AlertSeverity.LOW: 0,
    AlertSeverity.MEDIUM: 1,
    AlertSeverity.HIGH: 2,
    AlertSeverity.CRITICAL: 3,
}


class Recommendation(str, Enum):
    PROCEED = "proceed"
    REDUCE_INTENSITY = "reduce_intensity"
    REST = "rest"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CheckInRecord:
    date: date
    mood: float
    energy_level: float
    sleep_hours: float
    muscle_soreness: float


@dataclass(frozen=True)
class SessionSummary:
    date: date
    status: str
    average_rpe: Optional[float] = None


@dataclass(frozen=True)
class SetLogRecord:
    """One logged set. exercise_id groups sets for load progression."""
    rpe: float
    reps_completed: int
    weight_used: Optional[float] = None
    created_at: Optional[datetime] = None
    exercise_id: Optional[UUID] = None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass
class SafetyMetrics:
    """Derived metrics. Every numeric field is 0 when its inputs are empty."""
    average_energy: float = 0.0
    average_mood: float = 0.0
    average_soreness: float = 0.0
    average_sleep: float = 0.0
    average_session_rpe: float = 0.0
    rpe_trend: RpeTrend = RpeTrend.STABLE
    rpe_trend_delta: float = 0.0
    recent_frequency: int = 0
    max_consecutive_high_intensity: int = 0
    average_set_rpe: float = 0.0
    high_rpe_share: float = 0.0
    load_progression: float = 0.0         # mean % change per exercise, oldest -> newest weight
    overtraining_score: float = 0.0       # 0-1
    fatigue_level: float = 0.0            # 0-10, higher = more fatigued
    form_quality: float = 0.0             # 1-10 when set logs exist
    check_in_count: int = 0
    session_count: int = 0
    set_log_count: int = 0
    user_age: Optional[int] = None


@dataclass(frozen=True)
class SafetyCondition:
    """One breached rule."""
    alert_type: AlertType
    severity: AlertSeverity
    message: str


@dataclass
class SafetyAlertDraft:
    """An alert ready to persist. id/created_at are assigned on insert."""
    user_id: UUID
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    is_resolved: bool = False


@dataclass
class SessionModification:
    recommendation: Recommendation
    rationale: str
    reduce_intensity: bool = False
    reduce_volume: bool = False
    add_rest: bool = False
    focus_on_form: bool = False
    recommendations: List[str] = field(default_factory=list)


@dataclass
class SafetyAnalysis:
    metrics: SafetyMetrics
    alerts: List[SafetyAlertDraft]
    session_modification: SessionModification
    analysis_timestamp: datetime
    user_age: int


# ---------------------------------------------------------------------------
# Metric Aggregator
# ---------------------------------------------------------------------------

def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def compute_rpe_trend(
    sessions: Sequence[SessionSummary],
    tolerance: float = DEFAULT_RPE_TREND_TOLERANCE,
) -> Tuple[RpeTrend, float]:
    """
    Compare mean RPE of the newer half of rated sessions against the older half.

    Sessions without an average_rpe are skipped. With an odd count the middle
    session belongs to neither half. Fewer than two rated sessions is stable.

    Returns:
        (trend, delta) where delta = newer mean - older mean
    """
    rated = [float(s.average_rpe) for s in sessions if s.average_rpe is not None]
    half = len(rated) // 2
    if half == 0:
        return RpeTrend.STABLE, 0.0

    delta = _mean(rated[:half]) - _mean(rated[-half:])

    if delta > 0 and delta >= tolerance:
        trend = RpeTrend.INCREASING
    elif delta < 0 and -delta >= tolerance:
        trend = RpeTrend.DECREASING
    else:
        trend = RpeTrend.STABLE
    return trend, round(delta, 2)


def _recent_frequency(sessions: Sequence[SessionSummary]) -> int:
    """Non-skipped sessions dated within the frequency window of the newest one."""
    dated = [s for s in sessions if s.date is not None and s.status != "skipped"]
    if not dated:
        return 0
    newest = max(s.date for s in dated)
    return sum(1 for s in dated if (newest - s.date).days < FREQUENCY_WINDOW_DAYS)


def _max_consecutive_high_intensity(sessions: Sequence[SessionSummary]) -> int:
    longest = 0
    run = 0
    for session in sessions:
        if session.average_rpe is not None and session.average_rpe > HIGH_INTENSITY_SESSION_RPE:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def _load_progression(set_logs: Sequence[SetLogRecord]) -> float:
    """
    Mean percent change from oldest to newest logged weight, per exercise.

    Sets are grouped by exercise_id so weights of different exercises are
    never compared. Exercises with fewer than two weighted sets are skipped.
    """
    if len(set_logs) < MIN_SET_LOGS_FOR_PROGRESSION:
        return 0.0

    weights_by_exercise: Dict[Optional[UUID], List[float]] = {}
    for log in set_logs:
        if log.weight_used:
            weights_by_exercise.setdefault(log.exercise_id, []).append(float(log.weight_used))

    changes = [
        (weights[0] - weights[-1]) / weights[-1] * 100.0
        for weights in weights_by_exercise.values()
        if len(weights) >= 2
    ]
    if not changes:
        return 0.0
    return round(_mean(changes), 1)


def _overtraining_score(
    check_ins: Sequence[CheckInRecord],
    recent_frequency: int,
    max_consecutive_high_intensity: int,
) -> float:
    """
    Score 0-1 from training frequency, runs of hard sessions, and the last
    few check-ins showing energy falling day over day or soreness not easing.
    """
    score = 0.0
    if recent_frequency > MAX_WEEKLY_SESSIONS:
        score += OVERTRAINING_FREQUENCY_WEIGHT
    if max_consecutive_high_intensity > MAX_CONSECUTIVE_HIGH_INTENSITY:
        score += OVERTRAINING_CONSECUTIVE_WEIGHT

    if len(check_ins) >= OVERTRAINING_TREND_CHECK_INS:
        # Oldest first
        latest = list(reversed(check_ins[:OVERTRAINING_TREND_CHECK_INS]))
        pairs = list(zip(latest, latest[1:]))
        if all(newer.energy_level < older.energy_level for older, newer in pairs):
            score += OVERTRAINING_DECLINING_ENERGY_WEIGHT
        if all(newer.muscle_soreness >= older.muscle_soreness for older, newer in pairs):
            score += OVERTRAINING_RISING_SORENESS_WEIGHT

    return round(min(score, 1.0), 2)


def analyze_safety_metrics(
    check_ins: Sequence[CheckInRecord],
    sessions: Sequence[SessionSummary],
    set_logs: Sequence[SetLogRecord],
    age: int,
    rpe_trend_tolerance: float = DEFAULT_RPE_TREND_TOLERANCE,
) -> SafetyMetrics:
    """
    Reduce recent records into SafetyMetrics.

    Args:
        check_ins: Most recent first, already bounded (7 by default)
        sessions: Most recent first, already bounded (5 by default)
        set_logs: Most recent first, already bounded (20 by default)
        age: Passed through to user_age; never changes a metric
        rpe_trend_tolerance: Minimum |delta| for a non-stable trend

    Returns:
        SafetyMetrics. Empty inputs give zeros and a stable trend.
    """
    metrics = SafetyMetrics(user_age=age)

    if check_ins:
        metrics.check_in_count = len(check_ins)
        metrics.average_energy = round(_mean([c.energy_level for c in check_ins]), 2)
        metrics.average_mood = round(_mean([c.mood for c in check_ins]), 2)
        metrics.average_soreness = round(_mean([c.muscle_soreness for c in check_ins]), 2)
        metrics.average_sleep = round(_mean([c.sleep_hours for c in check_ins]), 2)
        fatigue = (
            (10 - metrics.average_energy) * 0.4
            + metrics.average_soreness * 0.3
            + max(0.0, 8 - metrics.average_sleep) * 0.3
        )
        metrics.fatigue_level = round(min(10.0, max(0.0, fatigue)), 1)

    if sessions:
        metrics.session_count = len(sessions)
        rated = [float(s.average_rpe) for s in sessions if s.average_rpe is not None]
        metrics.average_session_rpe = round(_mean(rated), 2)
        metrics.rpe_trend, metrics.rpe_trend_delta = compute_rpe_trend(sessions, rpe_trend_tolerance)
        metrics.recent_frequency = _recent_frequency(sessions)
        metrics.max_consecutive_high_intensity = _max_consecutive_high_intensity(sessions)

    if set_logs:
        metrics.set_log_count = len(set_logs)
        rpes = [float(log.rpe) for log in set_logs]
        metrics.average_set_rpe = round(_mean(rpes), 2)
        metrics.high_rpe_share = round(sum(1 for r in rpes if r > HIGH_SET_RPE) / len(rpes), 2)
        form = 10 - (metrics.average_set_rpe - 5) * 2 - metrics.high_rpe_share * 5
        metrics.form_quality = round(min(10.0, max(1.0, form)), 1)
        metrics.load_progression = _load_progression(set_logs)

    metrics.overtraining_score = _overtraining_score(
        check_ins,
        metrics.recent_frequency,
        metrics.max_consecutive_high_intensity,
    )

    return metrics


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def evaluate_safety_conditions(metrics: SafetyMetrics) -> List[SafetyCondition]:
    """
    Run every rule against the metrics, in declaration order.

    Rules are independent; any number may fire. Check-in rules are skipped
    when no check-ins were supplied.
    """
    t: SafetyThresholds = thresholds_for_age(metrics.user_age)
    conditions: List[SafetyCondition] = []
    has_check_ins = metrics.check_in_count > 0
    rpe_rising = metrics.rpe_trend == RpeTrend.INCREASING

    # 1. Soreness
    if has_check_ins and metrics.average_soreness >= t.soreness_high:
        excess = metrics.average_soreness - t.soreness_high
        severity = AlertSeverity.HIGH if excess >= t.soreness_severe_margin else AlertSeverity.MEDIUM
        conditions.append(SafetyCondition(
            AlertType.FATIGUE,
            severity,
            f"Muscle soreness has averaged {metrics.average_soreness:.1f}/5 over recent check-ins. "
            "Give sore muscles time to recover.",
        ))

    # 2. Sleep
    if has_check_ins and metrics.average_sleep < t.sleep_low:
        severity = AlertSeverity.HIGH if metrics.average_sleep < t.sleep_very_low else AlertSeverity.MEDIUM
        conditions.append(SafetyCondition(
            AlertType.FATIGUE,
            severity,
            f"Sleep has averaged {metrics.average_sleep:.1f} hours. "
            f"Aim for at least {t.sleep_low:.0f} hours before hard training.",
        ))

    # 3. Rising effort on low energy
    if has_check_ins and rpe_rising and metrics.average_energy < t.energy_low:
        conditions.append(SafetyCondition(
            AlertType.LOAD,
            AlertSeverity.HIGH,
            f"Session effort is climbing (RPE +{metrics.rpe_trend_delta:.1f}) while energy is low "
            f"({metrics.average_energy:.1f}/10). Training load may be too high.",
        ))

    # 4. Near-max sets while effort climbs
    if rpe_rising and metrics.set_log_count > 0 and metrics.high_rpe_share >= t.high_rpe_share:
        conditions.append(SafetyCondition(
            AlertType.FORM,
            AlertSeverity.MEDIUM,
            f"{metrics.high_rpe_share:.0%} of recent sets were near max effort. "
            "Reduce weight and focus on technique.",
        ))

    # 5. Weight jumping while effort climbs
    if rpe_rising and metrics.load_progression > t.max_weight_increase_pct:
        conditions.append(SafetyCondition(
            AlertType.LOAD,
            AlertSeverity.MEDIUM,
            f"Weight has gone up {metrics.load_progression:.0f}% across recent sets "
            f"(limit {t.max_weight_increase_pct:.0f}%). Slow the progression.",
        ))

    # 6. Extreme combination
    if (
        has_check_ins
        and rpe_rising
        and metrics.average_soreness >= t.soreness_extreme
        and metrics.average_sleep < t.sleep_very_low
    ):
        conditions.append(SafetyCondition(
            AlertType.INJURY_RISK,
            AlertSeverity.CRITICAL,
            "Maximum soreness, short sleep and rising effort together signal high injury risk. "
            "Rest and talk to a coach or healthcare professional.",
        ))

    # 7. Overtraining pattern while effort climbs
    if rpe_rising and metrics.overtraining_score >= t.overtraining_critical:
        conditions.append(SafetyCondition(
            AlertType.INJURY_RISK,
            AlertSeverity.CRITICAL,
            f"Signs of overtraining: {metrics.max_consecutive_high_intensity} hard sessions in a row "
            f"and {metrics.recent_frequency} sessions this week. Take additional rest.",
        ))

    return conditions


# ---------------------------------------------------------------------------
# Alert Generator
# ---------------------------------------------------------------------------

def generate_safety_alerts(metrics: SafetyMetrics, user_id: UUID) -> List[SafetyAlertDraft]:
    """Build one unresolved alert per breached rule. Usually returns []."""
    return [
        SafetyAlertDraft(
            user_id=user_id,
            alert_type=condition.alert_type,
            severity=condition.severity,
            message=condition.message,
        )
        for condition in evaluate_safety_conditions(metrics)
    ]


# ---------------------------------------------------------------------------
# Session Modifier
# ---------------------------------------------------------------------------

def should_modify_session(metrics: SafetyMetrics) -> SessionModification:
    """
    Map metrics to proceed / reduce_intensity / rest.

    rest: any critical condition, or two or more high ones
    reduce_intensity: any medium or high condition
    proceed: otherwise
    """
    conditions = evaluate_safety_conditions(metrics)
    severities = [c.severity for c in conditions]
    high_count = severities.count(AlertSeverity.HIGH)

    if AlertSeverity.CRITICAL in severities or high_count >= 2:
        recommendation = Recommendation.REST
    elif AlertSeverity.HIGH in severities or AlertSeverity.MEDIUM in severities:
        recommendation = Recommendation.REDUCE_INTENSITY
    else:
        recommendation = Recommendation.PROCEED

    modification = SessionModification(
        recommendation=recommendation,
        rationale=_rationale(recommendation, conditions),
    )

    for condition in conditions:
        if SEVERITY_RANK[condition.severity] < SEVERITY_RANK[AlertSeverity.MEDIUM]:
            continue
        modification.reduce_intensity = True
        if condition.alert_type == AlertType.FATIGUE:
            modification.reduce_volume = True
        elif condition.alert_type == AlertType.FORM:
            modification.focus_on_form = True

    if recommendation == Recommendation.REST:
        modification.add_rest = True
        modification.reduce_intensity = True
        modification.reduce_volume = True

    modification.recommendations = _recommendations(metrics, modification)
    return modification


def _rationale(recommendation: Recommendation, conditions: List[SafetyCondition]) -> str:
    if recommendation == Recommendation.PROCEED:
        return "No safety concerns in recent check-ins or sessions."
    triggered = ", ".join(f"{c.alert_type.value} ({c.severity.value})" for c in conditions)
    if recommendation == Recommendation.REST:
        return f"Take a rest day. Triggered by: {triggered}."
    return f"Train at reduced intensity. Triggered by: {triggered}."


def _recommendations(metrics: SafetyMetrics, modification: SessionModification) -> List[str]:
    advice: List[str] = []
    if modification.add_rest:
        advice.append("Take a rest day or swap the session for light mobility work.")
    elif modification.reduce_intensity:
        advice.append("Lower the weight and stop each set two reps short of failure.")
    if modification.reduce_volume:
        advice.append("Cut the number of working sets.")
    if modification.focus_on_form:
        advice.append("Focus on technique over intensity.")
    if metrics.user_age is not None and metrics.user_age < 16 and modification.recommendation != Recommendation.PROCEED:
        advice.append("Younger athletes should prioritise movement quality over load.")
    return advice


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_safety_analysis(
    user_id: UUID,
    check_ins: Sequence[CheckInRecord],
    sessions: Sequence[SessionSummary],
    set_logs: Sequence[SetLogRecord],
    age: int,
    analysis_timestamp: datetime,
    rpe_trend_tolerance: float = DEFAULT_RPE_TREND_TOLERANCE,
) -> SafetyAnalysis:
    """
    Full analysis for one user: metrics, alert drafts and recommendation.

    The caller fetches and bounds the records, supplies the timestamp and
    persists the returned alerts.
    """
    metrics = analyze_safety_metrics(check_ins, sessions, set_logs, age, rpe_trend_tolerance)
    alerts = generate_safety_alerts(metrics, user_id)
    modification = should_modify_session(metrics)

    logger.info(
        f"Safety analysis {user_id}: alerts={len(alerts)}, "
        f"recommendation={modification.recommendation.value}, "
        f"inputs={metrics.check_in_count}/{metrics.session_count}/{metrics.set_log_count}"
    )

    return SafetyAnalysis(
        metrics=metrics,
        alerts=alerts,
        session_modification=modification,
        analysis_timestamp=analysis_timestamp,
        user_age=age,
    )
