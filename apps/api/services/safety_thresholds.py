"""
Safety threshold table.

Every numeric cutoff the safety monitor uses lives here. Alert cutoffs are
bucketed by age: younger athletes get lower (stricter) soreness, energy and
load-progression cutoffs. Sleep cutoffs are the same for every bucket.

Values are tunable; nothing outside this module hardcodes them.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# Aggregation cutoffs. These shape the metrics themselves, which never
# depend on age, so they are not bucketed.
HIGH_SET_RPE = 8.0                 # set rpe strictly above this counts as near-max
HIGH_INTENSITY_SESSION_RPE = 7.0   # session average_rpe strictly above this is high intensity
FREQUENCY_WINDOW_DAYS = 7
MIN_SET_LOGS_FOR_PROGRESSION = 4

# Overtraining score components (score is capped at 1.0)
MAX_WEEKLY_SESSIONS = 6                 # more sessions than this in the frequency window
MAX_CONSECUTIVE_HIGH_INTENSITY = 3      # longer runs of high-intensity sessions than this
OVERTRAINING_FREQUENCY_WEIGHT = 0.3
OVERTRAINING_CONSECUTIVE_WEIGHT = 0.4
OVERTRAINING_DECLINING_ENERGY_WEIGHT = 0.2
OVERTRAINING_RISING_SORENESS_WEIGHT = 0.1
OVERTRAINING_TREND_CHECK_INS = 3        # most recent check-ins read for energy/soreness trends


@dataclass(frozen=True)
class SafetyThresholds:
    # Check-in means (soreness 1-5, energy 1-10, sleep in hours)
    soreness_high: float = 4.0
    soreness_severe_margin: float = 0.5   # this far above soreness_high -> high severity
    soreness_extreme: float = 5.0
    energy_low: float = 4.0
    sleep_low: float = 7.0
    sleep_very_low: float = 6.0

    # Set logs
    high_rpe_share: float = 0.5
    max_weight_increase_pct: float = 10.0

    # Overtraining score at or above this -> critical injury risk
    overtraining_critical: float = 0.7


# (min_age, max_age inclusive or None, thresholds)
AGE_THRESHOLD_TABLE: Tuple[Tuple[int, Optional[int], SafetyThresholds], ...] = (
    (0, 13, SafetyThresholds(soreness_high=3.5, energy_low=5.0, max_weight_increase_pct=5.0)),
    (14, 15, SafetyThresholds(soreness_high=4.0, energy_low=4.0, max_weight_increase_pct=7.5)),
    (16, None, SafetyThresholds()),
)

DEFAULT_THRESHOLDS = SafetyThresholds()


def thresholds_for_age(age: Optional[int]) -> SafetyThresholds:
    """Return the threshold row for an age. Unknown age gets the 16+ row."""
    if age is None:
        return DEFAULT_THRESHOLDS
    for min_age, max_age, thresholds in AGE_THRESHOLD_TABLE:
        if age >= min_age and (max_age is None or age <= max_age):
            return thresholds
    return DEFAULT_THRESHOLDS
