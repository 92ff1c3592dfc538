"""Training load, recovery and injury-risk calculations.

Loads follow the exponentially weighted acute/chronic model: every completed
workout is converted to a Training Stress Score (TSS) and folded into a 7-day
(acute) and a 28-day (chronic) exponential average. The acute:chronic workload
ratio (ACWR), a workout-derived recovery score and the recent change in
session duration combine into a 0-100 injury-risk score.
"""

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import config
from ..models import CompletedWorkout, RecoveryMetrics

logger = logging.getLogger(__name__)

HARD_EFFORT = 7  # Perceived effort counted as a hard session


@dataclass(frozen=True)
class TrainingLoad:
    """Current acute/chronic training load."""
    acute: float
    chronic: float
    ratio: float  # Acute:chronic workload ratio
    trend: str    # increasing, stable, decreasing


@dataclass(frozen=True)
class InjuryRiskAssessment:
    risk: int  # 0-100
    factors: Tuple[str, ...]
    load: Optional[TrainingLoad] = None
    recovery_score: Optional[float] = None
    weekly_increase: float = 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def pace_seconds_per_km(workout: CompletedWorkout) -> Optional[float]:
    """Average pace of a completed workout, or None without distance and duration."""
    if not workout.actual_distance_km or not workout.actual_duration_minutes:
        return None
    return workout.actual_duration_minutes * 60 / workout.actual_distance_km


def calculate_tss(workout: CompletedWorkout, threshold_pace: Optional[float] = None) -> float:
    """Training Stress Score from duration and pace relative to threshold pace.

    Args:
        workout: Completed workout
        threshold_pace: Threshold pace in seconds per km

    Returns:
        TSS rounded to the nearest integer, 0 when pace is unknown
    """
    threshold_pace = threshold_pace or config.THRESHOLD_PACE
    pace = pace_seconds_per_km(workout)
    if pace is None:
        return 0.0

    intensity_factor = threshold_pace / pace
    return float(round_half_up(workout.actual_duration_minutes * intensity_factor ** 2 * 100 / 60))


def exponential_load(loads: np.ndarray, time_constant: float) -> np.ndarray:
    """Exponentially weighted running average of per-session loads."""
    decay = np.exp(-1 / time_constant)
    averaged = np.zeros(len(loads))
    level = 0.0
    for i, load in enumerate(loads):
        level = level * decay + load * (1 - decay)
        averaged[i] = level
    return averaged


def _sorted_by_date(workouts: Sequence[CompletedWorkout]) -> List[CompletedWorkout]:
    return sorted(workouts, key=lambda w: w.date)


def calculate_training_load(workouts: Sequence[CompletedWorkout],
                            threshold_pace: Optional[float] = None) -> TrainingLoad:
    """Acute and chronic load after the most recent workout."""
    if not workouts:
        return TrainingLoad(acute=0.0, chronic=0.0, ratio=1.0, trend="stable")

    ordered = _sorted_by_date(workouts)
    tss = np.array([calculate_tss(w, threshold_pace) for w in ordered], dtype=float)

    acute = exponential_load(tss, config.ACUTE_LOAD_DAYS)
    chronic = exponential_load(tss, config.CHRONIC_LOAD_DAYS)

    ratio = acute[-1] / chronic[-1] if chronic[-1] > 0 else 1.0

    trend = "stable"
    if len(acute) > 7:
        week_ago = acute[-8]
        if acute[-1] > week_ago * 1.1:
            trend = "increasing"
        elif acute[-1] < week_ago * 0.9:
            trend = "decreasing"

    return TrainingLoad(
        acute=float(round(acute[-1])),
        chronic=float(round(chronic[-1])),
        ratio=round(float(ratio), 2),
        trend=trend,
    )


def calculate_recovery_score(workouts: Sequence[CompletedWorkout],
                             resting_hr: Optional[float] = None,
                             hrv: Optional[float] = None) -> float:
    """Recovery score (0-100) from recent hard sessions and optional HRV/resting HR.

    The 7-day window ends at the most recent workout so the score depends only on
    the inputs.
    """
    score = 70.0

    if workouts:
        latest = max(w.date for w in workouts)
        window_start = latest - timedelta(days=7)
        hard_sessions = [
            w for w in workouts
            if w.date > window_start and w.perceived_effort is not None and w.perceived_effort >= HARD_EFFORT
        ]
        score -= len(hard_sessions) * 5

    if hrv is not None:
        if hrv > 60:
            score += 10
        elif hrv < 40:
            score -= 10

    if resting_hr is not None:
        if resting_hr < 50:
            score += 10
        elif resting_hr > 65:
            score -= 10

    return float(np.clip(score, 0, 100))


def calculate_overall_recovery(recovery: RecoveryMetrics) -> float:
    """Composite recovery score (0-100) from subjective and physiological markers."""
    if recovery.recovery_score is not None:
        return float(recovery.recovery_score)

    score = 70.0

    # Each 1-10 scale contributes up to +/-20 points around its midpoint
    if recovery.sleep_quality is not None:
        score += (recovery.sleep_quality - 5) * 4
    if recovery.muscle_soreness is not None:
        score -= (recovery.muscle_soreness - 5) * 4
    if recovery.energy_level is not None:
        score += (recovery.energy_level - 5) * 4

    if recovery.hrv is not None:
        if recovery.hrv > 60:
            score += 10
        elif recovery.hrv > 50:
            score += 5
        elif recovery.hrv < 40:
            score -= 10

    if recovery.resting_heart_rate is not None:
        if recovery.resting_heart_rate < 50:
            score += 10
        elif recovery.resting_heart_rate < 60:
            score += 5
        elif recovery.resting_heart_rate > 70:
            score -= 10

    return float(np.clip(score, 0, 100))


def calculate_weekly_increase(workouts: Sequence[CompletedWorkout]) -> float:
    """Percentage change in mean duration of the last three sessions vs the three before."""
    durations = np.array([w.actual_duration_minutes or 0.0 for w in _sorted_by_date(workouts)], dtype=float)
    recent = durations[-3:].sum() / 3
    prior = durations[-6:-3].sum() / 3 if len(durations) > 3 else 0.0
    if prior <= 0:
        return 0.0
    return float((recent - prior) / prior * 100)


def calculate_injury_risk(load: TrainingLoad, weekly_increase: float, recovery_score: float) -> int:
    """Injury risk points (0-100) from ACWR, load increase and recovery."""
    risk = 0

    # Acute:chronic ratio (0-40 points)
    if load.ratio < config.SAFE_ACWR_LOWER:
        risk += 20  # Undertraining
    elif load.ratio > config.HIGH_RISK_ACWR:
        risk += 40
    elif load.ratio > config.SAFE_ACWR_UPPER:
        risk += 25
    else:
        risk += 10

    # Load increase (0-30 points)
    if weekly_increase > 20:
        risk += 30
    elif weekly_increase > 10:
        risk += 20
    elif weekly_increase > 5:
        risk += 10

    # Recovery (0-30 points)
    risk += round_half_up((100 - recovery_score) * 0.3)

    return min(100, risk)


def assess_dynamic_injury_risk(workouts: Optional[Sequence[CompletedWorkout]],
                               threshold_pace: Optional[float] = None,
                               window: Optional[int] = None) -> InjuryRiskAssessment:
    """Injury risk from the most recent completed workouts.

    Fewer than two workouts carry no usable trend and yield zero risk.
    """
    if not workouts or len(workouts) < 2:
        return InjuryRiskAssessment(risk=0, factors=())

    window = window or config.DYNAMIC_RISK_WINDOW
    recent = _sorted_by_date(workouts)[-window:]

    load = calculate_training_load(recent, threshold_pace)
    recovery_score = calculate_recovery_score(recent)
    weekly_increase = calculate_weekly_increase(recent)
    risk = calculate_injury_risk(load, weekly_increase, recovery_score)

    factors = []
    if weekly_increase > 10:
        factors.append("rapid_load_increase")
    if recovery_score < 70:
        factors.append("poor_recovery")
    if load.acute > load.chronic * config.SAFE_ACWR_UPPER:
        factors.append("high_absolute_load")

    logger.debug(f"Dynamic injury risk {risk} (ACWR {load.ratio}, increase {weekly_increase:.1f}%, "
                 f"recovery {recovery_score:.0f})")

    return InjuryRiskAssessment(
        risk=risk,
        factors=tuple(factors),
        load=load,
        recovery_score=recovery_score,
        weekly_increase=weekly_increase,
    )
