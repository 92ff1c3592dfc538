"""Progress analysis and progress-driven plan modifications."""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..config import config
from ..methodology import IntensityDistribution, MethodologyProfile
from ..models import (
    CompletedWorkout,
    FatigueAssessment,
    Methodology,
    MethodologyInsights,
    Modification,
    ModificationKind,
    OverreachingAssessment,
    PlannedWorkout,
    Priority,
    ProgressMetrics,
    RecoveryMetrics,
    RecoveryStatus,
    RiskLevel,
)
from .workload import (
    HARD_EFFORT,
    calculate_injury_risk,
    calculate_overall_recovery,
    calculate_recovery_score,
    calculate_training_load,
    round_half_up,
)

logger = logging.getLogger(__name__)

EASY_TYPES = {"recovery", "easy", "long", "long_run"}
MODERATE_TYPES = {"tempo", "steady"}
HARD_TYPES = {"threshold", "intervals", "vo2max", "speed"}
THRESHOLD_TYPES = {"threshold", "tempo"}

MIN_WORKOUTS_FOR_TREND = 5
MIN_WORKOUTS_FOR_RECOMMENDATIONS = 5


def classify_workout_type(workout_type: Optional[str]) -> str:
    """Effort class (easy, moderate, hard) of a workout type. Unknown types count as easy."""
    if workout_type in MODERATE_TYPES:
        return "moderate"
    if workout_type in HARD_TYPES:
        return "hard"
    return "easy"


def _workout_frame(completed: Sequence[CompletedWorkout]) -> pd.DataFrame:
    return pd.DataFrame({
        "date": pd.to_datetime([w.date for w in completed]),
        "duration": [w.actual_duration_minutes or 0.0 for w in completed],
        "distance": [w.actual_distance_km or 0.0 for w in completed],
        "effort_class": [classify_workout_type(w.planned_workout_type) for w in completed],
        "threshold": [w.planned_workout_type in THRESHOLD_TYPES for w in completed],
    })


def calculate_adherence(completed: Sequence[CompletedWorkout],
                        planned: Sequence[PlannedWorkout],
                        as_of: Optional[datetime] = None) -> float:
    """Completed workouts divided by planned workouts due by ``as_of``.

    ``as_of`` defaults to the date of the most recent completed workout.
    """
    if not planned:
        return 1.0
    if as_of is None and completed:
        as_of = max(w.date for w in completed)
    due = [w for w in planned if as_of is None or w.date <= as_of]
    if not due:
        return 1.0
    return len(completed) / len(due)


def _average_relative_pace(workouts: Sequence[CompletedWorkout]) -> float:
    relative = [
        (w.actual_duration_minutes / w.actual_distance_km) / (w.perceived_effort / 10)
        for w in workouts
        if w.actual_distance_km and w.actual_duration_minutes and w.perceived_effort
    ]
    return float(np.mean(relative)) if relative else 0.0


def analyze_performance_trend(completed: Sequence[CompletedWorkout]) -> str:
    """Compare effort-adjusted pace of the older and newer half of the workouts."""
    if len(completed) < MIN_WORKOUTS_FOR_TREND:
        return "stable"

    ordered = sorted(completed, key=lambda w: w.date)
    midpoint = len(ordered) // 2
    older = _average_relative_pace(ordered[:midpoint])
    recent = _average_relative_pace(ordered[midpoint:])
    if older == 0:
        return "stable"

    # Lower relative pace is better
    improvement = (older - recent) / older * 100
    if improvement > 2:
        return "improving"
    if improvement < -2:
        return "declining"
    return "stable"


def analyze_volume_progress(completed: Sequence[CompletedWorkout]) -> Dict[str, object]:
    """Weekly distance average and trend (first vs last third of weeks)."""
    frame = _workout_frame([w for w in completed if w.actual_distance_km])
    if frame.empty:
        return {"weekly_average": 0.0, "trend": "stable"}

    # Weeks start on Sunday
    weekly = frame.groupby(frame["date"].dt.to_period("W-SAT"))["distance"].sum()
    volumes = weekly.to_numpy()

    trend = "stable"
    if len(volumes) >= 3:
        third = len(volumes) // 3
        first_avg = volumes[:third].mean()
        last_avg = volumes[-third:].mean()
        if last_avg > first_avg * 1.1:
            trend = "increasing"
        elif last_avg < first_avg * 0.9:
            trend = "decreasing"

    return {"weekly_average": float(volumes.mean()), "trend": trend}


def analyze_effort_distribution(completed: Sequence[CompletedWorkout]) -> Dict[str, float]:
    """Share of sessions (%) per perceived-effort band."""
    counts = {"easy": 0, "moderate": 0, "hard": 0, "very_hard": 0}
    for workout in completed:
        effort = workout.perceived_effort if workout.perceived_effort is not None else 5
        if effort <= 3:
            counts["easy"] += 1
        elif effort <= 6:
            counts["moderate"] += 1
        elif effort <= 8:
            counts["hard"] += 1
        else:
            counts["very_hard"] += 1

    total = sum(counts.values()) or 1
    return {band: float(round(count / total * 100)) for band, count in counts.items()}


def calculate_intensity_distribution(completed: Sequence[CompletedWorkout]) -> Dict[str, float]:
    """Share of training time (%) per effort class derived from workout types."""
    frame = _workout_frame(completed)
    total = frame["duration"].sum() if not frame.empty else 0.0
    if total <= 0:
        return {"easy": 0.0, "moderate": 0.0, "hard": 0.0}

    by_class = frame.groupby("effort_class")["duration"].sum()
    return {
        effort_class: float(round(by_class.get(effort_class, 0.0) / total * 100))
        for effort_class in ("easy", "moderate", "hard")
    }


def calculate_threshold_percentage(completed: Sequence[CompletedWorkout]) -> float:
    """Share of training time (%) spent in threshold and tempo sessions."""
    frame = _workout_frame(completed)
    total = frame["duration"].sum() if not frame.empty else 0.0
    if total <= 0:
        return 0.0
    return float(frame.loc[frame["threshold"], "duration"].sum() / total * 100)


def calculate_philosophy_alignment(completed: Sequence[CompletedWorkout],
                                   target: IntensityDistribution) -> float:
    """0-100 match between actual and target intensity distribution."""
    if not completed:
        return 100.0
    actual = calculate_intensity_distribution(completed)
    deviation = sum(abs(target.as_dict()[band] - actual[band]) for band in ("easy", "moderate", "hard"))
    return float(round(max(0.0, 100 - deviation / 3)))


def calculate_compliance(completed: Sequence[CompletedWorkout], planned: Sequence[PlannedWorkout]) -> float:
    if not planned:
        return 100.0
    return float(round(len(completed) / len(planned) * 100))


# ---------------------------------------------------------------------------
# Methodology-specific recommendations
# ---------------------------------------------------------------------------

def _daniels_recommendations(completed, actual, target) -> List[str]:
    recommendations = []
    if actual["hard"] > target.hard + 5:
        recommendations.append("Reduce hard training intensity to maintain 80/20 distribution")
    if any(w.perceived_effort and w.perceived_effort > 8 for w in completed[-10:]):
        recommendations.append("Consider pace adjustment due to VDOT decline")
    return recommendations


def _lydiard_recommendations(completed, actual, target) -> List[str]:
    recommendations = []
    if actual["easy"] < target.easy - 5:
        recommendations.append("Increase aerobic base development with more easy running")
    recommendations.append("Focus on time-based training rather than pace-specific work")
    return recommendations


def _pfitzinger_recommendations(completed, actual, target) -> List[str]:
    recommendations = []
    if calculate_threshold_percentage(completed) > 15:
        recommendations.append("Reduce lactate threshold volume to prevent overload")
    recommendations.append("Incorporate medium-long runs with tempo segments")
    return recommendations


def _hudson_recommendations(completed, actual, target) -> List[str]:
    return [
        "Monitor individual response and adjust training based on feedback",
        "Assess current adaptation and modify plan accordingly",
    ]


def _custom_recommendations(completed, actual, target) -> List[str]:
    return ["Monitor training balance and adjust based on personal response"]


RecommendationRule = Callable[[List[CompletedWorkout], Dict[str, float], IntensityDistribution], List[str]]

METHODOLOGY_RECOMMENDATIONS: Dict[Methodology, RecommendationRule] = {
    Methodology.DANIELS: _daniels_recommendations,
    Methodology.LYDIARD: _lydiard_recommendations,
    Methodology.PFITZINGER: _pfitzinger_recommendations,
    Methodology.HUDSON: _hudson_recommendations,
    Methodology.CUSTOM: _custom_recommendations,
}


def generate_methodology_recommendations(completed: Sequence[CompletedWorkout],
                                         profile: MethodologyProfile) -> List[str]:
    if len(completed) < MIN_WORKOUTS_FOR_RECOMMENDATIONS:
        return ["Complete more workouts to generate methodology-specific recommendations"]

    ordered = sorted(completed, key=lambda w: w.date)
    actual = calculate_intensity_distribution(ordered)
    rule = METHODOLOGY_RECOMMENDATIONS[profile.methodology]
    return rule(ordered, actual, profile.intensity_distribution)


def analyze_progress(completed: Sequence[CompletedWorkout],
                     planned: Sequence[PlannedWorkout],
                     profile: MethodologyProfile) -> ProgressMetrics:
    """Summarize completed training against the plan and the methodology.

    Args:
        completed: Completed workouts
        planned: Planned workouts of the current plan
        profile: Methodology profile of the plan

    Returns:
        ProgressMetrics whose ``metrics`` map feeds the trigger matcher
    """
    completed = list(completed)
    adherence = calculate_adherence(completed, planned)
    trend = analyze_performance_trend(completed)
    volume = analyze_volume_progress(completed)
    load = calculate_training_load(completed)
    distribution = calculate_intensity_distribution(completed)

    metrics: Dict[str, float] = {
        "adherence_rate": adherence,
        "recovery_score": calculate_recovery_score(completed),
        "acute_chronic_ratio": load.ratio,
        "weekly_volume_km": volume["weekly_average"],
    }
    # Distribution metrics are meaningless without recorded training time
    if any(w.actual_duration_minutes for w in completed):
        metrics["easy_percentage"] = distribution["easy"]
        metrics["hard_percentage"] = distribution["hard"]
        metrics["threshold_volume"] = calculate_threshold_percentage(completed)

    insights = MethodologyInsights(
        methodology=profile.methodology,
        philosophy_alignment=calculate_philosophy_alignment(completed, profile.intensity_distribution),
        intensity_distribution=distribution,
        compliance_score=calculate_compliance(completed, planned),
        recommendations=generate_methodology_recommendations(completed, profile),
    )
    metrics["philosophy_alignment"] = insights.philosophy_alignment

    logger.debug(f"Analyzed {len(completed)} completed workouts: adherence {adherence:.2f}, trend {trend}, "
                 f"volume trend {volume['trend']}")

    return ProgressMetrics(
        adherence_rate=adherence,
        performance_trend=trend,
        completed_workouts=completed,
        metrics=metrics,
        insights=insights,
    )


def trigger_metrics(progress: Optional[ProgressMetrics], recovery: Optional[RecoveryMetrics]) -> Dict[str, float]:
    """Flat metric map for trigger matching, with the recovery score filled in from recovery markers."""
    metrics: Dict[str, float] = dict(progress.metrics) if progress else {}
    if progress is not None:
        metrics.setdefault("adherence_rate", progress.adherence_rate)
    if recovery is not None:
        metrics["recovery_score"] = calculate_overall_recovery(recovery)
    return metrics


def suggest_progress_modifications(progress: ProgressMetrics,
                                   recovery: Optional[RecoveryMetrics] = None) -> List[Modification]:
    """Methodology-independent modifications from load, recovery, adherence and performance."""
    modifications: List[Modification] = []

    load = calculate_training_load(progress.completed_workouts)
    if load.ratio > config.HIGH_RISK_ACWR:
        modifications.append(Modification(
            type=ModificationKind.REDUCE_VOLUME,
            reason=f"Acute:Chronic workload ratio ({load.ratio:.2f}) exceeds safe threshold",
            priority=Priority.HIGH,
            suggested_changes={"volume_reduction": 30},
        ))
    elif load.ratio > config.SAFE_ACWR_UPPER:
        modifications.append(Modification(
            type=ModificationKind.REDUCE_INTENSITY,
            reason=f"Elevated training load (A:C ratio {load.ratio:.2f})",
            priority=Priority.MEDIUM,
            suggested_changes={"intensity_reduction": 20},
        ))

    if recovery is not None:
        overall = calculate_overall_recovery(recovery)
        if overall < config.MIN_RECOVERY_SCORE:
            modifications.append(Modification(
                type=ModificationKind.ADD_RECOVERY,
                reason=f"Low recovery score ({overall:.0f}), indicating high fatigue",
                priority=Priority.HIGH,
                suggested_changes={"additional_recovery_days": 2, "intensity_reduction": 30},
            ))

        injured = recovery.injury_status == "injured"
        if injured or recovery.illness_status == "sick":
            modifications.append(Modification(
                type=ModificationKind.INJURY_PROTOCOL,
                reason="Injury reported" if injured else "Illness reported",
                priority=Priority.HIGH,
                suggested_changes={
                    "substitute_workout_type": "recovery",
                    "volume_reduction": 100 if injured else 50,
                },
            ))

    if progress.adherence_rate < config.LOW_ADHERENCE_RATE:
        modifications.append(Modification(
            type=ModificationKind.REDUCE_VOLUME,
            reason=f"Low adherence rate ({progress.adherence_rate * 100:.0f}%)",
            priority=Priority.MEDIUM,
            suggested_changes={"volume_reduction": 20, "delay_days": 7},
        ))

    if progress.performance_trend == "declining":
        modifications.append(Modification(
            type=ModificationKind.DELAY_PROGRESSION,
            reason="Performance trend showing decline",
            priority=Priority.MEDIUM,
            suggested_changes={"delay_days": 7, "intensity_reduction": 15},
        ))

    return modifications


def needs_adaptation(progress: ProgressMetrics, recovery: Optional[RecoveryMetrics] = None) -> bool:
    """Whether load, recovery, adherence or performance call for plan changes."""
    load = calculate_training_load(progress.completed_workouts)
    if not config.SAFE_ACWR_LOWER <= load.ratio <= config.SAFE_ACWR_UPPER:
        return True

    if recovery is not None:
        if calculate_overall_recovery(recovery) < config.MIN_RECOVERY_SCORE:
            return True
        if recovery.injury_status == "injured" or recovery.illness_status == "sick":
            return True

    return progress.adherence_rate < config.LOW_ADHERENCE_RATE or progress.performance_trend == "declining"


# ---------------------------------------------------------------------------
# Recovery, fatigue and overreaching
# ---------------------------------------------------------------------------

def _latest_date(completed: Sequence[CompletedWorkout]) -> Optional[datetime]:
    return max(w.date for w in completed) if completed else None


def _completion_rate(workout: CompletedWorkout) -> float:
    if workout.actual_duration_minutes and workout.planned_duration_minutes:
        return workout.actual_duration_minutes / workout.planned_duration_minutes
    return 1.0


def assess_recovery_status(completed: Sequence[CompletedWorkout],
                           recovery: Optional[RecoveryMetrics] = None) -> RecoveryStatus:
    """Recovery score and status, from recovery markers when given and recent training otherwise."""
    if recovery is not None:
        score = calculate_overall_recovery(recovery)
    else:
        score = calculate_recovery_score(completed)

    if score >= 80:
        status = "recovered"
    elif score >= 60:
        status = "adequate"
    elif score >= 40:
        status = "fatigued"
    else:
        status = "overreached"

    recommendations = []
    if status == "overreached":
        recommendations += [
            "Take 2-3 days of complete rest",
            "Focus on sleep quality (8+ hours)",
            "Consider massage or light stretching",
        ]
    elif status == "fatigued":
        recommendations += [
            "Reduce training intensity by 30%",
            "Add an extra recovery day this week",
            "Prioritize hydration and nutrition",
        ]

    if recovery is not None:
        if recovery.sleep_quality is not None and recovery.sleep_quality < 6:
            recommendations.append("Improve sleep hygiene - aim for consistent bedtime")
        if recovery.muscle_soreness is not None and recovery.muscle_soreness > 7:
            recommendations.append("Consider foam rolling and dynamic stretching")
        if recovery.hrv is not None and recovery.hrv < 40:
            recommendations.append("HRV is low - reduce stress and training load")

    return RecoveryStatus(score=score, status=status, recommendations=tuple(recommendations))


def estimate_effort_tss(workout: CompletedWorkout) -> float:
    """TSS estimated from duration and perceived effort (5 when unrecorded)."""
    if not workout.actual_duration_minutes:
        return 0.0
    intensity_factor = (workout.perceived_effort or 5) / 10
    return float(round_half_up(workout.actual_duration_minutes * intensity_factor ** 2 * 100 / 60))


def calculate_acute_fatigue(completed: Sequence[CompletedWorkout], as_of: Optional[datetime] = None) -> float:
    """Fatigue points (0-100) from the three days up to ``as_of``.

    Sessions cut short, very hard efforts and notes mentioning tiredness add points.
    """
    as_of = as_of or _latest_date(completed)
    if as_of is None:
        return 0.0

    window_start = as_of - timedelta(days=3)
    score = 0.0
    for workout in completed:
        if not window_start < workout.date <= as_of:
            continue
        if _completion_rate(workout) < 0.9:
            score += 10
        if workout.perceived_effort is not None and workout.perceived_effort >= 8:
            score += workout.perceived_effort * 2
        notes = workout.notes.lower()
        if "tired" in notes or "fatigue" in notes:
            score += 15
    return min(100.0, score)


def detect_chronic_fatigue(completed: Sequence[CompletedWorkout]) -> int:
    """Longest run of consecutive hard sessions that fell short of the planned duration."""
    longest = current = 0
    for workout in sorted(completed, key=lambda w: w.date):
        hard = workout.perceived_effort is not None and workout.perceived_effort >= HARD_EFFORT
        if hard and _completion_rate(workout) < 0.85:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def detect_tss_overload(completed: Sequence[CompletedWorkout]) -> int:
    """Longest run of consecutive training days whose total TSS exceeds the overreaching limit."""
    if not completed:
        return 0

    frame = pd.DataFrame({
        "day": pd.to_datetime([w.date for w in completed]).normalize(),
        "tss": [estimate_effort_tss(w) for w in completed],
    })
    daily = frame.groupby("day")["tss"].sum().sort_index()

    longest = current = 0
    for tss in daily:
        if tss > config.OVERREACHING_TSS_THRESHOLD:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def adjust_workouts_for_fatigue(workouts: Sequence[PlannedWorkout], level: str,
                                as_of: Optional[datetime]) -> List[PlannedWorkout]:
    """Scale volume and intensity of workouts after ``as_of``. Recovery workouts are kept."""
    if level == "low" or as_of is None:
        return list(workouts)

    volume, intensity = config.FATIGUE_ADJUSTMENTS[level]
    adjusted = []
    for workout in workouts:
        if workout.date <= as_of or workout.workout_type == "recovery":
            adjusted.append(workout)
            continue
        name = workout.name or workout.workout_type.replace("_", " ").capitalize()
        adjusted.append(replace(
            workout,
            name=f"{name} (Adjusted for {level} fatigue)",
            duration_minutes=round_half_up(workout.duration_minutes * volume),
            distance_km=workout.distance_km * volume,
            intensity=round_half_up(workout.intensity * intensity),
        ))
    return adjusted


def detect_fatigue(completed: Sequence[CompletedWorkout], upcoming: Sequence[PlannedWorkout],
                   as_of: Optional[datetime] = None) -> FatigueAssessment:
    """Classify fatigue from recent training and adjust the upcoming workouts to it.

    Args:
        completed: Completed workouts
        upcoming: Planned workouts to adjust
        as_of: Reference date, defaults to the most recent completed workout

    Returns:
        FatigueAssessment with the adjusted copies of ``upcoming``
    """
    as_of = as_of or _latest_date(completed)
    load = calculate_training_load(completed)
    acute = calculate_acute_fatigue(completed, as_of)
    chronic_days = detect_chronic_fatigue(completed)
    overload_days = detect_tss_overload(completed)

    if chronic_days >= config.CHRONIC_FATIGUE_DAYS or overload_days >= 3:
        level, warning = "severe", "Severe fatigue detected - immediate rest recommended"
    elif acute > 70 or load.ratio > config.HIGH_RISK_ACWR:
        level, warning = "high", "High fatigue levels - reduce training intensity"
    elif acute > 50 or load.ratio > config.SAFE_ACWR_UPPER:
        level, warning = "moderate", "Moderate fatigue - monitor closely"
    else:
        level, warning = "low", None

    if warning:
        logger.info(f"{level.capitalize()} fatigue: acute {acute:.0f}, chronic {chronic_days} days, "
                    f"overload {overload_days} days, A:C ratio {load.ratio}")

    return FatigueAssessment(
        level=level,
        acute_fatigue=acute,
        chronic_fatigue_days=chronic_days,
        overload_days=overload_days,
        acute_chronic_ratio=load.ratio,
        adjusted_workouts=tuple(adjust_workouts_for_fatigue(upcoming, level, as_of)),
        warnings=(warning,) if warning else (),
    )


def project_future_risk(completed: Sequence[CompletedWorkout], planned: Sequence[PlannedWorkout],
                        ratio: float, as_of: datetime) -> int:
    """Injury risk (0-100) projected from next week's planned load and recent very hard sessions."""
    next_week = as_of + timedelta(days=7)
    planned_tss = sum(
        config.DEFAULT_PLANNED_TSS if w.estimated_tss is None else w.estimated_tss
        for w in planned
        if as_of < w.date < next_week
    )
    # Rough estimate of the ratio after next week's load
    projected_ratio = ratio + planned_tss / 350

    risk = 0
    if projected_ratio > config.HIGH_RISK_ACWR:
        risk += 40
    elif projected_ratio > config.SAFE_ACWR_UPPER:
        risk += 25
    elif projected_ratio < config.SAFE_ACWR_LOWER:
        risk += 20

    last_week = as_of - timedelta(days=7)
    very_hard = sum(
        1 for w in completed
        if last_week < w.date <= as_of and w.perceived_effort is not None and w.perceived_effort >= 8
    )
    risk += very_hard * 10
    return min(100, risk)


def _mitigation_strategies(level: RiskLevel, ratio: float, weekly_increase: float,
                           recovery_score: float) -> List[str]:
    strategies = []
    if level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        strategies += [
            "Immediately reduce training volume by 30-40%",
            "Replace high-intensity workouts with easy recovery runs",
            "Schedule professional assessment if pain persists",
        ]
    if ratio > config.SAFE_ACWR_UPPER:
        strategies += [
            "Gradually reduce training load over 2 weeks",
            "Focus on maintaining fitness rather than building",
        ]
    if weekly_increase > 10:
        strategies += [
            "Limit weekly mileage increases to 10%",
            "Add recovery weeks every 3-4 weeks",
        ]
    if recovery_score < config.MIN_RECOVERY_SCORE:
        strategies += [
            "Prioritize sleep and nutrition",
            "Consider cross-training activities",
            "Monitor morning heart rate variability",
        ]
    return strategies


def assess_overreaching_risk(completed: Sequence[CompletedWorkout], planned: Sequence[PlannedWorkout],
                             as_of: Optional[datetime] = None) -> OverreachingAssessment:
    """Current and projected overreaching risk from acute:chronic load and weekly distance.

    ``as_of`` defaults to the most recent completed workout.
    """
    as_of = as_of or _latest_date(completed)
    load = calculate_training_load(completed)

    weekly_increase = 0.0
    weekly_average = analyze_volume_progress(completed)["weekly_average"]
    if as_of is not None and weekly_average > 0:
        last_week = as_of - timedelta(days=7)
        recent = sum(w.actual_distance_km or 0.0 for w in completed if last_week < w.date <= as_of)
        weekly_increase = (recent - weekly_average) / weekly_average * 100

    recovery_score = calculate_recovery_score(completed)
    current = calculate_injury_risk(load, weekly_increase, recovery_score)
    projected = project_future_risk(completed, planned, load.ratio, as_of) if as_of is not None else 0

    if current >= 80 or projected >= 90:
        level = RiskLevel.CRITICAL
    elif current >= 60 or projected >= 70:
        level = RiskLevel.HIGH
    elif current >= 40 or projected >= 50:
        level = RiskLevel.MODERATE
    else:
        level = RiskLevel.LOW

    logger.debug(f"Overreaching risk {level.value}: current {current}, projected {projected}, "
                 f"weekly increase {weekly_increase:.1f}%")

    return OverreachingAssessment(
        risk_level=level,
        acute_chronic_ratio=load.ratio,
        weekly_load_increase=weekly_increase,
        current_risk=current,
        projected_risk=projected,
        mitigation_strategies=tuple(_mitigation_strategies(level, load.ratio, weekly_increase, recovery_score)),
    )
