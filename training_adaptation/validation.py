"""Input validation for adaptation requests.

All checks run before any modification generator so a malformed request never
produces a partial result. Absent optional values are not errors; they only
switch off the corresponding branch in the generators.
"""

import logging
from typing import Iterable, Optional, Union

import numpy as np

from .config import config
from .errors import InvalidInputError
from .models import (
    CompletedWorkout,
    EnvironmentalConditions,
    EquipmentAvailability,
    InjuryConstraints,
    Methodology,
    Modification,
    OutcomeMetrics,
    ProgressMetrics,
    RecoveryMetrics,
    TimeAvailability,
    TrainingPlan,
)

logger = logging.getLogger(__name__)

TERRAINS = {"flat", "hilly", "mixed", "trail"}
AIR_QUALITY_LEVELS = {"good", "moderate", "poor", "hazardous"}
FLEXIBILITY_LEVELS = {"rigid", "moderate", "flexible"}
RISK_FACTOR_SEVERITIES = {"low", "moderate", "high"}
PERFORMANCE_TRENDS = {"improving", "stable", "declining"}


def resolve_methodology(value: Union[Methodology, str]) -> Methodology:
    """Map a methodology name onto the closed ``Methodology`` enum."""
    if isinstance(value, Methodology):
        return value
    if isinstance(value, str):
        try:
            return Methodology(value.strip().lower())
        except ValueError:
            pass
    known = ", ".join(m.value for m in Methodology)
    raise InvalidInputError(f"Unknown methodology {value!r}; expected one of: {known}", field="methodology")


def _require_type(value, expected, field: str):
    if not isinstance(value, expected):
        names = " or ".join(t.__name__ for t in expected) if isinstance(expected, tuple) else expected.__name__
        raise InvalidInputError(f"{field} must be {names}, got {type(value).__name__}", field=field)


def _check_number(value, field: str, minimum: Optional[float] = None, maximum: Optional[float] = None):
    """Validate an optional numeric field against an inclusive range."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise InvalidInputError(f"{field} must be numeric, got {value!r}", field=field)
    if not np.isfinite(value):
        raise InvalidInputError(f"{field} must be finite, got {value!r}", field=field)
    if minimum is not None and value < minimum:
        raise InvalidInputError(f"{field} must be >= {minimum}, got {value}", field=field)
    if maximum is not None and value > maximum:
        raise InvalidInputError(f"{field} must be <= {maximum}, got {value}", field=field)


def _check_choice(value, choices: Iterable[str], field: str, optional: bool = False):
    if value is None and optional:
        return
    if value not in choices:
        raise InvalidInputError(
            f"Invalid {field} {value!r}; expected one of: {', '.join(sorted(choices))}", field=field
        )


def validate_environmental(environmental: EnvironmentalConditions) -> None:
    _require_type(environmental, EnvironmentalConditions, "environmental")
    _check_number(environmental.altitude_meters, "environmental.altitude_meters")
    _check_number(environmental.temperature_celsius, "environmental.temperature_celsius")
    _check_number(environmental.humidity_percent, "environmental.humidity_percent", 0, 100)
    _check_number(environmental.wind_speed_kmh, "environmental.wind_speed_kmh", 0)
    _check_number(environmental.precipitation_mm, "environmental.precipitation_mm", 0)
    _check_choice(environmental.terrain, TERRAINS, "environmental.terrain")
    _check_choice(environmental.air_quality, AIR_QUALITY_LEVELS, "environmental.air_quality", optional=True)

    if environmental.altitude_meters is not None and environmental.altitude_meters > config.ALTITUDE_EXTREME:
        logger.warning(f"Extreme altitude {environmental.altitude_meters}m, adaptation formulas will clamp")


def validate_equipment(equipment: EquipmentAvailability) -> None:
    _require_type(equipment, EquipmentAvailability, "equipment")
    if equipment.available_surfaces is not None:
        _require_type(equipment.available_surfaces, (list, tuple), "equipment.available_surfaces")
        for surface in equipment.available_surfaces:
            _require_type(surface, str, "equipment.available_surfaces")
    for name in ("has_gym", "has_pool"):
        value = getattr(equipment, name)
        if value is not None and not isinstance(value, bool):
            raise InvalidInputError(f"equipment.{name} must be a bool or None", field=f"equipment.{name}")


def validate_time(time: TimeAvailability) -> None:
    _require_type(time, TimeAvailability, "time")
    _check_number(time.weekly_available_hours, "time.weekly_available_hours", 0, 7 * 24)
    for slot, minutes in time.daily_time_slots.items():
        _check_number(minutes, f"time.daily_time_slots.{slot}", 0, 24 * 60)
    _check_choice(time.flexibility_level, FLEXIBILITY_LEVELS, "time.flexibility_level")

    preference = time.preferred_workout_duration
    if preference is not None:
        _check_number(preference.min_minutes, "time.preferred_workout_duration.min_minutes", 0)
        _check_number(preference.max_minutes, "time.preferred_workout_duration.max_minutes", 0)
        _check_number(preference.optimal_minutes, "time.preferred_workout_duration.optimal_minutes", 0)
        if preference.min_minutes > preference.max_minutes:
            raise InvalidInputError(
                f"Preferred workout duration range is inverted "
                f"({preference.min_minutes} > {preference.max_minutes})",
                field="time.preferred_workout_duration",
            )


def validate_injury(injury: InjuryConstraints) -> None:
    _require_type(injury, InjuryConstraints, "injury")
    for index, current in enumerate(injury.current_injuries):
        prefix = f"injury.current_injuries[{index}]"
        _check_choice(current.severity, config.INJURY_SEVERITY_FACTORS.keys(), f"{prefix}.severity")
        _check_choice(current.stage, config.INJURY_STAGE_FACTORS.keys(), f"{prefix}.stage")
        _check_number(current.expected_recovery_weeks, f"{prefix}.expected_recovery_weeks", 0)
        if not current.type:
            raise InvalidInputError(f"{prefix}.type must not be empty", field=f"{prefix}.type")

    for index, past in enumerate(injury.injury_history):
        _require_type(past, str, f"injury.injury_history[{index}]")

    for index, area in enumerate(injury.pain_areas):
        _check_number(area.pain_level, f"injury.pain_areas[{index}].pain_level", 1, 10)

    for index, factor in enumerate(injury.risk_factors):
        _check_choice(factor.severity, RISK_FACTOR_SEVERITIES, f"injury.risk_factors[{index}].severity")

    for index, protocol in enumerate(injury.recovery_protocols):
        _check_number(protocol.effectiveness, f"injury.recovery_protocols[{index}].effectiveness", 1, 100)


def validate_plan(plan: TrainingPlan) -> None:
    _require_type(plan, TrainingPlan, "plan")
    summary = plan.summary
    if summary is not None:
        _check_number(summary.total_weeks, "plan.summary.total_weeks", 1)
        _check_number(summary.total_time_minutes, "plan.summary.total_time_minutes", 0)
    for index, workout in enumerate(plan.workouts):
        _check_number(workout.duration_minutes, f"plan.workouts[{index}].duration_minutes", 0)
        _check_number(workout.distance_km, f"plan.workouts[{index}].distance_km", 0)
        _check_number(workout.intensity, f"plan.workouts[{index}].intensity", 0, 100)
        _check_number(workout.estimated_tss, f"plan.workouts[{index}].estimated_tss", 0)


def validate_completed_workouts(workouts: Iterable[CompletedWorkout]) -> None:
    for index, workout in enumerate(workouts):
        prefix = f"completed_workouts[{index}]"
        _require_type(workout, CompletedWorkout, prefix)
        _check_number(workout.actual_distance_km, f"{prefix}.actual_distance_km", 0)
        _check_number(workout.actual_duration_minutes, f"{prefix}.actual_duration_minutes", 0)
        _check_number(workout.perceived_effort, f"{prefix}.perceived_effort", 1, 10)
        _check_number(workout.planned_duration_minutes, f"{prefix}.planned_duration_minutes", 0)


def validate_progress(progress: ProgressMetrics) -> None:
    _require_type(progress, ProgressMetrics, "progress")
    _check_number(progress.adherence_rate, "progress.adherence_rate", 0)
    _check_choice(progress.performance_trend, PERFORMANCE_TRENDS, "progress.performance_trend")
    for metric, value in progress.metrics.items():
        _check_number(value, f"progress.metrics.{metric}")
    for metric, history in progress.metric_history.items():
        for value in history:
            _check_number(value, f"progress.metric_history.{metric}")
    validate_completed_workouts(progress.completed_workouts)


def validate_recovery(recovery: RecoveryMetrics) -> None:
    _require_type(recovery, RecoveryMetrics, "recovery")
    for name in ("sleep_quality", "muscle_soreness", "energy_level"):
        _check_number(getattr(recovery, name), f"recovery.{name}", 1, 10)
    _check_number(recovery.hrv, "recovery.hrv", 0)
    _check_number(recovery.resting_heart_rate, "recovery.resting_heart_rate", 0)
    _check_number(recovery.recovery_score, "recovery.recovery_score", 0, 100)


def validate_outcome(modification: Modification, outcome: OutcomeMetrics) -> None:
    _require_type(modification, Modification, "modification")
    _require_type(outcome, OutcomeMetrics, "outcome")
    for name in ("performance_change", "adherence_change", "recovery_change", "satisfaction_change"):
        _check_number(getattr(outcome, name), f"outcome.{name}")


def validate_modifications(modifications: Iterable[Modification]) -> None:
    for index, modification in enumerate(modifications):
        _require_type(modification, Modification, f"modifications[{index}]")


def validate_athlete_id(athlete_id: str) -> None:
    if not isinstance(athlete_id, str) or not athlete_id.strip():
        raise InvalidInputError("athlete_id must be a non-empty string", field="athlete_id")
