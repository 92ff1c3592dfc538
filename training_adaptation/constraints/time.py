"""Time availability constraint adaptation."""

import logging
from typing import Tuple

import pandas as pd

from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    CompressionApproach,
    CompressionStrategy,
    GeneratorOutput,
    Modification,
    ModificationKind,
    Priority,
    TimeAvailability,
    TimeConstraint,
    TrainingPlan,
    WorkoutPriority,
)

logger = logging.getLogger(__name__)

# Deficit used to describe limited availability when no deficit exists
NOMINAL_DEFICIT_MINUTES = 60

_COMPRESSION_RECOMMENDATIONS = {
    CompressionApproach.INTENSITY_FOCUS: (
        "Increase workout intensity by 10%",
        "Reduce easy run duration",
        "Maintain key workouts",
    ),
    CompressionApproach.VOLUME_REDUCTION: (
        "Reduce weekly volume by 20%",
        "Maintain workout quality",
        "Focus on key sessions",
    ),
    CompressionApproach.SESSION_COMBINATION: (
        "Combine easy runs with warmup/cooldown",
        "Double runs on available days",
        "Multi-purpose sessions",
    ),
    CompressionApproach.KEY_WORKOUT_ONLY: (
        "Focus only on key workouts",
        "Minimal maintenance volume",
        "Cross-training substitution",
    ),
}

_RETAINED_EFFECTIVENESS = {
    CompressionApproach.INTENSITY_FOCUS: 87,
    CompressionApproach.VOLUME_REDUCTION: 75,
    CompressionApproach.SESSION_COMBINATION: 65,
    CompressionApproach.KEY_WORKOUT_ONLY: 50,
}


def planned_weekly_minutes(plan: TrainingPlan) -> float:
    """Average weekly training time the plan asks for."""
    summary = plan.summary
    if summary is not None and summary.total_time_minutes and summary.total_weeks:
        return summary.total_time_minutes / summary.total_weeks

    if plan.workouts:
        frame = pd.DataFrame({
            "date": pd.to_datetime([w.date for w in plan.workouts]),
            "duration": [w.duration_minutes for w in plan.workouts],
        })
        weekly = frame.groupby(frame["date"].dt.to_period("W-SAT"))["duration"].sum()
        if weekly.sum() > 0:
            return float(weekly.mean())

    return config.DEFAULT_WEEKLY_MINUTES


def select_compression_approach(deficit_minutes: float) -> CompressionApproach:
    hours = deficit_minutes / 60
    if hours < config.INTENSITY_FOCUS_MAX_HOURS:
        return CompressionApproach.INTENSITY_FOCUS
    if hours < config.VOLUME_REDUCTION_MAX_HOURS:
        return CompressionApproach.VOLUME_REDUCTION
    if hours < config.SESSION_COMBINATION_MAX_HOURS:
        return CompressionApproach.SESSION_COMBINATION
    return CompressionApproach.KEY_WORKOUT_ONLY


def create_compression_strategy(deficit_minutes: float) -> CompressionStrategy:
    approach = select_compression_approach(deficit_minutes)
    return CompressionStrategy(
        approach=approach,
        retained_effectiveness=_RETAINED_EFFECTIVENESS[approach],
        recommendations=_COMPRESSION_RECOMMENDATIONS[approach],
    )


class TimeAdapter:
    """Fit the plan into the athlete's weekly time budget."""

    def generate(self, plan: TrainingPlan, profile: MethodologyProfile,
                 time: TimeAvailability) -> GeneratorOutput:
        output = GeneratorOutput()
        priorities: Tuple[WorkoutPriority, ...] = profile.workout_priorities

        if time.weekly_available_hours is not None:
            planned = planned_weekly_minutes(plan)
            deficit = max(0.0, planned - time.weekly_available_hours * 60)

            if deficit > 0:
                strategy = create_compression_strategy(deficit)
                output.modifications.append(Modification(
                    type=ModificationKind.REDUCE_VOLUME,
                    reason=f"Time deficit of {round(deficit / 60)} hours per week",
                    priority=Priority.HIGH,
                    suggested_changes={
                        "volume_reduction": min(config.MAX_TIME_VOLUME_REDUCTION, deficit / planned * 100),
                        "compression_approach": strategy.approach.value,
                        "retained_effectiveness": strategy.retained_effectiveness,
                        "prioritized_workouts": strategy.recommendations,
                    },
                ))
                output.constraints.append(TimeConstraint(
                    shortfall_minutes=deficit,
                    compression=strategy,
                    prioritization=priorities,
                ))
                logger.debug(f"Weekly time deficit {deficit:.0f} min of {planned:.0f} planned, "
                             f"using {strategy.approach.value}")

            elif time.weekly_available_hours < config.LIMITED_WEEKLY_HOURS:
                output.constraints.append(TimeConstraint(
                    shortfall_minutes=0.0,
                    compression=create_compression_strategy(NOMINAL_DEFICIT_MINUTES),
                    prioritization=priorities,
                ))

        morning = time.daily_time_slots.get("morning")
        if morning and morning < config.SHORT_MORNING_SLOT_MINUTES:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason=f"Limited morning time slot ({morning:.0f} minutes)",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "substitute_workout_type": "recovery",
                    "morning_workout_types": ("easy_short", "recovery"),
                    "quality_workouts_to_other_slots": True,
                },
            ))

        preference = time.preferred_workout_duration
        if preference is not None and preference.max_minutes < config.SHORT_WORKOUT_MINUTES:
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_VOLUME,
                reason=f"Workout duration limited to {preference.max_minutes:.0f} minutes",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "volume_reduction": 15,
                    "split_long_runs": True,
                    "double_run_days": time.flexibility_level == "flexible",
                    "intensity_compensation": 10,
                },
            ))

        return output
