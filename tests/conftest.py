"""Shared fixtures for adaptation tests."""

from datetime import datetime, timedelta

import pytest

from training_adaptation.methodology import build_default_registry
from training_adaptation.models import (
    CompletedWorkout,
    PlannedWorkout,
    PlanSummary,
    TrainingPlan,
)


def make_plan(weeks=12, weekly_minutes=480):
    """Plan whose summary asks for ``weekly_minutes`` of training every week."""
    return TrainingPlan(
        id="plan-1",
        summary=PlanSummary(
            total_weeks=weeks,
            total_workouts=weeks * 5,
            total_distance_km=weeks * 60.0,
            total_time_minutes=weeks * weekly_minutes,
        ),
    )


def daily_workouts(durations, start=datetime(2024, 3, 1), pace_minutes_per_km=5.0, effort=None):
    """One completed workout per day with the given durations."""
    return [
        CompletedWorkout(
            date=start + timedelta(days=i),
            workout_id=f"w{i}",
            actual_distance_km=duration / pace_minutes_per_km,
            actual_duration_minutes=duration,
            perceived_effort=effort,
            planned_workout_type="easy",
        )
        for i, duration in enumerate(durations)
    ]


def daily_plan(days, start=datetime(2024, 3, 1), workout_type="easy", minutes=45):
    return [
        PlannedWorkout(date=start + timedelta(days=i), workout_type=workout_type,
                       duration_minutes=minutes, workout_id=f"p{i}")
        for i in range(days)
    ]


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def plan():
    return make_plan()
