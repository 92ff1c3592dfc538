"""Tests for training load, recovery and injury-risk calculations."""

from datetime import datetime

import numpy as np
import pytest

from conftest import daily_workouts
from training_adaptation.analysis.workload import (
    TrainingLoad,
    assess_dynamic_injury_risk,
    calculate_injury_risk,
    calculate_overall_recovery,
    calculate_recovery_score,
    calculate_training_load,
    calculate_tss,
    calculate_weekly_increase,
    exponential_load,
    round_half_up,
)
from training_adaptation.models import CompletedWorkout, RecoveryMetrics


class TestTrainingStress:
    """Test TSS and exponential loads."""

    def test_tss_at_threshold_pace(self):
        workout = CompletedWorkout(date=datetime(2024, 1, 1), actual_distance_km=6, actual_duration_minutes=30)
        assert calculate_tss(workout, threshold_pace=300) == 50

    def test_tss_slower_than_threshold(self):
        workout = CompletedWorkout(date=datetime(2024, 1, 1), actual_distance_km=10, actual_duration_minutes=60)
        assert calculate_tss(workout, threshold_pace=300) == 69

    def test_tss_without_pace(self):
        workout = CompletedWorkout(date=datetime(2024, 1, 1), actual_duration_minutes=60)
        assert calculate_tss(workout) == 0

    def test_exponential_load_converges(self):
        loads = np.full(200, 100.0)
        averaged = exponential_load(loads, 7)

        assert averaged[0] == pytest.approx(100 * (1 - np.exp(-1 / 7)))
        assert averaged[-1] == pytest.approx(100, rel=1e-3)
        assert np.all(np.diff(averaged[:30]) > 0)

    def test_training_load_empty(self):
        load = calculate_training_load([])
        assert load.ratio == 1.0
        assert load.trend == "stable"

    def test_short_history_has_high_ratio(self):
        load = calculate_training_load(daily_workouts([40] * 5))
        assert load.ratio > 1.5
        assert load.acute > load.chronic


class TestRecovery:
    """Test recovery scores."""

    def test_workout_recovery_score(self):
        easy = daily_workouts([40] * 3, effort=3)
        hard = daily_workouts([40] * 3, effort=8)

        assert calculate_recovery_score(easy) == 70
        assert calculate_recovery_score(hard) == 55
        assert calculate_recovery_score([], resting_hr=45, hrv=70) == 90

    def test_recovery_window_ends_at_latest_workout(self):
        old_hard = daily_workouts([40] * 3, start=datetime(2020, 1, 1), effort=9)
        assert calculate_recovery_score(old_hard) == 55

    def test_overall_recovery_override(self):
        assert calculate_overall_recovery(RecoveryMetrics(recovery_score=42, sleep_quality=10)) == 42

    def test_overall_recovery_composite(self):
        rested = RecoveryMetrics(sleep_quality=10, muscle_soreness=1, energy_level=10)
        tired = RecoveryMetrics(sleep_quality=2, muscle_soreness=9, energy_level=2)

        assert calculate_overall_recovery(rested) == 100
        assert calculate_overall_recovery(tired) == pytest.approx(30)
        assert calculate_overall_recovery(RecoveryMetrics()) == 70


class TestInjuryRisk:
    """Test load-based injury risk."""

    def test_weekly_increase(self):
        assert calculate_weekly_increase(daily_workouts([30, 30, 30, 60, 60, 60])) == pytest.approx(100)
        assert calculate_weekly_increase(daily_workouts([30, 30])) == 0

    def test_risk_points(self):
        safe = TrainingLoad(acute=50, chronic=50, ratio=1.0, trend="stable")
        spike = TrainingLoad(acute=90, chronic=50, ratio=1.8, trend="increasing")

        assert calculate_injury_risk(safe, weekly_increase=0, recovery_score=100) == 10
        assert calculate_injury_risk(spike, weekly_increase=25, recovery_score=0) == 100

    def test_recovery_points_round_half_up(self):
        safe = TrainingLoad(acute=50, chronic=50, ratio=1.0, trend="stable")

        # 65 missing recovery points weigh 19.5
        assert calculate_injury_risk(safe, weekly_increase=0, recovery_score=35) == 30
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0

    def test_degenerate_history(self):
        assert assess_dynamic_injury_risk(None).risk == 0
        assert assess_dynamic_injury_risk(daily_workouts([60])).risk == 0

    def test_rapid_increase(self):
        assessment = assess_dynamic_injury_risk(daily_workouts([30] * 7 + [60] * 3, effort=8))

        assert assessment.risk > 70
        assert "rapid_load_increase" in assessment.factors
        assert "poor_recovery" in assessment.factors
