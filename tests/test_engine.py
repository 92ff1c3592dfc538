"""End-to-end tests for the adaptation engine."""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from conftest import daily_plan, daily_workouts, make_plan
from training_adaptation import AdaptationEngine, InvalidInputError
from training_adaptation.adaptation.profiles import InMemoryProfileStore, SqlProfileStore
from training_adaptation.db import Database
from training_adaptation.methodology import MethodologyRegistry, build_default_registry
from training_adaptation.models import (
    AdaptationPattern,
    AdaptationResponse,
    AdaptationTrigger,
    CompletedWorkout,
    CompressionApproach,
    ConditionOperator,
    EnvironmentalConditions,
    EquipmentAvailability,
    InjuryConstraints,
    InjuryStatus,
    Methodology,
    Modification,
    ModificationKind,
    OutcomeMetrics,
    PlannedWorkout,
    PlanSummary,
    Priority,
    ProgressMetrics,
    RecommendationCategory,
    RecoveryMetrics,
    RiskLevel,
    RiskType,
    TimeAvailability,
    TrainingPlan,
    TriggerCondition,
    TriggerKind,
)

GOOD = OutcomeMetrics(performance_change=90, adherence_change=90, recovery_change=90, satisfaction_change=90)
INTENSITY_KINDS = (ModificationKind.REDUCE_INTENSITY, ModificationKind.INCREASE_INTENSITY)
AS_OF = datetime(2024, 3, 10)


def intensity_boost(priority):
    """Pattern raising intensity whenever the athlete is well recovered."""
    return AdaptationPattern(
        id="custom_fresh_legs",
        methodology=Methodology.CUSTOM,
        name="Fresh legs",
        trigger=AdaptationTrigger(
            type=TriggerKind.PLATEAU,
            conditions=(TriggerCondition("recovery_score", ConditionOperator.GREATER_THAN, 80, 90),),
            minimum_duration_days=1,
            philosophy_context="Use good recovery for quality work",
        ),
        response=AdaptationResponse(
            modifications=(Modification(
                type=ModificationKind.INCREASE_INTENSITY,
                reason="Recovery supports harder sessions",
                priority=priority,
                suggested_changes={"intensity_increase": 10},
            ),),
            rationale="Fresh athletes absorb more intensity",
            expected_duration_days=7,
            monitoring_period_days=7,
            rollback_criteria=(),
            philosophy_justification="Train hard when recovered",
        ),
        philosophy_alignment=80,
        success_rate=70,
    )


def registry_with_custom_pattern(pattern):
    profiles = {profile.methodology: profile for profile in build_default_registry()}
    profiles[Methodology.CUSTOM] = replace(profiles[Methodology.CUSTOM], patterns=(pattern,))
    return MethodologyRegistry(profiles)


def scheduled_plan():
    """One past workout before ``AS_OF`` and four upcoming ones."""
    workouts = [
        PlannedWorkout(AS_OF - timedelta(days=1), "intervals", 50, 10.0, "past", intensity=90),
        PlannedWorkout(AS_OF + timedelta(days=1), "intervals", 50, 10.0, "a", intensity=90),
        PlannedWorkout(AS_OF + timedelta(days=2), "easy", 40, 8.0, "b", intensity=60),
        PlannedWorkout(AS_OF + timedelta(days=3), "tempo", 60, 12.0, "c", intensity=85),
        PlannedWorkout(AS_OF + timedelta(days=10), "long", 120, 24.0, "d", intensity=70),
    ]
    summary = PlanSummary(total_weeks=2, total_workouts=5, total_distance_km=64.0, total_time_minutes=320)
    return TrainingPlan(id="plan-2", summary=summary, workouts=workouts)


class TestAdaptPlan:
    """Test full adaptation scenarios."""

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())
        self.plan = make_plan(weeks=12, weekly_minutes=480)

    def test_no_constraints(self):
        result = self.engine.adapt_plan(self.plan, Methodology.DANIELS)

        assert result.modifications == ()
        assert result.recommendations == ()
        assert result.effectiveness == 100
        assert result.risk_assessment.overall_risk is RiskLevel.LOW

    def test_high_altitude_lydiard(self):
        result = self.engine.adapt_plan(
            self.plan, "lydiard", environmental=EnvironmentalConditions(altitude_meters=4000),
        )

        altitude = [m for m in result.modifications if "altitude" in m.reason.lower()]
        assert len(altitude) >= 2
        assert any(
            m.type is ModificationKind.REDUCE_INTENSITY and m.suggested_changes["intensity_reduction"] > 15
            for m in altitude
        )
        assert any(m.type is ModificationKind.DELAY_PROGRESSION for m in altitude)
        assert result.constraints.environmental[0].factor == "altitude"
        assert result.risk_assessment.specific_risks[0].type is RiskType.ENVIRONMENTAL

    def test_limited_time(self):
        result = self.engine.adapt_plan(
            self.plan, Methodology.PFITZINGER, time=TimeAvailability(weekly_available_hours=2),
        )

        compression = result.constraints.time[0].compression
        assert compression.approach is CompressionApproach.KEY_WORKOUT_ONLY
        assert compression.retained_effectiveness < 70
        assert result.modifications[0].type is ModificationKind.REDUCE_VOLUME
        # One high-priority modification and a 50% retained compression
        assert result.effectiveness == pytest.approx(78)

    def test_severe_acute_injury(self):
        injury = InjuryConstraints(current_injuries=[
            InjuryStatus(type="stress_fracture", severity="severe", stage="acute"),
        ])
        result = self.engine.adapt_plan(self.plan, Methodology.HUDSON, injury=injury)

        assert result.risk_assessment.overall_risk in (RiskLevel.HIGH, RiskLevel.CRITICAL)
        assert result.risk_assessment.mitigation_required is True
        assert result.modifications[0].type is ModificationKind.INJURY_PROTOCOL
        assert result.constraints.injury[0].monitoring_required is True

    def test_recent_workouts_feed_dynamic_risk(self):
        completed = daily_workouts([30] * 7 + [60] * 3, effort=8)
        result = self.engine.adapt_plan(self.plan, Methodology.CUSTOM, recent_completed_workouts=completed)

        assert [m.type for m in result.modifications] == [ModificationKind.INJURY_PROTOCOL]

    def test_repeated_calls_are_identical(self):
        kwargs = dict(
            environmental=EnvironmentalConditions(altitude_meters=3000, temperature_celsius=33, terrain="hilly"),
            equipment=EquipmentAvailability(available_surfaces=["road"], has_gym=False),
            time=TimeAvailability(weekly_available_hours=5),
            injury=InjuryConstraints(injury_history=["IT_band"]),
        )
        first = self.engine.adapt_plan(self.plan, Methodology.DANIELS, **kwargs)
        second = self.engine.adapt_plan(self.plan, Methodology.DANIELS, **kwargs)

        assert first == second

    def test_effectiveness_bounds_under_heavy_constraints(self):
        result = self.engine.adapt_plan(
            self.plan,
            Methodology.DANIELS,
            environmental=EnvironmentalConditions(altitude_meters=6000, temperature_celsius=40, humidity_percent=90,
                                                  terrain="trail", wind_speed_kmh=50, precipitation_mm=30,
                                                  air_quality="hazardous"),
            equipment=EquipmentAvailability(available_surfaces=[], has_gym=False, has_pool=False),
            time=TimeAvailability(weekly_available_hours=1),
            injury=InjuryConstraints(current_injuries=[
                InjuryStatus(type="knee_tendinopathy", severity="moderate", stage="healing"),
            ]),
        )

        assert 50 <= result.effectiveness <= 100
        assert result.effectiveness == 50
        assert result.risk_assessment.mitigation_required is True

    def test_conflicts_resolved(self):
        recovery = RecoveryMetrics(recovery_score=90)
        altitude = EnvironmentalConditions(altitude_meters=3000)

        engine = AdaptationEngine(registry=registry_with_custom_pattern(intensity_boost(Priority.MEDIUM)))
        result = engine.adapt_plan(self.plan, Methodology.CUSTOM, altitude, recovery=recovery)

        intensity = [m for m in result.modifications if m.type in INTENSITY_KINDS]
        assert len(intensity) == 1
        assert intensity[0].type is ModificationKind.REDUCE_INTENSITY
        assert intensity[0].reason.startswith("Altitude adaptation")

    def test_higher_priority_pattern_overrides_environment(self):
        recovery = RecoveryMetrics(recovery_score=90)
        altitude = EnvironmentalConditions(altitude_meters=3000)

        engine = AdaptationEngine(registry=registry_with_custom_pattern(intensity_boost(Priority.CRITICAL)))
        result = engine.adapt_plan(self.plan, Methodology.CUSTOM, altitude, recovery=recovery)

        intensity = [m for m in result.modifications if m.type in INTENSITY_KINDS]
        assert [m.type for m in intensity] == [ModificationKind.INCREASE_INTENSITY]
        assert intensity[0].methodology_specific is True
        assert intensity[0].priority is Priority.CRITICAL

    def test_pattern_that_does_not_fire_leaves_environment(self):
        engine = AdaptationEngine(registry=registry_with_custom_pattern(intensity_boost(Priority.CRITICAL)))
        result = engine.adapt_plan(self.plan, Methodology.CUSTOM, EnvironmentalConditions(altitude_meters=3000),
                                   recovery=RecoveryMetrics(recovery_score=70))

        kinds = [m.type for m in result.modifications]
        assert ModificationKind.REDUCE_INTENSITY in kinds
        assert ModificationKind.INCREASE_INTENSITY not in kinds

    def test_invalid_input_fails_fast(self):
        with pytest.raises(InvalidInputError):
            self.engine.adapt_plan(self.plan, "canova")
        with pytest.raises(InvalidInputError):
            self.engine.adapt_plan(self.plan, Methodology.DANIELS, time=TimeAvailability(weekly_available_hours=-3))
        with pytest.raises(InvalidInputError):
            self.engine.adapt_plan(self.plan, Methodology.DANIELS, injury=InjuryConstraints(current_injuries=[
                InjuryStatus(type="knee", severity="catastrophic", stage="acute"),
            ]))

    def test_generator_failure_is_isolated(self, monkeypatch, caplog):
        def broken(*args, **kwargs):
            raise RuntimeError("equipment catalogue unavailable")

        monkeypatch.setattr(self.engine.equipment_adapter, "generate", broken)

        with caplog.at_level(logging.ERROR, logger="training_adaptation.engine"):
            result = self.engine.adapt_plan(
                self.plan,
                Methodology.LYDIARD,
                environmental=EnvironmentalConditions(altitude_meters=4000),
                equipment=EquipmentAvailability(has_gym=False),
            )

        assert result.recommendations[0].category is RecommendationCategory.SYSTEM
        assert result.recommendations[0].recommendation == "Equipment adaptations unavailable"
        assert result.constraints.equipment == ()
        assert len(result.constraints.environmental) == 1
        assert any("altitude" in m.reason.lower() for m in result.modifications)
        assert "equipment adaptations failed" in caplog.text


class TestMethodologyModifications:
    """Test progress-driven and pattern-triggered modifications."""

    def setup_method(self):
        self.engine = AdaptationEngine()
        self.plan = make_plan()

    def test_triggered_pattern_ordered_first(self):
        progress = ProgressMetrics(adherence_rate=0.5, metrics={"hard_percentage": 30})
        modifications = self.engine.suggest_methodology_modifications(self.plan, Methodology.DANIELS, progress)

        assert modifications[0].methodology_specific is True
        assert modifications[0].type is ModificationKind.REDUCE_INTENSITY
        assert modifications[-1].type is ModificationKind.REDUCE_VOLUME

    def test_trigger_persistence_with_history(self):
        progress = ProgressMetrics(metric_history={"recovery_score": [55, 50, 45]})
        persistent = self.engine.suggest_methodology_modifications(self.plan, Methodology.CUSTOM, progress)

        brief = ProgressMetrics(metric_history={"recovery_score": [80, 80, 45]})
        not_persistent = self.engine.suggest_methodology_modifications(self.plan, Methodology.CUSTOM, brief)

        assert [m.type for m in persistent] == [ModificationKind.ADD_RECOVERY]
        assert not_persistent == []

    def test_recovery_markers_in_adapt_plan(self):
        result = self.engine.adapt_plan(self.plan, Methodology.CUSTOM, recovery=RecoveryMetrics(recovery_score=40))

        first = result.modifications[0]
        assert first.type is ModificationKind.ADD_RECOVERY
        assert first.methodology_specific is True

    def test_analyze_progress(self):
        start = daily_plan(6)[0].date
        completed = daily_workouts([40, 45, 50, 60, 40], start=start)
        plan = TrainingPlan(workouts=daily_plan(6))

        progress = self.engine.analyze_progress(completed, plan, "lydiard")

        assert progress.adherence_rate == pytest.approx(1.0)
        assert progress.insights.methodology is Methodology.LYDIARD
        assert progress.metrics["easy_percentage"] == 100


class TestResponseLearning:
    """Test the learning feedback loop through the engine."""

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())
        self.plan = make_plan(weekly_minutes=480)
        self.kwargs = dict(
            environmental=EnvironmentalConditions(altitude_meters=4000),
            time=TimeAvailability(weekly_available_hours=6),
        )

    def test_ten_good_outcomes_one_preference(self):
        result = self.engine.adapt_plan(self.plan, Methodology.LYDIARD, **self.kwargs)
        modification = result.modifications[0]

        for _ in range(10):
            self.engine.update_response_profile("athlete-1", Methodology.LYDIARD, modification, GOOD)

        profile = self.engine.get_response_profile("athlete-1", "lydiard")
        assert len(profile.response_history) == 10
        assert len(profile.preferred_modifications) == 1

    def test_preferences_reorder_results(self):
        baseline = self.engine.adapt_plan(self.plan, Methodology.LYDIARD, **self.kwargs)
        volume = next(m for m in baseline.modifications if m.type is ModificationKind.REDUCE_VOLUME)
        assert baseline.modifications[0] is not volume

        self.engine.update_response_profile("athlete-1", Methodology.LYDIARD, volume, GOOD)
        personalised = self.engine.adapt_plan(self.plan, Methodology.LYDIARD, athlete_id="athlete-1", **self.kwargs)

        assert personalised.modifications[0].type is ModificationKind.REDUCE_VOLUME
        assert len(personalised.modifications) == len(baseline.modifications)

    def test_invalid_outcome(self):
        modification = self.engine.adapt_plan(self.plan, Methodology.LYDIARD, **self.kwargs).modifications[0]
        with pytest.raises(InvalidInputError):
            self.engine.update_response_profile("", Methodology.LYDIARD, modification, GOOD)
        with pytest.raises(InvalidInputError):
            self.engine.update_response_profile("athlete-1", Methodology.LYDIARD, modification, None)

    def test_sql_store(self):
        database = Database("sqlite:///:memory:")
        engine = AdaptationEngine(store=SqlProfileStore(database))
        modification = engine.adapt_plan(self.plan, Methodology.LYDIARD, **self.kwargs).modifications[0]

        engine.update_response_profile("athlete-1", Methodology.LYDIARD, modification, GOOD)

        profile = engine.get_response_profile("athlete-1", Methodology.LYDIARD)
        assert profile.preferred_modifications[0] == modification
        database.close()


class TestPlanApplication:
    """Test applying modifications to scheduled workouts."""

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())
        self.plan = scheduled_plan()

    def apply(self, *modifications):
        return self.engine.apply_modifications(self.plan, list(modifications), as_of=AS_OF)

    def test_reduce_volume_changes_upcoming_workouts(self):
        result = self.apply(Modification(ModificationKind.REDUCE_VOLUME, "Low adherence", Priority.MEDIUM,
                                         suggested_changes={"volume_reduction": 30}))

        assert [w.duration_minutes for w in result.workouts] == pytest.approx([50, 35, 28, 42, 84])
        assert [w.distance_km for w in result.workouts] == pytest.approx([10, 7, 5.6, 8.4, 16.8])
        assert result.summary.total_time_minutes == pytest.approx(239)
        assert result.summary.total_distance_km == pytest.approx(47.8)

    def test_input_plan_is_unchanged(self):
        result = self.apply(Modification(ModificationKind.REDUCE_VOLUME, "Low adherence", Priority.MEDIUM))

        assert result is not self.plan
        assert self.plan.workouts[1].duration_minutes == 50
        assert self.plan.summary.total_time_minutes == 320
        assert result.workouts[1].duration_minutes == pytest.approx(40)

    def test_reduce_intensity_only_hard_workouts(self):
        result = self.apply(Modification(ModificationKind.REDUCE_INTENSITY, "Heat", Priority.HIGH))

        assert [w.intensity for w in result.workouts] == pytest.approx([90, 72, 60, 68, 70])

    def test_add_recovery_converts_hardest_upcoming_workouts(self):
        result = self.apply(Modification(ModificationKind.ADD_RECOVERY, "Low recovery score", Priority.HIGH,
                                         suggested_changes={"additional_recovery_days": 2}))

        recovery = [w for w in result.workouts if w.workout_type == "recovery"]
        assert [w.workout_id for w in recovery] == ["a", "c"]
        assert all(w.duration_minutes == 30 and w.intensity == 50 for w in recovery)
        assert recovery[0].name == "Recovery Run (Modified)"
        assert result.workouts[0].workout_type == "intervals"
        assert result.summary.recovery_days == 2

    def test_substitute_named_workouts(self):
        result = self.apply(Modification(
            ModificationKind.SUBSTITUTE_WORKOUT, "No track available", Priority.MEDIUM,
            suggested_changes={"substitute_workout_type": "fartlek"}, workout_ids=("c",),
        ))

        substituted = result.workouts[3]
        assert substituted.workout_type == "fartlek"
        assert substituted.name == "Fartlek Run (Substituted)"
        assert substituted.description == "Workout substituted: No track available"
        assert [w.workout_type for w in result.workouts[:3]] == ["intervals", "intervals", "easy"]

    def test_delay_progression_shifts_upcoming_dates(self):
        result = self.apply(Modification(ModificationKind.DELAY_PROGRESSION, "Acclimatization", Priority.MEDIUM,
                                         suggested_changes={"delay_days": 14}))

        assert result.workouts[0].date == AS_OF - timedelta(days=1)
        assert [w.date - AS_OF for w in result.workouts[1:]] == [timedelta(days=d) for d in (15, 16, 17, 24)]

    def test_injury_protocol_rests_for_a_week(self):
        result = self.apply(Modification(ModificationKind.INJURY_PROTOCOL, "Injury reported", Priority.HIGH,
                                         suggested_changes={"volume_reduction": 100}))

        assert [w.workout_id for w in result.workouts] == ["past", "d"]
        assert result.summary.total_workouts == 2

    def test_partial_injury_protocol_adds_recovery(self):
        result = self.apply(Modification(ModificationKind.INJURY_PROTOCOL, "Illness reported", Priority.HIGH,
                                         suggested_changes={"volume_reduction": 50}))

        assert len(result.workouts) == 5
        assert [w.workout_type for w in result.workouts] == ["intervals", "recovery", "easy", "recovery", "long"]

    def test_higher_priority_applied_first(self):
        result = self.apply(
            Modification(ModificationKind.ADD_RECOVERY, "Low recovery score", Priority.LOW),
            Modification(ModificationKind.REDUCE_INTENSITY, "Altitude", Priority.CRITICAL),
        )

        # Reduced intensities no longer qualify for conversion to recovery runs
        assert all(w.workout_type != "recovery" for w in result.workouts)
        assert result.workouts[1].intensity == pytest.approx(72)

    def test_modification_without_plan_change(self):
        result = self.apply(Modification(ModificationKind.INCREASE_VOLUME, "Plateau", Priority.LOW))

        assert result.workouts == self.plan.workouts
        assert result.summary == self.plan.summary

    def test_invalid_modifications(self):
        with pytest.raises(InvalidInputError):
            self.engine.apply_modifications(self.plan, ["reduce_volume"], as_of=AS_OF)


class TestAdaptationNeed:

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())

    def test_steady_training_needs_nothing(self):
        assert self.engine.needs_adaptation(ProgressMetrics(), RecoveryMetrics(recovery_score=75)) is False

    def test_signals_that_need_adaptation(self):
        assert self.engine.needs_adaptation(ProgressMetrics(adherence_rate=0.5)) is True
        assert self.engine.needs_adaptation(ProgressMetrics(performance_trend="declining")) is True
        assert self.engine.needs_adaptation(ProgressMetrics(), RecoveryMetrics(recovery_score=50)) is True
        assert self.engine.needs_adaptation(ProgressMetrics(), RecoveryMetrics(illness_status="sick")) is True

    def test_load_spike_needs_adaptation(self):
        progress = ProgressMetrics(completed_workouts=daily_workouts([30] * 7 + [60] * 3))
        assert self.engine.needs_adaptation(progress) is True


def recent_sessions(count, minutes=60, effort=9, notes="", planned_minutes=None):
    """Sessions on the days up to ``AS_OF``, without distance so pace-based load stays neutral."""
    return [
        CompletedWorkout(
            date=AS_OF - timedelta(days=count - 1 - i),
            workout_id=f"s{i}",
            actual_duration_minutes=minutes,
            perceived_effort=effort,
            planned_duration_minutes=planned_minutes,
            notes=notes,
        )
        for i in range(count)
    ]


class TestFatigueDetection:
    """Test fatigue classification and the matching workout adjustments."""

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())
        self.upcoming = [
            PlannedWorkout(AS_OF, "easy", 40, 8.0, "today", intensity=60),
            PlannedWorkout(AS_OF + timedelta(days=1), "tempo", 60, 10.0, "next", intensity=80),
            PlannedWorkout(AS_OF + timedelta(days=2), "recovery", 30, 5.0, "rest", intensity=50),
        ]

    def test_low_fatigue_keeps_workouts(self):
        assessment = self.engine.detect_fatigue(recent_sessions(3, minutes=45, effort=4), self.upcoming)

        assert assessment.level == "low"
        assert assessment.acute_fatigue == 0
        assert assessment.warnings == ()
        assert assessment.adjusted_workouts == tuple(self.upcoming)

    def test_moderate_from_hard_sessions(self):
        assessment = self.engine.detect_fatigue(recent_sessions(3), self.upcoming)

        assert assessment.level == "moderate"
        assert assessment.acute_fatigue == 54
        assert assessment.acute_chronic_ratio == 1.0
        tempo = assessment.adjusted_workouts[1]
        assert tempo.duration_minutes == 54
        assert tempo.intensity == 76
        assert tempo.name == "Tempo (Adjusted for moderate fatigue)"

    def test_high_when_athlete_reports_tiredness(self):
        assessment = self.engine.detect_fatigue(recent_sessions(3, notes="Tired legs"), self.upcoming)

        assert assessment.level == "high"
        assert assessment.acute_fatigue == 99
        assert assessment.warnings == ("High fatigue levels - reduce training intensity",)

    def test_severe_from_sessions_cut_short(self):
        completed = recent_sessions(5, minutes=40, effort=8, planned_minutes=60)
        assessment = self.engine.detect_fatigue(completed, self.upcoming)

        assert assessment.level == "severe"
        assert assessment.chronic_fatigue_days == 5
        assert assessment.warnings == ("Severe fatigue detected - immediate rest recommended",)

        today, tempo, recovery = assessment.adjusted_workouts
        assert today == self.upcoming[0]
        assert recovery == self.upcoming[2]
        assert tempo.duration_minutes == 30
        assert tempo.distance_km == pytest.approx(5.0)
        assert tempo.intensity == 56
        assert tempo.name == "Tempo (Adjusted for severe fatigue)"

    def test_severe_from_consecutive_overload_days(self):
        assessment = self.engine.detect_fatigue(recent_sessions(3, minutes=200), self.upcoming)

        assert assessment.overload_days == 3
        assert assessment.level == "severe"

    def test_fatigue_warning_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="training_adaptation.analysis.progress"):
            self.engine.detect_fatigue(recent_sessions(3), self.upcoming)

        assert "Moderate fatigue" in caplog.text


class TestOverreachingRisk:

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())

    def test_load_spike_is_critical(self):
        completed = daily_workouts([30] * 7 + [60] * 3, effort=8)
        assessment = self.engine.assess_overreaching_risk(completed, TrainingPlan())

        assert assessment.risk_level is RiskLevel.CRITICAL
        assert assessment.current_risk == 90
        assert assessment.weekly_load_increase == pytest.approx(130.77, abs=0.01)
        assert "Limit weekly mileage increases to 10%" in assessment.mitigation_strategies
        assert "Prioritize sleep and nutrition" in assessment.mitigation_strategies

    def test_steady_easy_training_is_low(self):
        assessment = self.engine.assess_overreaching_risk(recent_sessions(3, minutes=45, effort=4), TrainingPlan())

        assert assessment.risk_level is RiskLevel.LOW
        assert assessment.current_risk == 19
        assert assessment.projected_risk == 0
        assert assessment.mitigation_strategies == ()

    def test_no_history(self):
        assessment = self.engine.assess_overreaching_risk([], TrainingPlan())

        assert assessment.risk_level is RiskLevel.LOW
        assert assessment.projected_risk == 0


class TestRecoveryStatus:

    def setup_method(self):
        self.engine = AdaptationEngine(store=InMemoryProfileStore())

    def test_markers_drive_status(self):
        status = self.engine.assess_recovery_status([], RecoveryMetrics(sleep_quality=4, muscle_soreness=8, hrv=35))

        assert status.score == 44
        assert status.status == "fatigued"
        assert status.recommendations[0] == "Reduce training intensity by 30%"
        assert "Improve sleep hygiene - aim for consistent bedtime" in status.recommendations
        assert "Consider foam rolling and dynamic stretching" in status.recommendations
        assert "HRV is low - reduce stress and training load" in status.recommendations

    def test_workouts_drive_status_without_markers(self):
        status = self.engine.assess_recovery_status(recent_sessions(3, effort=4))

        assert status.score == 70
        assert status.status == "adequate"
        assert status.recommendations == ()

    def test_recovered(self):
        assert self.engine.assess_recovery_status([], RecoveryMetrics(recovery_score=85)).status == "recovered"
