"""Constraint-driven adaptation engine.

Turns the observed state of an athlete into a prioritized, conflict-resolved
set of plan modifications:

1. Validate every input before any work is done
2. Run the environmental, equipment, time and injury generators, each isolated
   so that a failure in one category cannot block the others
3. Add progress-driven modifications and fired methodology patterns
4. Resolve contradicting modifications and order the rest using the athlete's
   learned response profile
5. Assess risk and predict the effectiveness of the adapted plan
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

from .adaptation.applier import ModificationApplier
from .adaptation.conflicts import ConflictResolver
from .adaptation.prioritizer import prioritize
from .adaptation.profiles import ProfileStore, ResponseProfileLearner
from .adaptation.recommendations import generate_recommendations, system_failure_recommendation
from .adaptation.risk import assess_risk, calculate_effectiveness
from .adaptation.triggers import TriggerMatcher
from .analysis import progress as progress_analysis
from .constraints.environmental import EnvironmentalAdapter
from .constraints.equipment import EquipmentAdapter
from .constraints.injury import InjuryAdapter
from .constraints.time import TimeAdapter
from .methodology import MethodologyProfile, MethodologyRegistry, build_default_registry
from .models import (
    AdaptationResult,
    CompletedWorkout,
    ConstraintSet,
    EnvironmentalConditions,
    EnvironmentalConstraint,
    EquipmentAvailability,
    EquipmentConstraint,
    FatigueAssessment,
    GeneratorOutput,
    InjuryConstraint,
    InjuryConstraints,
    Methodology,
    Modification,
    OutcomeMetrics,
    OverreachingAssessment,
    PlannedWorkout,
    ProgressMetrics,
    Recommendation,
    RecoveryMetrics,
    RecoveryStatus,
    ResponseProfile,
    TimeAvailability,
    TimeConstraint,
    TrainingPlan,
)
from .validation import (
    resolve_methodology,
    validate_athlete_id,
    validate_completed_workouts,
    validate_environmental,
    validate_equipment,
    validate_injury,
    validate_modifications,
    validate_outcome,
    validate_plan,
    validate_progress,
    validate_recovery,
    validate_time,
)

logger = logging.getLogger(__name__)

MethodologyInput = Union[Methodology, str]


class AdaptationEngine:
    """Plan adaptation from constraints, progress and learned athlete responses."""

    def __init__(self, registry: Optional[MethodologyRegistry] = None,
                 store: Optional[ProfileStore] = None,
                 matcher: Optional[TriggerMatcher] = None):
        self.registry = registry or build_default_registry()
        self.learner = ResponseProfileLearner(store)
        self.matcher = matcher or TriggerMatcher()
        self.resolver = ConflictResolver()
        self.applier = ModificationApplier()

        self.environmental_adapter = EnvironmentalAdapter()
        self.equipment_adapter = EquipmentAdapter()
        self.time_adapter = TimeAdapter()
        self.injury_adapter = InjuryAdapter()

    def adapt_plan(self, plan: TrainingPlan, methodology: MethodologyInput,
                   environmental: Optional[EnvironmentalConditions] = None,
                   equipment: Optional[EquipmentAvailability] = None,
                   time: Optional[TimeAvailability] = None,
                   injury: Optional[InjuryConstraints] = None,
                   recent_completed_workouts: Optional[Sequence[CompletedWorkout]] = None,
                   *, progress: Optional[ProgressMetrics] = None,
                   recovery: Optional[RecoveryMetrics] = None,
                   athlete_id: Optional[str] = None) -> AdaptationResult:
        """Adapt a plan to the athlete's constraints.

        Args:
            plan: Baseline training plan
            methodology: Methodology of the plan, as enum or name
            environmental: Training environment, None for no environmental constraints
            equipment: Equipment availability, None when unknown
            time: Weekly time budget, None when unconstrained
            injury: Current injuries, history and risk factors
            recent_completed_workouts: Recent training for dynamic injury risk
            progress: Progress metrics used for methodology pattern triggers
            recovery: Recovery markers used for triggers and recovery modifications
            athlete_id: Athlete whose response profile orders the result

        Returns:
            AdaptationResult with resolved, prioritized modifications

        Raises:
            InvalidInputError: If any input is malformed
        """
        resolved = resolve_methodology(methodology)
        environmental = environmental or EnvironmentalConditions()
        equipment = equipment or EquipmentAvailability()
        time = time or TimeAvailability()
        injury = injury or InjuryConstraints()
        completed = list(recent_completed_workouts or [])

        validate_plan(plan)
        validate_environmental(environmental)
        validate_equipment(equipment)
        validate_time(time)
        validate_injury(injury)
        validate_completed_workouts(completed)
        if progress is not None:
            validate_progress(progress)
        if recovery is not None:
            validate_recovery(recovery)
        if athlete_id is not None:
            validate_athlete_id(athlete_id)

        profile = self.registry.get(resolved)
        candidates = GeneratorOutput()
        failures: List[Recommendation] = []

        generators: Dict[str, Callable[[], GeneratorOutput]] = {
            "environmental": lambda: self.environmental_adapter.generate(plan, profile, environmental),
            "equipment": lambda: self.equipment_adapter.generate(plan, profile, equipment),
            "time": lambda: self.time_adapter.generate(plan, profile, time),
            "injury": lambda: self.injury_adapter.generate(plan, profile, injury, completed),
        }
        for category, generate in generators.items():
            output = self._run_isolated(category, generate, failures)
            if output is not None:
                logger.debug(f"{category} generator produced {len(output.modifications)} modifications")
                candidates.extend(output)

        modifications = candidates.modifications
        if progress is not None or recovery is not None:
            modifications.extend(self._progress_modifications(profile, progress, recovery))

        response_profile = self.learner.get_profile(athlete_id, resolved) if athlete_id else None
        final = prioritize(self.resolver.resolve(modifications), response_profile)
        logger.debug(f"{len(modifications)} candidate modifications resolved to {len(final)}")

        constraints = self._group_constraints(candidates)
        recommendations = failures + generate_recommendations(environmental, equipment, time, injury, profile)

        return AdaptationResult(
            modifications=tuple(final),
            constraints=constraints,
            recommendations=tuple(recommendations),
            risk_assessment=assess_risk(final, injury),
            effectiveness=calculate_effectiveness(final, constraints, profile),
        )

    def suggest_methodology_modifications(self, plan: TrainingPlan, methodology: MethodologyInput,
                                          progress: ProgressMetrics,
                                          recovery: Optional[RecoveryMetrics] = None,
                                          athlete_id: Optional[str] = None) -> List[Modification]:
        """Progress-driven and pattern-triggered modifications, prioritized for the athlete."""
        resolved = resolve_methodology(methodology)
        validate_plan(plan)
        validate_progress(progress)
        if recovery is not None:
            validate_recovery(recovery)
        if athlete_id is not None:
            validate_athlete_id(athlete_id)

        profile = self.registry.get(resolved)
        modifications = self._progress_modifications(profile, progress, recovery)
        response_profile = self.learner.get_profile(athlete_id, resolved) if athlete_id else None
        return prioritize(self.resolver.resolve(modifications), response_profile)

    def analyze_progress(self, completed: Sequence[CompletedWorkout], planned: TrainingPlan,
                         methodology: MethodologyInput) -> ProgressMetrics:
        resolved = resolve_methodology(methodology)
        validate_plan(planned)
        validate_completed_workouts(completed)
        return progress_analysis.analyze_progress(completed, planned.workouts, self.registry.get(resolved))

    def apply_modifications(self, plan: TrainingPlan, modifications: Sequence[Modification],
                            as_of: Optional[datetime] = None) -> TrainingPlan:
        """Apply modifications to the workouts scheduled after ``as_of`` (default now).

        Returns a new plan; the input plan is left unchanged.
        """
        validate_plan(plan)
        validate_modifications(modifications)
        return self.applier.apply(plan, modifications, as_of)

    def needs_adaptation(self, progress: ProgressMetrics, recovery: Optional[RecoveryMetrics] = None) -> bool:
        validate_progress(progress)
        if recovery is not None:
            validate_recovery(recovery)
        return progress_analysis.needs_adaptation(progress, recovery)

    def assess_recovery_status(self, completed: Sequence[CompletedWorkout],
                               recovery: Optional[RecoveryMetrics] = None) -> RecoveryStatus:
        validate_completed_workouts(completed)
        if recovery is not None:
            validate_recovery(recovery)
        return progress_analysis.assess_recovery_status(completed, recovery)

    def detect_fatigue(self, completed: Sequence[CompletedWorkout], upcoming: Sequence[PlannedWorkout],
                       as_of: Optional[datetime] = None) -> FatigueAssessment:
        """Fatigue level from recent training, with the upcoming workouts scaled to it."""
        validate_completed_workouts(completed)
        validate_plan(TrainingPlan(workouts=list(upcoming)))
        return progress_analysis.detect_fatigue(completed, upcoming, as_of)

    def assess_overreaching_risk(self, completed: Sequence[CompletedWorkout], planned: TrainingPlan,
                                 as_of: Optional[datetime] = None) -> OverreachingAssessment:
        validate_completed_workouts(completed)
        validate_plan(planned)
        return progress_analysis.assess_overreaching_risk(completed, planned.workouts, as_of)

    def update_response_profile(self, athlete_id: str, methodology: MethodologyInput,
                                modification: Modification, outcome: OutcomeMetrics) -> None:
        """Learn from the observed outcome of an applied modification."""
        resolved = resolve_methodology(methodology)
        validate_athlete_id(athlete_id)
        validate_outcome(modification, outcome)
        self.learner.record_outcome(athlete_id, resolved, modification, outcome)

    def get_response_profile(self, athlete_id: str, methodology: MethodologyInput) -> Optional[ResponseProfile]:
        return self.learner.get_profile(athlete_id, resolve_methodology(methodology))

    def _progress_modifications(self, profile: MethodologyProfile, progress: Optional[ProgressMetrics],
                                recovery: Optional[RecoveryMetrics]) -> List[Modification]:
        modifications = progress_analysis.suggest_progress_modifications(progress or ProgressMetrics(), recovery)

        metrics = progress_analysis.trigger_metrics(progress, recovery)
        history = progress.metric_history if progress is not None else None
        triggered = self.matcher.triggered_modifications(profile.patterns, metrics, history)
        if triggered:
            logger.debug(f"{profile.name} patterns added {len(triggered)} modifications")
        modifications.extend(triggered)
        return modifications

    @staticmethod
    def _run_isolated(category: str, generate: Callable[[], GeneratorOutput],
                      failures: List[Recommendation]) -> Optional[GeneratorOutput]:
        try:
            return generate()
        except Exception:
            logger.exception(f"{category} adaptations failed; continuing without them")
            failures.append(system_failure_recommendation(category))
            return None

    @staticmethod
    def _group_constraints(output: GeneratorOutput) -> ConstraintSet:
        return ConstraintSet(
            environmental=tuple(c for c in output.constraints if isinstance(c, EnvironmentalConstraint)),
            equipment=tuple(c for c in output.constraints if isinstance(c, EquipmentConstraint)),
            time=tuple(c for c in output.constraints if isinstance(c, TimeConstraint)),
            injury=tuple(c for c in output.constraints if isinstance(c, InjuryConstraint)),
        )
