"""Methodology profiles and adaptation-pattern tables.

Each supported methodology is described by one immutable ``MethodologyProfile``
record: its target intensity distribution, the principles it is built around,
the workout priorities used when time is short, the environmental extras it
asks for and its adaptation patterns. The records are collected in a
``MethodologyRegistry`` that is built once and handed to the engine.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .models import (
    AdaptationPattern,
    AdaptationResponse,
    AdaptationTrigger,
    ConditionOperator,
    Methodology,
    Modification,
    ModificationKind,
    Priority,
    TriggerCondition,
    TriggerKind,
    WorkoutPriority,
)


@dataclass(frozen=True)
class IntensityDistribution:
    """Target share of training time (%) per effort class."""
    easy: float
    moderate: float
    hard: float

    def as_dict(self) -> Dict[str, float]:
        return {"easy": self.easy, "moderate": self.moderate, "hard": self.hard}


@dataclass(frozen=True)
class MethodologyProfile:
    """Read-only parameters of one training methodology."""
    methodology: Methodology
    name: str
    intensity_distribution: IntensityDistribution
    principle_keywords: Tuple[str, ...]       # Terms that mark a modification as aligned
    workout_priorities: Tuple[WorkoutPriority, ...]
    patterns: Tuple[AdaptationPattern, ...] = ()
    requires_pool: bool = False               # Pool running used for recovery
    altitude_vdot_correction: bool = False    # Paces derived from VDOT need altitude correction
    altitude_base_extension: bool = False     # Aerobic base phase extended at altitude
    natural_hill_phase: bool = False          # Hilly terrain feeds the hill phase

    def references_principle(self, text: str) -> bool:
        """Whether text mentions one of the methodology's core principles."""
        lowered = text.lower()
        return any(keyword.lower() in lowered for keyword in self.principle_keywords)


class MethodologyRegistry:
    """Lookup of methodology profiles by ``Methodology``."""

    def __init__(self, profiles: Mapping[Methodology, MethodologyProfile]):
        missing = [m.value for m in Methodology if m not in profiles]
        if missing:
            raise ValueError(f"No methodology profile registered for: {', '.join(missing)}")
        self._profiles = MappingProxyType(dict(profiles))

    def get(self, methodology: Methodology) -> MethodologyProfile:
        return self._profiles[methodology]

    def patterns_for(self, methodology: Methodology) -> Tuple[AdaptationPattern, ...]:
        return self._profiles[methodology].patterns

    def __contains__(self, methodology) -> bool:
        return methodology in self._profiles

    def __iter__(self):
        return iter(self._profiles.values())


def _condition(metric: str, operator: ConditionOperator, value: float, confidence: float) -> TriggerCondition:
    return TriggerCondition(metric=metric, operator=operator, value=value, confidence=confidence)


def _base_priorities(overrides: Optional[Dict[str, int]] = None,
                     extra: Tuple[WorkoutPriority, ...] = ()) -> Tuple[WorkoutPriority, ...]:
    """Standard workout priorities with per-methodology importance overrides, most important first."""
    base = [
        ("long_run", 9, "Aerobic base development"),
        ("tempo", 8, "Lactate threshold development"),
        ("intervals", 7, "VO2max development"),
        ("easy", 6, "Recovery and aerobic maintenance"),
    ]
    overrides = overrides or {}
    priorities = [
        WorkoutPriority(workout_type=workout_type, importance=overrides.get(workout_type, importance), reason=reason)
        for workout_type, importance, reason in base
    ]
    priorities.extend(extra)
    # sorted() is stable, so equal importance keeps declaration order
    return tuple(sorted(priorities, key=lambda p: -p.importance))


def _daniels_patterns() -> Tuple[AdaptationPattern, ...]:
    vdot_decline = AdaptationPattern(
        id="daniels-vdot-decline",
        methodology=Methodology.DANIELS,
        name="VDOT Performance Decline",
        trigger=AdaptationTrigger(
            type=TriggerKind.PERFORMANCE_DECLINE,
            conditions=(_condition("vdot", ConditionOperator.LESS_THAN, -3, 80),),
            minimum_duration_days=7,
            philosophy_context="VDOT decline indicates need for pace adjustment or recovery",
        ),
        response=AdaptationResponse(
            modifications=(
                Modification(
                    type=ModificationKind.REDUCE_INTENSITY,
                    reason="VDOT decline requires pace recalibration",
                    priority=Priority.HIGH,
                    suggested_changes={"intensity_reduction": 5},
                    methodology_specific=True,
                    philosophy_principle="VDOT-based pace prescription",
                    confidence=90,
                    workout_ids=("tempo", "threshold", "intervals"),
                ),
            ),
            rationale="Daniels methodology requires pace adjustments when VDOT declines "
                      "to maintain appropriate training stress",
            expected_duration_days=14,
            monitoring_period_days=21,
            rollback_criteria=(_condition("vdot", ConditionOperator.GREATER_THAN, 2, 75),),
            philosophy_justification="Maintains 80/20 intensity distribution while adjusting for current fitness",
        ),
        philosophy_alignment=95,
        success_rate=85,
    )

    intensity_imbalance = AdaptationPattern(
        id="daniels-intensity-imbalance",
        methodology=Methodology.DANIELS,
        name="Intensity Distribution Imbalance",
        trigger=AdaptationTrigger(
            type=TriggerKind.FATIGUE_BUILDUP,
            conditions=(
                _condition("hard_percentage", ConditionOperator.GREATER_THAN, 25, 85),
                _condition("recovery_score", ConditionOperator.LESS_THAN, 70, 80),
            ),
            minimum_duration_days=5,
            philosophy_context="80/20 principle violation causing excessive fatigue",
        ),
        response=AdaptationResponse(
            modifications=(
                Modification(
                    type=ModificationKind.REDUCE_INTENSITY,
                    reason="Restore 80/20 intensity distribution",
                    priority=Priority.HIGH,
                    suggested_changes={"intensity_reduction": 15},
                    methodology_specific=True,
                    philosophy_principle="80/20 intensity distribution",
                    confidence=92,
                    workout_ids=("intervals", "tempo"),
                ),
            ),
            rationale="Excessive hard training violates Daniels 80/20 principle and leads to overreaching",
            expected_duration_days=10,
            monitoring_period_days=14,
            rollback_criteria=(_condition("hard_percentage", ConditionOperator.LESS_THAN, 22, 80),),
            philosophy_justification="Returns to fundamental 80/20 easy/hard distribution for sustainable training",
        ),
        philosophy_alignment=98,
        success_rate=88,
    )
    return vdot_decline, intensity_imbalance


def _lydiard_patterns() -> Tuple[AdaptationPattern, ...]:
    return (
        AdaptationPattern(
            id="lydiard-base-insufficient",
            methodology=Methodology.LYDIARD,
            name="Insufficient Aerobic Base",
            trigger=AdaptationTrigger(
                type=TriggerKind.PERFORMANCE_DECLINE,
                conditions=(
                    _condition("easy_percentage", ConditionOperator.LESS_THAN, 80, 90),
                    _condition("aerobic_efficiency", ConditionOperator.LESS_THAN, 70, 75),
                ),
                minimum_duration_days=7,
                philosophy_context="Aerobic base is the foundation of Lydiard methodology",
            ),
            response=AdaptationResponse(
                modifications=(
                    Modification(
                        type=ModificationKind.DELAY_PROGRESSION,
                        reason="Increase aerobic base development",
                        priority=Priority.MEDIUM,
                        # Negative reduction means more easy volume
                        suggested_changes={"volume_reduction": -15},
                        methodology_specific=True,
                        philosophy_principle="Aerobic base development",
                        confidence=88,
                        workout_ids=("easy", "long"),
                    ),
                ),
                rationale="Lydiard methodology requires strong aerobic base before quality work",
                expected_duration_days=21,
                monitoring_period_days=28,
                rollback_criteria=(_condition("aerobic_efficiency", ConditionOperator.GREATER_THAN, 75, 80),),
                philosophy_justification="Builds aerobic capacity through time-based easy running",
            ),
            philosophy_alignment=96,
            success_rate=82,
        ),
    )


def _pfitzinger_patterns() -> Tuple[AdaptationPattern, ...]:
    return (
        AdaptationPattern(
            id="pfitzinger-threshold-overload",
            methodology=Methodology.PFITZINGER,
            name="Lactate Threshold Overload",
            trigger=AdaptationTrigger(
                type=TriggerKind.FATIGUE_BUILDUP,
                conditions=(
                    _condition("threshold_volume", ConditionOperator.GREATER_THAN, 15, 85),
                    _condition("recovery_score", ConditionOperator.LESS_THAN, 65, 80),
                ),
                minimum_duration_days=5,
                philosophy_context="Excessive threshold volume can lead to plateau or decline",
            ),
            response=AdaptationResponse(
                modifications=(
                    Modification(
                        type=ModificationKind.SUBSTITUTE_WORKOUT,
                        reason="Reduce threshold load while maintaining aerobic base",
                        priority=Priority.MEDIUM,
                        suggested_changes={"substitute_workout_type": "easy"},
                        methodology_specific=True,
                        philosophy_principle="Progressive threshold development",
                        confidence=87,
                        workout_ids=("threshold",),
                    ),
                ),
                rationale="Pfitzinger emphasizes progressive threshold development, not excessive volume",
                expected_duration_days=14,
                monitoring_period_days=21,
                rollback_criteria=(_condition("recovery_score", ConditionOperator.GREATER_THAN, 72, 75),),
                philosophy_justification="Maintains threshold focus while preventing overload",
            ),
            philosophy_alignment=91,
            success_rate=79,
        ),
    )


def _hudson_patterns() -> Tuple[AdaptationPattern, ...]:
    return (
        AdaptationPattern(
            id="hudson-adaptive-response",
            methodology=Methodology.HUDSON,
            name="Individual Response Adaptation",
            trigger=AdaptationTrigger(
                type=TriggerKind.PLATEAU,
                # Days without improvement
                conditions=(_condition("performance_stagnation", ConditionOperator.GREATER_THAN, 14, 70),),
                minimum_duration_days=14,
                philosophy_context="Hudson methodology emphasizes adapting to individual response",
            ),
            response=AdaptationResponse(
                modifications=(
                    Modification(
                        type=ModificationKind.DELAY_PROGRESSION,
                        reason="Adapt training based on individual response patterns",
                        priority=Priority.LOW,
                        suggested_changes={"delay_days": 7},
                        methodology_specific=True,
                        philosophy_principle="Individual response monitoring",
                        confidence=75,
                    ),
                ),
                rationale="Hudson methodology requires frequent adjustments based on individual adaptation",
                expected_duration_days=7,
                monitoring_period_days=14,
                rollback_criteria=(_condition("performance_improvement", ConditionOperator.GREATER_THAN, 2, 70),),
                philosophy_justification="Highly individualized approach with frequent assessment and adjustment",
            ),
            philosophy_alignment=93,
            success_rate=71,
        ),
    )


def _custom_patterns() -> Tuple[AdaptationPattern, ...]:
    return (
        AdaptationPattern(
            id="custom-general-fatigue",
            methodology=Methodology.CUSTOM,
            name="General Fatigue Management",
            trigger=AdaptationTrigger(
                type=TriggerKind.FATIGUE_BUILDUP,
                conditions=(_condition("recovery_score", ConditionOperator.LESS_THAN, 60, 85),),
                minimum_duration_days=3,
                philosophy_context="General fatigue management without specific methodology bias",
            ),
            response=AdaptationResponse(
                modifications=(
                    Modification(
                        type=ModificationKind.ADD_RECOVERY,
                        reason="General fatigue requires increased recovery",
                        priority=Priority.HIGH,
                        suggested_changes={"additional_recovery_days": 2},
                        methodology_specific=False,
                        philosophy_principle="General recovery principles",
                        confidence=80,
                        workout_ids=("hard",),
                    ),
                ),
                rationale="Custom approach focuses on general training principles",
                expected_duration_days=7,
                monitoring_period_days=10,
                rollback_criteria=(_condition("recovery_score", ConditionOperator.GREATER_THAN, 70, 80),),
                philosophy_justification="General training principles without methodology bias",
            ),
            philosophy_alignment=60,
            success_rate=75,
        ),
    )


def build_default_registry() -> MethodologyRegistry:
    """Create the registry of built-in methodology profiles."""
    profiles = {
        Methodology.DANIELS: MethodologyProfile(
            methodology=Methodology.DANIELS,
            name="Jack Daniels",
            intensity_distribution=IntensityDistribution(easy=80, moderate=15, hard=5),
            principle_keywords=("VDOT", "precise"),
            workout_priorities=_base_priorities(),
            patterns=_daniels_patterns(),
            altitude_vdot_correction=True,
        ),
        Methodology.LYDIARD: MethodologyProfile(
            methodology=Methodology.LYDIARD,
            name="Arthur Lydiard",
            intensity_distribution=IntensityDistribution(easy=85, moderate=10, hard=5),
            principle_keywords=("aerobic", "base"),
            workout_priorities=_base_priorities({"long_run": 10, "easy": 8}),
            patterns=_lydiard_patterns(),
            requires_pool=True,
            altitude_base_extension=True,
            natural_hill_phase=True,
        ),
        Methodology.PFITZINGER: MethodologyProfile(
            methodology=Methodology.PFITZINGER,
            name="Pete Pfitzinger",
            intensity_distribution=IntensityDistribution(easy=75, moderate=20, hard=5),
            principle_keywords=("threshold", "progression"),
            workout_priorities=_base_priorities(
                {"tempo": 9},
                extra=(WorkoutPriority("medium_long", 8, "Pfitzinger signature workout"),),
            ),
            patterns=_pfitzinger_patterns(),
        ),
        Methodology.HUDSON: MethodologyProfile(
            methodology=Methodology.HUDSON,
            name="Brad Hudson",
            intensity_distribution=IntensityDistribution(easy=70, moderate=20, hard=10),
            principle_keywords=(),
            workout_priorities=_base_priorities(),
            patterns=_hudson_patterns(),
        ),
        Methodology.CUSTOM: MethodologyProfile(
            methodology=Methodology.CUSTOM,
            name="Custom Methodology",
            intensity_distribution=IntensityDistribution(easy=80, moderate=15, hard=5),
            principle_keywords=(),
            workout_priorities=_base_priorities(),
            patterns=_custom_patterns(),
        ),
    }
    return MethodologyRegistry(profiles)
