"""Injury constraint adaptation: current injuries, injury history, risk factors, load-based risk."""

import logging
from typing import Dict, Optional, Sequence, Tuple

from ..analysis.workload import assess_dynamic_injury_risk
from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    CompletedWorkout,
    GeneratorOutput,
    InjuryConstraint,
    InjuryConstraints,
    InjuryStatus,
    Modification,
    ModificationKind,
    Priority,
    RiskFactor,
    TrainingPlan,
)

logger = logging.getLogger(__name__)

INJURY_ALTERNATIVES: Dict[str, Tuple[str, ...]] = {
    "knee": ("pool_running", "cycling", "upper_body_strength"),
    "ankle": ("pool_running", "upper_body_strength", "core_work"),
    "foot": ("pool_running", "cycling", "upper_body_strength"),
    "hip": ("pool_running", "walking", "core_strengthening"),
    "back": ("walking", "swimming", "gentle_yoga"),
}
DEFAULT_ALTERNATIVES = ("complete_rest", "gentle_walking")

PREVENTION_STRATEGIES: Dict[str, Dict[str, object]] = {
    "IT_band": {
        "primary_prevention": "hip_strengthening",
        "secondary_prevention": "foam_rolling",
        "volume_limit": 10,  # % below standard volume
    },
    "plantar_fasciitis": {
        "primary_prevention": "calf_stretching",
        "secondary_prevention": "arch_support",
        "surface_recommendations": ("avoid_concrete", "prefer_trails"),
    },
    "stress_fracture": {
        "primary_prevention": "gradual_progression",
        "secondary_prevention": "calcium_vitamin_d",
        "volume_limit": 15,
    },
}
DEFAULT_PREVENTION = {
    "primary_prevention": "standard_injury_prevention",
    "volume_limit": 5,
}


def injury_volume_reduction(severity: str, stage: str) -> float:
    """Volume reduction (%) scaled by injury severity and healing stage, capped."""
    factor = config.INJURY_SEVERITY_FACTORS[severity] * config.INJURY_STAGE_FACTORS[stage]
    return min(config.MAX_INJURY_VOLUME_REDUCTION, round(factor * 100, 2))


def injury_region(injury: InjuryStatus) -> Optional[str]:
    """Body region of an injury, from the explicit region or the injury type name."""
    if injury.region:
        return injury.region.lower()
    name = injury.type.lower()
    for region in INJURY_ALTERNATIVES:
        if region in name:
            return region
    return None


def injury_alternatives(injury: InjuryStatus) -> Tuple[str, ...]:
    return INJURY_ALTERNATIVES.get(injury_region(injury), DEFAULT_ALTERNATIVES)


def prevention_strategy(past_injury: str) -> Dict[str, object]:
    if past_injury in PREVENTION_STRATEGIES:
        return PREVENTION_STRATEGIES[past_injury]
    normalized = past_injury.strip().lower().replace(" ", "_").replace("-", "_")
    for name, strategy in PREVENTION_STRATEGIES.items():
        if name.lower() == normalized:
            return strategy
    return DEFAULT_PREVENTION


class InjuryAdapter:
    """Protect current injuries and prevent recurrence of past ones."""

    def generate(self, plan: TrainingPlan, profile: MethodologyProfile, injury: InjuryConstraints,
                 completed_workouts: Optional[Sequence[CompletedWorkout]] = None) -> GeneratorOutput:
        output = GeneratorOutput()

        for current in injury.current_injuries:
            output.extend(self._current_injury(current))

        # One prevention modification per history entry
        for past_injury in injury.injury_history:
            output.extend(self._prevention(past_injury))

        for factor in injury.risk_factors:
            output.modifications.append(self._risk_factor(factor))

        if completed_workouts:
            assessment = assess_dynamic_injury_risk(completed_workouts)
            if assessment.risk > config.DYNAMIC_INJURY_RISK_THRESHOLD:
                logger.info(f"High dynamic injury risk {assessment.risk}%: {', '.join(assessment.factors)}")
                output.modifications.append(Modification(
                    type=ModificationKind.INJURY_PROTOCOL,
                    reason=f"High dynamic injury risk detected ({assessment.risk}%)",
                    priority=Priority.HIGH,
                    suggested_changes={
                        "volume_reduction": 20,
                        "additional_recovery_days": 2,
                        "recovery_increase": 30,
                        "monitoring_increase": True,
                        "risk_factors": assessment.factors,
                    },
                ))

        return output

    def _current_injury(self, injury: InjuryStatus) -> GeneratorOutput:
        output = GeneratorOutput()
        alternatives = injury_alternatives(injury)

        output.modifications.append(Modification(
            type=ModificationKind.INJURY_PROTOCOL,
            reason=f"Current {injury.severity} {injury.type} in {injury.stage} stage",
            priority=Priority.HIGH,
            suggested_changes={
                "volume_reduction": injury_volume_reduction(injury.severity, injury.stage),
                "avoid_activities": tuple(injury.restrictions),
                "alternative_activities": alternatives,
                "monitoring_required": True,
            },
        ))
        output.constraints.append(InjuryConstraint(
            restriction=f"{injury.type} restrictions during {injury.stage} phase",
            alternative=", ".join(alternatives),
            monitoring_required=True,
        ))
        return output

    def _prevention(self, past_injury: str) -> GeneratorOutput:
        output = GeneratorOutput()
        strategy = prevention_strategy(past_injury)

        output.modifications.append(Modification(
            type=ModificationKind.INJURY_PREVENTION,
            reason=f"Prevention strategy for history of {past_injury}",
            priority=Priority.MEDIUM,
            suggested_changes=strategy,
        ))
        output.constraints.append(InjuryConstraint(
            restriction=f"Preventive measures for {past_injury} history",
            alternative=str(strategy.get("primary_prevention", "standard_prevention")),
            monitoring_required=True,
        ))
        return output

    def _risk_factor(self, factor: RiskFactor) -> Modification:
        return Modification(
            type=ModificationKind.RISK_MITIGATION,
            reason=f"{factor.severity} {factor.type} risk factor",
            priority=Priority.HIGH if factor.severity == "high" else Priority.MEDIUM,
            suggested_changes={
                "volume_reduction": 10,
                "mitigation_strategies": tuple(factor.mitigation_strategies),
                "monitoring": True,
            },
        )
