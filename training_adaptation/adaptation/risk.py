"""Risk and effectiveness assessment of a resolved modification set."""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    ConstraintSet,
    InjuryConstraints,
    Modification,
    Priority,
    RiskAssessment,
    RiskLevel,
    RiskType,
    Severity,
    SpecificRisk,
)

logger = logging.getLogger(__name__)

ENVIRONMENTAL_RISK_TERMS = ("altitude", "heat")


def identify_risks(modifications: Sequence[Modification],
                   injury: Optional[InjuryConstraints] = None) -> List[SpecificRisk]:
    risks = []

    if injury is not None and injury.current_injuries:
        risks.append(SpecificRisk(
            type=RiskType.INJURY,
            probability=70,
            severity=Severity.HIGH,
            factors=("current_active_injuries", "modified_training_plan"),
        ))

    high_priority = sum(1 for m in modifications if m.priority is Priority.HIGH)
    if high_priority > config.OVERTRAINING_HIGH_PRIORITY_LIMIT:
        risks.append(SpecificRisk(
            type=RiskType.OVERTRAINING,
            probability=60,
            severity=Severity.MODERATE,
            factors=("multiple_significant_adaptations", "training_stress_accumulation"),
        ))

    if len(modifications) > config.ADHERENCE_MODIFICATION_LIMIT:
        risks.append(SpecificRisk(
            type=RiskType.ADHERENCE,
            probability=80,
            severity=Severity.MODERATE,
            factors=("complex_adaptation_requirements", "overwhelming_modifications"),
        ))

    if any(term in m.reason.lower() for m in modifications for term in ENVIRONMENTAL_RISK_TERMS):
        risks.append(SpecificRisk(
            type=RiskType.ENVIRONMENTAL,
            probability=40,
            severity=Severity.MODERATE,
            factors=("challenging_environmental_conditions",),
        ))

    return risks


def overall_risk_level(risks: Sequence[SpecificRisk]) -> RiskLevel:
    """Combine specific risks into one level.

    The level never decreases when the average probability or the maximum
    severity increases. No specific risks means low risk.
    """
    if not risks:
        return RiskLevel.LOW

    average = float(np.mean([risk.probability for risk in risks]))
    worst = max((risk.severity for risk in risks), key=lambda s: s.rank)

    if average > 70 and worst is Severity.HIGH:
        return RiskLevel.CRITICAL
    if average > 60 or worst is Severity.HIGH:
        return RiskLevel.HIGH
    if average > 40 or worst is Severity.MODERATE:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def assess_risk(modifications: Sequence[Modification],
                injury: Optional[InjuryConstraints] = None) -> RiskAssessment:
    risks = identify_risks(modifications, injury)
    level = overall_risk_level(risks)
    return RiskAssessment(
        overall_risk=level,
        specific_risks=tuple(risks),
        mitigation_required=level in (RiskLevel.HIGH, RiskLevel.CRITICAL),
        monitoring_points=tuple(config.MONITORING_POINTS),
    )


def calculate_effectiveness(modifications: Sequence[Modification], constraints: ConstraintSet,
                            profile: MethodologyProfile) -> float:
    """Predicted effectiveness (50-100) of the adapted plan.

    Each priority class costs a per-modification penalty that shrinks as the
    class grows. Equipment substitutes and strong time compression cost a share
    of the training value they lose. Modifications that reference the
    methodology's core principles earn a small bonus.
    """
    critical = sum(1 for m in modifications if m.priority is Priority.CRITICAL)
    high = sum(1 for m in modifications if m.priority is Priority.HIGH)
    medium = sum(1 for m in modifications if m.priority is Priority.MEDIUM)

    score = 100.0
    score -= critical * max(10, 15 - critical * 2)
    score -= high * max(4, 8 - high)
    score -= medium * max(2, 3 - medium * 0.5)

    score -= sum((100 - c.effectiveness) * config.EQUIPMENT_PENALTY_WEIGHT for c in constraints.equipment)

    for constraint in constraints.time:
        retained = constraint.compression.retained_effectiveness
        if retained < config.TIME_PENALTY_RETAINED_LIMIT:
            score -= (100 - retained) * config.TIME_PENALTY_WEIGHT

    if any(profile.references_principle(m.reason) or profile.references_principle(m.philosophy_principle)
           for m in modifications):
        score += config.METHODOLOGY_ALIGNMENT_BONUS

    effectiveness = float(np.clip(score, config.EFFECTIVENESS_FLOOR, config.EFFECTIVENESS_CEILING))
    logger.debug(f"Predicted effectiveness {effectiveness:.1f} (raw {score:.1f})")
    return effectiveness
