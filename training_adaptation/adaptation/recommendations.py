"""Athlete-facing recommendations derived from the constraint inputs."""

from typing import List, Optional

from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    EnvironmentalConditions,
    EquipmentAvailability,
    InjuryConstraints,
    Priority,
    Recommendation,
    RecommendationCategory,
    TimeAvailability,
)

MIN_SURFACE_VARIETY = 3
LOW_WEEKLY_HOURS = 6


def system_failure_recommendation(category: str) -> Recommendation:
    """Warning attached to a result when one constraint category could not be evaluated."""
    return Recommendation(
        category=RecommendationCategory.SYSTEM,
        priority=Priority.HIGH,
        recommendation=f"{category.capitalize()} adaptations unavailable",
        implementation=f"Review the {category} constraints manually before applying this plan",
        expected_benefit="Avoids training against unassessed constraints",
        weeks_to_effect=0,
    )


def generate_recommendations(environmental: EnvironmentalConditions, equipment: EquipmentAvailability,
                             time: TimeAvailability, injury: InjuryConstraints,
                             profile: MethodologyProfile) -> List[Recommendation]:
    """Recommendations for the given constraints, most urgent first."""
    recommendations = []
    altitude = environmental.altitude_meters

    if altitude is not None and altitude > config.ALTITUDE_MODERATE:
        recommendations.append(Recommendation(
            category=RecommendationCategory.ENVIRONMENTAL,
            priority=Priority.HIGH,
            recommendation="Consider altitude pre-acclimatization",
            implementation="Spend 1-2 weeks at moderate altitude before high altitude training",
            expected_benefit="Faster adaptation and reduced altitude sickness risk",
            weeks_to_effect=2,
        ))

    temperature = environmental.temperature_celsius
    if temperature is not None and temperature > config.TEMPERATURE_HOT:
        recommendations.append(Recommendation(
            category=RecommendationCategory.ENVIRONMENTAL,
            priority=Priority.HIGH,
            recommendation="Implement heat acclimatization protocol",
            implementation="Gradual exposure to hot conditions over 10-14 days",
            expected_benefit="Improved heat tolerance and reduced heat illness risk",
            weeks_to_effect=2,
        ))

    if environmental.terrain == "hilly":
        recommendations.append(Recommendation(
            category=RecommendationCategory.ENVIRONMENTAL,
            priority=Priority.MEDIUM,
            recommendation="Develop hill-specific training techniques",
            implementation="Practice uphill and downhill running form, add hill-specific strength work",
            expected_benefit="Improved efficiency and reduced injury risk on hilly terrain",
            weeks_to_effect=4,
        ))

    if environmental.air_quality in ("poor", "hazardous"):
        recommendations.append(Recommendation(
            category=RecommendationCategory.ENVIRONMENTAL,
            priority=Priority.HIGH,
            recommendation="Develop air quality monitoring and indoor alternatives",
            implementation="Use air quality apps, identify indoor training facilities",
            expected_benefit="Consistent training despite poor air quality conditions",
            weeks_to_effect=1,
        ))

    safety = equipment.safety_equipment
    if not safety.lights and not safety.reflective_gear:
        recommendations.append(Recommendation(
            category=RecommendationCategory.EQUIPMENT,
            priority=Priority.HIGH,
            recommendation="Invest in safety equipment for low-light running",
            implementation="Purchase LED lights and reflective vest/clothing",
            expected_benefit="Expanded training time windows and improved safety",
            weeks_to_effect=0,
        ))

    if equipment.has_gym is False:
        recommendations.append(Recommendation(
            category=RecommendationCategory.EQUIPMENT,
            priority=Priority.MEDIUM,
            recommendation="Develop home-based strength training setup",
            implementation="Invest in resistance bands, bodyweight program, basic equipment",
            expected_benefit="Maintain strength training without gym access",
            weeks_to_effect=1,
        ))

    surfaces = equipment.available_surfaces
    if surfaces is not None and len(surfaces) < MIN_SURFACE_VARIETY:
        recommendations.append(Recommendation(
            category=RecommendationCategory.EQUIPMENT,
            priority=Priority.LOW,
            recommendation="Identify additional training surfaces",
            implementation="Scout local trails, tracks, or indoor facilities",
            expected_benefit="Greater training variety and reduced injury risk",
            weeks_to_effect=2,
        ))

    hours: Optional[float] = time.weekly_available_hours
    if hours is not None and hours < LOW_WEEKLY_HOURS:
        recommendations.append(Recommendation(
            category=RecommendationCategory.SCHEDULING,
            priority=Priority.MEDIUM,
            recommendation="Focus on high-intensity, low-volume training approach",
            implementation="Emphasize quality over quantity, use interval training",
            expected_benefit="Maintain fitness with limited time commitment",
            weeks_to_effect=3,
        ))

    if any(factor.severity == "high" for factor in injury.risk_factors):
        recommendations.append(Recommendation(
            category=RecommendationCategory.INJURY_PREVENTION,
            priority=Priority.HIGH,
            recommendation="Implement comprehensive injury prevention program",
            implementation="Add strength training, mobility work, and recovery protocols",
            expected_benefit="Reduced injury risk and improved training consistency",
            weeks_to_effect=4,
        ))

    if profile.altitude_vdot_correction and altitude is not None and altitude > config.ALTITUDE_THRESHOLD:
        recommendations.append(Recommendation(
            category=RecommendationCategory.METHODOLOGY,
            priority=Priority.MEDIUM,
            recommendation="Adjust VDOT calculations for altitude",
            implementation="Use altitude-corrected VDOT tables and paces",
            expected_benefit="More accurate training zones at altitude",
            weeks_to_effect=1,
        ))

    # Stable: equal priorities keep rule order
    return sorted(recommendations, key=lambda r: r.priority.rank, reverse=True)
