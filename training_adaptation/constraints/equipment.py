"""Equipment and facility constraint adaptation."""

import logging

from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    EquipmentAvailability,
    EquipmentConstraint,
    GeneratorOutput,
    Modification,
    ModificationKind,
    Priority,
    TrainingPlan,
)

logger = logging.getLogger(__name__)


def _constraint(missing: str, substitute: str) -> EquipmentConstraint:
    return EquipmentConstraint(
        missing=missing,
        substitute=substitute,
        effectiveness=config.get_equipment_effectiveness(missing),
    )


class EquipmentAdapter:
    """Substitute workouts that depend on unavailable surfaces, facilities or gear.

    Unknown availability (``None``) is treated as available.
    """

    def generate(self, plan: TrainingPlan, profile: MethodologyProfile,
                 equipment: EquipmentAvailability) -> GeneratorOutput:
        output = GeneratorOutput()

        surfaces = equipment.available_surfaces
        if surfaces is not None and "track" not in surfaces:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="No track access - adapt interval workouts",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "substitute_workout_type": "vo2max",
                    "distance_adjustment": "time_based_vs_distance",
                    "landmark_navigation": True,
                },
            ))
            output.constraints.append(_constraint("running_track", "road_intervals_with_timing"))

        if equipment.has_gym is False:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="No gym access - bodyweight alternatives",
                priority=Priority.LOW,
                suggested_changes={
                    "substitute_workout_type": "strength",
                    "bodyweight_alternatives": True,
                    "outdoor_strength_options": True,
                },
            ))
            output.constraints.append(_constraint("gym_access", "bodyweight_and_outdoor_strength"))

        if equipment.has_pool is False and profile.requires_pool:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="No pool access - alternative recovery methods",
                priority=Priority.LOW,
                suggested_changes={
                    "substitute_workout_type": "cross_training",
                    "alternative_recovery": ("walking", "cycling", "yoga"),
                    "active_recovery_focus": True,
                },
            ))
            output.constraints.append(_constraint("pool_access", "land_based_recovery_activities"))

        gear = equipment.weather_gear
        if not gear.cold_weather or not gear.rain_gear:
            output.modifications.append(Modification(
                type=ModificationKind.DELAY_PROGRESSION,
                reason="Limited weather gear requires seasonal adaptations",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "delay_days": 7,
                    "indoor_seasonal_options": True,
                    "weather_window_optimization": True,
                },
            ))
            output.constraints.append(_constraint("weather_appropriate_gear", "indoor_alternatives_and_weather_timing"))

        safety = equipment.safety_equipment
        if not safety.lights and not safety.reflective_gear:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="Safety equipment limitations restrict dawn/dusk running",
                priority=Priority.HIGH,
                suggested_changes={
                    "substitute_workout_type": "easy",
                    "daylight_only_running": True,
                    "route_restrictions": "well_lit_areas_only",
                },
            ))
            output.constraints.append(_constraint("safety_equipment", "daylight_and_well_lit_area_restrictions"))

        logger.debug(f"Equipment adaptations: {len(output.modifications)} modifications")
        return output
