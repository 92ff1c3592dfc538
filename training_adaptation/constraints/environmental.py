"""
Environmental constraint adaptation.

Translates the training environment into plan modifications:
- Altitude: intensity reduction stepped by elevation, acclimatization delay
- Temperature: heat index driven intensity cuts, cold-weather warm-up changes
- Terrain: hill integration, trail pacing
- Weather: wind, precipitation and air quality safety substitutions
"""

import logging
import math
from typing import Optional

from ..config import config
from ..methodology import MethodologyProfile
from ..models import (
    ConstraintImpact,
    EnvironmentalConditions,
    EnvironmentalConstraint,
    GeneratorOutput,
    Modification,
    ModificationKind,
    Priority,
    TrainingPlan,
)

logger = logging.getLogger(__name__)

HEAT_INDEX_MIN_TEMPERATURE = 27  # Celsius; below this the heat index equals the temperature
SIGNIFICANT_HEAT_INDEX = 40

# Heat index regression coefficients (Celsius form)
_HEAT_INDEX_COEFFICIENTS = (
    -8.78469475556,
    1.61139411,
    2.33854883889,
    -0.14611605,
    -0.012308094,
    -0.0164248277778,
    0.002211732,
    0.00072546,
    -0.000003582,
)


def calculate_heat_index(temperature: float, humidity: float) -> float:
    """Apparent temperature in Celsius from air temperature and relative humidity."""
    if temperature < HEAT_INDEX_MIN_TEMPERATURE:
        return temperature

    c1, c2, c3, c4, c5, c6, c7, c8, c9 = _HEAT_INDEX_COEFFICIENTS
    t, h = temperature, humidity
    return (
        c1
        + c2 * t
        + c3 * h
        + c4 * t * h
        + c5 * t * t
        + c6 * h * h
        + c7 * t * t * h
        + c8 * t * h * h
        + c9 * t * t * h * h
    )


def altitude_level(altitude: float) -> str:
    if altitude < config.ALTITUDE_THRESHOLD:
        return "sea_level"
    if altitude < config.ALTITUDE_MODERATE:
        return "low"
    if altitude < config.ALTITUDE_HIGH:
        return "moderate"
    if altitude < config.ALTITUDE_EXTREME:
        return "high"
    return "extreme"


def altitude_intensity_reduction(altitude: float) -> float:
    """Intensity reduction (%) at altitude: 10% plus 5% per 500 m above threshold, capped."""
    if altitude < config.ALTITUDE_THRESHOLD:
        return 0
    steps = math.floor((altitude - config.ALTITUDE_THRESHOLD) / 500)
    return min(10 + steps * 5, config.MAX_ALTITUDE_INTENSITY_REDUCTION)


def acclimatization_weeks(altitude: float) -> int:
    return math.ceil(altitude / 1000)


class EnvironmentalAdapter:
    """Generate modifications for altitude, heat, terrain and weather."""

    def generate(self, plan: TrainingPlan, profile: MethodologyProfile,
                 environmental: EnvironmentalConditions) -> GeneratorOutput:
        output = GeneratorOutput()

        altitude = environmental.altitude_meters
        if altitude is not None and altitude > config.ALTITUDE_THRESHOLD:
            output.extend(self._altitude(altitude, profile))

        if environmental.temperature_celsius is not None:
            humidity = environmental.humidity_percent if environmental.humidity_percent is not None else 50
            output.extend(self._temperature(environmental.temperature_celsius, humidity))

        output.extend(self._terrain(environmental.terrain, profile))
        output.extend(self._weather(environmental))

        logger.debug(f"Environmental adaptations: {len(output.modifications)} modifications, "
                     f"{len(output.constraints)} constraints")
        return output

    def _altitude(self, altitude: float, profile: MethodologyProfile) -> GeneratorOutput:
        output = GeneratorOutput()
        level = altitude_level(altitude)
        reduction = altitude_intensity_reduction(altitude)

        changes = {"intensity_reduction": reduction}
        if altitude > config.ALTITUDE_HIGH:
            changes["phase_adjustment"] = "extend_base"
        output.modifications.append(Modification(
            type=ModificationKind.REDUCE_INTENSITY,
            reason=f"Altitude adaptation at {altitude:.0f}m ({level} altitude)",
            priority=Priority.HIGH,
            suggested_changes=changes,
        ))

        weeks = acclimatization_weeks(altitude)
        capped_weeks = min(weeks, config.MAX_ACCLIMATIZATION_WEEKS)
        output.modifications.append(Modification(
            type=ModificationKind.DELAY_PROGRESSION,
            reason="Altitude acclimatization period required",
            priority=Priority.MEDIUM,
            suggested_changes={
                "delay_days": capped_weeks * 7,
                "extend_phase": "base",
                "extension_weeks": capped_weeks,
            },
        ))

        if profile.altitude_vdot_correction:
            correction = math.floor(altitude / 300)
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_INTENSITY,
                reason="VDOT calculations require altitude correction",
                priority=Priority.HIGH,
                suggested_changes={
                    "intensity_reduction": min(correction, config.MAX_ALTITUDE_INTENSITY_REDUCTION),
                    "vdot_adjustment": -correction,
                },
            ))

        if profile.altitude_base_extension:
            base_weeks = min(math.ceil(altitude / 800), 6)
            output.modifications.append(Modification(
                type=ModificationKind.DELAY_PROGRESSION,
                reason=f"{profile.methodology.value.capitalize()} aerobic base requires longer adaptation at altitude",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "delay_days": base_weeks * 7,
                    "extend_phase": "base",
                    "extension_weeks": base_weeks,
                },
            ))

        output.constraints.append(EnvironmentalConstraint(
            factor="altitude",
            limitation=f"Reduced oxygen availability at {altitude:.0f}m",
            workaround=f"{reduction:.0f}% intensity reduction with {weeks}-week adaptation",
            impact=ConstraintImpact.SIGNIFICANT if altitude > config.ALTITUDE_HIGH else ConstraintImpact.MODERATE,
        ))
        return output

    def _temperature(self, temperature: float, humidity: float) -> GeneratorOutput:
        output = GeneratorOutput()
        heat_index = calculate_heat_index(temperature, humidity)

        if temperature < config.TEMPERATURE_COLD:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason=f"Cold weather adaptations for {temperature:.0f}°C",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "substitute_workout_type": "easy",
                    "warmup_extension": 15,
                    "indoor_alternatives": True,
                    "layering_recommendations": True,
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="cold_temperature",
                limitation=f"Increased injury risk and longer warmup required at {temperature:.0f}°C",
                workaround="Extended warmup, layered clothing, indoor alternatives",
                impact=ConstraintImpact.MODERATE,
            ))

        if temperature > config.TEMPERATURE_HOT or heat_index > config.HEAT_INDEX_CAUTION:
            reduction = config.get_heat_intensity_reduction(heat_index)
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_INTENSITY,
                reason=f"Heat stress management (Heat Index: {heat_index:.1f}°C)",
                priority=Priority.HIGH,
                suggested_changes={
                    "intensity_reduction": reduction,
                    "hydration_increase": min(50, max(0, (heat_index - 25) * 2)),
                    "timing_adjustment": "early_morning_or_evening",
                },
            ))
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="Heat avoidance scheduling",
                priority=Priority.HIGH,
                suggested_changes={
                    "substitute_workout_type": "easy",
                    "avoid_time_windows": ("10:00-16:00",),
                    "preferred_times": ("05:00-08:00", "19:00-21:00"),
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="heat_index",
                limitation=f"Dangerous heat conditions ({heat_index:.1f}°C heat index)",
                workaround=f"{reduction:.0f}% intensity reduction, timing shifts, increased hydration",
                impact=ConstraintImpact.SIGNIFICANT if heat_index > SIGNIFICANT_HEAT_INDEX
                else ConstraintImpact.MODERATE,
            ))

        if humidity > config.HIGH_HUMIDITY:
            steps = math.ceil((humidity - 60) / 10)
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_INTENSITY,
                reason=f"High humidity ({humidity:.0f}%) pace adjustments",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "intensity_reduction": steps * 2,
                    "pace_slowing": steps * 5,
                    "recovery_extension": 20,
                },
            ))

        return output

    def _terrain(self, terrain: str, profile: MethodologyProfile) -> GeneratorOutput:
        output = GeneratorOutput()

        if terrain == "hilly":
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason="Hill terrain integration",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "substitute_workout_type": "hill_repeats",
                    "frequency": "weekly",
                    "intensity_adjustment": 5,
                },
            ))
            if profile.natural_hill_phase:
                output.modifications.append(Modification(
                    type=ModificationKind.DELAY_PROGRESSION,
                    reason=f"{profile.methodology.value.capitalize()} hill phase optimization for natural terrain",
                    priority=Priority.LOW,
                    suggested_changes={
                        "delay_days": 7,
                        "enhance_phase": "hill",
                        "natural_hill_integration": True,
                    },
                ))
            output.constraints.append(EnvironmentalConstraint(
                factor="hilly_terrain",
                limitation="Increased workload and impact stress",
                workaround="Natural hill training integration, adjusted pacing",
                impact=ConstraintImpact.MODERATE,
            ))

        elif terrain == "trail":
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_INTENSITY,
                reason="Trail running adaptations",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "intensity_reduction": 10,
                    "pace_adjustment": -10,
                    "stability_focus": True,
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="trail_surface",
                limitation="Variable footing, slower paces, navigation requirements",
                workaround="Adjusted pacing expectations, stability training",
                impact=ConstraintImpact.MODERATE,
            ))

        return output

    def _weather(self, environmental: EnvironmentalConditions) -> GeneratorOutput:
        output = GeneratorOutput()

        wind = environmental.wind_speed_kmh
        if wind is not None and wind > config.WIND_SPEED_LIMIT:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason=f"High wind speeds ({wind:.0f} km/h)",
                priority=Priority.MEDIUM,
                suggested_changes={
                    "substitute_workout_type": "easy",
                    "route_modification": "sheltered_areas",
                    "pace_variability": 15,
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="wind_speed",
                limitation=f"Challenging conditions at {wind:.0f} km/h",
                workaround="Sheltered routes, pace adjustments, safety considerations",
                impact=ConstraintImpact.SIGNIFICANT if wind > config.STRONG_WIND_SPEED
                else ConstraintImpact.MODERATE,
            ))

        precipitation = environmental.precipitation_mm
        if precipitation is not None and precipitation > config.PRECIPITATION_LIMIT:
            output.modifications.append(Modification(
                type=ModificationKind.SUBSTITUTE_WORKOUT,
                reason=f"Heavy precipitation ({precipitation:.0f}mm)",
                priority=Priority.HIGH,
                suggested_changes={
                    "substitute_workout_type": "easy",
                    "indoor_alternatives": True,
                    "safety_equipment": ("reflective_gear", "traction_devices"),
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="precipitation",
                limitation=f"Safety and traction concerns with {precipitation:.0f}mm precipitation",
                workaround="Indoor alternatives, safety equipment, route modifications",
                impact=ConstraintImpact.SIGNIFICANT if precipitation > config.HEAVY_PRECIPITATION
                else ConstraintImpact.MODERATE,
            ))

        air_quality: Optional[str] = environmental.air_quality
        if air_quality in config.AIR_QUALITY_REDUCTIONS:
            output.modifications.append(Modification(
                type=ModificationKind.REDUCE_INTENSITY,
                reason=f"Poor air quality ({air_quality})",
                priority=Priority.HIGH,
                suggested_changes={
                    "intensity_reduction": config.AIR_QUALITY_REDUCTIONS[air_quality],
                    "indoor_alternatives": True,
                    "timing_adjustment": "early_morning",
                },
            ))
            output.constraints.append(EnvironmentalConstraint(
                factor="air_quality",
                limitation=f"Health risks from {air_quality} air quality",
                workaround="Intensity reduction, indoor training, timing optimization",
                impact=ConstraintImpact.SIGNIFICANT if air_quality == "hazardous" else ConstraintImpact.MODERATE,
            ))

        return output
