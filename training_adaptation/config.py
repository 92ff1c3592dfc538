"""Configuration management for the training adaptation engine."""

import logging
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Profile store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./training_adaptation.db")

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Altitude thresholds (meters)
    ALTITUDE_THRESHOLD: float = float(os.getenv("ALTITUDE_THRESHOLD", "1500"))
    ALTITUDE_MODERATE: float = float(os.getenv("ALTITUDE_MODERATE", "2500"))
    ALTITUDE_HIGH: float = float(os.getenv("ALTITUDE_HIGH", "3500"))
    ALTITUDE_EXTREME: float = float(os.getenv("ALTITUDE_EXTREME", "4500"))
    MAX_ALTITUDE_INTENSITY_REDUCTION: float = float(os.getenv("MAX_ALTITUDE_INTENSITY_REDUCTION", "40"))
    MAX_ACCLIMATIZATION_WEEKS: int = int(os.getenv("MAX_ACCLIMATIZATION_WEEKS", "4"))

    # Temperature thresholds (Celsius)
    TEMPERATURE_COLD: float = float(os.getenv("TEMPERATURE_COLD", "0"))
    TEMPERATURE_HOT: float = float(os.getenv("TEMPERATURE_HOT", "30"))
    HEAT_INDEX_CAUTION: float = float(os.getenv("HEAT_INDEX_CAUTION", "32"))
    HIGH_HUMIDITY: float = float(os.getenv("HIGH_HUMIDITY", "80"))

    # Heat index bands -> intensity reduction (%)
    HEAT_INTENSITY_REDUCTIONS = {
        27: 0,
        32: 5,
        38: 15,
        46: 30,
    }
    EXTREME_HEAT_INTENSITY_REDUCTION: float = 50

    # Weather thresholds
    WIND_SPEED_LIMIT: float = float(os.getenv("WIND_SPEED_LIMIT", "20"))  # km/h
    STRONG_WIND_SPEED: float = float(os.getenv("STRONG_WIND_SPEED", "40"))  # km/h
    PRECIPITATION_LIMIT: float = float(os.getenv("PRECIPITATION_LIMIT", "5"))  # mm
    HEAVY_PRECIPITATION: float = float(os.getenv("HEAVY_PRECIPITATION", "20"))  # mm
    AIR_QUALITY_REDUCTIONS = {
        "poor": float(os.getenv("AIR_QUALITY_POOR_REDUCTION", "25")),
        "hazardous": float(os.getenv("AIR_QUALITY_HAZARDOUS_REDUCTION", "50")),
    }

    # Equipment substitutes: retained training value (%)
    EQUIPMENT_EFFECTIVENESS = {
        "running_track": int(os.getenv("EFFECTIVENESS_NO_TRACK", "85")),
        "gym_access": int(os.getenv("EFFECTIVENESS_NO_GYM", "70")),
        "pool_access": int(os.getenv("EFFECTIVENESS_NO_POOL", "80")),
        "weather_appropriate_gear": int(os.getenv("EFFECTIVENESS_NO_WEATHER_GEAR", "75")),
        "safety_equipment": int(os.getenv("EFFECTIVENESS_NO_SAFETY_GEAR", "60")),
    }

    # Time constraints
    DEFAULT_WEEKLY_MINUTES: float = float(os.getenv("DEFAULT_WEEKLY_MINUTES", "300"))
    LIMITED_WEEKLY_HOURS: float = float(os.getenv("LIMITED_WEEKLY_HOURS", "8"))
    MAX_TIME_VOLUME_REDUCTION: float = float(os.getenv("MAX_TIME_VOLUME_REDUCTION", "50"))
    INTENSITY_FOCUS_MAX_HOURS: float = float(os.getenv("INTENSITY_FOCUS_MAX_HOURS", "1.5"))
    VOLUME_REDUCTION_MAX_HOURS: float = float(os.getenv("VOLUME_REDUCTION_MAX_HOURS", "3"))
    SESSION_COMBINATION_MAX_HOURS: float = float(os.getenv("SESSION_COMBINATION_MAX_HOURS", "4.5"))
    SHORT_MORNING_SLOT_MINUTES: float = float(os.getenv("SHORT_MORNING_SLOT_MINUTES", "45"))
    SHORT_WORKOUT_MINUTES: float = float(os.getenv("SHORT_WORKOUT_MINUTES", "90"))

    # Injury
    INJURY_SEVERITY_FACTORS = {"minor": 0.1, "moderate": 0.3, "severe": 0.6}
    INJURY_STAGE_FACTORS = {"acute": 0.8, "healing": 0.5, "chronic": 0.3}
    MAX_INJURY_VOLUME_REDUCTION: float = float(os.getenv("MAX_INJURY_VOLUME_REDUCTION", "80"))
    DYNAMIC_INJURY_RISK_THRESHOLD: float = float(os.getenv("DYNAMIC_INJURY_RISK_THRESHOLD", "70"))
    DYNAMIC_RISK_WINDOW: int = int(os.getenv("DYNAMIC_RISK_WINDOW", "10"))

    # Workload model
    THRESHOLD_PACE: float = float(os.getenv("THRESHOLD_PACE", "300"))  # seconds per km
    ACUTE_LOAD_DAYS: float = float(os.getenv("ACUTE_LOAD_DAYS", "7"))
    CHRONIC_LOAD_DAYS: float = float(os.getenv("CHRONIC_LOAD_DAYS", "28"))
    SAFE_ACWR_LOWER: float = float(os.getenv("SAFE_ACWR_LOWER", "0.8"))
    SAFE_ACWR_UPPER: float = float(os.getenv("SAFE_ACWR_UPPER", "1.3"))
    HIGH_RISK_ACWR: float = float(os.getenv("HIGH_RISK_ACWR", "1.5"))
    MIN_RECOVERY_SCORE: float = float(os.getenv("MIN_RECOVERY_SCORE", "60"))
    LOW_ADHERENCE_RATE: float = float(os.getenv("LOW_ADHERENCE_RATE", "0.7"))

    # Fatigue and overreaching
    CHRONIC_FATIGUE_DAYS: int = int(os.getenv("CHRONIC_FATIGUE_DAYS", "5"))
    OVERREACHING_TSS_THRESHOLD: float = float(os.getenv("OVERREACHING_TSS_THRESHOLD", "150"))  # daily TSS
    FATIGUE_ADJUSTMENTS = {  # level -> (volume factor, intensity factor)
        "low": (1.0, 1.0),
        "moderate": (0.9, 0.95),
        "high": (0.7, 0.85),
        "severe": (0.5, 0.7),
    }
    DEFAULT_PLANNED_TSS: float = 50

    # Trigger matching
    TRIGGER_MIN_CONFIDENCE: float = float(os.getenv("TRIGGER_MIN_CONFIDENCE", "70"))

    # Response profile learning
    PROFILE_LEARNING_RATE: float = float(os.getenv("PROFILE_LEARNING_RATE", "0.3"))
    PROFILE_INITIAL_TREND: float = float(os.getenv("PROFILE_INITIAL_TREND", "50"))
    PREFERRED_THRESHOLD: float = float(os.getenv("PREFERRED_THRESHOLD", "75"))
    AVOIDED_THRESHOLD: float = float(os.getenv("AVOIDED_THRESHOLD", "40"))
    RESPONSE_WEIGHTS = {
        "performance": 0.4,
        "adherence": 0.3,
        "recovery": 0.2,
        "satisfaction": 0.1,
    }

    # Effectiveness scoring
    EFFECTIVENESS_FLOOR: float = float(os.getenv("EFFECTIVENESS_FLOOR", "50"))
    EFFECTIVENESS_CEILING: float = float(os.getenv("EFFECTIVENESS_CEILING", "100"))
    METHODOLOGY_ALIGNMENT_BONUS: float = float(os.getenv("METHODOLOGY_ALIGNMENT_BONUS", "5"))
    EQUIPMENT_PENALTY_WEIGHT: float = 0.05
    TIME_PENALTY_WEIGHT: float = 0.3
    TIME_PENALTY_RETAINED_LIMIT: float = 90

    # Risk assessment
    OVERTRAINING_HIGH_PRIORITY_LIMIT: int = int(os.getenv("OVERTRAINING_HIGH_PRIORITY_LIMIT", "3"))
    ADHERENCE_MODIFICATION_LIMIT: int = int(os.getenv("ADHERENCE_MODIFICATION_LIMIT", "8"))
    MONITORING_POINTS = [
        "Weekly injury check-ins",
        "Training load progression monitoring",
        "Environmental condition tracking",
        "Adherence and motivation assessment",
    ]

    @classmethod
    def get_heat_intensity_reduction(cls, heat_index: float) -> float:
        """Get intensity reduction (%) for a heat index in Celsius."""
        for upper_bound in sorted(cls.HEAT_INTENSITY_REDUCTIONS.keys()):
            if heat_index < upper_bound:
                return cls.HEAT_INTENSITY_REDUCTIONS[upper_bound]
        return cls.EXTREME_HEAT_INTENSITY_REDUCTION

    @classmethod
    def get_equipment_effectiveness(cls, missing: str) -> int:
        """Get retained effectiveness for a missing piece of equipment."""
        return cls.EQUIPMENT_EFFECTIVENESS.get(missing, 75)


config = Config()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Set the package logger level from configuration."""
    logger = logging.getLogger("training_adaptation")
    logger.setLevel((level or config.LOG_LEVEL).upper())
    return logger
