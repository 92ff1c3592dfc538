"""Domain records for plan adaptation.

Inputs (plans, completed workouts, constraint descriptions) are plain mutable
dataclasses supplied by the caller. Everything the engine produces is frozen:
modifications, constraint records, risk assessments and adaptation results are
created once per call and never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class Methodology(Enum):
    """Supported training methodologies."""
    DANIELS = "daniels"
    LYDIARD = "lydiard"
    PFITZINGER = "pfitzinger"
    HUDSON = "hudson"
    CUSTOM = "custom"


class ModificationKind(Enum):
    """Kinds of plan modifications."""
    REDUCE_VOLUME = "reduce_volume"
    INCREASE_VOLUME = "increase_volume"
    REDUCE_INTENSITY = "reduce_intensity"
    INCREASE_INTENSITY = "increase_intensity"
    ADD_RECOVERY = "add_recovery"
    SUBSTITUTE_WORKOUT = "substitute_workout"
    DELAY_PROGRESSION = "delay_progression"
    EXTEND_PHASE = "extend_phase"
    SHORTEN_PHASE = "shorten_phase"
    INJURY_PROTOCOL = "injury_protocol"
    INJURY_PREVENTION = "injury_prevention"
    RISK_MITIGATION = "risk_mitigation"


class Priority(Enum):
    """Modification priority with an explicit total order."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_RANKS = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


class Severity(Enum):
    """Severity of a specific risk."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]


_SEVERITY_RANKS = {
    Severity.LOW: 0,
    Severity.MODERATE: 1,
    Severity.HIGH: 2,
}


class RiskLevel(Enum):
    """Overall risk of an adaptation."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class RiskType(Enum):
    INJURY = "injury"
    OVERTRAINING = "overtraining"
    ENVIRONMENTAL = "environmental"
    ADHERENCE = "adherence"


class ConstraintImpact(Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class CompressionApproach(Enum):
    """Strategies for fitting training into limited time."""
    INTENSITY_FOCUS = "intensity_focus"
    VOLUME_REDUCTION = "volume_reduction"
    SESSION_COMBINATION = "session_combination"
    KEY_WORKOUT_ONLY = "key_workout_only"


class TriggerKind(Enum):
    PERFORMANCE_DECLINE = "performance_decline"
    FATIGUE_BUILDUP = "fatigue_buildup"
    RECOVERY_ISSUE = "recovery_issue"
    ADHERENCE_DROP = "adherence_drop"
    PLATEAU = "plateau"
    OVERREACHING = "overreaching"


class ConditionOperator(Enum):
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EQUALS = "equals"
    BETWEEN = "between"


class RecommendationCategory(Enum):
    ENVIRONMENTAL = "environmental"
    EQUIPMENT = "equipment"
    SCHEDULING = "scheduling"
    INJURY_PREVENTION = "injury_prevention"
    METHODOLOGY = "methodology"
    SYSTEM = "system"  # Isolated generator failures


GENERIC_PRINCIPLE = "General training principles"
GENERIC_CONFIDENCE = 70.0


# ---------------------------------------------------------------------------
# Modifications
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Modification:
    """A single suggested change to a training plan."""
    type: ModificationKind
    reason: str
    priority: Priority
    suggested_changes: Mapping[str, Any] = field(default_factory=dict)
    methodology_specific: bool = False
    philosophy_principle: str = GENERIC_PRINCIPLE
    confidence: float = GENERIC_CONFIDENCE  # 0-100
    workout_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        # Freeze the change set so results can be shared between callers
        if not isinstance(self.suggested_changes, MappingProxyType):
            object.__setattr__(self, "suggested_changes", MappingProxyType(dict(self.suggested_changes)))
        object.__setattr__(self, "workout_ids", tuple(self.workout_ids))

    def __hash__(self):
        # suggested_changes is a mapping and stays out of the hash
        return hash((self.type, self.reason, self.priority, self.philosophy_principle, self.workout_ids))

    @property
    def preference_key(self) -> Tuple[ModificationKind, str]:
        return self.type, self.philosophy_principle

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "reason": self.reason,
            "priority": self.priority.value,
            "suggested_changes": {k: list(v) if isinstance(v, tuple) else v
                                  for k, v in self.suggested_changes.items()},
            "methodology_specific": self.methodology_specific,
            "philosophy_principle": self.philosophy_principle,
            "confidence": self.confidence,
            "workout_ids": list(self.workout_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Modification":
        return cls(
            type=ModificationKind(data["type"]),
            reason=data["reason"],
            priority=Priority(data["priority"]),
            suggested_changes={k: tuple(v) if isinstance(v, list) else v
                               for k, v in data.get("suggested_changes", {}).items()},
            methodology_specific=data.get("methodology_specific", False),
            philosophy_principle=data.get("philosophy_principle", GENERIC_PRINCIPLE),
            confidence=data.get("confidence", GENERIC_CONFIDENCE),
            workout_ids=tuple(data.get("workout_ids", ())),
        )


# ---------------------------------------------------------------------------
# Constraint records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnvironmentalConstraint:
    factor: str
    limitation: str
    workaround: str
    impact: ConstraintImpact


@dataclass(frozen=True)
class EquipmentConstraint:
    missing: str
    substitute: str
    effectiveness: int  # % of the original training value retained


@dataclass(frozen=True)
class CompressionStrategy:
    approach: CompressionApproach
    retained_effectiveness: int  # percentage
    recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class WorkoutPriority:
    workout_type: str
    importance: int  # 1-10
    reason: str


@dataclass(frozen=True)
class TimeConstraint:
    shortfall_minutes: float  # per week
    compression: CompressionStrategy
    prioritization: Tuple[WorkoutPriority, ...]


@dataclass(frozen=True)
class InjuryConstraint:
    restriction: str
    alternative: str
    monitoring_required: bool


ConstraintRecord = Union[EnvironmentalConstraint, EquipmentConstraint, TimeConstraint, InjuryConstraint]


@dataclass(frozen=True)
class ConstraintSet:
    """Constraint records grouped by category."""
    environmental: Tuple[EnvironmentalConstraint, ...] = ()
    equipment: Tuple[EquipmentConstraint, ...] = ()
    time: Tuple[TimeConstraint, ...] = ()
    injury: Tuple[InjuryConstraint, ...] = ()


@dataclass
class GeneratorOutput:
    """Candidate modifications and the constraints that explain them."""
    modifications: List[Modification] = field(default_factory=list)
    constraints: List[ConstraintRecord] = field(default_factory=list)

    def extend(self, other: "GeneratorOutput") -> None:
        self.modifications.extend(other.modifications)
        self.constraints.extend(other.constraints)


# ---------------------------------------------------------------------------
# Constraint inputs
# ---------------------------------------------------------------------------

@dataclass
class EnvironmentalConditions:
    """Training environment for the plan period."""
    altitude_meters: Optional[float] = None
    temperature_celsius: Optional[float] = None
    humidity_percent: Optional[float] = None
    terrain: str = "flat"                    # flat, hilly, mixed, trail
    wind_speed_kmh: Optional[float] = None
    precipitation_mm: Optional[float] = None
    air_quality: Optional[str] = None        # good, moderate, poor, hazardous


@dataclass
class WeatherGear:
    cold_weather: bool = True
    rain_gear: bool = True
    wind_resistant: bool = True


@dataclass
class SafetyEquipment:
    reflective_gear: bool = True
    lights: bool = True
    emergency_device: bool = True


@dataclass
class EquipmentAvailability:
    """Available surfaces and facilities. ``None`` means unknown."""
    available_surfaces: Optional[List[str]] = None  # road, track, trail, treadmill
    has_gym: Optional[bool] = None
    has_pool: Optional[bool] = None
    weather_gear: WeatherGear = field(default_factory=WeatherGear)
    safety_equipment: SafetyEquipment = field(default_factory=SafetyEquipment)


@dataclass
class DurationPreference:
    min_minutes: float
    max_minutes: float
    optimal_minutes: float


@dataclass
class TimeAvailability:
    """Weekly time budget for training."""
    weekly_available_hours: Optional[float] = None
    daily_time_slots: Dict[str, float] = field(default_factory=dict)  # morning/afternoon/evening minutes
    preferred_workout_duration: Optional[DurationPreference] = None
    flexibility_level: str = "moderate"  # rigid, moderate, flexible
    consistent_schedule: bool = True


@dataclass
class InjuryStatus:
    type: str
    severity: str                          # minor, moderate, severe
    stage: str                             # acute, healing, chronic
    restrictions: List[str] = field(default_factory=list)
    expected_recovery_weeks: float = 0
    region: Optional[str] = None           # knee, ankle, foot, hip, back, ...


@dataclass
class BodyRegion:
    area: str
    pain_level: int  # 1-10
    functional_limitation: List[str] = field(default_factory=list)


@dataclass
class RiskFactor:
    type: str                              # biomechanical, training_load, environmental, equipment, lifestyle
    description: str
    severity: str                          # low, moderate, high
    mitigation_strategies: List[str] = field(default_factory=list)


@dataclass
class RecoveryProtocol:
    type: str                              # rest, active_recovery, therapy, cross_training
    frequency: str
    duration: str
    effectiveness: int  # 1-100


@dataclass
class InjuryConstraints:
    current_injuries: List[InjuryStatus] = field(default_factory=list)
    injury_history: List[str] = field(default_factory=list)
    pain_areas: List[BodyRegion] = field(default_factory=list)
    risk_factors: List[RiskFactor] = field(default_factory=list)
    recovery_protocols: List[RecoveryProtocol] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Plans and workouts
# ---------------------------------------------------------------------------

@dataclass
class PlannedWorkout:
    date: datetime
    workout_type: str                      # easy, tempo, threshold, intervals, long, recovery, ...
    duration_minutes: float = 0.0
    distance_km: float = 0.0
    workout_id: str = ""
    intensity: float = 0.0                 # % of maximal effort, 0 when unknown
    name: str = ""
    description: str = ""
    estimated_tss: Optional[float] = None


@dataclass
class TrainingBlock:
    phase: str                             # base, build, peak, taper, recovery
    start_date: datetime
    end_date: datetime
    weeks: int
    focus_areas: List[str] = field(default_factory=list)


@dataclass
class PlanSummary:
    total_weeks: int
    total_workouts: int = 0
    total_distance_km: float = 0.0
    total_time_minutes: float = 0.0
    key_workouts: int = 0
    recovery_days: int = 0


@dataclass
class TrainingPlan:
    """Baseline plan produced by the plan generator."""
    id: Optional[str] = None
    blocks: List[TrainingBlock] = field(default_factory=list)
    summary: Optional[PlanSummary] = None
    workouts: List[PlannedWorkout] = field(default_factory=list)


@dataclass
class CompletedWorkout:
    date: datetime
    workout_id: str = ""
    actual_distance_km: Optional[float] = None
    actual_duration_minutes: Optional[float] = None
    perceived_effort: Optional[float] = None  # 1-10
    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    planned_workout_type: Optional[str] = None
    planned_duration_minutes: Optional[float] = None
    notes: str = ""


@dataclass
class RecoveryMetrics:
    """Subjective and physiological recovery markers."""
    sleep_quality: Optional[float] = None     # 1-10
    muscle_soreness: Optional[float] = None   # 1-10
    energy_level: Optional[float] = None      # 1-10
    hrv: Optional[float] = None               # ms
    resting_heart_rate: Optional[float] = None
    injury_status: str = "none"               # none, injured
    illness_status: str = "none"              # none, sick
    recovery_score: Optional[float] = None    # 0-100, overrides the composite


@dataclass
class MethodologyInsights:
    methodology: Methodology
    philosophy_alignment: float               # 0-100
    intensity_distribution: Dict[str, float]
    compliance_score: float
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ProgressMetrics:
    """Pre-aggregated progress signals consumed by trigger matching."""
    adherence_rate: float = 1.0
    performance_trend: str = "stable"         # improving, stable, declining
    completed_workouts: List[CompletedWorkout] = field(default_factory=list)
    metrics: Dict[str, float] = field(default_factory=dict)
    metric_history: Dict[str, List[float]] = field(default_factory=dict)  # daily values, most recent last
    insights: Optional[MethodologyInsights] = None


# ---------------------------------------------------------------------------
# Adaptation patterns
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TriggerCondition:
    metric: str
    operator: ConditionOperator
    value: Union[float, Tuple[float, float]]
    confidence: float  # 0-100


@dataclass(frozen=True)
class AdaptationTrigger:
    type: TriggerKind
    conditions: Tuple[TriggerCondition, ...]
    minimum_duration_days: int
    philosophy_context: str


@dataclass(frozen=True)
class AdaptationResponse:
    modifications: Tuple[Modification, ...]
    rationale: str
    expected_duration_days: int
    monitoring_period_days: int
    rollback_criteria: Tuple[TriggerCondition, ...]
    philosophy_justification: str


@dataclass(frozen=True)
class AdaptationPattern:
    id: str
    methodology: Methodology
    name: str
    trigger: AdaptationTrigger
    response: AdaptationResponse
    philosophy_alignment: float  # 0-100
    success_rate: float


# ---------------------------------------------------------------------------
# Response profiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutcomeMetrics:
    """Observed outcome after applying a modification (% changes)."""
    performance_change: float
    adherence_change: float
    recovery_change: float
    satisfaction_change: float


@dataclass(frozen=True)
class ResponseRecord:
    applied_at: datetime
    modification: Modification
    outcome: OutcomeMetrics
    effectiveness: float
    notes: str = ""


@dataclass
class EffectivenessTrends:
    volume: float = 50.0
    intensity: float = 50.0
    recovery: float = 50.0
    workout_type: float = 50.0


@dataclass
class ResponseProfile:
    """Learned per-athlete, per-methodology response record."""
    athlete_id: str
    methodology: Methodology
    response_history: List[ResponseRecord] = field(default_factory=list)
    effectiveness_trends: EffectivenessTrends = field(default_factory=EffectivenessTrends)
    preferred_modifications: List[Modification] = field(default_factory=list)
    avoided_modifications: List[Modification] = field(default_factory=list)
    last_updated: Optional[datetime] = None

    @property
    def key(self) -> Tuple[str, Methodology]:
        return self.athlete_id, self.methodology

    def snapshot(self) -> "ResponseProfile":
        """Independent copy; modifications and records are immutable and shared."""
        return ResponseProfile(
            athlete_id=self.athlete_id,
            methodology=self.methodology,
            response_history=list(self.response_history),
            effectiveness_trends=EffectivenessTrends(**vars(self.effectiveness_trends)),
            preferred_modifications=list(self.preferred_modifications),
            avoided_modifications=list(self.avoided_modifications),
            last_updated=self.last_updated,
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Recommendation:
    category: RecommendationCategory
    priority: Priority
    recommendation: str
    implementation: str
    expected_benefit: str
    weeks_to_effect: int


@dataclass(frozen=True)
class SpecificRisk:
    type: RiskType
    probability: float  # 0-100
    severity: Severity
    factors: Tuple[str, ...]


@dataclass(frozen=True)
class RiskAssessment:
    overall_risk: RiskLevel
    specific_risks: Tuple[SpecificRisk, ...]
    mitigation_required: bool
    monitoring_points: Tuple[str, ...]


@dataclass(frozen=True)
class AdaptationResult:
    """Conflict-resolved, prioritized adaptation of a plan."""
    modifications: Tuple[Modification, ...]
    constraints: ConstraintSet
    recommendations: Tuple[Recommendation, ...]
    risk_assessment: RiskAssessment
    effectiveness: float  # 50-100


@dataclass(frozen=True)
class RecoveryStatus:
    score: float  # 0-100
    status: str   # recovered, adequate, fatigued, overreached
    recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class FatigueAssessment:
    """Fatigue level from recent training and the upcoming workouts adjusted for it."""
    level: str  # low, moderate, high, severe
    acute_fatigue: float  # 0-100
    chronic_fatigue_days: int
    overload_days: int  # Longest run of consecutive days above the daily TSS limit
    acute_chronic_ratio: float
    adjusted_workouts: Tuple[PlannedWorkout, ...]
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class OverreachingAssessment:
    risk_level: RiskLevel
    acute_chronic_ratio: float
    weekly_load_increase: float  # % vs the average week
    current_risk: int  # 0-100
    projected_risk: int  # 0-100
    mitigation_strategies: Tuple[str, ...]
