"""Application of resolved modifications to a training plan.

Modifications only change workouts scheduled after the reference date; past
workouts are history. The input plan is never mutated: every change produces
new ``PlannedWorkout`` records and a new ``TrainingPlan``.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from ..analysis.progress import classify_workout_type
from ..models import (
    Modification,
    ModificationKind,
    PlannedWorkout,
    PlanSummary,
    TrainingPlan,
)

logger = logging.getLogger(__name__)

HARD_INTENSITY = 80      # Workouts above this intensity are reduced
RECOVERY_CANDIDATE = 75  # Workouts above this intensity may become recovery runs
RECOVERY_MINUTES = 30
RECOVERY_INTENSITY = 50
COMPLETE_REST_DAYS = 7


def targets(modification: Modification, workout: PlannedWorkout) -> bool:
    """Whether ``workout_ids`` names the workout by id, type or effort class."""
    ids = modification.workout_ids
    return (
        workout.workout_id in ids
        or workout.workout_type in ids
        or classify_workout_type(workout.workout_type) in ids
    )


class ModificationApplier:
    """Apply modifications to a plan in priority order."""

    def __init__(self):
        self._handlers: Dict[ModificationKind, Callable[..., List[PlannedWorkout]]] = {
            ModificationKind.REDUCE_VOLUME: self._reduce_volume,
            ModificationKind.REDUCE_INTENSITY: self._reduce_intensity,
            ModificationKind.ADD_RECOVERY: self._add_recovery,
            ModificationKind.SUBSTITUTE_WORKOUT: self._substitute,
            ModificationKind.DELAY_PROGRESSION: self._delay_progression,
            ModificationKind.INJURY_PROTOCOL: self._injury_protocol,
        }

    def apply(self, plan: TrainingPlan, modifications: Sequence[Modification],
              as_of: Optional[datetime] = None) -> TrainingPlan:
        """Apply modifications to the plan's workouts.

        Args:
            plan: Plan to modify
            modifications: Modifications to apply, highest priority first regardless of input order
            as_of: Reference date, workouts after it are modified. Defaults to now

        Returns:
            New plan with modified workouts and a recalculated summary
        """
        as_of = as_of or datetime.now()
        workouts = list(plan.workouts)

        # sorted() is stable, so equal priorities keep their input order
        for modification in sorted(modifications, key=lambda m: -m.priority.rank):
            handler = self._handlers.get(modification.type)
            if handler is None:
                logger.debug(f"No plan change for {modification.type.value} modification")
                continue
            workouts = handler(workouts, modification, as_of)

        logger.debug(f"Applied {len(modifications)} modifications to {len(workouts)} workouts")
        return replace(plan, workouts=workouts, summary=self._recalculate_summary(plan.summary, workouts))

    @staticmethod
    def _recalculate_summary(summary: Optional[PlanSummary], workouts: List[PlannedWorkout]) -> Optional[PlanSummary]:
        if summary is None or not workouts:
            return summary
        return replace(
            summary,
            total_workouts=len(workouts),
            total_distance_km=sum(w.distance_km for w in workouts),
            total_time_minutes=sum(w.duration_minutes for w in workouts),
            recovery_days=sum(1 for w in workouts if w.workout_type == "recovery"),
        )

    @staticmethod
    def _reduce_volume(workouts, modification, as_of):
        factor = 1 - (modification.suggested_changes.get("volume_reduction") or 20) / 100
        return [
            replace(w, duration_minutes=w.duration_minutes * factor, distance_km=w.distance_km * factor)
            if w.date > as_of else w
            for w in workouts
        ]

    @staticmethod
    def _reduce_intensity(workouts, modification, as_of):
        factor = 1 - (modification.suggested_changes.get("intensity_reduction") or 20) / 100
        return [
            replace(w, intensity=w.intensity * factor)
            if w.date > as_of and w.intensity > HARD_INTENSITY else w
            for w in workouts
        ]

    @staticmethod
    def _add_recovery(workouts, modification, as_of, days=None):
        days = days or modification.suggested_changes.get("additional_recovery_days") or 2
        converted = 0
        result = []
        for workout in workouts:
            if workout.date > as_of and converted < days and workout.intensity > RECOVERY_CANDIDATE:
                converted += 1
                workout = replace(
                    workout,
                    workout_type="recovery",
                    name="Recovery Run (Modified)",
                    description="Easy recovery run - plan adjusted for fatigue",
                    duration_minutes=RECOVERY_MINUTES,
                    intensity=RECOVERY_INTENSITY,
                )
            result.append(workout)
        return result

    @staticmethod
    def _substitute(workouts, modification, as_of):
        substitute = modification.suggested_changes.get("substitute_workout_type") or "easy"
        result = []
        for workout in workouts:
            selected = targets(modification, workout) if modification.workout_ids else workout.date > as_of
            if selected:
                workout = replace(
                    workout,
                    workout_type=substitute,
                    name=f"{substitute.capitalize()} Run (Substituted)",
                    description=f"Workout substituted: {modification.reason}",
                )
            result.append(workout)
        return result

    @staticmethod
    def _delay_progression(workouts, modification, as_of):
        delay = timedelta(days=modification.suggested_changes.get("delay_days") or 7)
        return [replace(w, date=w.date + delay) if w.date > as_of else w for w in workouts]

    def _injury_protocol(self, workouts, modification, as_of):
        reduction = modification.suggested_changes.get("volume_reduction") or 100
        if reduction >= 100:
            # Complete rest for the coming week
            rest_until = as_of + timedelta(days=COMPLETE_REST_DAYS)
            return [w for w in workouts if w.date <= as_of or w.date > rest_until]
        return self._add_recovery(workouts, modification, as_of, days=COMPLETE_REST_DAYS)
