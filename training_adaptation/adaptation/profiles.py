"""Per-athlete response profiles: storage and learning.

A response profile records how an athlete responded to modifications applied
under one methodology. Every observed outcome is scored, appended to the
profile history and folded into an exponential moving average for the
modification's category. Consistently effective modifications become
preferred, ineffective ones avoided; the prioritizer uses both lists.

Profiles are the only shared mutable state of the engine. Stores serialise
updates per ``(athlete_id, methodology)`` key and hand out independent copies.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..analysis.workload import round_half_up
from ..config import config
from ..db import Database, ResponseProfileRecord
from ..models import (
    EffectivenessTrends,
    Methodology,
    Modification,
    ModificationKind,
    OutcomeMetrics,
    ResponseProfile,
    ResponseRecord,
)

logger = logging.getLogger(__name__)

ProfileKey = Tuple[str, Methodology]
ProfileUpdate = Callable[[Optional[ResponseProfile]], ResponseProfile]

# Modification kind -> effectiveness trend it feeds
TREND_BUCKETS: Dict[ModificationKind, str] = {
    ModificationKind.REDUCE_VOLUME: "volume",
    ModificationKind.INCREASE_VOLUME: "volume",
    ModificationKind.REDUCE_INTENSITY: "intensity",
    ModificationKind.INCREASE_INTENSITY: "intensity",
    ModificationKind.ADD_RECOVERY: "recovery",
    ModificationKind.INJURY_PROTOCOL: "recovery",
    ModificationKind.INJURY_PREVENTION: "recovery",
    ModificationKind.RISK_MITIGATION: "recovery",
    ModificationKind.SUBSTITUTE_WORKOUT: "workout_type",
    ModificationKind.DELAY_PROGRESSION: "workout_type",
    ModificationKind.EXTEND_PHASE: "workout_type",
    ModificationKind.SHORTEN_PHASE: "workout_type",
}


def response_effectiveness(outcome: OutcomeMetrics) -> float:
    """Weighted effectiveness of an observed outcome."""
    weights = config.RESPONSE_WEIGHTS
    return float(round_half_up(
        outcome.performance_change * weights["performance"]
        + outcome.adherence_change * weights["adherence"]
        + outcome.recovery_change * weights["recovery"]
        + outcome.satisfaction_change * weights["satisfaction"]
    ))


def new_profile(athlete_id: str, methodology: Methodology) -> ResponseProfile:
    initial = config.PROFILE_INITIAL_TREND
    return ResponseProfile(
        athlete_id=athlete_id,
        methodology=methodology,
        effectiveness_trends=EffectivenessTrends(
            volume=initial, intensity=initial, recovery=initial, workout_type=initial
        ),
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def profile_to_dict(profile: ResponseProfile) -> Dict[str, Any]:
    return {
        "athlete_id": profile.athlete_id,
        "methodology": profile.methodology.value,
        "response_history": [
            {
                "applied_at": record.applied_at.isoformat(),
                "modification": record.modification.to_dict(),
                "outcome": vars(record.outcome),
                "effectiveness": record.effectiveness,
                "notes": record.notes,
            }
            for record in profile.response_history
        ],
        "effectiveness_trends": vars(profile.effectiveness_trends),
        "preferred_modifications": [m.to_dict() for m in profile.preferred_modifications],
        "avoided_modifications": [m.to_dict() for m in profile.avoided_modifications],
        "last_updated": profile.last_updated.isoformat() if profile.last_updated else None,
    }


def profile_from_dict(data: Dict[str, Any]) -> ResponseProfile:
    last_updated = data.get("last_updated")
    return ResponseProfile(
        athlete_id=data["athlete_id"],
        methodology=Methodology(data["methodology"]),
        response_history=[
            ResponseRecord(
                applied_at=datetime.fromisoformat(record["applied_at"]),
                modification=Modification.from_dict(record["modification"]),
                outcome=OutcomeMetrics(**record["outcome"]),
                effectiveness=record["effectiveness"],
                notes=record.get("notes", ""),
            )
            for record in data.get("response_history", [])
        ],
        effectiveness_trends=EffectivenessTrends(**data["effectiveness_trends"]),
        preferred_modifications=[Modification.from_dict(m) for m in data.get("preferred_modifications", [])],
        avoided_modifications=[Modification.from_dict(m) for m in data.get("avoided_modifications", [])],
        last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
    )


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class ProfileStore(ABC):
    """Key-value store of response profiles with per-key serialised updates."""

    def __init__(self):
        self._locks: Dict[ProfileKey, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: ProfileKey) -> threading.Lock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _existing_lock(self, key: ProfileKey) -> Optional[threading.Lock]:
        """Lock of a key that has been written, or None. Reads never create locks."""
        with self._locks_guard:
            return self._locks.get(key)

    @abstractmethod
    def get(self, key: ProfileKey) -> Optional[ResponseProfile]:
        """Independent copy of the stored profile, or None."""

    @abstractmethod
    def update(self, key: ProfileKey, fn: ProfileUpdate) -> ResponseProfile:
        """Atomically replace the profile at ``key`` with ``fn(current)``."""

    @abstractmethod
    def keys(self) -> List[ProfileKey]:
        """Keys of all stored profiles."""


class InMemoryProfileStore(ProfileStore):
    """Process-local profile store."""

    def __init__(self):
        super().__init__()
        self._profiles: Dict[ProfileKey, ResponseProfile] = {}

    def get(self, key: ProfileKey) -> Optional[ResponseProfile]:
        # A profile is only stored after its key's lock exists
        lock = self._existing_lock(key)
        if lock is None:
            return None
        with lock:
            profile = self._profiles.get(key)
            return profile.snapshot() if profile else None

    def update(self, key: ProfileKey, fn: ProfileUpdate) -> ResponseProfile:
        with self._lock_for(key):
            current = self._profiles.get(key)
            updated = fn(current.snapshot() if current else None)
            self._profiles[key] = updated
            return updated.snapshot()

    def keys(self) -> List[ProfileKey]:
        with self._locks_guard:
            return list(self._profiles.keys())


class SqlProfileStore(ProfileStore):
    """Profile store persisted through SQLAlchemy as JSON documents."""

    def __init__(self, database: Optional[Database] = None):
        super().__init__()
        self.database = database or Database()

    @staticmethod
    def _query(session, key: ProfileKey):
        athlete_id, methodology = key
        return (
            session.query(ResponseProfileRecord)
            .filter_by(athlete_id=athlete_id, methodology=methodology.value)
            .one_or_none()
        )

    def get(self, key: ProfileKey) -> Optional[ResponseProfile]:
        with self.database.get_session() as session:
            record = self._query(session, key)
            return profile_from_dict(json.loads(record.state)) if record else None

    def update(self, key: ProfileKey, fn: ProfileUpdate) -> ResponseProfile:
        athlete_id, methodology = key
        with self._lock_for(key), self.database.get_session() as session:
            record = self._query(session, key)
            current = profile_from_dict(json.loads(record.state)) if record else None
            updated = fn(current)
            state = json.dumps(profile_to_dict(updated))

            if record is None:
                record = ResponseProfileRecord(athlete_id=athlete_id, methodology=methodology.value, state=state)
                session.add(record)
            else:
                record.state = state
            record.response_count = len(updated.response_history)

        return updated.snapshot()

    def keys(self) -> List[ProfileKey]:
        with self.database.get_session() as session:
            rows = session.query(ResponseProfileRecord.athlete_id, ResponseProfileRecord.methodology).all()
            return [(athlete_id, Methodology(methodology)) for athlete_id, methodology in rows]


# ---------------------------------------------------------------------------
# Learning
# ---------------------------------------------------------------------------

class ResponseProfileLearner:
    """Fold observed modification outcomes into response profiles."""

    def __init__(self, store: Optional[ProfileStore] = None, learning_rate: Optional[float] = None):
        self.store = store or InMemoryProfileStore()
        self.learning_rate = config.PROFILE_LEARNING_RATE if learning_rate is None else learning_rate

    def get_profile(self, athlete_id: str, methodology: Methodology) -> Optional[ResponseProfile]:
        return self.store.get((athlete_id, methodology))

    def record_outcome(self, athlete_id: str, methodology: Methodology, modification: Modification,
                       outcome: OutcomeMetrics, applied_at: Optional[datetime] = None) -> ResponseProfile:
        """Score an outcome and update the athlete's profile atomically.

        Args:
            athlete_id: Athlete identifier
            methodology: Methodology the modification was applied under
            modification: Applied modification
            outcome: Observed changes (%) after applying it
            applied_at: When the modification was applied, defaults to now

        Returns:
            Copy of the updated profile
        """
        effectiveness = response_effectiveness(outcome)
        record = ResponseRecord(
            applied_at=applied_at or datetime.now(timezone.utc),
            modification=modification,
            outcome=outcome,
            effectiveness=effectiveness,
            notes=f"Applied {modification.type.value} modification based on {modification.philosophy_principle}",
        )

        def apply(current: Optional[ResponseProfile]) -> ResponseProfile:
            profile = current or new_profile(athlete_id, methodology)
            profile.response_history.append(record)
            self._update_trend(profile, modification.type, effectiveness)
            self._update_preferences(profile, modification, effectiveness)
            profile.last_updated = record.applied_at
            return profile

        profile = self.store.update((athlete_id, methodology), apply)
        logger.info(f"Updated response profile {athlete_id}/{methodology.value}: "
                    f"{modification.type.value} effectiveness {effectiveness:.0f}")
        return profile

    def _update_trend(self, profile: ResponseProfile, kind: ModificationKind, effectiveness: float) -> None:
        bucket = TREND_BUCKETS[kind]
        trend = getattr(profile.effectiveness_trends, bucket)
        alpha = self.learning_rate
        setattr(profile.effectiveness_trends, bucket, trend * (1 - alpha) + effectiveness * alpha)

    @staticmethod
    def _update_preferences(profile: ResponseProfile, modification: Modification, effectiveness: float) -> None:
        key = modification.preference_key
        if effectiveness > config.PREFERRED_THRESHOLD:
            target = profile.preferred_modifications
        elif effectiveness < config.AVOIDED_THRESHOLD:
            target = profile.avoided_modifications
        else:
            return
        if not any(existing.preference_key == key for existing in target):
            target.append(modification)
