"""Trigger matching, conflict resolution, prioritization, response learning and plan application."""

from .applier import ModificationApplier
from .conflicts import ConflictResolver
from .profiles import InMemoryProfileStore, ProfileStore, ResponseProfileLearner, SqlProfileStore
from .triggers import TriggerMatcher

__all__ = [
    "ConflictResolver",
    "ModificationApplier",
    "InMemoryProfileStore",
    "ProfileStore",
    "ResponseProfileLearner",
    "SqlProfileStore",
    "TriggerMatcher",
]
