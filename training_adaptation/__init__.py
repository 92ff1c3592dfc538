"""Constraint-driven adaptation of endurance training plans."""

from .config import config, configure_logging
from .engine import AdaptationEngine
from .errors import AdaptationError, InvalidInputError
from .methodology import MethodologyRegistry, build_default_registry
from .models import AdaptationResult, Methodology, Modification, ModificationKind, Priority

__all__ = [
    "AdaptationEngine",
    "config",
    "configure_logging",
    "AdaptationError",
    "InvalidInputError",
    "MethodologyRegistry",
    "build_default_registry",
    "AdaptationResult",
    "Methodology",
    "Modification",
    "ModificationKind",
    "Priority",
]
