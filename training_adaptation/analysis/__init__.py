"""Workload and progress analysis of completed training."""

from .progress import analyze_progress, suggest_progress_modifications
from .workload import TrainingLoad, assess_dynamic_injury_risk, calculate_training_load

__all__ = [
    "analyze_progress",
    "suggest_progress_modifications",
    "TrainingLoad",
    "assess_dynamic_injury_risk",
    "calculate_training_load",
]
