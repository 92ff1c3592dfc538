"""Adaptation-pattern trigger matching."""

import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence

from ..config import config
from ..models import (
    AdaptationPattern,
    ConditionOperator,
    Modification,
    TriggerCondition,
)

logger = logging.getLogger(__name__)

EQUALS_TOLERANCE = 1e-9


def compare(value: float, operator: ConditionOperator, target) -> bool:
    """Apply a trigger comparison to a single metric value."""
    if operator is ConditionOperator.GREATER_THAN:
        return value > target
    if operator is ConditionOperator.LESS_THAN:
        return value < target
    if operator is ConditionOperator.EQUALS:
        return abs(value - target) <= EQUALS_TOLERANCE
    if operator is ConditionOperator.BETWEEN:
        lower, upper = target
        return lower <= value <= upper
    raise ValueError(f"Unsupported trigger operator: {operator}")


class TriggerMatcher:
    """Evaluate methodology adaptation patterns against progress and recovery metrics.

    A pattern fires when any of its conditions matches. A condition matches when
    its confidence reaches the configured minimum and its comparison holds. When
    a daily history is available for the metric, the comparison must hold for each
    of the last ``minimum_duration_days`` values; otherwise the current value is
    used on its own. Metrics that are not reported never match.
    """

    def __init__(self, min_confidence: Optional[float] = None):
        self.min_confidence = config.TRIGGER_MIN_CONFIDENCE if min_confidence is None else min_confidence

    def condition_matches(self, condition: TriggerCondition, metrics: Mapping[str, float],
                          history: Optional[Mapping[str, Sequence[float]]] = None,
                          minimum_duration_days: int = 0) -> bool:
        if condition.confidence < self.min_confidence:
            return False

        series = (history or {}).get(condition.metric)
        if series:
            days = max(minimum_duration_days, 1)
            if len(series) < days:
                return False
            return all(compare(value, condition.operator, condition.value) for value in list(series)[-days:])

        value = metrics.get(condition.metric)
        if value is None:
            return False
        return compare(value, condition.operator, condition.value)

    def pattern_fires(self, pattern: AdaptationPattern, metrics: Mapping[str, float],
                      history: Optional[Mapping[str, Sequence[float]]] = None) -> bool:
        trigger = pattern.trigger
        return any(
            self.condition_matches(condition, metrics, history, trigger.minimum_duration_days)
            for condition in trigger.conditions
        )

    def match(self, patterns: Sequence[AdaptationPattern], metrics: Mapping[str, float],
              history: Optional[Mapping[str, Sequence[float]]] = None) -> List[AdaptationPattern]:
        fired = [pattern for pattern in patterns if self.pattern_fires(pattern, metrics, history)]
        if fired:
            logger.debug(f"Triggered patterns: {', '.join(p.id for p in fired)}")
        return fired

    def modifications_for(self, patterns: Sequence[AdaptationPattern]) -> List[Modification]:
        """Prescribed modifications of fired patterns, tagged as methodology-specific."""
        return [
            replace(modification, methodology_specific=True)
            for pattern in patterns
            for modification in pattern.response.modifications
        ]

    def triggered_modifications(self, patterns: Sequence[AdaptationPattern], metrics: Dict[str, float],
                                history: Optional[Mapping[str, Sequence[float]]] = None) -> List[Modification]:
        return self.modifications_for(self.match(patterns, metrics, history))
