"""Modification generators for each constraint category."""

from .environmental import EnvironmentalAdapter
from .equipment import EquipmentAdapter
from .injury import InjuryAdapter
from .time import TimeAdapter

__all__ = ["EnvironmentalAdapter", "EquipmentAdapter", "InjuryAdapter", "TimeAdapter"]
