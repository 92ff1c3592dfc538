"""Ordering of conflict-resolved modifications."""

from typing import List, Optional, Sequence

from ..models import Modification, ResponseProfile

PREFERRED, NEUTRAL, AVOIDED = 0, 1, 2


def preference_tier(modification: Modification, profile: Optional[ResponseProfile]) -> int:
    """Ranking tier from the athlete's learned preferences.

    A key learned as both preferred and avoided counts as neutral.
    """
    if profile is None:
        return NEUTRAL
    key = modification.preference_key
    preferred = any(m.preference_key == key for m in profile.preferred_modifications)
    avoided = any(m.preference_key == key for m in profile.avoided_modifications)
    if preferred and not avoided:
        return PREFERRED
    if avoided and not preferred:
        return AVOIDED
    return NEUTRAL


def prioritize(modifications: Sequence[Modification],
               profile: Optional[ResponseProfile] = None) -> List[Modification]:
    """Sort methodology-specific first, then by confidence; learned preferences take precedence.

    Avoided modifications move to the back but are never dropped. The sort is
    stable, so equal keys keep their input order.
    """
    return sorted(
        modifications,
        key=lambda m: (preference_tier(m, profile), not m.methodology_specific, -m.confidence),
    )
