"""Tests for conflict resolution and prioritization."""

from training_adaptation.adaptation.conflicts import ConflictResolver, are_conflicting
from training_adaptation.adaptation.prioritizer import prioritize
from training_adaptation.models import (
    Methodology,
    Modification,
    ModificationKind,
    Priority,
    ResponseProfile,
)


def mod(kind, priority=Priority.MEDIUM, reason="test", **kwargs):
    return Modification(type=kind, reason=reason, priority=priority, **kwargs)


class TestConflictResolver:
    """Test resolution of contradicting modifications."""

    def setup_method(self):
        self.resolver = ConflictResolver()

    def test_conflicting_pairs(self):
        assert are_conflicting(mod(ModificationKind.REDUCE_VOLUME), mod(ModificationKind.INCREASE_VOLUME))
        assert are_conflicting(mod(ModificationKind.SHORTEN_PHASE), mod(ModificationKind.EXTEND_PHASE))
        assert not are_conflicting(mod(ModificationKind.REDUCE_VOLUME), mod(ModificationKind.REDUCE_VOLUME))
        assert not are_conflicting(mod(ModificationKind.REDUCE_VOLUME), mod(ModificationKind.REDUCE_INTENSITY))

    def test_highest_priority_wins(self):
        reduce = mod(ModificationKind.REDUCE_INTENSITY, Priority.HIGH)
        increase = mod(ModificationKind.INCREASE_INTENSITY, Priority.MEDIUM)

        assert self.resolver.resolve([increase, reduce]) == [reduce]

    def test_tie_keeps_first(self):
        first = mod(ModificationKind.INCREASE_VOLUME, Priority.HIGH, reason="first")
        second = mod(ModificationKind.REDUCE_VOLUME, Priority.HIGH, reason="second")

        assert self.resolver.resolve([first, second]) == [first]

    def test_group_order_follows_first_appearance(self):
        reduce = mod(ModificationKind.REDUCE_VOLUME, Priority.LOW)
        substitute = mod(ModificationKind.SUBSTITUTE_WORKOUT)
        increase = mod(ModificationKind.INCREASE_VOLUME, Priority.CRITICAL)

        assert self.resolver.resolve([reduce, substitute, increase]) == [increase, substitute]

    def test_single_pass_grouping(self):
        first = mod(ModificationKind.REDUCE_INTENSITY, Priority.LOW, reason="first")
        opposite = mod(ModificationKind.INCREASE_INTENSITY, Priority.HIGH)
        repeat = mod(ModificationKind.REDUCE_INTENSITY, Priority.LOW, reason="repeat")

        groups = self.resolver.group([first, opposite, repeat])
        assert groups == [[first, opposite], [repeat]]
        assert self.resolver.resolve([first, opposite, repeat]) == [opposite, repeat]

    def test_result_has_no_conflicting_pair_within_group(self):
        modifications = [
            mod(ModificationKind.REDUCE_VOLUME, Priority.HIGH),
            mod(ModificationKind.INCREASE_VOLUME, Priority.LOW),
            mod(ModificationKind.EXTEND_PHASE),
            mod(ModificationKind.SHORTEN_PHASE, Priority.HIGH),
        ]
        resolved = self.resolver.resolve(modifications)

        kinds = [m.type for m in resolved]
        assert kinds == [ModificationKind.REDUCE_VOLUME, ModificationKind.SHORTEN_PHASE]

    def test_empty(self):
        assert self.resolver.resolve([]) == []


class TestPrioritizer:
    """Test modification ordering."""

    def test_methodology_specific_then_confidence(self):
        generic_high = mod(ModificationKind.REDUCE_VOLUME, confidence=95)
        specific_low = mod(ModificationKind.ADD_RECOVERY, methodology_specific=True, confidence=60)
        specific_high = mod(ModificationKind.SUBSTITUTE_WORKOUT, methodology_specific=True, confidence=90)

        ordered = prioritize([generic_high, specific_low, specific_high])
        assert ordered == [specific_high, specific_low, generic_high]

    def test_stable_for_equal_keys(self):
        a = mod(ModificationKind.REDUCE_VOLUME, reason="a")
        b = mod(ModificationKind.ADD_RECOVERY, reason="b")
        assert prioritize([a, b]) == [a, b]

    def test_learned_preferences(self):
        preferred = mod(ModificationKind.ADD_RECOVERY, philosophy_principle="Recovery first", confidence=50)
        neutral = mod(ModificationKind.SUBSTITUTE_WORKOUT, methodology_specific=True, confidence=95)
        avoided = mod(ModificationKind.REDUCE_VOLUME, methodology_specific=True, confidence=99)

        profile = ResponseProfile(
            athlete_id="a1",
            methodology=Methodology.DANIELS,
            preferred_modifications=[preferred],
            avoided_modifications=[avoided],
        )
        ordered = prioritize([avoided, neutral, preferred], profile)

        assert ordered == [preferred, neutral, avoided]

    def test_preferred_and_avoided_is_neutral(self):
        contested = mod(ModificationKind.ADD_RECOVERY, confidence=50)
        other = mod(ModificationKind.REDUCE_VOLUME, confidence=80)
        profile = ResponseProfile(
            athlete_id="a1",
            methodology=Methodology.DANIELS,
            preferred_modifications=[contested],
            avoided_modifications=[contested],
        )

        assert prioritize([contested, other], profile) == [other, contested]


class TestModificationHashing:

    def test_equal_modifications_hash_equally(self):
        first = mod(ModificationKind.ADD_RECOVERY, suggested_changes={"additional_recovery_days": 2})
        second = mod(ModificationKind.ADD_RECOVERY, suggested_changes={"additional_recovery_days": 2})

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_usable_as_mapping_key(self):
        recovery = mod(ModificationKind.ADD_RECOVERY, workout_ids=["w1", "w2"])
        volume = mod(ModificationKind.REDUCE_VOLUME)
        counts = {recovery: 1, volume: 2}

        assert counts[mod(ModificationKind.ADD_RECOVERY, workout_ids=("w1", "w2"))] == 1
        assert counts[volume] == 2

    def test_different_changes_stay_distinct_in_sets(self):
        mild = mod(ModificationKind.REDUCE_VOLUME, suggested_changes={"volume_reduction": 10})
        strong = mod(ModificationKind.REDUCE_VOLUME, suggested_changes={"volume_reduction": 40})

        assert mild != strong
        assert len({mild, strong}) == 2
