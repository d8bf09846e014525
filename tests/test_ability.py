"""Tests for the Ability value and its builder."""
import pytest

from rbac_core.domain.ability import Ability, AbilityBuilder, PermissionRule
from rbac_core.domain.vocabulary import ALL_SUBJECTS, Action


class TestAbilityMatching:
    def test_empty_ability_allows_nothing(self):
        ability = Ability()
        assert ability.can(Action.READ, "Post") is False
        assert ability.cannot(Action.READ, "Post") is True

    def test_exact_rule_matches_only_its_action_and_subject(self):
        ability = AbilityBuilder().can(Action.READ, "Post").build()

        assert ability.can(Action.READ, "Post")
        assert not ability.can(Action.UPDATE, "Post")
        assert not ability.can(Action.READ, "User")

    def test_all_subject_matches_every_subject(self):
        ability = AbilityBuilder().can(Action.READ, ALL_SUBJECTS).build()

        for subject in ("Post", "User", "Settings", "Invoice", ALL_SUBJECTS):
            assert ability.can(Action.READ, subject)
        assert not ability.can(Action.DELETE, "Post")

    def test_manage_matches_every_action_on_its_subject(self):
        ability = AbilityBuilder().can(Action.MANAGE, "Post").build()

        for action in Action:
            assert ability.can(action, "Post")
        assert not ability.can(Action.READ, "User")

    def test_concrete_subject_rule_does_not_grant_all(self):
        ability = AbilityBuilder().can(Action.READ, "Post").build()
        assert not ability.can(Action.READ, ALL_SUBJECTS)

    def test_concrete_action_rule_does_not_grant_manage(self):
        ability = AbilityBuilder().can(Action.READ, ALL_SUBJECTS).build()
        assert not ability.can(Action.MANAGE, ALL_SUBJECTS)

    def test_raw_action_strings_are_accepted(self):
        ability = AbilityBuilder().can(Action.UPDATE, "Post").build()
        assert ability.can("update", "Post")
        assert not ability.can("publish", "Post")

    def test_manage_rule_does_not_match_unknown_actions(self):
        ability = AbilityBuilder().can(Action.MANAGE, ALL_SUBJECTS).build()

        assert ability.can("delete", "Post")
        assert not ability.can("publish", "Post")
        assert not ability.can("Read", ALL_SUBJECTS)


class TestAbilityImmutability:
    def test_rules_are_frozen(self):
        ability = AbilityBuilder().can(Action.READ, "Post").build()

        assert ability.rules == frozenset({PermissionRule(Action.READ, "Post")})
        with pytest.raises(AttributeError):
            ability.rules = frozenset()  # type: ignore[misc]

    def test_builder_changes_do_not_leak_into_built_ability(self):
        builder = AbilityBuilder().can(Action.READ, "Post")
        ability = builder.build()
        builder.can(Action.DELETE, "Post")

        assert not ability.can(Action.DELETE, "Post")

    def test_builder_rejects_unknown_action(self):
        with pytest.raises(ValueError):
            AbilityBuilder().can("publish", "Post")  # type: ignore[arg-type]
