"""
Ability model - a resolved, queryable permission set for one user.

An Ability is an immutable value holding the granted (action, subject) rules.
It is built once from a role and discarded after use; it never reflects a
role change made after it was built.
"""
from __future__ import annotations

from dataclasses import dataclass

from .vocabulary import ALL_SUBJECTS, Action, Subject


@dataclass(frozen=True)
class PermissionRule:
    """A single grant: ``action`` is allowed on ``subject``."""

    action: Action
    subject: Subject

    def matches(self, action: Action, subject: Subject) -> bool:
        action_ok = self.action == Action.MANAGE or self.action == action
        subject_ok = self.subject == ALL_SUBJECTS or self.subject == subject
        return action_ok and subject_ok


@dataclass(frozen=True)
class Ability:
    rules: frozenset[PermissionRule] = frozenset()

    def can(self, action: Action | str, subject: Subject) -> bool:
        """
        Check whether ``action`` is allowed on ``subject``.

        A rule on ``"all"`` covers every subject and a ``MANAGE`` rule covers
        every action on its subject. Unknown actions are never allowed.
        """
        try:
            action = Action(action)
        except ValueError:
            return False
        return any(rule.matches(action, subject) for rule in self.rules)

    def cannot(self, action: Action | str, subject: Subject) -> bool:
        return not self.can(action, subject)


class AbilityBuilder:
    """Accumulates rules and finalizes them into an immutable Ability."""

    def __init__(self) -> None:
        self._rules: list[PermissionRule] = []

    def can(self, action: Action, subject: Subject) -> AbilityBuilder:
        self._rules.append(PermissionRule(Action(action), subject))
        return self

    def build(self) -> Ability:
        return Ability(frozenset(self._rules))
