"""
Role Policy - the static role-to-permission table and the Ability factory.

Permissions are declared additively per role. No role inherits from another:
auditing what a role can do means reading exactly one row of ROLE_PERMISSIONS.

The table is validated at import time (fail-fast). A role without a row, or a
rule with an unknown action or an empty subject, aborts the import.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Final

from ..domain.ability import Ability, AbilityBuilder, PermissionRule
from ..domain.ports.user import UserData
from ..domain.vocabulary import ALL_SUBJECTS, POST, USER, Action, Role


# ============================================================================
# ROLE -> PERMISSION TABLE
# ============================================================================

ROLE_PERMISSIONS: Final[Mapping[Role, tuple[PermissionRule, ...]]] = MappingProxyType({
    # Manage on "all" supersedes every other rule
    Role.ADMIN: (
        PermissionRule(Action.MANAGE, ALL_SUBJECTS),
    ),

    Role.EDITOR: (
        PermissionRule(Action.READ, ALL_SUBJECTS),
        PermissionRule(Action.CREATE, POST),
        PermissionRule(Action.UPDATE, POST),
    ),

    Role.USER: (
        PermissionRule(Action.READ, POST),
        PermissionRule(Action.READ, USER),
    ),
})


def _validate_policy(policy: Mapping[Role, Sequence[PermissionRule]]) -> None:
    """Validate that the policy table covers every role with well-formed rules."""
    errors = []

    for role in Role:
        if role not in policy:
            errors.append(f"Role '{role.value}' has no permission row")

    for role, rules in policy.items():
        if not isinstance(role, Role):
            errors.append(f"Invalid role in policy: {role!r}")
            continue
        for rule in rules:
            if not isinstance(rule.action, Action):
                errors.append(f"Role '{role.value}' has invalid action: {rule.action!r}")
            if not isinstance(rule.subject, str) or not rule.subject:
                errors.append(f"Role '{role.value}' has invalid subject: {rule.subject!r}")

    if errors:
        raise RuntimeError(
            "Role policy validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


_validate_policy(ROLE_PERMISSIONS)


# ============================================================================
# ABILITY FACTORY
# ============================================================================

class AbilityFactory:
    """Builds an Ability from a role using a static policy table.

    Resolution is a pure function of the role: the same role always yields an
    Ability with the same rules. The factory never fails; a role value with no
    table row yields an empty Ability.
    """

    def __init__(
        self,
        policy: Mapping[Role, Sequence[PermissionRule]] = ROLE_PERMISSIONS,
    ):
        if policy is not ROLE_PERMISSIONS:
            _validate_policy(policy)
        self.policy = policy

    def create_for_user(self, user: UserData) -> Ability:
        return self.create_for_role(user.role)

    def create_for_role(self, role: Role | str) -> Ability:
        builder = AbilityBuilder()
        for rule in self.policy.get(role, ()):
            builder.can(rule.action, rule.subject)
        return builder.build()


default_ability_factory = AbilityFactory()
