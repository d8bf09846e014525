"""
Policy Guard - the boundary check in front of protected operations.

Protected operations declare an explicit, ordered list of policies. Each policy
is a pure predicate over the caller's Ability. The caller passes the guard only
if every policy holds. All policies are evaluated even after one fails.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..domain.ports.ability import AbilityPort
from ..errors import AuthError, PermissionError
from ..services.authorization_service import AuthorizationService

logger = logging.getLogger(__name__)

PolicyHandler = Callable[[AbilityPort], bool]


def evaluate_policies(ability: AbilityPort, policies: Sequence[PolicyHandler]) -> bool:
    outcomes = [bool(policy(ability)) for policy in policies]
    return all(outcomes)


def enforce_policies(
    ability: AbilityPort | None, policies: Sequence[PolicyHandler]
) -> None:
    """Allow or deny a call given the caller's Ability.

    Raises:
        AuthError: If there is no authenticated caller (``ability`` is None)
        PermissionError: If one or more policies do not hold
    """
    if ability is None:
        raise AuthError("User not authenticated")

    if not evaluate_policies(ability, policies):
        raise PermissionError("Insufficient permissions")


class PolicyGuard:
    """Resolves the caller's Ability and enforces policies against it."""

    def __init__(self, authorization_service: AuthorizationService):
        self.authorization_service = authorization_service

    async def authorize(
        self, user_id: str | None, policies: Sequence[PolicyHandler]
    ) -> AbilityPort:
        """
        Enforce ``policies`` for the caller identified by ``user_id``.

        The identity check happens before any lookup or policy evaluation.

        Returns:
            The caller's Ability, for reuse by the protected operation

        Raises:
            AuthError: If ``user_id`` is missing
            NotFoundError: If the caller no longer exists
            PermissionError: If one or more policies do not hold
        """
        if not user_id:
            logger.warning("policy_denied reason=unauthenticated")
            raise AuthError("User not authenticated")

        ability = await self.authorization_service.get_user_abilities(user_id)
        try:
            enforce_policies(ability, policies)
        except PermissionError:
            logger.warning(
                "policy_denied reason=insufficient_permissions user_id=%s policies=%d",
                user_id,
                len(policies),
            )
            raise
        return ability
