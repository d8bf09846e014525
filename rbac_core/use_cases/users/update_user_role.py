import asyncio
import logging

from ...domain.ports.user import UserManagementPort
from ...domain.vocabulary import Role
from ...errors import NotFoundError, PermissionError
from ...schemas.user import UserRead

logger = logging.getLogger(__name__)


def _deny(reason: str, message: str, actor_id: str, target_id: str) -> PermissionError:
    logger.warning(
        "role_change_denied reason=%s actor_id=%s target_id=%s",
        reason,
        actor_id,
        target_id,
    )
    return PermissionError(message)


def _validate_role_change_request(
    acting_user_id: str,
    acting_user_role: Role | str,
    target_user_id: str,
    new_role: Role | str,
) -> Role:
    if acting_user_role != Role.ADMIN:
        raise _deny(
            "actor_not_admin",
            "Only administrators can update user roles",
            acting_user_id,
            target_user_id,
        )

    if acting_user_id == target_user_id:
        raise _deny(
            "self_modification",
            "You cannot change your own role",
            acting_user_id,
            target_user_id,
        )

    try:
        return Role(new_role)
    except ValueError:
        raise _deny(
            "invalid_role",
            f"Invalid role: {new_role}",
            acting_user_id,
            target_user_id,
        ) from None


async def _apply_role_change(
    user_port: UserManagementPort,
    acting_user_id: str,
    target_user_id: str,
    new_role: Role,
) -> UserRead:
    """
    Change the target's role inside one serialized role-change transaction.

    INVARIANT: the system keeps at least one admin. The role-change lock is
    taken before any row is read, so concurrent role changes run one after
    another and never wait on each other's row locks. The admin count is
    taken at evaluation time and includes the target itself.
    """
    await user_port.lock_role_changes()
    target = await user_port.find_by_id(target_user_id, for_update=True)
    if target is None:
        raise NotFoundError(f"User with ID {target_user_id} not found")

    previous_role = target.role
    if previous_role == Role.ADMIN and new_role != Role.ADMIN:
        admin_count = await user_port.count_admins(for_update=True)
        if admin_count <= 1:
            raise _deny(
                "last_admin",
                "Cannot remove the last administrator from the system",
                acting_user_id,
                target_user_id,
            )

    updated = await user_port.update_user_role(target_user_id, new_role)
    await user_port.commit()

    logger.info(
        "operation=role-change actor_id=%s target_id=%s from=%s to=%s",
        acting_user_id,
        target_user_id,
        Role(previous_role).value,
        new_role.value,
    )
    return UserRead.model_validate(updated)


async def _rollback_quietly(
    user_port: UserManagementPort, acting_user_id: str, target_user_id: str
) -> None:
    # The caller re-raises its own error; a failed rollback is only logged
    try:
        await user_port.rollback()
    except Exception:
        logger.exception(
            "role_change_rollback_failed actor_id=%s target_id=%s",
            acting_user_id,
            target_user_id,
        )


async def update_user_role(
    user_port: UserManagementPort,
    acting_user_id: str,
    acting_user_role: Role | str,
    target_user_id: str,
    new_role: Role | str,
) -> UserRead:
    """
    Change a user's role on behalf of an acting user.

    Guards run in order and the first violation wins:
    1. The actor must be an admin
    2. The actor cannot change their own role
    3. ``new_role`` must be a known role
    4. The target must exist
    5. The last admin cannot be demoted

    Raises:
        PermissionError: If guard 1, 2, 3 or 5 fails
        NotFoundError: If the target does not exist
    """
    role = _validate_role_change_request(
        acting_user_id, acting_user_role, target_user_id, new_role
    )

    try:
        return await _apply_role_change(user_port, acting_user_id, target_user_id, role)
    except (Exception, asyncio.CancelledError):
        await _rollback_quietly(user_port, acting_user_id, target_user_id)
        raise
