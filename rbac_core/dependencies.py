"""
Boundary dependencies - wiring the authorization core into FastAPI.

Identity is established upstream by the external identity layer, which places
the authenticated user's id on ``request.state.user_id``. Protected endpoints
declare their policies explicitly:

    @router.get("/posts")
    async def list_posts(
        ability: AbilityPort = Depends(
            require_policies(lambda ability: ability.can(Action.READ, POST))
        ),
    ): ...
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .auth.guard import PolicyGuard, PolicyHandler
from .crud.user import UserRepository
from .database import get_session
from .domain.ports.ability import AbilityPort
from .domain.ports.user import UserManagementPort
from .services.authorization_service import AuthorizationService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_user_port(db: AsyncSession = Depends(get_db)) -> UserManagementPort:
    return UserRepository(db)


def get_authorization_service(
    user_port: UserManagementPort = Depends(get_user_port),
) -> AuthorizationService:
    return AuthorizationService(user_port)


def get_current_user_id(request: Request) -> str | None:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        return None
    return str(user_id)


def require_policies(*policies: PolicyHandler) -> Callable:
    """
    Build a dependency that guards an endpoint with ``policies``.

    Verifies:
    - The caller is authenticated (401 if not)
    - The caller still exists (404 if not)
    - Every policy holds for the caller's Ability (403 if not)

    Returns:
        Dependency resolving to the caller's Ability
    """
    async def dependency(
        user_id: str | None = Depends(get_current_user_id),
        authorization_service: AuthorizationService = Depends(get_authorization_service),
    ) -> AbilityPort:
        guard = PolicyGuard(authorization_service)
        return await guard.authorize(user_id, policies)

    return dependency
