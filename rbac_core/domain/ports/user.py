from __future__ import annotations

from typing import Protocol

from ..vocabulary import Role


class UserData(Protocol):
    id: str
    email: str
    name: str
    role: Role


class UserLookupPort(Protocol):
    async def find_by_id(
        self, user_id: str, *, for_update: bool = False
    ) -> UserData | None:
        ...

    async def find_by_email(self, email: str) -> UserData | None:
        ...


class UserManagementPort(UserLookupPort, Protocol):
    async def update_user_role(self, user_id: str, role: Role) -> UserData:
        ...

    async def lock_role_changes(self) -> None:
        ...

    async def count_admins(self, *, for_update: bool = False) -> int:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
