from __future__ import annotations

from typing import Protocol

from ..vocabulary import Action, Role, Subject
from .user import UserData


class AbilityPort(Protocol):
    def can(self, action: Action | str, subject: Subject) -> bool:
        ...

    def cannot(self, action: Action | str, subject: Subject) -> bool:
        ...


class AbilityFactoryPort(Protocol):
    def create_for_user(self, user: UserData) -> AbilityPort:
        ...

    def create_for_role(self, role: Role) -> AbilityPort:
        ...
