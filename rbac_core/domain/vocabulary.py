"""
Authorization vocabulary - the closed sets that define the permission space.

Roles and actions are closed enumerations. Subjects are open strings naming a
resource kind; ``ALL_SUBJECTS`` is the wildcard matching every subject.
"""
from __future__ import annotations

from enum import Enum
from typing import Final


class Role(str, Enum):
    """
    User roles.

    No privilege order is implied between members: each role's permissions
    are declared explicitly in the role policy table.
    """
    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class Action(str, Enum):
    """Actions a user may perform on a subject. ``MANAGE`` means every action."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


Subject = str

ALL_SUBJECTS: Final[Subject] = "all"

POST: Final[Subject] = "Post"
USER: Final[Subject] = "User"
SETTINGS: Final[Subject] = "Settings"

KNOWN_SUBJECTS: Final[frozenset[Subject]] = frozenset({POST, USER, SETTINGS})
