import logging

from ..auth.role_policy import default_ability_factory
from ..domain.ports.ability import AbilityFactoryPort, AbilityPort
from ..domain.ports.user import UserLookupPort
from ..domain.vocabulary import Action, Subject
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Resolves what a user can do.

    This is the single place where a role becomes a capability. Nothing is
    cached: every call re-reads the user and rebuilds the Ability, so a role
    change takes effect on the very next check.
    """

    def __init__(
        self,
        user_repo: UserLookupPort,
        ability_factory: AbilityFactoryPort | None = None,
    ):
        self.user_repo = user_repo
        self.ability_factory = ability_factory or default_ability_factory

    async def get_user_abilities(self, user_id: str) -> AbilityPort:
        """Load the user and build their Ability.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repo.find_by_id(user_id)
        if user is None:
            logger.info("ability_resolution_failed reason=user_not_found user_id=%s", user_id)
            raise NotFoundError("User not found")

        return self.ability_factory.create_for_user(user)

    async def check_permission(
        self, user_id: str, action: Action | str, subject: Subject
    ) -> bool:
        ability = await self.get_user_abilities(user_id)
        allowed = ability.can(action, subject)
        logger.debug(
            "permission_check user_id=%s action=%s subject=%s allowed=%s",
            user_id,
            getattr(action, "value", action),
            subject,
            allowed,
        )
        return allowed
