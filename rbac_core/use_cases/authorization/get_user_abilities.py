from ...domain.ports.ability import AbilityPort
from ...services.authorization_service import AuthorizationService


async def get_user_abilities(
    authorization_service: AuthorizationService, user_id: str
) -> AbilityPort:
    return await authorization_service.get_user_abilities(user_id)
