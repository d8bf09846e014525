from ...domain.vocabulary import Action, Subject
from ...services.authorization_service import AuthorizationService


async def check_permission(
    authorization_service: AuthorizationService,
    user_id: str,
    action: Action | str,
    subject: Subject,
) -> bool:
    return await authorization_service.check_permission(user_id, action, subject)
