from ...domain.ports.user import UserLookupPort
from ...errors import NotFoundError
from ...schemas.user import UserRead


async def get_user(user_port: UserLookupPort, user_id: str) -> UserRead:
    user = await user_port.find_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return UserRead.model_validate(user)
