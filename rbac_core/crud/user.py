from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.vocabulary import Role
from ..errors import NotFoundError
from ..models.user import User

# pg_advisory_xact_lock key shared by every role-change transaction
ROLE_CHANGE_LOCK_KEY = 0x52424143


class UserRepository:
    """SQLAlchemy adapter for the user lookup and user management ports.

    ``for_update`` reads take row locks (``SELECT ... FOR UPDATE``) that are
    held until ``commit()`` or ``rollback()``.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def lock_role_changes(self) -> None:
        """Serialize role changes for the rest of the transaction.

        PostgreSQL takes a transaction-scoped advisory lock. SQLite allows a
        single writer per database, so nothing is taken there.
        """
        if self.session.get_bind().dialect.name != "postgresql":
            return
        await self.session.execute(
            select(func.pg_advisory_xact_lock(ROLE_CHANGE_LOCK_KEY))
        )

    async def find_by_id(self, user_id: str, *, for_update: bool = False) -> User | None:
        query = select(User).where(User.id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def count_admins(self, *, for_update: bool = False) -> int:
        if for_update:
            # Aggregates cannot take row locks; lock the admin rows and count them
            result = await self.session.execute(
                select(User.id)
                .where(User.role == Role.ADMIN)
                .order_by(User.id)
                .with_for_update()
            )
            return len(result.scalars().all())

        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.role == Role.ADMIN)
        )
        return int(result.scalar_one())

    async def update_user_role(self, user_id: str, role: Role) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.role = role
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
