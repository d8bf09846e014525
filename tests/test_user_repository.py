"""Tests for the SQLAlchemy user repository against an in-memory SQLite database."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from rbac_core.crud.user import ROLE_CHANGE_LOCK_KEY, UserRepository
from rbac_core.database import dispose_engine, get_engine, get_session
from rbac_core.domain.vocabulary import Action, Role
from rbac_core.errors import NotFoundError
from rbac_core.models import Base, User
from rbac_core.services.authorization_service import AuthorizationService
from rbac_core.use_cases.users.update_user_role import update_user_role


@pytest.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                User(id="user-1", email="user-1@example.com", name="User One", role=Role.USER),
                User(id="editor-1", email="editor-1@example.com", name="Editor One", role=Role.EDITOR),
                User(id="admin-1", email="admin-1@example.com", name="Admin One", role=Role.ADMIN),
            ]
        )
        await session.commit()

    yield factory
    await engine.dispose()


@pytest.mark.anyio
async def test_find_by_id_and_email(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)

        user = await repo.find_by_id("editor-1")
        assert user is not None
        assert user.role is Role.EDITOR

        locked = await repo.find_by_id("editor-1", for_update=True)
        assert locked is user

        by_email = await repo.find_by_email("admin-1@example.com")
        assert by_email is not None
        assert by_email.id == "admin-1"

        assert await repo.find_by_id("ghost") is None
        assert await repo.find_by_email("ghost@example.com") is None


@pytest.mark.anyio
async def test_count_admins(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)

        assert await repo.count_admins() == 1
        assert await repo.count_admins(for_update=True) == 1


@pytest.mark.anyio
async def test_lock_role_changes_is_a_noop_on_sqlite(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)

        await repo.lock_role_changes()
        assert await repo.count_admins(for_update=True) == 1


@pytest.mark.anyio
async def test_lock_role_changes_takes_advisory_lock_on_postgres() -> None:
    session = MagicMock()
    session.get_bind.return_value.dialect.name = "postgresql"
    session.execute = AsyncMock()

    await UserRepository(session).lock_role_changes()

    statement = session.execute.await_args.args[0]
    sql = str(
        statement.compile(
            dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}
        )
    )
    assert f"pg_advisory_xact_lock({ROLE_CHANGE_LOCK_KEY})" in sql


@pytest.mark.anyio
async def test_update_user_role_persists_on_commit(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)
        updated = await repo.update_user_role("user-1", Role.ADMIN)
        await repo.commit()
        assert updated.role is Role.ADMIN

    async with session_factory() as session:
        repo = UserRepository(session)
        assert await repo.count_admins() == 2


@pytest.mark.anyio
async def test_update_user_role_discarded_on_rollback(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)
        await repo.update_user_role("user-1", Role.ADMIN)
        await repo.rollback()

    async with session_factory() as session:
        assert await UserRepository(session).count_admins() == 1


@pytest.mark.anyio
async def test_update_unknown_user_raises_not_found(session_factory) -> None:
    async with session_factory() as session:
        with pytest.raises(NotFoundError):
            await UserRepository(session).update_user_role("ghost", Role.ADMIN)


@pytest.mark.anyio
async def test_role_change_through_repository(session_factory) -> None:
    async with session_factory() as session:
        result = await update_user_role(
            UserRepository(session), "admin-1", Role.ADMIN, "user-1", Role.EDITOR
        )
    assert result.role == Role.EDITOR

    async with session_factory() as session:
        service = AuthorizationService(UserRepository(session))
        assert await service.check_permission("user-1", Action.CREATE, "Post") is True


@pytest.mark.anyio
async def test_get_session_uses_configured_engine() -> None:
    async for session in get_session():
        assert isinstance(session, AsyncSession)
        assert session.bind is get_engine()
    await dispose_engine()
