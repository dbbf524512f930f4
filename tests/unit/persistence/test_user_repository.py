import pytest

from mbc_cms.core.exceptions import StoreError
from mbc_cms.infrastructure.persistence.models import UserModel
from mbc_cms.infrastructure.persistence.repositories import (
    PermissionStore,
    UserConflictError,
    UserRepository,
    to_user,
)


async def _role(db_session) -> str:
    return await PermissionStore(db_session).insert_role("Editor")


@pytest.mark.asyncio
async def test_create_and_get(db_session):
    role_id = await _role(db_session)
    repo = UserRepository(db_session)

    created = await repo.create(
        UserModel(email="editor@mountainbackpackers.co.za", password_hash="x", role_id=role_id)
    )

    by_email = await repo.get_by_email("editor@mountainbackpackers.co.za")
    assert by_email is not None
    assert by_email.id == created.id
    assert (await repo.get_by_id(created.id)).email == "editor@mountainbackpackers.co.za"
    assert await repo.get_by_email("nobody@mountainbackpackers.co.za") is None


@pytest.mark.asyncio
async def test_to_user_carries_flags(db_session):
    role_id = await _role(db_session)
    repo = UserRepository(db_session)
    await repo.create(
        UserModel(
            email="editor@mountainbackpackers.co.za",
            password_hash="x",
            role_id=role_id,
            active=False,
            mfa_enabled=True,
        )
    )

    user = to_user(await repo.get_by_email("editor@mountainbackpackers.co.za"))

    assert user.role_id == role_id
    assert user.active is False
    assert user.mfa_enabled is True
    assert user.mfa_verified is False
    assert user.mfa_secret == ""


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(db_session):
    role_id = await _role(db_session)
    repo = UserRepository(db_session)
    await repo.create(
        UserModel(email="editor@mountainbackpackers.co.za", password_hash="x", role_id=role_id)
    )

    with pytest.raises(UserConflictError):
        await repo.create(
            UserModel(email="editor@mountainbackpackers.co.za", password_hash="y", role_id=role_id)
        )


@pytest.mark.asyncio
async def test_unknown_role_conflicts(db_session):
    repo = UserRepository(db_session)

    with pytest.raises(UserConflictError) as exc_info:
        await repo.create(
            UserModel(email="editor@mountainbackpackers.co.za", password_hash="x", role_id="nope")
        )

    assert isinstance(exc_info.value, StoreError)
