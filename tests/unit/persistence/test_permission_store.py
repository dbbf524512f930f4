import pytest

from mbc_cms.core.exceptions import StoreError
from mbc_cms.infrastructure.persistence.repositories import PermissionStore


@pytest.mark.asyncio
async def test_insert_and_list(db_session):
    store = PermissionStore(db_session)

    role_id = await store.insert_role("Editor")
    await store.insert_permission(role_id, "articles.publish", 2)
    await store.insert_permission(role_id, "articles.edit", 1)

    permissions = await store.list_permissions(role_id)
    assert {p.as_grant() for p in permissions} == {
        ("articles.edit", 1),
        ("articles.publish", 2),
    }
    assert all(p.role_id == role_id for p in permissions)


@pytest.mark.asyncio
async def test_store_never_commits(db_session, session_factory):
    store = PermissionStore(db_session)
    role_id = await store.insert_role("Editor")

    await db_session.rollback()

    async with session_factory() as other_session:
        assert await PermissionStore(other_session).get_role(role_id) is None


@pytest.mark.asyncio
async def test_duplicate_permission_name_fails(db_session):
    store = PermissionStore(db_session)
    role_id = await store.insert_role("Editor")
    await store.insert_permission(role_id, "articles.edit", 1)

    with pytest.raises(StoreError) as exc_info:
        await store.insert_permission(role_id, "articles.edit", 2)

    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_permission_for_unknown_role_fails(db_session):
    store = PermissionStore(db_session)

    with pytest.raises(StoreError):
        await store.insert_permission("no-such-role", "articles.edit", 1)


@pytest.mark.asyncio
async def test_delete_permission_counts_rows(db_session):
    store = PermissionStore(db_session)
    role_id = await store.insert_role("Editor")
    await store.insert_permission(role_id, "articles.edit", 1)

    assert await store.delete_permission(role_id, "articles.edit") == 1
    assert await store.delete_permission(role_id, "articles.edit") == 0
    assert await store.list_permissions(role_id) == []


@pytest.mark.asyncio
async def test_get_role(db_session):
    store = PermissionStore(db_session)
    role_id = await store.insert_role("Editor")

    role = await store.get_role(role_id)
    assert role is not None
    assert role.id == role_id
    assert role.name == "Editor"
    assert await store.get_role("no-such-role") is None


@pytest.mark.asyncio
async def test_get_role_by_name(db_session):
    store = PermissionStore(db_session)
    role_id = await store.insert_role("System Admin")

    role = await store.get_role_by_name("System Admin")
    assert role is not None
    assert role.id == role_id
    assert await store.get_role_by_name("Editor") is None


@pytest.mark.asyncio
async def test_unreachable_store(broken_session_factory):
    async with broken_session_factory() as session:
        store = PermissionStore(session)
        with pytest.raises(StoreError):
            await store.list_permissions("r-1")
