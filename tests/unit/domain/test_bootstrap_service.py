"""Tests for the first-run bootstrap of the admin identity and default role."""

import pytest

from mbc_cms.core.exceptions import BootstrapError
from mbc_cms.domain.services import BootstrapService
from mbc_cms.infrastructure.auth import verify_password
from mbc_cms.infrastructure.persistence.repositories import (
    UserConflictError,
    UserRepository,
)


@pytest.mark.asyncio
async def test_run_creates_role_and_admin(session_factory, settings, role_manager):
    result = await BootstrapService(session_factory, settings).run()

    assert result.role_created
    assert result.admin_created

    role = await role_manager.get_role(result.role_id)
    assert role.name == "System Admin"
    permissions = {p.as_grant() for p in await role_manager.list_permissions(result.role_id)}
    assert permissions == set(settings.default_role_permissions.items())

    async with session_factory() as session:
        admin = await UserRepository(session).get_by_email(settings.admin_email)
    assert admin is not None
    assert admin.role_id == result.role_id
    assert admin.active
    assert verify_password(settings.admin_password, admin.password_hash)


@pytest.mark.asyncio
async def test_run_is_idempotent(session_factory, settings):
    service = BootstrapService(session_factory, settings)
    first = await service.run()
    second = await service.run()

    assert second.role_id == first.role_id
    assert not second.role_created
    assert not second.admin_created


@pytest.mark.asyncio
async def test_existing_role_is_reused(session_factory, settings, role_manager):
    role_id = await role_manager.create_role_with_permissions("System Admin", [])

    result = await BootstrapService(session_factory, settings, role_manager).run()

    assert result.role_id == role_id
    assert not result.role_created
    # An existing role keeps its permissions
    assert await role_manager.list_permissions(role_id) == []


@pytest.mark.asyncio
async def test_admin_lost_race_is_not_an_error(session_factory, settings, monkeypatch):
    """A concurrent bootstrap inserting the admin first wins quietly."""
    service = BootstrapService(session_factory, settings)
    role_id, _ = await service.ensure_default_role()
    assert await service.ensure_admin_user(role_id)

    original_get_by_email = UserRepository.get_by_email
    calls = []

    async def racing_get_by_email(self, email):
        calls.append(email)
        if len(calls) == 1:
            return None
        return await original_get_by_email(self, email)

    monkeypatch.setattr(UserRepository, "get_by_email", racing_get_by_email)

    assert not await service.ensure_admin_user(role_id)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_admin_with_unknown_role_fails(session_factory, settings):
    service = BootstrapService(session_factory, settings)

    with pytest.raises(UserConflictError):
        await service.ensure_admin_user("no-such-role")


@pytest.mark.asyncio
async def test_store_failure_raises_bootstrap_error(broken_session_factory, settings):
    with pytest.raises(BootstrapError):
        await BootstrapService(broken_session_factory, settings).run()
