"""Unit tests for AccessControlService."""

from uuid import uuid4

import pytest

from provision.domain.error import (
    InvalidRoleAssignment,
    NotFoundError,
    PermissionDenied,
    SelfModificationDenied,
)
from provision.domain.repository import AuditLogRepository, UserRepository
from provision.domain.service import AccessControlService
from provision.domain.value import AccessAction, Role, UserId
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def seed(env, *users):
    user_repo = await env.get(UserRepository)
    return [await user_repo.save(u) for u in users]


class TestSetRole:
    """Tests for role changes."""

    @pytest.mark.asyncio
    async def test_role_change_is_saved_and_recorded(self, unit_env):
        # Arrange
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@example.org", Role.CLIENT),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        # Act
        updated = await service.set_role(admin.id, target.id, Role.PILOT, "flying now")

        # Assert
        assert updated.role == Role.PILOT
        [event] = await audit_repo.list_role_changes(target.id)
        assert event.role == Role.PILOT
        assert event.changed_by == "admin@example.com"
        assert event.reason == "flying now"

    @pytest.mark.asyncio
    async def test_same_role_records_nothing(self, unit_env):
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("p@example.org", Role.PILOT),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        await service.set_role(admin.id, target.id, Role.PILOT)

        assert await audit_repo.list_role_changes(target.id) == []

    @pytest.mark.asyncio
    async def test_default_reason_is_recorded(self, unit_env):
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@example.org", Role.CLIENT),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        await service.set_role(admin.id, target.id, Role.PILOT)

        [event] = await audit_repo.list_role_changes(target.id)
        assert event.reason == "Role updated by admin"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_change_roles(self, unit_env):
        pilot, target = await seed(
            unit_env,
            make_user("pilot@example.com", Role.PILOT),
            make_user("c@example.org", Role.CLIENT),
        )
        service = await unit_env.get(AccessControlService)

        with pytest.raises(PermissionDenied):
            await service.set_role(pilot.id, target.id, Role.PILOT)

    @pytest.mark.asyncio
    async def test_admin_role_outside_trusted_domain_is_invalid(self, unit_env):
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@gmail.com", Role.CLIENT),
        )
        service = await unit_env.get(AccessControlService)

        with pytest.raises(InvalidRoleAssignment):
            await service.set_role(admin.id, target.id, Role.ADMIN)

    @pytest.mark.asyncio
    async def test_untrusted_admin_granting_admin_outside_domain_is_invalid(
        self, unit_env
    ):
        # Legacy admin account that predates the trusted domain rule
        legacy_admin, target = await seed(
            unit_env,
            make_user("ops@gmail.com", Role.ADMIN),
            make_user("c@gmail.com", Role.CLIENT),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        with pytest.raises(InvalidRoleAssignment):
            await service.set_role(legacy_admin.id, target.id, Role.ADMIN)

        assert await audit_repo.list_role_changes(target.id) == []

    @pytest.mark.asyncio
    async def test_missing_target_is_not_found(self, unit_env):
        [admin] = await seed(unit_env, make_user("admin@example.com", Role.ADMIN))
        service = await unit_env.get(AccessControlService)

        with pytest.raises(NotFoundError):
            await service.set_role(admin.id, UserId(uuid4()), Role.PILOT)


class TestSetAccess:
    """Tests for access changes."""

    @pytest.mark.asyncio
    async def test_deactivate_records_event(self, unit_env):
        # Arrange
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@example.org", has_access=True),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        # Act
        result = await service.set_access(admin.id, target.id, False, "left company")

        # Assert
        assert not result.user.has_access
        assert result.event.action == AccessAction.DEACTIVATED
        assert result.event.changed_by == "admin@example.com"
        assert await audit_repo.list_access_changes(target.id) == [result.event]

    @pytest.mark.asyncio
    async def test_activate_records_event(self, unit_env):
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@example.org", has_access=False),
        )
        service = await unit_env.get(AccessControlService)

        result = await service.set_access(admin.id, target.id, True)

        assert result.user.has_access
        assert result.event.action == AccessAction.ACTIVATED

    @pytest.mark.asyncio
    async def test_unchanged_access_records_nothing(self, unit_env):
        admin, target = await seed(
            unit_env,
            make_user("admin@example.com", Role.ADMIN),
            make_user("c@example.org", has_access=True),
        )
        service = await unit_env.get(AccessControlService)
        audit_repo = await unit_env.get(AuditLogRepository)

        result = await service.set_access(admin.id, target.id, True)

        assert result.event is None
        assert await audit_repo.list_access_changes(target.id) == []

    @pytest.mark.asyncio
    async def test_admin_cannot_change_own_access(self, unit_env):
        [admin] = await seed(unit_env, make_user("admin@example.com", Role.ADMIN))
        service = await unit_env.get(AccessControlService)
        user_repo = await unit_env.get(UserRepository)

        with pytest.raises(SelfModificationDenied):
            await service.set_access(admin.id, admin.id, False)

        assert (await user_repo.find_by_id(admin.id)).has_access
