"""Unit tests for GetUserHistoryUseCase."""

import pytest

from provision.application.usecase.user import (
    GetUserHistoryRequest,
    GetUserHistoryUseCase,
)
from provision.domain.repository import UserRepository
from provision.domain.service import AccessControlService
from provision.domain.value import AccessAction, Role
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGetUserHistory:
    @pytest.mark.asyncio
    async def test_history_lists_changes_in_order(self, unit_env):
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        admin = await user_repo.save(make_user("admin@example.com", Role.ADMIN))
        target = await user_repo.save(make_user("c@example.org", Role.CLIENT))
        access_control = await unit_env.get(AccessControlService)
        await access_control.set_role(admin.id, target.id, Role.PILOT)
        await access_control.set_role(admin.id, target.id, Role.CLIENT, "back again")
        await access_control.set_access(admin.id, target.id, False)
        use_case = await unit_env.get(GetUserHistoryUseCase)

        # Act
        response = await use_case.execute(
            GetUserHistoryRequest(acting_admin_id=admin.id, user_id=target.id)
        )

        # Assert
        assert [e.role for e in response.role_history] == [Role.PILOT, Role.CLIENT]
        assert response.role_history[1].reason == "back again"
        [access] = response.access_history
        assert access.action == AccessAction.DEACTIVATED
        assert access.changed_by == "admin@example.com"
        assert not response.user.has_access
