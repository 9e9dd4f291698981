"""Unit tests for RedeemInvitationUseCase."""

import pytest

from provision.application.usecase.invitation import (
    RedeemInvitationRequest,
    RedeemInvitationUseCase,
)
from provision.domain.repository import InvitationRepository, UserRepository
from provision.domain.value import Role
from tests.conftest import make_invitation, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRedeemInvitation:
    @pytest.mark.asyncio
    async def test_new_account_is_returned(self, unit_env):
        # Arrange
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation("r@example.org", role=Role.CLIENT)
        )
        use_case = await unit_env.get(RedeemInvitationUseCase)

        # Act
        response = await use_case.execute(
            RedeemInvitationRequest(
                token=invitation.token.root, authenticated_email="r@example.org"
            )
        )

        # Assert
        assert response.user.email == "r@example.org"
        assert response.invitation_id == str(invitation.id)
        assert not response.merged
        assert response.deleted_user_ids == []
        assert response.delivery.delivered
        assert "jwt_token" not in response.model_dump()

    @pytest.mark.asyncio
    async def test_existing_account_is_reported_as_merged(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        existing = await user_repo.save(make_user("m@example.org", Role.CLIENT))
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation("m@example.org", role=Role.PILOT)
        )
        use_case = await unit_env.get(RedeemInvitationUseCase)

        response = await use_case.execute(
            RedeemInvitationRequest(
                token=invitation.token.root, authenticated_email="m@example.org"
            )
        )

        assert response.merged
        assert response.user.id == str(existing.id)
        assert response.user.role == Role.PILOT
