"""Unit tests for RedemptionService."""

import asyncio
from datetime import timedelta

import pytest

from provision.adapter.notifier import MockNotifier
from provision.domain.error import (
    ExpiredToken,
    IdentityMismatch,
    InvalidToken,
    MergeConflict,
    StatusConflict,
)
from provision.domain.repository import (
    AuditLogRepository,
    InvitationRepository,
    UserRepository,
)
from provision.domain.service import InvitationService, RedemptionService
from provision.domain.value import (
    AccessAction,
    Email,
    InvitationStatus,
    NotificationTemplate,
    Role,
)
from provision.persistence.repository.inmemory import InMemoryStore
from tests.conftest import make_invitation, make_user
from tests.di import build_test_container
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRedeemNewUser:
    """Redeeming for an email without an account."""

    @pytest.mark.asyncio
    async def test_redeem_creates_user_with_invited_role_and_access(self, unit_env):
        # Arrange
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation(
                "pilot@example.org",
                role=Role.PILOT,
                has_access=True,
                name="Jane Pilot",
                company="Skyline",
            )
        )
        service = await unit_env.get(RedemptionService)
        audit_repo = await unit_env.get(AuditLogRepository)
        notifier = await unit_env.get(MockNotifier)

        # Act
        result = await service.redeem(invitation.token.root, "PILOT@example.org")

        # Assert
        user = result.user
        assert not result.merged
        assert user.email == Email("pilot@example.org")
        assert user.role == Role.PILOT
        assert user.has_access
        assert user.name == "Jane Pilot"
        assert user.company == "Skyline"
        assert result.invitation.status == InvitationStatus.ACCEPTED
        assert result.invitation.accepted_at is not None

        [role_event] = await audit_repo.list_role_changes(user.id)
        assert role_event.role == Role.PILOT
        assert role_event.changed_by == invitation.invited_by
        [access_event] = await audit_repo.list_access_changes(user.id)
        assert access_event.action == AccessAction.CREATED
        assert access_event.has_access

        [message] = notifier.sent_to("pilot@example.org")
        assert message.template == NotificationTemplate.WELCOME

    @pytest.mark.asyncio
    async def test_welcome_failure_does_not_undo_redemption(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("c@example.org"))
        notifier = await unit_env.get(MockNotifier)
        notifier.fail_for.add("c@example.org")
        service = await unit_env.get(RedemptionService)

        result = await service.redeem(invitation.token.root, "c@example.org")

        assert result.delivery is not None
        assert result.delivery.template == NotificationTemplate.WELCOME
        assert result.invitation.status == InvitationStatus.ACCEPTED


class TestRedeemExistingUser:
    """Redeeming for an email that already has accounts."""

    @pytest.mark.asyncio
    async def test_redeem_updates_existing_user_in_place(self, unit_env):
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        existing = await user_repo.save(
            make_user("old@example.org", Role.CLIENT, has_access=False, phone="123")
        )
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation("old@example.org", role=Role.PILOT, has_access=True)
        )
        service = await unit_env.get(RedemptionService)

        # Act
        result = await service.redeem(invitation.token.root, "old@example.org")

        # Assert
        assert result.merged
        assert result.user.id == existing.id
        assert result.user.role == Role.PILOT
        assert result.user.has_access
        assert result.user.phone == "123"
        assert len(await user_repo.find_all_by_email(Email("old@example.org"))) == 1

    @pytest.mark.asyncio
    async def test_manual_review_leaves_invitation_pending(self, unit_env):
        # Arrange
        store = await unit_env.get(InMemoryStore)
        store.unique_user_email = False
        user_repo = await unit_env.get(UserRepository)
        created = make_user("tie@example.org", Role.CLIENT).created_at
        for _ in range(2):
            await user_repo.save(
                make_user("tie@example.org", Role.CLIENT, created_at=created)
            )
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation("tie@example.org", role=Role.PILOT)
        )
        service = await unit_env.get(RedemptionService)

        # Act
        with pytest.raises(MergeConflict):
            await service.redeem(invitation.token.root, "tie@example.org")

        # Assert
        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.PENDING
        assert stored.accepted_at is None
        assert len(await user_repo.find_all_by_email(Email("tie@example.org"))) == 2


class TestRedeemRejections:
    """Tokens that cannot be redeemed."""

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        service = await unit_env.get(RedemptionService)

        with pytest.raises(InvalidToken):
            await service.redeem("nope", "a@example.org")

    @pytest.mark.asyncio
    async def test_identity_mismatch_leaves_invitation_pending(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("a@example.org"))
        service = await unit_env.get(RedemptionService)

        with pytest.raises(IdentityMismatch):
            await service.redeem(invitation.token.root, "b@example.org")

        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_expired_invitation_is_marked_expired(self, unit_env):
        # Arrange
        invitation_repo = await unit_env.get(InvitationRepository)
        user_repo = await unit_env.get(UserRepository)
        invitation = await invitation_repo.save(make_invitation("late@example.org"))
        service = await unit_env.get(RedemptionService)

        # Act
        with pytest.raises(ExpiredToken):
            await service.redeem(
                invitation.token.root,
                "late@example.org",
                now=invitation.expires_at + timedelta(minutes=1),
            )

        # Assert
        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.EXPIRED
        assert await user_repo.find_by_email(Email("late@example.org")) is None

    @pytest.mark.asyncio
    async def test_redeem_twice_conflicts(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("a@example.org"))
        service = await unit_env.get(RedemptionService)
        await service.redeem(invitation.token.root, "a@example.org")

        with pytest.raises(StatusConflict):
            await service.redeem(invitation.token.root, "a@example.org")


class TestConcurrentRedemption:
    """Several requests racing for one token."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("callers", [2, 5])
    async def test_exactly_one_concurrent_redemption_succeeds(self, callers):
        # Arrange
        container = build_test_container()
        async with container() as setup:
            invitation_repo = await setup.get(InvitationRepository)
            invitation = await invitation_repo.save(
                make_invitation("race@example.org", role=Role.PILOT)
            )

        async def redeem():
            async with container() as request:
                service = await request.get(RedemptionService)
                return await service.redeem(invitation.token.root, "race@example.org")

        # Act
        results = await asyncio.gather(
            *(redeem() for _ in range(callers)), return_exceptions=True
        )

        # Assert
        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == callers - 1
        assert all(isinstance(f, StatusConflict) for f in failures)

        async with container() as check:
            user_repo = await check.get(UserRepository)
            assert len(await user_repo.find_all_by_email(Email("race@example.org"))) == 1

        await container.close()


class TestIssueThenRedeem:
    @pytest.mark.asyncio
    async def test_pilot_invitation_yields_pilot_without_access(self, unit_env):
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(make_user("admin@example.com", Role.ADMIN))
        invitations = await unit_env.get(InvitationService)
        issued = await invitations.issue(
            "a@x.com",
            "A",
            Role.PILOT,
            has_access=False,
            invited_by_email="admin@example.com",
            ttl=timedelta(days=7),
        )
        service = await unit_env.get(RedemptionService)

        # Act
        result = await service.redeem(issued.invitation.token.root, "a@x.com")

        # Assert
        assert result.user.role == Role.PILOT
        assert not result.user.has_access
        assert result.invitation.status == InvitationStatus.ACCEPTED
