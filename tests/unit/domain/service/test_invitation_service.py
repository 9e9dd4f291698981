"""Unit tests for InvitationService."""

from datetime import datetime, timedelta, timezone

import pytest

from provision.adapter.notifier import MockNotifier
from provision.domain.error import (
    DuplicateInvitation,
    ExpiredToken,
    InvalidRoleAssignment,
    InvalidToken,
    InvitationConflict,
    NotFoundError,
    PermissionDenied,
    StatusConflict,
    ValidationError,
)
from provision.domain.repository import InvitationRepository, UserRepository
from provision.domain.service import InvitationService
from provision.domain.value import (
    Email,
    InvitationStatus,
    NotificationTemplate,
    Role,
)
from provision.persistence.repository.inmemory import InMemoryStore
from tests.conftest import make_invitation, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

ADMIN = "admin@example.com"
T1 = datetime(2026, 1, 1, tzinfo=timezone.utc)


async def seed_admin(env, email: str = ADMIN):
    user_repo = await env.get(UserRepository)
    return await user_repo.save(make_user(email, Role.ADMIN))


class TestIssue:
    """Tests for issuing invitations."""

    @pytest.mark.asyncio
    async def test_issue_stores_pending_invitation_and_sends_email(self, unit_env):
        # Arrange
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockNotifier)

        # Act
        result = await service.issue(
            email="  Pilot@Example.org ",
            name="Jane Pilot",
            role=Role.PILOT,
            has_access=True,
            invited_by_email=ADMIN,
        )

        # Assert
        invitation = result.invitation
        assert invitation.email == Email("pilot@example.org")
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.invited_by == ADMIN
        assert invitation.expires_at - invitation.invited_at == timedelta(days=7)
        assert result.delivered
        assert f"/invite?token={invitation.token.root}" in result.invite_url

        [message] = notifier.sent_to("pilot@example.org")
        assert message.template == NotificationTemplate.INVITATION
        assert message.variables["invite_url"] == result.invite_url

    @pytest.mark.asyncio
    async def test_custom_ttl_is_applied(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)

        result = await service.issue(
            email="c@example.org",
            name="C",
            role=Role.CLIENT,
            has_access=False,
            invited_by_email=ADMIN,
            ttl=timedelta(days=2),
        )

        invitation = result.invitation
        assert invitation.expires_at - invitation.invited_at == timedelta(days=2)

    @pytest.mark.asyncio
    async def test_tokens_are_unique(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)

        first = await service.issue("a@example.org", "A", Role.CLIENT, True, ADMIN)
        second = await service.issue("b@example.org", "B", Role.CLIENT, True, ADMIN)

        assert first.invitation.token != second.invitation.token
        assert len(first.invitation.token.root) >= 32

    @pytest.mark.asyncio
    async def test_non_admin_cannot_issue(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(make_user("pilot@example.com", Role.PILOT))
        service = await unit_env.get(InvitationService)

        with pytest.raises(PermissionDenied):
            await service.issue(
                "new@example.org", "New", Role.CLIENT, True, "pilot@example.com"
            )

    @pytest.mark.asyncio
    async def test_unknown_inviter_cannot_issue(self, unit_env):
        service = await unit_env.get(InvitationService)

        with pytest.raises(PermissionDenied):
            await service.issue("new@example.org", "New", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_admin_invitation_outside_trusted_domain_is_rejected(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvalidRoleAssignment):
            await service.issue("boss@gmail.com", "Boss", Role.ADMIN, True, ADMIN)

    @pytest.mark.asyncio
    async def test_untrusted_admin_cannot_invite_admins(self, unit_env):
        await seed_admin(unit_env, "ops@partner.org")
        service = await unit_env.get(InvitationService)

        with pytest.raises(PermissionDenied):
            await service.issue(
                "new@example.com", "New", Role.ADMIN, True, "ops@partner.org"
            )

    @pytest.mark.asyncio
    async def test_active_user_cannot_be_invited(self, unit_env):
        await seed_admin(unit_env)
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(make_user("taken@example.org", has_access=True))
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvitationConflict):
            await service.issue("TAKEN@example.org", "T", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_active_legacy_duplicate_blocks_invitation(self, unit_env):
        await seed_admin(unit_env)
        store = await unit_env.get(InMemoryStore)
        store.unique_user_email = False
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(
            make_user("twice@example.org", has_access=False, created_at=T1)
        )
        await user_repo.save(
            make_user(
                "twice@example.org", has_access=True, created_at=T1 + timedelta(days=1)
            )
        )
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvitationConflict):
            await service.issue("twice@example.org", "T", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_inactive_user_can_be_invited(self, unit_env):
        await seed_admin(unit_env)
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(make_user("dormant@example.org", has_access=False))
        service = await unit_env.get(InvitationService)

        result = await service.issue("dormant@example.org", "D", Role.CLIENT, True, ADMIN)

        assert result.invitation.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_second_pending_invitation_is_rejected(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)
        await service.issue("dup@example.org", "D", Role.CLIENT, True, ADMIN)

        with pytest.raises(DuplicateInvitation):
            await service.issue("Dup@example.org", "D", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_stale_pending_invitation_is_expired_and_replaced(self, unit_env):
        await seed_admin(unit_env)
        invitation_repo = await unit_env.get(InvitationRepository)
        stale = await invitation_repo.save(
            make_invitation(
                "late@example.org",
                invited_at=datetime.now(timezone.utc) - timedelta(days=10),
            )
        )
        service = await unit_env.get(InvitationService)

        result = await service.issue("late@example.org", "L", Role.CLIENT, True, ADMIN)

        assert result.invitation.id != stale.id
        old = await invitation_repo.find_by_id(stale.id)
        assert old.status == InvitationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(ValidationError):
            await service.issue("x@example.org", "   ", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_malformed_email_is_rejected(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(ValidationError):
            await service.issue("nope", "X", Role.CLIENT, True, ADMIN)

    @pytest.mark.asyncio
    async def test_failed_email_still_issues_invitation(self, unit_env):
        # Arrange
        await seed_admin(unit_env)
        notifier = await unit_env.get(MockNotifier)
        notifier.fail = True
        service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)

        # Act
        result = await service.issue("x@example.org", "X", Role.CLIENT, True, ADMIN)

        # Assert
        assert not result.delivered
        assert result.delivery.template == NotificationTemplate.INVITATION
        assert result.delivery.recipient == "x@example.org"
        stored = await invitation_repo.find_by_id(result.invitation.id)
        assert stored.status == InvitationStatus.PENDING


class TestResend:
    """Tests for resending invitations."""

    @pytest.mark.asyncio
    async def test_resend_rotates_token_and_extends_expiry(self, unit_env):
        # Arrange
        await seed_admin(unit_env)
        invitation_repo = await unit_env.get(InvitationRepository)
        original = await invitation_repo.save(
            make_invitation(
                "r@example.org",
                invited_at=datetime.now(timezone.utc) - timedelta(days=6),
                ttl=timedelta(days=7),
            )
        )
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockNotifier)

        # Act
        result = await service.resend(original.id, ADMIN)

        # Assert
        assert result.invitation.id == original.id
        assert result.invitation.token != original.token
        assert result.invitation.expires_at > original.expires_at
        assert await invitation_repo.find_by_token(original.token) is None
        [message] = notifier.sent_to("r@example.org")
        assert message.template == NotificationTemplate.INVITATION_RESEND

    @pytest.mark.asyncio
    async def test_expired_invitation_can_be_resent(self, unit_env):
        await seed_admin(unit_env)
        invitation_repo = await unit_env.get(InvitationRepository)
        expired = await invitation_repo.save(
            make_invitation("e@example.org", status=InvitationStatus.EXPIRED)
        )
        service = await unit_env.get(InvitationService)

        result = await service.resend(expired.id, ADMIN)

        assert result.invitation.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_accepted_invitation_cannot_be_resent(self, unit_env):
        await seed_admin(unit_env)
        invitation_repo = await unit_env.get(InvitationRepository)
        accepted = await invitation_repo.save(
            make_invitation("a@example.org", status=InvitationStatus.ACCEPTED)
        )
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError):
            await service.resend(accepted.id, ADMIN)


class TestCancel:
    """Tests for cancelling invitations."""

    @pytest.mark.asyncio
    async def test_cancel_deletes_pending_invitation(self, unit_env):
        await seed_admin(unit_env)
        service = await unit_env.get(InvitationService)
        issued = await service.issue("c@example.org", "C", Role.CLIENT, True, ADMIN)

        await service.cancel(issued.invitation.id, ADMIN)

        with pytest.raises(InvalidToken):
            await service.validate(issued.invitation.token.root)

    @pytest.mark.asyncio
    async def test_cancel_accepted_invitation_conflicts(self, unit_env):
        await seed_admin(unit_env)
        invitation_repo = await unit_env.get(InvitationRepository)
        accepted = await invitation_repo.save(
            make_invitation("a@example.org", status=InvitationStatus.ACCEPTED)
        )
        service = await unit_env.get(InvitationService)

        with pytest.raises(StatusConflict):
            await service.cancel(accepted.id, ADMIN)


class TestValidate:
    """Tests for token validation."""

    @pytest.mark.asyncio
    async def test_validate_returns_pending_invitation(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("v@example.org"))
        service = await unit_env.get(InvitationService)

        found = await service.validate(invitation.token.root)

        assert found.id == invitation.id

    @pytest.mark.asyncio
    async def test_unknown_token_is_invalid(self, unit_env):
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvalidToken):
            await service.validate("does-not-exist")

    @pytest.mark.asyncio
    async def test_validate_past_expiry_raises_without_changing_status(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("v@example.org"))
        service = await unit_env.get(InvitationService)

        with pytest.raises(ExpiredToken):
            await service.validate(
                invitation.token.root, now=invitation.expires_at + timedelta(seconds=1)
            )

        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_validate_at_exact_expiry_is_still_valid(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(make_invitation("v@example.org"))
        service = await unit_env.get(InvitationService)

        found = await service.validate(invitation.token.root, now=invitation.expires_at)

        assert found.id == invitation.id

    @pytest.mark.asyncio
    async def test_validate_accepted_invitation_conflicts(self, unit_env):
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = await invitation_repo.save(
            make_invitation("v@example.org", status=InvitationStatus.ACCEPTED)
        )
        service = await unit_env.get(InvitationService)

        with pytest.raises(StatusConflict):
            await service.validate(invitation.token.root)


class TestExpireStale:
    """Tests for the expiry sweep."""

    @pytest.mark.asyncio
    async def test_sweep_expires_only_stale_pending_invitations(self, unit_env):
        # Arrange
        invitation_repo = await unit_env.get(InvitationRepository)
        now = datetime.now(timezone.utc)
        stale = await invitation_repo.save(
            make_invitation("old@example.org", invited_at=now - timedelta(days=8))
        )
        fresh = await invitation_repo.save(make_invitation("new@example.org"))
        accepted = await invitation_repo.save(
            make_invitation(
                "done@example.org",
                invited_at=now - timedelta(days=8),
                status=InvitationStatus.ACCEPTED,
            )
        )
        service = await unit_env.get(InvitationService)

        # Act
        first = await service.expire_stale(now)
        second = await service.expire_stale(now)

        # Assert
        assert first == 1
        assert second == 0
        assert (await invitation_repo.find_by_id(stale.id)).status == InvitationStatus.EXPIRED
        assert (await invitation_repo.find_by_id(fresh.id)).status == InvitationStatus.PENDING
        assert (
            await invitation_repo.find_by_id(accepted.id)
        ).status == InvitationStatus.ACCEPTED
