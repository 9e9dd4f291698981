"""Unit tests for the in-memory repositories."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from provision.domain.value import Email, InvitationStatus, Role
from provision.persistence.repository.inmemory import (
    InMemoryInvitationRepository,
    InMemoryStore,
    InMemoryUserRepository,
)
from tests.conftest import make_invitation, make_user


class TestInMemoryUserRepository:
    @pytest.mark.asyncio
    async def test_second_user_with_same_email_is_rejected(self):
        repo = InMemoryUserRepository()
        await repo.save(make_user("a@example.org"))

        with pytest.raises(IntegrityError):
            await repo.save(make_user("A@example.org"))

    @pytest.mark.asyncio
    async def test_duplicates_allowed_for_legacy_store(self):
        repo = InMemoryUserRepository(InMemoryStore(unique_user_email=False))
        await repo.save(make_user("a@example.org"))
        await repo.save(make_user("a@example.org"))
        await repo.save(make_user("b@example.org"))

        assert await repo.find_duplicate_emails() == [Email("a@example.org")]

    @pytest.mark.asyncio
    async def test_list_filters_and_counts_roles(self):
        repo = InMemoryUserRepository()
        await repo.save(make_user("a@example.org", Role.PILOT, has_access=True))
        await repo.save(make_user("b@example.org", Role.PILOT, has_access=False))
        await repo.save(make_user("c@example.org", Role.CLIENT))

        pilots = await repo.list_users(role=Role.PILOT, has_access=True)

        assert [u.email.root for u in pilots] == ["a@example.org"]
        assert await repo.count_by_role() == {Role.PILOT: 2, Role.CLIENT: 1}


class TestInMemoryInvitationRepository:
    @pytest.mark.asyncio
    async def test_second_pending_invitation_is_rejected(self):
        repo = InMemoryInvitationRepository()
        await repo.save(make_invitation("a@example.org"))

        with pytest.raises(IntegrityError):
            await repo.save(make_invitation("a@example.org"))

    @pytest.mark.asyncio
    async def test_pending_invitation_allowed_next_to_accepted_one(self):
        repo = InMemoryInvitationRepository()
        await repo.save(make_invitation("a@example.org", status=InvitationStatus.ACCEPTED))

        saved = await repo.save(make_invitation("a@example.org"))

        assert await repo.find_pending_by_email(Email("a@example.org")) == saved

    @pytest.mark.asyncio
    async def test_accept_if_pending_succeeds_once(self):
        repo = InMemoryInvitationRepository()
        invitation = await repo.save(make_invitation("a@example.org"))
        now = invitation.invited_at + timedelta(hours=1)

        results = await asyncio.gather(
            repo.accept_if_pending(invitation.id, now),
            repo.accept_if_pending(invitation.id, now),
        )

        assert sum(r is not None for r in results) == 1

    @pytest.mark.asyncio
    async def test_accept_if_pending_refuses_expired(self):
        repo = InMemoryInvitationRepository()
        invitation = await repo.save(make_invitation("a@example.org"))

        accepted = await repo.accept_if_pending(
            invitation.id, invitation.expires_at + timedelta(seconds=1)
        )

        assert accepted is None

    @pytest.mark.asyncio
    async def test_mark_expired_only_touches_pending(self):
        repo = InMemoryInvitationRepository()
        pending = await repo.save(make_invitation("a@example.org"))
        accepted = await repo.save(
            make_invitation("b@example.org", status=InvitationStatus.ACCEPTED)
        )

        assert await repo.mark_expired(pending.id)
        assert not await repo.mark_expired(pending.id)
        assert not await repo.mark_expired(accepted.id)
