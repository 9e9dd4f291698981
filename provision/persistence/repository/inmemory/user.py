"""Accounts in a dict keyed by id."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from provision.domain.error import MergeConflict
from provision.domain.model import User
from provision.domain.repository import UserRepository
from provision.domain.value import Email, Role, UserId

from .store import InMemoryStore


class InMemoryUserRepository(UserRepository):
    """Rejects a second account per email when the store enforces uniqueness."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    def _by_email(self, email: Email) -> list[User]:
        users = [u for u in self._store.users.values() if u.email == email]
        return sorted(users, key=lambda u: u.created_at)

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        await self._store.io()
        return self._store.users.get(user_id)

    async def find_by_email(self, email: Email) -> Optional[User]:
        await self._store.io()
        users = self._by_email(email)
        return users[0] if users else None

    async def find_all_by_email(self, email: Email) -> list[User]:
        await self._store.io()
        return self._by_email(email)

    async def find_duplicate_emails(self) -> list[Email]:
        await self._store.io()
        counts: dict[Email, int] = {}
        for user in self._store.users.values():
            counts[user.email] = counts.get(user.email, 0) + 1
        return sorted(
            (email for email, count in counts.items() if count > 1),
            key=lambda e: e.root,
        )

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Raises:
            IntegrityError: If another user already holds the email
        """
        await self._store.io()
        if self._store.unique_user_email:
            for other in self._store.users.values():
                if other.id != user.id and other.email == user.email:
                    raise IntegrityError("Duplicate user email", None, Exception())
        self._store.users[user.id] = user
        return user

    async def list_users(
        self,
        role: Optional[Role] = None,
        has_access: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[User]:
        await self._store.io()
        users = [
            u
            for u in self._store.users.values()
            if (role is None or u.role == role)
            and (has_access is None or u.has_access == has_access)
        ]
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users[offset : offset + limit]

    async def count_by_role(self) -> dict[Role, int]:
        await self._store.io()
        counts: dict[Role, int] = {}
        for user in self._store.users.values():
            counts[user.role] = counts.get(user.role, 0) + 1
        return counts

    async def replace_duplicates(
        self, survivor: User, loser_ids: list[UserId]
    ) -> list[UserId]:
        await self._store.io()
        if survivor.id not in self._store.users:
            raise MergeConflict(survivor.email.root, "surviving user no longer exists")

        deleted: list[UserId] = []
        for loser_id in loser_ids:
            if loser_id != survivor.id and self._store.users.pop(loser_id, None):
                deleted.append(loser_id)
        self._store.users[survivor.id] = survivor
        return deleted
