"""Accounts in the ``users`` table."""

from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from provision.domain.error import MergeConflict
from provision.domain.model import User
from provision.domain.repository import UserRepository
from provision.domain.value import Email, Role, UserId
from provision.persistence.mappers import row_to_user, user_to_dict
from provision.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """Writes go through the request session and commit with it."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: Email) -> Optional[User]:
        stmt = (
            select(users_table)
            .where(users_table.c.email == email.root)
            .order_by(users_table.c.created_at.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_all_by_email(self, email: Email) -> list[User]:
        stmt = (
            select(users_table)
            .where(users_table.c.email == email.root)
            .order_by(users_table.c.created_at.asc(), users_table.c.id.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def find_duplicate_emails(self) -> list[Email]:
        stmt = (
            select(users_table.c.email)
            .group_by(users_table.c.email)
            .having(func.count() > 1)
            .order_by(users_table.c.email)
        )
        result = await self.session.execute(stmt)
        return [Email(email) for email in result.scalars().all()]

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Writes inside a savepoint so a unique violation leaves the request
        transaction usable.

        Raises:
            IntegrityError: If another user already holds the email
        """
        user_dict = user_to_dict(user)

        existing = await self.find_by_id(user.id)

        async with self.session.begin_nested():
            if existing:
                stmt = (
                    update(users_table)
                    .where(users_table.c.id == user.id)
                    .values(**user_dict)
                )
            else:
                stmt = insert(users_table).values(**user_dict)
            await self.session.execute(stmt)

        return user

    async def list_users(
        self,
        role: Optional[Role] = None,
        has_access: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[User]:
        stmt = (
            select(users_table)
            .order_by(users_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )

        if role is not None:
            stmt = stmt.where(users_table.c.role == role.value)
        if has_access is not None:
            stmt = stmt.where(users_table.c.has_access == has_access)

        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def count_by_role(self) -> dict[Role, int]:
        stmt = select(users_table.c.role, func.count()).group_by(users_table.c.role)
        result = await self.session.execute(stmt)

        counts: dict[Role, int] = {}
        for role_value, count in result.all():
            # Legacy "user" rows fold into client
            role = Role(role_value)
            counts[role] = counts.get(role, 0) + count
        return counts

    async def replace_duplicates(
        self, survivor: User, loser_ids: list[UserId]
    ) -> list[UserId]:
        """Persist the survivor and delete the losers under a row lock.

        Locks every row holding the survivor's email for the rest of the
        transaction, so concurrent merges for one email serialize.
        """
        locked = await self.session.execute(
            select(users_table.c.id)
            .where(users_table.c.email == survivor.email.root)
            .with_for_update()
        )
        held = set(locked.scalars().all())
        if survivor.id not in held:
            raise MergeConflict(survivor.email.root, "surviving user no longer exists")

        deleted: list[UserId] = []
        if loser_ids:
            result = await self.session.execute(
                delete(users_table)
                .where(
                    and_(
                        users_table.c.id.in_(loser_ids),
                        users_table.c.id != survivor.id,
                    )
                )
                .returning(users_table.c.id)
            )
            deleted = [UserId(user_id) for user_id in result.scalars().all()]

        await self.session.execute(
            update(users_table)
            .where(users_table.c.id == survivor.id)
            .values(**user_to_dict(survivor))
        )
        await self.session.flush()
        return deleted
