"""Account storage."""

from abc import ABC, abstractmethod
from typing import Optional

from provision.domain.model.user import User
from provision.domain.value import Email, Role, UserId


class UserRepository(ABC):
    """Accounts keyed by id, looked up by normalized email.

    Emails are unique once the unique-email migration has run; before that
    the lookups below must cope with several accounts per email.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """The account with ``user_id``, or None."""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """The oldest account holding ``email``, or None."""
        pass

    @abstractmethod
    async def find_all_by_email(self, email: Email) -> list[User]:
        """Find every user holding an email, oldest first.

        More than one result only occurs for legacy data written before the
        unique email index existed.

        Args:
            email: Normalized email

        Returns:
            Users ordered by created_at ascending
        """
        pass

    @abstractmethod
    async def find_duplicate_emails(self) -> list[Email]:
        """Find every email held by more than one user."""
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert the account, or overwrite it if the id already exists.

        Raises:
            IntegrityError: If another user already holds the email
        """
        pass

    @abstractmethod
    async def list_users(
        self,
        role: Optional[Role] = None,
        has_access: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[User]:
        """List users, newest first.

        Args:
            role: Optional role filter
            has_access: Optional access filter
            limit: Page size
            offset: Rows to skip
        """
        pass

    @abstractmethod
    async def count_by_role(self) -> dict[Role, int]:
        """Count users per role."""
        pass

    @abstractmethod
    async def replace_duplicates(
        self, survivor: User, loser_ids: list[UserId]
    ) -> list[UserId]:
        """Persist the surviving user and delete the others in one step.

        Readers never observe a state where the survivor is updated but the
        losers still exist, or the reverse.

        Args:
            survivor: Surviving user with merged fields applied
            loser_ids: Users to delete

        Returns:
            IDs that were actually deleted; losers already gone are skipped

        Raises:
            MergeConflict: If the survivor no longer exists
        """
        pass
