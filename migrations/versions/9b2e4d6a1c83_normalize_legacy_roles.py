"""normalize_legacy_roles

Rewrite the legacy 'user' role to 'client', recording a role event for each
rewritten account, and normalize stored emails to trimmed lowercase.

Revision ID: 9b2e4d6a1c83
Revises: 3f1c9a7d2b40
Create Date: 2026-09-28 10:31:07.204419

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "9b2e4d6a1c83"
down_revision: Union[str, Sequence[str], None] = "3f1c9a7d2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        INSERT INTO role_events (user_id, role, changed_by, changed_at, reason)
        SELECT id, 'client', 'migration-script', NOW(), 'Legacy role user renamed to client'
        FROM users
        WHERE lower(role) = 'user'
    """)
    op.execute("UPDATE users SET role = 'client' WHERE lower(role) = 'user'")
    op.execute("UPDATE invitations SET role = 'client' WHERE lower(role) = 'user'")

    op.execute("UPDATE users SET email = lower(trim(email)) WHERE email <> lower(trim(email))")
    op.execute(
        "UPDATE invitations SET email = lower(trim(email)) WHERE email <> lower(trim(email))"
    )


def downgrade() -> None:
    """Downgrade schema.

    Role rewrites are not reversed; the audit rows are removed.
    """
    op.execute("DELETE FROM role_events WHERE changed_by = 'migration-script'")
