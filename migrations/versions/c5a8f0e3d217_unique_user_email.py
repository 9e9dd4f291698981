"""unique_user_email

Enforce one account per email. Duplicates must be merged first with
``scripts/resolve_duplicates.py --all``.

Revision ID: c5a8f0e3d217
Revises: 9b2e4d6a1c83
Create Date: 2026-09-30 16:02:51.880132

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "c5a8f0e3d217"
down_revision: Union[str, Sequence[str], None] = "9b2e4d6a1c83"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    duplicates = op.get_bind().execute(
        sa.text("SELECT email FROM users GROUP BY email HAVING COUNT(*) > 1")
    ).scalars().all()
    if duplicates:
        raise RuntimeError(
            f"{len(duplicates)} emails still have several accounts; "
            "run scripts/resolve_duplicates.py --all before this migration"
        )

    op.drop_index("idx_users_email", table_name="users")
    op.create_index("uq_users_email", "users", ["email"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_users_email", table_name="users")
    op.create_index("idx_users_email", "users", ["email"])
