"""SQLAlchemy Core table definitions.

Domain models are plain pydantic objects; these tables are mapped by hand in
``provision.persistence.mappers``.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    Index,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False),  # Normalized lowercase
    Column("role", String(20), nullable=False, server_default="client"),
    Column("has_access", Boolean, nullable=False, server_default=text("false")),
    Column("company", String(255), nullable=True),
    Column("phone", String(50), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
)

Index("uq_users_email", users_table.c.email, unique=True)
Index("idx_users_role", users_table.c.role)
Index("idx_users_created_at", users_table.c.created_at)

invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")),
    Column("email", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("company", String(255), nullable=True),
    Column("phone", String(50), nullable=True),
    Column("role", String(20), nullable=False, server_default="client"),
    Column("has_access", Boolean, nullable=False, server_default=text("false")),
    Column("token", String(255), nullable=False, unique=True),
    Column("invited_by", String(255), nullable=False),
    Column("invited_at", TIMESTAMP(timezone=True), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "status",
        Enum(
            "pending",
            "accepted",
            "expired",
            name="invitation_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
)

Index("idx_invitations_email", invitations_table.c.email)
Index("idx_invitations_status_expires_at", invitations_table.c.status, invitations_table.c.expires_at)
# At most one pending invitation per email
Index(
    "uq_invitations_pending_email",
    invitations_table.c.email,
    unique=True,
    postgresql_where=invitations_table.c.status == "pending",
)

# Audit events carry no foreign key: history outlives merged-away users
role_events_table = Table(
    "role_events",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")),
    Column("user_id", UUID, nullable=False),
    Column("role", String(20), nullable=False),
    Column("changed_by", String(255), nullable=False),
    Column("changed_at", TIMESTAMP(timezone=True), nullable=False),
    Column("reason", Text, nullable=True),
)

Index("idx_role_events_user_changed_at", role_events_table.c.user_id, role_events_table.c.changed_at)

access_events_table = Table(
    "access_events",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")),
    Column("user_id", UUID, nullable=False),
    Column("action", String(20), nullable=False),
    Column("has_access", Boolean, nullable=False),
    Column("changed_by", String(255), nullable=False),
    Column("changed_at", TIMESTAMP(timezone=True), nullable=False),
    Column("reason", Text, nullable=True),
)

Index(
    "idx_access_events_user_changed_at",
    access_events_table.c.user_id,
    access_events_table.c.changed_at,
)
