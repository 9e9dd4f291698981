"""User entity.

The live projection of an account. Role and access history are kept in the
audit log, keyed by user id, rather than embedded here.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from provision.domain.model.common import DomainModel, utcnow
from provision.domain.value import Email, Role, UserId


class User(DomainModel):
    """User entity.

    Business rules:
    - Email is unique across users, compared after normalization
    - Admin role is only held by emails in a trusted operator domain
    - A user can never change their own access flag
    """

    id: UserId
    name: str = Field(min_length=1, max_length=255)
    email: Email
    role: Role = Role.CLIENT
    has_access: bool = False
    company: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
