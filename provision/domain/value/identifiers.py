"""Strongly typed identifiers for provisioning entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
InvitationId = NewType("InvitationId", UUID)
AuditEventId = NewType("AuditEventId", UUID)
