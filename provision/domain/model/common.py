"""Entity base and the domain clock."""

from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

M = TypeVar("M", bound="DomainModel")


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Frozen entity. State changes produce a new instance via ``evolve``."""

    model_config = ConfigDict(frozen=True)

    def evolve(self: M, **changes: Any) -> M:
        """Copy with ``changes`` applied, re-running field validation."""
        return type(self).model_validate({**self.__dict__, **changes})
