"""Immutable value object bases."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")
V = TypeVar("V", bound="RootValueObject")


class ValueObject(BaseModel):
    """Several fields compared together, e.g. a ``PartialFailure``."""

    model_config = ConfigDict(frozen=True)


class RootValueObject(RootModel[T], Generic[T]):
    """A single normalized primitive such as an Email or InvitationToken.

    Validators on ``root`` normalize the value, so equality and hashing
    operate on the normalized form.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def try_parse(cls: type[V], value: object) -> Optional[V]:
        """Return the parsed value, or None when the input is not valid."""
        try:
            return cls(value)
        except PydanticValidationError:
            return None

    def __str__(self) -> str:
        return str(self.root)
