"""Use case contract shared by the API routes and maintenance scripts."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """One application operation: a request DTO in, a response DTO out.

    Domain errors raised by the services propagate unchanged; the API maps
    them to status codes and the scripts log and count them.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT: ...
