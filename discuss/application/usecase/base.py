"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from discuss.domain.error import MalformedIdentifierError

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


def parse_uuid(value: str, field: str) -> UUID:
    """Parse an identifier from a request, rejecting malformed input."""
    try:
        return UUID(value)
    except ValueError as e:
        raise MalformedIdentifierError(field, value) from e


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Orchestrates domain services for one externally visible operation."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
