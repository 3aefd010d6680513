"""Base model for all domain entities."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are immutable snapshots of stored state. A mutation produces a
    new snapshot; it never changes one a caller already holds.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )

    def evolve(self, **changes: Any) -> Self:
        """Return a validated copy with the given fields replaced.

        Args:
            **changes: Field values to replace

        Returns:
            New instance of the same model
        """
        return self.model_validate({**self.model_dump(), **changes})
