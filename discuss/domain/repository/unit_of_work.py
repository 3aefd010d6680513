"""Transaction boundary interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Commits the current request's writes.

    Use cases commit explicitly before notifying collaborators outside the
    store, so a failed commit never leaves those collaborators ahead of it.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable.

        Raises:
            ConflictError: If the store rejects the transaction
        """
        pass
