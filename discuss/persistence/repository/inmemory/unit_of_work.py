"""In-memory transaction boundary for testing."""

from discuss.domain.error import ConflictError
from discuss.domain.repository import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """Counts commits; the in-memory store applies writes immediately."""

    def __init__(self) -> None:
        self.commits = 0
        # Set to make commits raise, as a rejected transaction would
        self.fail_commits = False

    async def commit(self) -> None:
        if self.fail_commits:
            raise ConflictError("Transaction could not be committed")
        self.commits += 1
