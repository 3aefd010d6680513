"""PostgreSQL transaction boundary."""

import logfire
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from discuss.domain.error import ConflictError
from discuss.domain.repository import UnitOfWork


class PostgresUnitOfWork(UnitOfWork):
    """Commits the request session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logfire.error("Commit failed", error=str(e))
            await self.session.rollback()
            raise ConflictError(f"Transaction could not be committed: {e}") from e
