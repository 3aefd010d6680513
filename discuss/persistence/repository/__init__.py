"""PostgreSQL repository implementations."""

from discuss.persistence.repository.comment import PostgresCommentRepository
from discuss.persistence.repository.unit_of_work import PostgresUnitOfWork

__all__ = ["PostgresCommentRepository", "PostgresUnitOfWork"]
