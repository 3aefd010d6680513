"""Repository interfaces for the discussion domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from discuss.domain.repository.comment import CommentRepository
from discuss.domain.repository.unit_of_work import UnitOfWork

__all__ = [
    "CommentRepository",
    "UnitOfWork",
]
