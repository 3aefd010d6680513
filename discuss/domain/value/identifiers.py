"""Strongly typed identifiers for discussion entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

CommentId = NewType("CommentId", UUID)
UserId = NewType("UserId", UUID)

# Parent content lives in an external service; only its id is stored here
IdeaId = NewType("IdeaId", UUID)
DomainId = NewType("DomainId", UUID)
