"""Domain model entities for the discussion engine."""

from discuss.domain.model.comment import MAX_THREAD_LEVEL, Comment
from discuss.domain.model.thread import Pagination, ThreadEntry, ThreadNode, ThreadPage

__all__ = [
    "Comment",
    "MAX_THREAD_LEVEL",
    "Pagination",
    "ThreadEntry",
    "ThreadNode",
    "ThreadPage",
]
