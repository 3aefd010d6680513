"""Read-side thread structures assembled from stored comments."""

import math

from pydantic import Field

from discuss.domain.model.comment import Comment
from discuss.domain.model.common import DomainModel


class Pagination(DomainModel):
    """Page position within a listing."""

    current: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    count: int = Field(ge=0)
    total_items: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, page_size: int, count: int, total_items: int) -> "Pagination":
        """Build pagination metadata for a page of results.

        Args:
            page: 1-based page number
            page_size: Requested page size
            count: Number of items on this page
            total_items: Number of items across all pages

        Returns:
            Pagination metadata
        """
        return cls(
            current=page,
            total_pages=math.ceil(total_items / page_size) if page_size else 0,
            count=count,
            total_items=total_items,
        )


class ThreadEntry(DomainModel):
    """A root comment with the first slice of its replies."""

    comment: Comment
    replies: list[Comment]
    reply_count: int = Field(ge=0)

    @property
    def has_more_replies(self) -> bool:
        return self.reply_count > len(self.replies)


class ThreadPage(DomainModel):
    """One page of root comments for a target."""

    entries: list[ThreadEntry]
    pagination: Pagination


class ThreadNode(DomainModel):
    """A comment and its expanded descendants."""

    comment: Comment
    replies: list["ThreadNode"] = Field(default_factory=list)

    def size(self) -> int:
        """Count nodes in this subtree, iteratively."""
        total = 0
        stack: list[ThreadNode] = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.replies)
        return total
