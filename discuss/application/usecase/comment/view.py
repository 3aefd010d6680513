"""Response shapes shared by the comment use cases."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel

from discuss.domain.model import Comment, Pagination, ThreadNode
from discuss.domain.value import UserId


class AttachmentItem(BaseModel):
    """Attachment reference in responses."""

    type: str
    url: str
    filename: str
    size: int


class EditItem(BaseModel):
    """One replaced version of a comment."""

    content: str
    edited_at: datetime


class CommentItem(BaseModel):
    """Comment in responses.

    ``is_liked`` is relative to the viewer passed to ``from_comment``.
    """

    comment_id: str
    content: str
    author_id: str
    target_kind: str
    target_id: str
    parent_id: str | None
    thread_level: int
    reply_count: int
    like_count: int
    is_liked: bool
    flag_count: int
    status: str
    is_deleted: bool
    deleted_at: datetime | None
    is_edited: bool
    edit_history: list[EditItem]
    mentions: list[str]
    attachments: list[AttachmentItem]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment, viewer_id: UserId | None = None) -> Self:
        return cls(
            comment_id=str(comment.id),
            content=comment.content,
            author_id=str(comment.author_id),
            target_kind=comment.target.kind.value,
            target_id=str(comment.target.id),
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            thread_level=comment.thread_level,
            reply_count=comment.reply_count,
            like_count=comment.like_count,
            is_liked=viewer_id is not None and comment.is_liked_by(viewer_id),
            flag_count=comment.flag_count,
            status=comment.status.value,
            is_deleted=comment.is_deleted,
            deleted_at=comment.deleted_at,
            is_edited=comment.is_edited,
            edit_history=[
                EditItem(content=e.content, edited_at=e.edited_at)
                for e in comment.edit_history
            ],
            mentions=[str(m) for m in comment.mentions],
            attachments=[
                AttachmentItem(
                    type=a.type.value, url=a.url, filename=a.filename, size=a.size
                )
                for a in comment.attachments
            ],
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class PaginationItem(BaseModel):
    """Page metadata."""

    current: int
    total_pages: int
    count: int
    total_items: int

    @classmethod
    def from_pagination(cls, pagination: Pagination) -> Self:
        return cls(
            current=pagination.current,
            total_pages=pagination.total_pages,
            count=pagination.count,
            total_items=pagination.total_items,
        )


class ThreadNodeItem(BaseModel):
    """Expanded comment with its nested replies."""

    comment: CommentItem
    replies: list["ThreadNodeItem"]

    @classmethod
    def from_node(cls, root: ThreadNode, viewer_id: UserId | None = None) -> Self:
        """Convert a thread tree without recursion."""
        order: list[ThreadNode] = []
        stack = [root]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(node.replies)

        built: dict[int, ThreadNodeItem] = {}
        for node in reversed(order):
            built[id(node)] = cls(
                comment=CommentItem.from_comment(node.comment, viewer_id),
                replies=[built[id(reply)] for reply in node.replies],
            )
        return built[id(root)]
