"""Comment entity.

Comments are threaded discussions attached to ideas, domains, or other
comments. Nesting is clamped at a fixed maximum thread level: a reply to a
comment at the cap becomes another comment at the cap.
"""

from datetime import UTC, datetime
from typing import Optional

from pydantic import Field, model_validator

from discuss.domain.model.common import DomainModel
from discuss.domain.value import (
    Attachment,
    CommentId,
    CommentStatus,
    CommentTarget,
    EditRecord,
    Flag,
    Like,
    TargetKind,
    UserId,
)

MAX_THREAD_LEVEL = 5


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through:
    - target: What the comment hangs off (idea, domain, or parent comment)
    - parent_id: Direct parent comment (None for root comments)
    - thread_level: Nesting level, 0 for roots, clamped at MAX_THREAD_LEVEL

    Aggregates (reply_count, like_count) are maintained by the store with
    atomic updates and are never supplied by clients.
    """

    id: CommentId
    content: str = Field(min_length=1, max_length=2000)
    author_id: UserId
    target: CommentTarget
    parent_id: Optional[CommentId] = None
    thread_level: int = Field(default=0, ge=0, le=MAX_THREAD_LEVEL)
    reply_count: int = Field(default=0, ge=0)
    likes: list[Like] = Field(default_factory=list)
    like_count: int = Field(default=0, ge=0)
    flags: list[Flag] = Field(default_factory=list)
    status: CommentStatus = CommentStatus.ACTIVE
    moderation_notes: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    is_edited: bool = False
    edit_history: list[EditRecord] = Field(default_factory=list)
    mentions: list[UserId] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def validate_threading(self) -> "Comment":
        """Keep target, parent and thread level consistent."""
        match self.target.kind:
            case TargetKind.COMMENT:
                if self.parent_id is None or self.parent_id != self.target.id:
                    raise ValueError("Reply target must reference its parent comment")
                if self.thread_level < 1:
                    raise ValueError("Replies must have a thread level of at least 1")
            case TargetKind.IDEA | TargetKind.DOMAIN:
                if self.parent_id is not None:
                    raise ValueError("Root comments cannot have a parent")
                if self.thread_level != 0:
                    raise ValueError("Root comments must have thread level 0")
        return self

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def flag_count(self) -> int:
        return len(self.flags)

    @property
    def is_visible(self) -> bool:
        """Whether read-side listings may show this comment."""
        return not self.is_deleted and self.status == CommentStatus.ACTIVE

    def is_liked_by(self, user_id: UserId) -> bool:
        """Check whether a user has liked this comment."""
        return any(like.user_id == user_id for like in self.likes)

    def has_flag_from(self, user_id: UserId) -> bool:
        """Check whether a user has already flagged this comment."""
        return any(flag.user_id == user_id for flag in self.flags)
