"""Domain value objects for the discussion engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import Field, field_validator

from discuss.domain.value.common import RootValueObject, ValueObject


class TargetKind(str, Enum):
    """Kind of entity a comment is attached to."""

    IDEA = "idea"
    DOMAIN = "domain"
    COMMENT = "comment"


class CommentStatus(str, Enum):
    """Moderation status of a comment."""

    ACTIVE = "active"
    FLAGGED = "flagged"
    HIDDEN = "hidden"
    SPAM = "spam"


class FlagReason(str, Enum):
    """Reason a user gives when flagging a comment."""

    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    HARASSMENT = "harassment"
    MISINFORMATION = "misinformation"
    OTHER = "other"


class AttachmentType(str, Enum):
    """Kind of file referenced by a comment attachment."""

    IMAGE = "image"
    DOCUMENT = "document"
    LINK = "link"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> "AttachmentType":
        """Pick the attachment type for an uploaded file's MIME type."""
        if content_type and content_type.startswith("image/"):
            return cls.IMAGE
        return cls.DOCUMENT


class CommentTarget(ValueObject):
    """What a comment is attached to.

    A tagged union: ``kind`` is the discriminant and ``id`` the payload.
    Replies use ``kind=comment`` with the parent comment's id.
    """

    kind: TargetKind
    id: UUID

    @classmethod
    def idea(cls, idea_id: UUID) -> "CommentTarget":
        return cls(kind=TargetKind.IDEA, id=idea_id)

    @classmethod
    def domain(cls, domain_id: UUID) -> "CommentTarget":
        return cls(kind=TargetKind.DOMAIN, id=domain_id)

    @classmethod
    def comment(cls, comment_id: UUID) -> "CommentTarget":
        return cls(kind=TargetKind.COMMENT, id=comment_id)


class Handle(RootValueObject[str]):
    """User-facing handle used in ``@mentions``.

    Word characters only, the same alphabet the mention pattern matches.
    """

    @field_validator("root")
    @classmethod
    def validate_handle_format(cls, v: str) -> str:
        """Validate handle is a non-empty word."""
        if not re.match(r"^\w{1,64}$", v):
            raise ValueError("Handle must be 1-64 word characters")
        return v


class Like(ValueObject):
    """A single user's like on a comment."""

    user_id: UUID
    liked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Flag(ValueObject):
    """A single user's report against a comment."""

    user_id: UUID
    reason: FlagReason
    description: str | None = None
    flagged_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EditRecord(ValueObject):
    """Snapshot of comment content replaced by an edit."""

    content: str
    edited_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Attachment(ValueObject):
    """Reference to a stored file plus its metadata.

    Binary payloads never live in the comment store.
    """

    type: AttachmentType
    url: str = Field(min_length=1)
    filename: str = Field(min_length=1, max_length=255)
    size: int = Field(ge=0)
