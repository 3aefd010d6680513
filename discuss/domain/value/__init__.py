"""Domain value objects for the discussion engine."""

from discuss.domain.value.identifiers import CommentId, DomainId, IdeaId, UserId
from discuss.domain.value.types import (
    Attachment,
    AttachmentType,
    CommentStatus,
    CommentTarget,
    EditRecord,
    Flag,
    FlagReason,
    Handle,
    Like,
    TargetKind,
)

__all__ = [
    # Identifiers
    "CommentId",
    "UserId",
    "IdeaId",
    "DomainId",
    # Types
    "Attachment",
    "AttachmentType",
    "CommentStatus",
    "CommentTarget",
    "EditRecord",
    "Flag",
    "FlagReason",
    "Handle",
    "Like",
    "TargetKind",
]
