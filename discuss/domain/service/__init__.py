"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .gateway import AttachmentStorage, IdentityDirectory, ParentContentGateway
from .mention_service import MentionService
from .moderation_service import ModerationService
from .thread_service import ThreadService

__all__ = [
    "AttachmentStorage",
    "CommentService",
    "IdentityDirectory",
    "MentionService",
    "ModerationService",
    "ParentContentGateway",
    "Service",
    "ThreadService",
]
