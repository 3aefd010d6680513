"""Interfaces for platform services the comment engine depends on.

Identity management, idea/domain content and file storage are owned by
other systems. The engine only talks to them through these interfaces;
adapters live in ``discuss.adapter``.
"""

from collections.abc import Iterable
from uuid import UUID

from discuss.domain.value import Attachment, IdeaId, TargetKind, UserId


class IdentityDirectory:
    """Resolves user-facing handles and roles to stable identities."""

    async def resolve_handles(self, handles: Iterable[str]) -> dict[str, UserId]:
        """Resolve several handles in one call.

        Args:
            handles: Handles without the leading ``@``

        Returns:
            Mapping of handle to user id; unknown handles are absent
        """
        raise NotImplementedError

    async def resolve_handle(self, handle: str) -> UserId | None:
        """Resolve a single handle, or None if unknown."""
        resolved = await self.resolve_handles([handle])
        return resolved.get(handle)

    async def is_admin(self, user_id: UserId) -> bool:
        """Whether the user may perform administrative moderation."""
        raise NotImplementedError


class ParentContentGateway:
    """Access to the ideas and domains comments are attached to."""

    async def exists(self, kind: TargetKind, target_id: UUID) -> bool:
        """Confirm an idea or domain exists.

        Args:
            kind: TargetKind.IDEA or TargetKind.DOMAIN
            target_id: Identifier in the owning service

        Returns:
            True if the target exists
        """
        raise NotImplementedError

    async def increment_comment_count(self, idea_id: IdeaId) -> None:
        """Atomically add one to an idea's comment counter."""
        raise NotImplementedError

    async def decrement_comment_count(self, idea_id: IdeaId) -> None:
        """Atomically subtract one from an idea's comment counter (floor 0)."""
        raise NotImplementedError


class AttachmentStorage:
    """Stores uploaded files and hands back references to them."""

    async def store(self, filename: str, content_type: str | None, data: bytes) -> Attachment:
        """Persist an uploaded file.

        Args:
            filename: Client-supplied file name
            content_type: MIME type reported by the client
            data: File contents

        Returns:
            Attachment reference with type, url, filename and size
        """
        raise NotImplementedError
