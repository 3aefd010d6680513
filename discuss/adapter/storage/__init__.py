"""Attachment storage adapters."""

from .local import InMemoryAttachmentStorage, LocalAttachmentStorage

__all__ = ["InMemoryAttachmentStorage", "LocalAttachmentStorage"]
