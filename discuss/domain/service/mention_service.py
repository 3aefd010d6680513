"""Mention resolution for comment content."""

import re

import logfire

from discuss.domain.value import UserId

from .base import Service
from .gateway import IdentityDirectory

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_handles(content: str) -> list[str]:
    """Extract ``@handle`` tokens in order of first appearance.

    Args:
        content: Raw comment text

    Returns:
        Distinct handles without the ``@`` prefix
    """
    return list(dict.fromkeys(MENTION_PATTERN.findall(content)))


class MentionService(Service):
    """Resolves ``@handle`` mentions to user ids at write time.

    The result is a snapshot: renaming a user later does not change the
    mentions stored on existing comments.
    """

    def __init__(self, identity_directory: IdentityDirectory) -> None:
        self.identity_directory = identity_directory

    async def resolve(self, content: str) -> list[UserId]:
        """Resolve every known handle mentioned in the content.

        Unknown handles are dropped; mentioning someone who does not exist
        is not an error.

        Args:
            content: Raw comment text

        Returns:
            User ids in order of first mention
        """
        handles = extract_handles(content)
        if not handles:
            return []

        with logfire.span("mention_service.resolve", handle_count=len(handles)):
            resolved = await self.identity_directory.resolve_handles(handles)
            unresolved = [h for h in handles if h not in resolved]
            if unresolved:
                logfire.debug(
                    "Dropped unresolved mentions",
                    requested=len(handles),
                    unresolved=len(unresolved),
                )
            # Two handles may point at the same identity
            return list(dict.fromkeys(resolved[h] for h in handles if h in resolved))
