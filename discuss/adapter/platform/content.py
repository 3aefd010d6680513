"""Adapters for the service that owns ideas and domains."""

from uuid import UUID

import httpx
import logfire

from discuss.adapter.error import ProviderError
from discuss.domain.service.gateway import ParentContentGateway
from discuss.domain.value import IdeaId, TargetKind

_COLLECTIONS = {TargetKind.IDEA: "ideas", TargetKind.DOMAIN: "domains"}


class HttpParentContentGateway(ParentContentGateway):
    """Parent content gateway backed by the platform content service.

    Existence is a ``GET /ideas/{id}`` or ``GET /domains/{id}``; the idea
    counter is changed with ``POST /ideas/{id}/comment-count`` and a
    ``{"delta": n}`` body so the owning service applies it atomically.
    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def exists(self, kind: TargetKind, target_id: UUID) -> bool:
        collection = _COLLECTIONS.get(kind)
        if collection is None:
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/{collection}/{target_id}")
        except httpx.HTTPError as e:
            logfire.error("Content service HTTP error", error=str(e))
            raise ProviderError("content", f"HTTP error checking {kind.value}: {e}") from e

        if response.status_code == 404:
            return False
        if response.status_code != 200:
            logfire.error(
                "Content lookup failed",
                status_code=response.status_code,
                kind=kind.value,
                target_id=str(target_id),
            )
            raise ProviderError("content", f"Lookup failed: {response.status_code}")
        return True

    async def _adjust_comment_count(self, idea_id: IdeaId, delta: int) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/ideas/{idea_id}/comment-count",
                    json={"delta": delta},
                )
        except httpx.HTTPError as e:
            logfire.error("Content service HTTP error", error=str(e))
            raise ProviderError("content", f"HTTP error updating counter: {e}") from e

        if response.status_code not in (200, 204):
            logfire.error(
                "Idea comment counter update failed",
                status_code=response.status_code,
                idea_id=str(idea_id),
            )
            raise ProviderError(
                "content", f"Counter update failed: {response.status_code}"
            )

    async def increment_comment_count(self, idea_id: IdeaId) -> None:
        await self._adjust_comment_count(idea_id, 1)

    async def decrement_comment_count(self, idea_id: IdeaId) -> None:
        await self._adjust_comment_count(idea_id, -1)


class InMemoryParentContentGateway(ParentContentGateway):
    """In-memory ideas and domains for testing."""

    def __init__(self) -> None:
        self._targets: set[tuple[TargetKind, UUID]] = set()
        self.comment_counts: dict[IdeaId, int] = {}
        # Set to make counter updates raise, as a flaky collaborator would
        self.fail_counter_updates = False

    def add_idea(self, idea_id: IdeaId) -> IdeaId:
        self._targets.add((TargetKind.IDEA, idea_id))
        self.comment_counts.setdefault(idea_id, 0)
        return idea_id

    def add_domain(self, domain_id: UUID) -> UUID:
        self._targets.add((TargetKind.DOMAIN, domain_id))
        return domain_id

    async def exists(self, kind: TargetKind, target_id: UUID) -> bool:
        return (kind, target_id) in self._targets

    async def increment_comment_count(self, idea_id: IdeaId) -> None:
        if self.fail_counter_updates:
            raise ProviderError("content", "counter update unavailable")
        self.comment_counts[idea_id] = self.comment_counts.get(idea_id, 0) + 1

    async def decrement_comment_count(self, idea_id: IdeaId) -> None:
        if self.fail_counter_updates:
            raise ProviderError("content", "counter update unavailable")
        self.comment_counts[idea_id] = max(0, self.comment_counts.get(idea_id, 0) - 1)
