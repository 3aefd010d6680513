"""Identity directory adapters.

The identity service owns users and their handles. The engine only needs
handle lookups for mentions and the admin role for moderation.
"""

from collections.abc import Iterable
from uuid import UUID

import httpx
import logfire

from discuss.adapter.error import ProviderError
from discuss.domain.service.gateway import IdentityDirectory
from discuss.domain.value import Handle, UserId


class HttpIdentityDirectory(IdentityDirectory):
    """Identity directory backed by the platform identity service.

    Endpoints used:
    - ``POST /users/resolve`` with ``{"handles": [...]}`` returning
      ``{"users": [{"handle": ..., "id": ...}]}``
    - ``GET /users/{id}`` returning the user with a ``role`` field
    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        """Initialize identity directory client.

        Args:
            base_url: Identity service base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def resolve_handles(self, handles: Iterable[str]) -> dict[str, UserId]:
        wanted = list(dict.fromkeys(handles))
        if not wanted:
            return {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/users/resolve", json={"handles": wanted}
                )
        except httpx.HTTPError as e:
            logfire.error("Identity service HTTP error", error=str(e))
            raise ProviderError("identity", f"HTTP error resolving handles: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Handle resolution failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError(
                "identity", f"Handle resolution failed: {response.status_code}"
            )

        resolved: dict[str, UserId] = {}
        for user in response.json().get("users", []):
            handle = user.get("handle")
            if handle in wanted and user.get("id"):
                resolved[handle] = UserId(UUID(str(user["id"])))
        return resolved

    async def is_admin(self, user_id: UserId) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/users/{user_id}")
        except httpx.HTTPError as e:
            logfire.error("Identity service HTTP error", error=str(e))
            raise ProviderError("identity", f"HTTP error fetching user: {e}") from e

        if response.status_code == 404:
            return False
        if response.status_code != 200:
            logfire.error(
                "User lookup failed",
                status_code=response.status_code,
                user_id=str(user_id),
            )
            raise ProviderError("identity", f"User lookup failed: {response.status_code}")

        return response.json().get("role") == "admin"


class InMemoryIdentityDirectory(IdentityDirectory):
    """In-memory identity directory for testing.

    Seed it with ``add_user``; unknown handles simply do not resolve.
    """

    def __init__(self) -> None:
        self._handles: dict[str, UserId] = {}
        self._admins: set[UserId] = set()

    def add_user(self, handle: str, user_id: UserId, admin: bool = False) -> UserId:
        """Register a user for lookups.

        Raises:
            pydantic.ValidationError: If the handle is not a valid mention handle
        """
        self._handles[Handle(root=handle).root] = user_id
        if admin:
            self._admins.add(user_id)
        return user_id

    def add_admin(self, user_id: UserId) -> UserId:
        """Grant the admin role to a user."""
        self._admins.add(user_id)
        return user_id

    async def resolve_handles(self, handles: Iterable[str]) -> dict[str, UserId]:
        return {h: self._handles[h] for h in handles if h in self._handles}

    async def is_admin(self, user_id: UserId) -> bool:
        return user_id in self._admins
