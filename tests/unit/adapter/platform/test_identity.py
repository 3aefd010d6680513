"""Unit tests for the identity directory adapters."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pydantic
import pytest

from discuss.adapter.error import ProviderError
from discuss.adapter.platform import HttpIdentityDirectory, InMemoryIdentityDirectory
from discuss.domain.value import UserId


def _response(status_code: int, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=payload or {})
    response.text = ""
    return response


class TestHttpIdentityDirectoryResolveHandles:
    """Tests for HttpIdentityDirectory.resolve_handles."""

    @pytest.mark.asyncio
    async def test_resolves_known_handles(self):
        """Should map returned users back to the requested handles."""
        alice = uuid4()
        directory = HttpIdentityDirectory("http://identity.test/")

        with patch("httpx.AsyncClient") as mock_client:
            post = AsyncMock(
                return_value=_response(
                    200,
                    {
                        "users": [
                            {"handle": "alice", "id": str(alice)},
                            {"handle": "mallory", "id": str(uuid4())},
                        ]
                    },
                )
            )
            mock_client.return_value.__aenter__.return_value.post = post

            result = await directory.resolve_handles(["alice", "bob", "alice"])

            assert result == {"alice": UserId(alice)}
            post.assert_called_once_with(
                "http://identity.test/users/resolve", json={"handles": ["alice", "bob"]}
            )

    @pytest.mark.asyncio
    async def test_no_handles_skips_request(self):
        directory = HttpIdentityDirectory("http://identity.test")

        with patch("httpx.AsyncClient") as mock_client:
            assert await directory.resolve_handles([]) == {}
            mock_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_server_error_raises_provider_error(self):
        directory = HttpIdentityDirectory("http://identity.test")

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=_response(500)
            )

            with pytest.raises(ProviderError):
                await directory.resolve_handles(["alice"])

    @pytest.mark.asyncio
    async def test_transport_error_raises_provider_error(self):
        directory = HttpIdentityDirectory("http://identity.test")

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ConnectError("refused")
            )

            with pytest.raises(ProviderError):
                await directory.resolve_handles(["alice"])


class TestHttpIdentityDirectoryIsAdmin:
    """Tests for HttpIdentityDirectory.is_admin."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("role", "expected"), [("admin", True), ("member", False), (None, False)]
    )
    async def test_role_decides_admin(self, role, expected):
        user_id = UserId(uuid4())
        directory = HttpIdentityDirectory("http://identity.test")

        with patch("httpx.AsyncClient") as mock_client:
            get = AsyncMock(return_value=_response(200, {"id": str(user_id), "role": role}))
            mock_client.return_value.__aenter__.return_value.get = get

            assert await directory.is_admin(user_id) is expected
            get.assert_called_once_with(f"http://identity.test/users/{user_id}")

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_admin(self):
        directory = HttpIdentityDirectory("http://identity.test")

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=_response(404)
            )

            assert await directory.is_admin(UserId(uuid4())) is False


class TestInMemoryIdentityDirectory:
    """Tests for InMemoryIdentityDirectory."""

    @pytest.mark.asyncio
    async def test_seeded_users_resolve(self):
        directory = InMemoryIdentityDirectory()
        admin = directory.add_user("root", UserId(uuid4()), admin=True)
        user = directory.add_user("guest", UserId(uuid4()))

        assert await directory.resolve_handles(["root", "nobody"]) == {"root": admin}
        assert await directory.is_admin(admin) is True
        assert await directory.is_admin(user) is False

    def test_invalid_handle_rejected(self):
        directory = InMemoryIdentityDirectory()

        with pytest.raises(pydantic.ValidationError):
            directory.add_user("not a handle", UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_resolve_single_handle(self):
        directory = InMemoryIdentityDirectory()
        frank = directory.add_user("frank", UserId(uuid4()))

        assert await directory.resolve_handle("frank") == frank
        assert await directory.resolve_handle("ghost") is None
