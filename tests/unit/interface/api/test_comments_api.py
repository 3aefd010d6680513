"""Unit tests for the comment HTTP routes.

The app runs against in-memory collaborators. The comment store is
app-scoped here so that state carries across requests within a test.
"""

from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from dishka import Provider, Scope, make_async_container, provide
from dishka.integrations.fastapi import FastapiProvider

from discuss.config import Settings
from discuss.domain.repository import CommentRepository, UnitOfWork
from discuss.domain.service import IdentityDirectory, ParentContentGateway
from discuss.domain.value import IdeaId, UserId
from discuss.interface.api.app import create_app
from discuss.persistence.repository.inmemory import InMemoryCommentRepository, InMemoryUnitOfWork
from discuss.util.di import ProdApplicationProvider, ProdConfigProvider, ProdDomainProvider
from tests.di.platform import MockPlatformProvider
from tests.di.storage import MockStorageProvider


class SharedStoreProvider(Provider):
    """One in-memory comment store for the whole app."""

    @provide(scope=Scope.APP)
    def get_comment_repository(self) -> CommentRepository:
        return InMemoryCommentRepository()

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self) -> UnitOfWork:
        return InMemoryUnitOfWork()


@pytest_asyncio.fixture
async def api():
    container = make_async_container(
        ProdConfigProvider(),
        ProdDomainProvider(),
        ProdApplicationProvider(),
        SharedStoreProvider(),
        MockPlatformProvider(),
        MockStorageProvider(),
        FastapiProvider(),
    )
    app = create_app(settings=Settings(), container=container)
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client, container
    finally:
        await container.close()


def as_user(user_id) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


async def _post_root(client, container, user_id) -> tuple[IdeaId, dict]:
    gateway = await container.get(ParentContentGateway)
    idea_id = gateway.add_idea(IdeaId(uuid4()))
    response = await client.post(
        f"/comments/targets/idea/{idea_id}",
        data={"content": "Interesting idea"},
        headers=as_user(user_id),
    )
    assert response.status_code == 201
    return idea_id, response.json()["comment"]


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, api):
        client, _ = api

        response = await client.get("/health")

        assert response.status_code == 200


class TestCommentRoutes:
    """Tests for the comment routes."""

    @pytest.mark.asyncio
    async def test_post_and_list_comments(self, api):
        """A posted comment shows up on its idea's thread page."""
        # Arrange
        client, container = api
        author_id = uuid4()
        idea_id, comment = await _post_root(client, container, author_id)

        # Act
        response = await client.get(f"/comments/targets/idea/{idea_id}")

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["target_kind"] == "idea"
        assert [c["comment"]["comment_id"] for c in body["comments"]] == [
            comment["comment_id"]
        ]
        assert body["pagination"]["total_items"] == 1

    @pytest.mark.asyncio
    async def test_post_requires_identity(self, api):
        client, container = api
        gateway = await container.get(ParentContentGateway)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        response = await client.post(
            f"/comments/targets/idea/{idea_id}", data={"content": "anonymous"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_identity_rejected(self, api):
        client, _ = api

        response = await client.post(
            f"/comments/{uuid4()}/like", headers={"X-User-Id": "not-a-uuid"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_idea_is_404(self, api):
        client, _ = api

        response = await client.post(
            f"/comments/targets/idea/{uuid4()}",
            data={"content": "Hello?"},
            headers=as_user(uuid4()),
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reply_with_attachment(self, api):
        """Replies accept multipart uploads."""
        client, container = api
        _, root = await _post_root(client, container, uuid4())

        response = await client.post(
            f"/comments/{root['comment_id']}/replies",
            data={"content": "Here is the plot"},
            files=[("attachments", ("plot.png", b"\x89PNG", "image/png"))],
            headers=as_user(uuid4()),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["is_reply"] is True
        assert body["comment"]["attachments"][0]["type"] == "image"
        assert body["comment"]["attachments"][0]["size"] == 4

    @pytest.mark.asyncio
    async def test_reply_to_deleted_comment_is_400(self, api):
        client, container = api
        author_id = uuid4()
        _, root = await _post_root(client, container, author_id)
        deleted = await client.delete(
            f"/comments/{root['comment_id']}", headers=as_user(author_id)
        )
        assert deleted.json() == {"comment_id": root["comment_id"], "deleted": True}

        response = await client.post(
            f"/comments/{root['comment_id']}/replies",
            data={"content": "late"},
            headers=as_user(uuid4()),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_edit_by_other_user_is_403(self, api):
        client, container = api
        _, root = await _post_root(client, container, uuid4())

        response = await client.patch(
            f"/comments/{root['comment_id']}",
            json={"content": "hijack"},
            headers=as_user(uuid4()),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_like_toggle_and_viewer_state(self, api):
        client, container = api
        _, root = await _post_root(client, container, uuid4())
        viewer = uuid4()

        liked = await client.post(
            f"/comments/{root['comment_id']}/like", headers=as_user(viewer)
        )
        thread = await client.get(
            f"/comments/{root['comment_id']}/thread", headers=as_user(viewer)
        )

        assert liked.json()["is_liked"] is True
        assert thread.json()["thread"]["comment"]["is_liked"] is True
        assert thread.json()["node_count"] == 1

    @pytest.mark.asyncio
    async def test_flag_and_moderate(self, api):
        """Flags reach the threshold; only administrators moderate."""
        # Arrange
        client, container = api
        directory = await container.get(IdentityDirectory)
        admin_id = directory.add_admin(UserId(uuid4()))
        _, root = await _post_root(client, container, uuid4())
        comment_id = root["comment_id"]

        # Act
        for _ in range(5):
            flagged = await client.post(
                f"/comments/{comment_id}/flag",
                json={"reason": "spam"},
                headers=as_user(uuid4()),
            )
        denied = await client.post(
            f"/comments/{comment_id}/moderate",
            json={"status": "hidden"},
            headers=as_user(uuid4()),
        )
        moderated = await client.post(
            f"/comments/{comment_id}/moderate",
            json={"status": "hidden", "notes": "spam wave"},
            headers=as_user(admin_id),
        )

        # Assert
        assert flagged.json()["status"] == "flagged"
        assert denied.status_code == 403
        assert moderated.status_code == 200
        assert moderated.json()["status"] == "hidden"

    @pytest.mark.asyncio
    async def test_invalid_flag_reason_is_422(self, api):
        client, container = api
        _, root = await _post_root(client, container, uuid4())

        response = await client.post(
            f"/comments/{root['comment_id']}/flag",
            json={"reason": "boring"},
            headers=as_user(uuid4()),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_search(self, api):
        client, container = api
        await _post_root(client, container, uuid4())

        response = await client.get("/comments/search", params={"q": "interesting"})

        assert response.status_code == 200
        assert len(response.json()["comments"]) == 1

    @pytest.mark.asyncio
    async def test_missing_comment_is_404(self, api):
        client, _ = api

        response = await client.get(f"/comments/{uuid4()}/replies")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_comment_id_is_400(self, api):
        client, _ = api

        response = await client.get("/comments/not-a-uuid/replies")

        assert response.status_code == 400
        assert "comment_id" in response.json()["detail"]
