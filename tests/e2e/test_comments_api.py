"""End-to-end tests for comment endpoints."""

import pytest
from fastapi.testclient import TestClient

from murmur.config import AuthSettings
from murmur.domain.model import Video
from murmur.domain.repository import VideoRepository
from murmur.domain.value import UserId, VideoId
from murmur.interface.api.app import create_app
from murmur.util.di.container import setup_di
from murmur.util.jwt import create_token
from tests.di import build_test_container


def token_for(user_id: str, name: str) -> dict[str, str]:
    return {"auth_token": create_token(user_id, name, AuthSettings())}


ADA = token_for("u1", "Ada")
BOB = token_for("u2", "Bob")
OWNER = token_for("owner", "Olive")


@pytest.fixture
def client():
    """Create test client with test container and one seeded video."""
    app_instance = create_app()
    test_container = build_test_container()
    setup_di(app_instance, test_container)

    async def seed() -> None:
        video_repo = await test_container.get(VideoRepository)
        await video_repo.save(
            Video(id=VideoId("v1"), owner_id=UserId("owner"), title="Demo")
        )

    with TestClient(app_instance) as test_client:
        test_client.portal.call(seed)
        yield test_client


def post_comment(client, content: str, cookies=ADA, **extra):
    return client.post(
        "/videos/v1/comments", json={"content": content, **extra}, cookies=cookies
    )


class TestCommentEndpoints:
    """End-to-end tests for comment API endpoints.

    Note: These tests focus on the HTTP API interface layer.
    More detailed business logic tests are in unit tests.
    """

    def test_create_comment_without_auth_fails(self, client):
        response = client.post("/videos/v1/comments", json={"content": "hi"})

        assert response.status_code == 401

    def test_create_comment_with_invalid_token_fails(self, client):
        response = post_comment(client, "hi", cookies={"auth_token": "invalid"})

        assert response.status_code == 401

    def test_create_and_list_thread(self, client):
        """Comments come back as a tree with camelCase fields."""
        # Act
        root = post_comment(client, "First!", timestamp="00:00:05")
        assert root.status_code == 201
        root_id = root.json()["data"]["id"]

        reply = post_comment(client, "Welcome", cookies=BOB, parentId=root_id)
        assert reply.status_code == 201

        response = client.get("/videos/v1/comments")

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["data"][0]["authorName"] == "Ada"
        assert body["data"][0]["timestamp"] == "00:00:05"
        assert body["data"][0]["replies"][0]["parentId"] == root_id

    def test_create_comment_unknown_video(self, client):
        response = client.post(
            "/videos/missing/comments", json={"content": "hi"}, cookies=ADA
        )

        assert response.status_code == 404

    def test_create_reply_unknown_parent(self, client):
        response = post_comment(client, "hi", parentId="missing")

        assert response.status_code == 404

    def test_create_empty_comment_rejected(self, client):
        response = post_comment(client, "")

        assert response.status_code == 422

    def test_range_query(self, client):
        post_comment(client, "early", timestamp="00:00:05")
        post_comment(client, "late", timestamp="00:10:00")

        response = client.get(
            "/videos/v1/comments/range", params={"start": "00:00:00", "end": "00:01:00"}
        )

        assert response.status_code == 200
        assert [c["content"] for c in response.json()["data"]] == ["early"]

    def test_inverted_range_rejected(self, client):
        response = client.get(
            "/videos/v1/comments/range", params={"start": "00:09:00", "end": "00:01:00"}
        )

        assert response.status_code == 400

    def test_only_author_can_edit(self, client):
        comment_id = post_comment(client, "typo").json()["data"]["id"]

        forbidden = client.patch(
            f"/comments/{comment_id}", json={"content": "hijack"}, cookies=BOB
        )
        allowed = client.patch(
            f"/comments/{comment_id}", json={"content": "fixed"}, cookies=ADA
        )

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["data"]["content"] == "fixed"

    def test_edit_missing_comment(self, client):
        response = client.patch("/comments/nope", json={"content": "x"}, cookies=ADA)

        assert response.status_code == 404

    def test_video_owner_deletes_thread(self, client):
        root_id = post_comment(client, "root").json()["data"]["id"]
        post_comment(client, "reply", cookies=BOB, parentId=root_id)

        stranger = client.delete(f"/comments/{root_id}", cookies=BOB)
        owner = client.delete(f"/comments/{root_id}", cookies=OWNER)

        assert stranger.status_code == 403
        assert owner.status_code == 200
        assert owner.json() == {"success": True, "id": root_id}
        assert client.get("/videos/v1/comments").json() == {"data": [], "total": 0}


class TestHealthEndpoint:
    """Health check endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
