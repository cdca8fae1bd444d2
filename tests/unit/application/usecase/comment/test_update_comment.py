"""Unit tests for UpdateCommentUseCase."""

import pytest

from murmur.application.usecase.comment import (
    UpdateCommentRequest,
    UpdateCommentUseCase,
)
from murmur.domain.error import NotAuthorizedError, NotFoundError
from murmur.domain.repository import CommentRepository
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestUpdateCommentUseCase:
    """Tests for UpdateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_author_updates_content(self, unit_env):
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", "typo"))
        use_case = await unit_env.get(UpdateCommentUseCase)

        response = await use_case.execute(
            UpdateCommentRequest(comment_id="c1", user_id="u1", content="fixed")
        )

        assert response.data.content == "fixed"
        # Immutable fields are left alone
        assert response.data.author_id == "u1"
        assert response.data.video_id == "v1"

    @pytest.mark.asyncio
    async def test_other_user_is_rejected(self, unit_env):
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", "typo"))
        use_case = await unit_env.get(UpdateCommentUseCase)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(
                UpdateCommentRequest(comment_id="c1", user_id="u2", content="mine")
            )

    @pytest.mark.asyncio
    async def test_missing_comment(self, unit_env):
        use_case = await unit_env.get(UpdateCommentUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                UpdateCommentRequest(comment_id="nope", user_id="u1", content="x")
            )
