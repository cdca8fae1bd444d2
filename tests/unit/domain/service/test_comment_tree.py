"""Unit tests for the threaded comment tree operations."""

from datetime import datetime, timezone

from murmur.domain.service.comment_tree import (
    add_comment,
    build_comment_tree,
    count_comments,
    find_comment,
    remove_comment,
    update_comment,
)
from murmur.domain.value import CommentId
from tests.conftest import make_comment, make_node


class TestAddComment:
    """Tests for add_comment."""

    def test_appends_root_comment_with_empty_replies(self):
        """A comment without parent becomes the last root."""
        tree = [make_node("c1")]

        result = add_comment(tree, make_comment("c2", "second"))

        assert [node.id for node in result] == ["c1", "c2"]
        assert result[1].replies == []

    def test_duplicate_root_is_ignored(self):
        """Adding the same root twice leaves exactly one occurrence."""
        comment = make_comment("c1", "hi")

        once = add_comment([], comment)
        twice = add_comment(once, comment)

        assert twice == once
        assert [node.id for node in twice] == ["c1"]

    def test_reply_appended_to_matching_root(self, thread):
        """A reply to a root goes to the end of that root's replies."""
        result = add_comment(thread, make_comment("c5", "late", parent_id="c1"))

        assert [r.id for r in result[0].replies] == ["c2", "c5"]
        assert result[1] == thread[1]

    def test_reply_appended_to_first_level_reply(self, thread):
        """A reply to a reply nests under it."""
        result = add_comment(thread, make_comment("c5", "deep", parent_id="c2"))

        assert [r.id for r in result[0].replies[0].replies] == ["c3", "c5"]

    def test_duplicate_reply_is_ignored(self, thread):
        """Re-adding an existing reply leaves one occurrence at its level."""
        reply = make_comment("c2", "reply", parent_id="c1")

        result = add_comment(thread, reply)

        assert result == thread
        assert [r.id for r in result[0].replies] == ["c2"]

    def test_orphan_reply_leaves_tree_unchanged(self, thread):
        """A reply whose parent is nowhere in the tree is dropped."""
        result = add_comment(thread, make_comment("c9", "lost", parent_id="missing"))

        assert result == thread

    def test_reply_to_second_level_reply_is_dropped(self, thread):
        """Parents are only searched among roots and first-level replies."""
        result = add_comment(thread, make_comment("c9", "too deep", parent_id="c3"))

        assert result == thread

    def test_does_not_mutate_input(self, thread):
        """The input tree is left as it was."""
        before = [node.model_copy(deep=True) for node in thread]

        add_comment(thread, make_comment("c5", parent_id="c1"))

        assert thread == before


class TestUpdateComment:
    """Tests for update_comment."""

    def test_updates_root_content(self, thread):
        """Editing a root changes its content and keeps its replies."""
        stamp = datetime(2024, 2, 1, tzinfo=timezone.utc)

        result = update_comment(thread, CommentId("c1"), "edited", updated_at=stamp)

        assert result[0].content == "edited"
        assert result[0].updated_at == stamp
        assert result[0].replies == thread[0].replies
        assert result[0].author_name == thread[0].author_name

    def test_updates_nested_reply(self, thread):
        """Edits reach replies at any depth."""
        result = update_comment(thread, CommentId("c3"), "edited")

        assert result[0].replies[0].replies[0].content == "edited"
        assert result[0].replies[0].content == "reply"

    def test_defaults_updated_at_to_now(self, thread):
        """Without an explicit time the edit is stamped with the current time."""
        result = update_comment(thread, CommentId("c4"), "edited")

        assert result[1].updated_at > thread[1].updated_at

    def test_miss_returns_equal_tree(self, thread):
        """Updating an unknown id is a structural no-op."""
        result = update_comment(thread, CommentId("nonexistent"), "x")

        assert result == thread


class TestRemoveComment:
    """Tests for remove_comment."""

    def test_removing_reply_leaves_root_with_empty_replies(self):
        """Deleting the only reply empties the root's replies."""
        tree = [make_node("r", replies=[make_node("x", parent_id="r")])]

        result = remove_comment(tree, CommentId("x"))

        assert len(result) == 1
        assert result[0].id == "r"
        assert result[0].replies == []

    def test_removing_root_drops_its_replies(self):
        """Deleting a root removes it and everything beneath it."""
        tree = [make_node("r", replies=[make_node("x", parent_id="r")])]

        result = remove_comment(tree, CommentId("r"))

        assert result == []

    def test_removes_nested_reply(self, thread):
        """Deletes reach replies at any depth."""
        result = remove_comment(thread, CommentId("c3"))

        assert result[0].replies[0].replies == []
        assert count_comments(result) == 3

    def test_miss_returns_equal_tree(self, thread):
        """Removing an unknown id is a no-op."""
        assert remove_comment(thread, CommentId("nonexistent")) == thread


class TestBuildCommentTree:
    """Tests for build_comment_tree."""

    def test_nests_replies_in_order(self):
        """Flat oldest-first comments become a nested tree."""
        comments = [
            make_comment("a", minute=0),
            make_comment("b", minute=1),
            make_comment("a1", parent_id="a", minute=2),
            make_comment("a2", parent_id="a", minute=3),
            make_comment("a1x", parent_id="a1", minute=4),
        ]

        tree = build_comment_tree(comments)

        assert [n.id for n in tree] == ["a", "b"]
        assert [n.id for n in tree[0].replies] == ["a1", "a2"]
        assert [n.id for n in tree[0].replies[0].replies] == ["a1x"]
        assert count_comments(tree) == 5

    def test_unknown_parent_becomes_root(self):
        """A comment whose parent is missing from the list is kept as a root."""
        tree = build_comment_tree([make_comment("x", parent_id="gone")])

        assert [n.id for n in tree] == ["x"]

    def test_find_comment_at_any_depth(self, thread):
        """find_comment searches the whole tree."""
        assert find_comment(thread, CommentId("c3")).content == "nested"
        assert find_comment(thread, CommentId("nope")) is None
