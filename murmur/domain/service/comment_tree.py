"""Threaded comment tree operations.

The tree is a read-optimized projection of a video's comments: an ordered
list of root ``CommentNode`` objects, each carrying its replies in arrival
order. Every operation here is a pure function of ``(tree, input)`` that
returns a new list and leaves its input untouched, so applying the same
change twice is safe.

Missing references never raise. The tree is a best-effort cache over the
comment repository, and a stale or out-of-order event must degrade to a
no-op rather than break the caller.
"""

from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional, Sequence

import logfire

from murmur.domain.model.comment import Comment, CommentNode, utcnow
from murmur.domain.value import CommentId

CommentTree = list[CommentNode]


def add_comment(tree: Sequence[CommentNode], comment: Comment) -> CommentTree:
    """Insert a root comment or a reply.

    Root comments are appended unless a root with the same id exists.
    Replies are appended to the root whose id equals ``parent_id``; failing
    that, to a first-level reply with that id. A reply whose parent is not
    in the tree is dropped.

    Args:
        tree: Current tree
        comment: Comment to insert

    Returns:
        New tree
    """
    node = CommentNode.from_comment(comment)

    if comment.parent_id is None:
        if any(root.id == comment.id for root in tree):
            return list(tree)
        return [*tree, node]

    for index, root in enumerate(tree):
        if root.id == comment.parent_id:
            return _replace_at(tree, index, _append_reply(root, node))

    for index, root in enumerate(tree):
        for reply_index, reply in enumerate(root.replies):
            if reply.id == comment.parent_id:
                replies = _replace_at(
                    root.replies, reply_index, _append_reply(reply, node)
                )
                return _replace_at(
                    tree, index, root.model_copy(update={"replies": replies})
                )

    logfire.debug(
        "Dropping reply with unknown parent",
        comment_id=comment.id,
        parent_id=comment.parent_id,
    )
    return list(tree)


def update_comment(
    tree: Sequence[CommentNode],
    comment_id: CommentId,
    content: str,
    updated_at: Optional[datetime] = None,
) -> CommentTree:
    """Replace the content of a comment anywhere in the tree.

    Args:
        tree: Current tree
        comment_id: Comment to edit
        content: New content
        updated_at: Edit time (defaults to now)

    Returns:
        New tree; equal to the input if the id is not found
    """
    stamp = updated_at or utcnow()
    return [_update_node(node, comment_id, content, stamp) for node in tree]


def remove_comment(tree: Sequence[CommentNode], comment_id: CommentId) -> CommentTree:
    """Remove a comment, and with it all of its replies, from any level.

    Args:
        tree: Current tree
        comment_id: Comment to remove

    Returns:
        New tree; equal to the input if the id is not found
    """
    return [
        _prune_replies(node, comment_id) for node in tree if node.id != comment_id
    ]


def build_comment_tree(comments: Iterable[Comment]) -> CommentTree:
    """Build the nested tree from a flat, oldest-first list of comments.

    Comments whose parent is absent from the list are treated as roots so
    that a partially deleted thread still renders.

    Args:
        comments: Flat comments

    Returns:
        Tree of root nodes with replies attached recursively
    """
    comments = list(comments)
    known_ids = {comment.id for comment in comments}

    children: dict[CommentId, list[Comment]] = defaultdict(list)
    roots: list[Comment] = []
    for comment in comments:
        if comment.parent_id is not None and comment.parent_id in known_ids:
            children[comment.parent_id].append(comment)
        else:
            roots.append(comment)

    def build_subtree(comment: Comment) -> CommentNode:
        replies = [build_subtree(child) for child in children.get(comment.id, [])]
        return CommentNode.from_comment(comment, replies=replies)

    return [build_subtree(root) for root in roots]


def find_comment(
    tree: Sequence[CommentNode], comment_id: CommentId
) -> Optional[CommentNode]:
    """Find a node by id at any depth."""
    for node in tree:
        if node.id == comment_id:
            return node
        found = find_comment(node.replies, comment_id)
        if found is not None:
            return found
    return None


def count_comments(tree: Sequence[CommentNode]) -> int:
    """Count every comment in the tree, replies included."""
    return sum(1 + count_comments(node.replies) for node in tree)


def _append_reply(parent: CommentNode, reply: CommentNode) -> CommentNode:
    if any(existing.id == reply.id for existing in parent.replies):
        return parent
    return parent.model_copy(update={"replies": [*parent.replies, reply]})


def _replace_at(
    nodes: Sequence[CommentNode], index: int, node: CommentNode
) -> CommentTree:
    return [*nodes[:index], node, *nodes[index + 1 :]]


def _update_node(
    node: CommentNode, comment_id: CommentId, content: str, stamp: datetime
) -> CommentNode:
    if node.id == comment_id:
        return node.model_copy(update={"content": content, "updated_at": stamp})
    if not node.replies:
        return node
    return node.model_copy(
        update={
            "replies": [
                _update_node(reply, comment_id, content, stamp)
                for reply in node.replies
            ]
        }
    )


def _prune_replies(node: CommentNode, comment_id: CommentId) -> CommentNode:
    if not node.replies:
        return node
    return node.model_copy(
        update={"replies": remove_comment(node.replies, comment_id)}
    )
