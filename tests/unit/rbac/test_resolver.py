"""Tests for resource path resolution."""

import pytest

from permtree.core.rbac.errors import InvalidPathError, ResourceNotFoundError
from permtree.core.rbac.models import Resource
from permtree.core.rbac.resolver import PathResolver, child_path, parse_resource_path


class TestParseResourcePath:

    def test_split_on_dots(self):
        assert parse_resource_path("article.comment.tag") == ["article", "comment", "tag"]

    def test_single_segment(self):
        assert parse_resource_path("article") == ["article"]

    @pytest.mark.parametrize("path", ["", ".", "article.", ".article", "article..comment"])
    def test_empty_segments_rejected(self, path):
        with pytest.raises(InvalidPathError) as exc_info:
            parse_resource_path(path)
        assert exc_info.value.path == path


class TestChildPath:

    def test_root_and_child(self):
        assert child_path("", "article") == "article"
        assert child_path("article.comment", "reply") == "article.comment.reply"

    def test_child_path_round_trips_through_parser(self):
        assert parse_resource_path(child_path("article", "comment")) == ["article", "comment"]

    @pytest.mark.parametrize(
        "parent, key, path",
        [("", "", ""), ("article", "", "article."), ("article", "x.y", "article.x.y")],
    )
    def test_unreachable_keys_rejected(self, parent, key, path):
        with pytest.raises(InvalidPathError) as exc_info:
            child_path(parent, key)
        assert exc_info.value.path == path


class TestPathResolver:
    """Test walking the tree with parent-scoped lookups."""

    @pytest.fixture
    def tree(self, storage):
        article = storage.create_resource(Resource(key="article", name="Article"))
        comment = storage.create_resource(Resource(key="comment", parent_id=article.id))
        reply = storage.create_resource(Resource(key="reply", parent_id=comment.id))
        # Same key at another level must not be confused with article.comment
        storage.create_resource(Resource(key="comment"))
        return article, comment, reply

    def test_resolve_root(self, storage, tree):
        article, _, _ = tree
        resolved = PathResolver(storage).resolve("article")
        assert resolved.id == article.id
        assert [child.key for child in resolved.sub_resources] == ["comment"]

    def test_resolve_nested(self, storage, tree):
        _, comment, _ = tree
        resolved = PathResolver(storage).resolve("article.comment")
        assert resolved.id == comment.id
        assert resolved.key == "comment"

    def test_resolve_deep(self, storage, tree):
        _, _, reply = tree
        assert PathResolver(storage).resolve("article.comment.reply").id == reply.id

    def test_root_scope_is_separate(self, storage, tree):
        _, comment, _ = tree
        root_comment = PathResolver(storage).resolve("comment")
        assert root_comment.id != comment.id
        assert root_comment.parent_id is None

    def test_missing_segment(self, storage, tree):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            PathResolver(storage).resolve("article.missing")
        assert exc_info.value.key == "missing"
        assert exc_info.value.path == "article.missing"

    def test_missing_root(self, storage, tree):
        with pytest.raises(ResourceNotFoundError):
            PathResolver(storage).resolve("missing.comment")

    def test_child_not_reachable_from_root_scope(self, storage, tree):
        with pytest.raises(ResourceNotFoundError):
            PathResolver(storage).resolve("reply")

    def test_empty_path(self, storage):
        with pytest.raises(InvalidPathError):
            PathResolver(storage).resolve("")
