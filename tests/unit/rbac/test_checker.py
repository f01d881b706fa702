"""Tests for PermissionChecker."""

from permtree.core.rbac.checker import PermissionChecker


class TestPermissionChecker:
    """Test PermissionChecker class."""

    def test_has_permission_exact_match(self):
        """Test exact grants match through the hierarchical matcher."""
        checker = PermissionChecker(["article.read", "article.create"])
        assert checker.has_permission("article.read")
        assert checker.has_permission("article.create")
        assert not checker.has_permission("article.delete")

    def test_has_permission_group(self):
        """Test a resource-level grant covers all its actions and children."""
        checker = PermissionChecker(["article"])
        assert checker.has_permission("article.read")
        assert checker.has_permission("article.comment.delete")
        assert not checker.has_permission("articles.read")

    def test_duplicates_collapsed(self):
        checker = PermissionChecker(["a", "b", "a"])
        assert checker.permissions == ["a", "b"]

    def test_has_any_permission(self):
        checker = PermissionChecker(["article.read"])
        assert checker.has_any_permission(["article.read", "article.create"])
        assert not checker.has_any_permission(["user.read", "billing"])
        assert not checker.has_any_permission([])

    def test_has_all_permissions(self):
        checker = PermissionChecker(["article.read", "article.comment"])
        assert checker.has_all_permissions(["article.read", "article.comment.delete"])
        assert not checker.has_all_permissions(["article.read", "article.delete"])
        assert checker.has_all_permissions([])

    def test_empty_checker_denies(self):
        checker = PermissionChecker([])
        assert not checker.has_permission("article")

    def test_matching_permissions(self):
        checker = PermissionChecker(["article", "article.read", "user.read"])
        assert checker.matching_permissions("article.read") == ["article", "article.read"]
