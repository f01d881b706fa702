"""Tests for hierarchical permission matching."""

import itertools

import pytest

from permtree.core.rbac.permissions import (
    build_permission_string,
    check_permission,
    check_permissions,
)


SAMPLE_PERMISSIONS = [
    "",
    "user",
    "username",
    "user.create",
    "user.delete",
    "user.create.bulk",
    "infrastructure",
    "infrastructure.vm",
    "infrastructure.vm.start",
    "infrastructure.vm.compute.start",
    "article.comment",
    "Article.comment",
]


class TestCheckPermission:
    """Test the single-permission matching rule."""

    @pytest.mark.parametrize(
        "required, given, expected",
        [
            # Exact match
            ("user.create", "user.create", True),
            # Group match: coarser grant covers its descendants
            ("user.create", "user", True),
            ("infrastructure.vm.start", "infrastructure", True),
            ("infrastructure.vm.compute.start", "infrastructure", True),
            # Descendant grant satisfies a coarser requirement
            ("infrastructure", "infrastructure.vm.start", True),
            ("infrastructure.vm", "infrastructure.vm.start", True),
            # Siblings
            ("user.delete", "user.update", False),
            ("article.comment", "article.tag", False),
            # Segment boundaries, not string prefixes
            ("user", "username", False),
            ("username", "user", False),
            ("user.create", "user.cre", False),
            ("infra", "infrastructure.vm", False),
            # Case sensitive
            ("Article.read", "article", False),
            ("article.read", "", False),
        ],
    )
    def test_matching_rules(self, required, given, expected):
        assert check_permission(required, given) is expected

    @pytest.mark.parametrize("permission", SAMPLE_PERMISSIONS)
    def test_reflexive(self, permission):
        """Test every permission satisfies itself."""
        assert check_permission(permission, permission)

    def test_symmetric(self):
        """Test the ancestor-or-descendant relation is symmetric."""
        for a, b in itertools.product(SAMPLE_PERMISSIONS, repeat=2):
            assert check_permission(a, b) == check_permission(b, a), (a, b)


class TestCheckPermissions:
    """Test matching against a list of granted permissions."""

    def test_empty_list_never_matches(self):
        assert not check_permissions("article.read", [])
        assert not check_permissions("", [])

    def test_any_match(self):
        given = ["user.read", "article"]
        assert check_permissions("article.comment.delete", given)
        assert check_permissions("user.read", given)
        assert not check_permissions("user.delete", given)

    def test_accepts_generators(self):
        given = (p for p in ["infrastructure.vm.start"])
        assert check_permissions("infrastructure", given)

    def test_short_circuits_on_first_match(self):
        seen = []

        def grants():
            for p in ["article", "never.reached"]:
                seen.append(p)
                yield p

        assert check_permissions("article.read", grants())
        assert seen == ["article"]


class TestBuildPermissionString:

    def test_joins_with_dot(self):
        assert build_permission_string("article.comment", "delete") == "article.comment.delete"

    def test_built_string_checks_against_group(self):
        perm = build_permission_string("article", "publish")
        assert check_permission(perm, "article")
