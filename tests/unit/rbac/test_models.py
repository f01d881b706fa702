"""Tests for the entity model."""

from permtree.core.rbac.models import Action, Resource, ResourceConfig, Role, define_action


class TestDefineAction:

    def test_builds_unsaved_action(self):
        action = define_action("read", "Read", "Read article content")
        assert action == Action(key="read", name="Read", description="Read article content")
        assert action.id is None
        assert action.resource_id is None

    def test_no_shared_state(self):
        assert define_action("read") is not define_action("read")


class TestResource:

    def test_lookup_helpers(self):
        resource = Resource(
            key="article",
            actions=[define_action("read"), define_action("delete")],
            sub_resources=[Resource(key="comment")],
        )
        assert resource.get_action("delete").key == "delete"
        assert resource.get_action("fly") is None
        assert resource.get_sub_resource("comment").key == "comment"
        assert resource.get_sub_resource("tag") is None

    def test_default_collections_not_shared(self):
        first, second = Resource(key="a"), Resource(key="b")
        first.actions.append(define_action("read"))
        assert second.actions == []
        assert ResourceConfig(key="c").sub_resources == []


class TestRole:

    def test_defaults(self):
        role = Role(key="viewer")
        assert role.permissions == []
        assert role.version == 0
