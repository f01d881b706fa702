"""Pytest configuration and shared fixtures."""

import pytest

from permtree.core.rbac.manager import RBACManager
from permtree.core.rbac.models import ResourceConfig, RoleConfig, define_action
from permtree.storage.memory import MemoryStorage
from permtree.storage.sql import SQLAlchemyStorage


def _build_storage(backend: str):
    if backend == "memory":
        return MemoryStorage()
    return SQLAlchemyStorage.from_url("sqlite://")


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    """Every storage backend, initialized and empty."""
    backend = _build_storage(request.param)
    backend.initialize()
    yield backend
    backend.close()


@pytest.fixture
def sql_storage():
    backend = SQLAlchemyStorage.from_url("sqlite://")
    backend.initialize()
    yield backend
    backend.close()


@pytest.fixture
def manager(storage):
    return RBACManager(storage)


@pytest.fixture
def article_config():
    """Article tree: article -> comment, with actions on both levels."""
    return ResourceConfig(
        key="article",
        name="Article",
        description="News article entity",
        actions=[
            define_action("read", "Read", "Read article content"),
            define_action("create", "Create", "Create new article"),
            define_action("update", "Update", "Edit existing article"),
            define_action("delete", "Delete", "Delete article"),
            define_action("publish", "Publish", "Publish article"),
        ],
        sub_resources=[
            ResourceConfig(
                key="comment",
                name="Comment",
                description="Article comments",
                actions=[
                    define_action("read", "Read Comment", "Read comment content"),
                    define_action("create", "Create Comment", "Create a new comment"),
                    define_action("delete", "Delete Comment", "Delete comment"),
                ],
            ),
        ],
    )


@pytest.fixture
def article(manager, article_config):
    return manager.create_resource(article_config)


@pytest.fixture
def editor_and_viewer(manager):
    editor = manager.create_role(
        "editor",
        RoleConfig(
            name="Editor",
            description="Can edit and publish articles",
            permissions=[
                "article.read",
                "article.create",
                "article.update",
                "article.publish",
                "article.comment.read",
                "article.comment.create",
            ],
        ),
    )
    viewer = manager.create_role(
        "viewer",
        RoleConfig(
            name="Viewer",
            description="Can only view articles",
            permissions=["article.read", "article.comment.read"],
        ),
    )
    return editor, viewer
