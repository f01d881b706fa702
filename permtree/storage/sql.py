"""SQLAlchemy storage backend.

Persists resources, actions and roles in three tables. Every public
operation runs in its own transaction and returns detached entity copies,
so no ORM object escapes a session.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from ..common.logger import get_logger
from ..core.rbac.errors import (
    ActionNotFoundError,
    ConcurrentModificationError,
    DuplicateKeyError,
    ResourceNotFoundError,
    RoleNotFoundError,
)
from ..core.rbac.models import Action, Resource, Role
from ..db.base import Base
from ..db.models import ActionRow, ResourceRow, RoleRow
from ..db.session import build_engine
from .base import Storage

logger = get_logger("sql_storage")


class SQLAlchemyStorage(Storage):
    """Relational implementation of the storage contract."""

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the backend.

        Args:
            session_factory: Configured ``sessionmaker`` bound to an engine
        """
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, *, echo: bool = False) -> "SQLAlchemyStorage":
        engine = build_engine(database_url, echo=echo)
        return cls(sessionmaker(bind=engine, expire_on_commit=False))

    @property
    def backend_name(self) -> str:
        return "sql"

    @property
    def engine(self):
        return self._session_factory.kw["bind"]

    def initialize(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.debug(f"Schema ready on {self.engine.url.render_as_string(hide_password=True)}")

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._session_factory() as session:
            with session.begin():
                yield session

    # Resource operations

    def create_resource(self, resource: Resource) -> Resource:
        with self._transaction() as session:
            if resource.parent_id is not None and session.get(ResourceRow, resource.parent_id) is None:
                raise ResourceNotFoundError(resource.parent_id)
            # NULL parents never collide in a unique index, so roots are checked here
            if self._query_resource(session, resource.key, resource.parent_id).first():
                raise DuplicateKeyError("resource", resource.key)

            row = ResourceRow(
                key=resource.key,
                name=resource.name,
                description=resource.description,
                parent_id=resource.parent_id,
            )
            session.add(row)
            self._flush(session, "resource", resource.key)

            resource.id = row.id
            resource.created_at = row.created_at
            resource.updated_at = row.updated_at
            return resource

    def get_resource(self, key: str, parent_id: Optional[Any] = None) -> Resource:
        with self._transaction() as session:
            row = (
                self._query_resource(session, key, parent_id)
                .options(
                    selectinload(ResourceRow.actions),
                    selectinload(ResourceRow.sub_resources),
                )
                .first()
            )
            if row is None:
                raise ResourceNotFoundError(key, parent_id)
            return _to_resource(row)

    def get_resource_by_id(self, resource_id: Any) -> Resource:
        with self._transaction() as session:
            row = session.get(
                ResourceRow,
                resource_id,
                options=[
                    selectinload(ResourceRow.actions),
                    selectinload(ResourceRow.sub_resources),
                ],
            )
            if row is None:
                raise ResourceNotFoundError(resource_id)
            return _to_resource(row)

    def list_resources(self, parent_id: Optional[Any] = None) -> List[Resource]:
        with self._transaction() as session:
            query = session.query(ResourceRow).options(
                selectinload(ResourceRow.actions),
                selectinload(ResourceRow.sub_resources),
            )
            if parent_id is None:
                query = query.filter(ResourceRow.parent_id.is_(None))
            else:
                query = query.filter(ResourceRow.parent_id == parent_id)
            return [_to_resource(row) for row in query.order_by(ResourceRow.id).all()]

    def update_resource(self, resource: Resource) -> Resource:
        with self._transaction() as session:
            row = session.get(ResourceRow, resource.id)
            if row is None:
                raise ResourceNotFoundError(resource.id)
            clash = self._query_resource(session, resource.key, resource.parent_id).first()
            if clash is not None and clash.id != row.id:
                raise DuplicateKeyError("resource", resource.key)

            row.key = resource.key
            row.name = resource.name
            row.description = resource.description
            row.parent_id = resource.parent_id
            self._flush(session, "resource", resource.key)
            resource.updated_at = row.updated_at
            return resource

    def delete_resource(self, resource_id: Any) -> None:
        with self._transaction() as session:
            row = session.get(ResourceRow, resource_id)
            if row is None:
                raise ResourceNotFoundError(resource_id)
            # delete-orphan cascade walks sub_resources and actions recursively
            session.delete(row)

    @staticmethod
    def _query_resource(session: Session, key: str, parent_id: Optional[Any]):
        query = session.query(ResourceRow).filter(ResourceRow.key == key)
        if parent_id is None:
            return query.filter(ResourceRow.parent_id.is_(None))
        return query.filter(ResourceRow.parent_id == parent_id)

    # Action operations

    def create_actions(self, resource_id: Any, actions: List[Action]) -> List[Action]:
        with self._transaction() as session:
            if session.get(ResourceRow, resource_id) is None:
                raise ResourceNotFoundError(resource_id)

            taken = {
                key
                for (key,) in session.query(ActionRow.key).filter(
                    ActionRow.resource_id == resource_id
                )
            }
            rows = []
            for action in actions:
                if action.key in taken:
                    raise DuplicateKeyError("action", action.key)
                taken.add(action.key)
                rows.append(
                    ActionRow(
                        key=action.key,
                        name=action.name,
                        description=action.description,
                        resource_id=resource_id,
                    )
                )

            session.add_all(rows)
            self._flush(session, "action", ", ".join(a.key for a in actions))
            return [_to_action(row) for row in rows]

    def get_action(self, resource_id: Any, key: str) -> Action:
        with self._transaction() as session:
            row = (
                session.query(ActionRow)
                .filter(ActionRow.resource_id == resource_id, ActionRow.key == key)
                .first()
            )
            if row is None:
                raise ActionNotFoundError(key, resource_id)
            return _to_action(row)

    def list_actions(self, resource_id: Any) -> List[Action]:
        with self._transaction() as session:
            rows = (
                session.query(ActionRow)
                .filter(ActionRow.resource_id == resource_id)
                .order_by(ActionRow.id)
                .all()
            )
            return [_to_action(row) for row in rows]

    def delete_action(self, action_id: Any) -> None:
        with self._transaction() as session:
            row = session.get(ActionRow, action_id)
            if row is None:
                raise ActionNotFoundError(action_id)
            session.delete(row)

    # Role operations

    def create_role(self, role: Role) -> Role:
        with self._transaction() as session:
            if session.query(RoleRow.id).filter(RoleRow.key == role.key).first():
                raise DuplicateKeyError("role", role.key)

            row = RoleRow(
                key=role.key,
                name=role.name,
                description=role.description,
                permissions=list(role.permissions),
                version=1,
            )
            session.add(row)
            self._flush(session, "role", role.key)

            role.id = row.id
            role.version = row.version
            role.created_at = row.created_at
            role.updated_at = row.updated_at
            return role

    def get_role(self, key: str) -> Role:
        with self._transaction() as session:
            row = session.query(RoleRow).filter(RoleRow.key == key).first()
            if row is None:
                raise RoleNotFoundError(key)
            return _to_role(row)

    def get_role_by_id(self, role_id: Any) -> Role:
        with self._transaction() as session:
            row = session.get(RoleRow, role_id)
            if row is None:
                raise RoleNotFoundError(role_id)
            return _to_role(row)

    def list_roles(self) -> List[Role]:
        with self._transaction() as session:
            return [_to_role(row) for row in session.query(RoleRow).order_by(RoleRow.id).all()]

    def update_role(self, role: Role) -> Role:
        now = datetime.utcnow()
        with self._transaction() as session:
            clash = session.query(RoleRow.id).filter(RoleRow.key == role.key).first()
            if clash is not None and clash.id != role.id:
                raise DuplicateKeyError("role", role.key)

            result = session.execute(
                update(RoleRow)
                .where(RoleRow.id == role.id, RoleRow.version == role.version)
                .values(
                    key=role.key,
                    name=role.name,
                    description=role.description,
                    permissions=list(role.permissions),
                    version=role.version + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                if session.get(RoleRow, role.id) is None:
                    raise RoleNotFoundError(role.key)
                raise ConcurrentModificationError(role.key, role.version)

        role.version += 1
        role.updated_at = now
        return role

    def delete_role(self, role_id: Any) -> None:
        with self._transaction() as session:
            row = session.get(RoleRow, role_id)
            if row is None:
                raise RoleNotFoundError(role_id)
            session.delete(row)

    @staticmethod
    def _flush(session: Session, entity: str, key: str) -> None:
        try:
            session.flush()
        except IntegrityError as e:
            raise DuplicateKeyError(entity, key) from e


def _to_action(row: ActionRow) -> Action:
    return Action(
        id=row.id,
        key=row.key,
        name=row.name,
        description=row.description,
        resource_id=row.resource_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_resource(row: ResourceRow, *, with_relations: bool = True) -> Resource:
    resource = Resource(
        id=row.id,
        key=row.key,
        name=row.name,
        description=row.description,
        parent_id=row.parent_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
    if with_relations:
        resource.actions = [_to_action(a) for a in row.actions]
        resource.sub_resources = [
            _to_resource(child, with_relations=False) for child in row.sub_resources
        ]
    return resource


def _to_role(row: RoleRow) -> Role:
    return Role(
        id=row.id,
        key=row.key,
        name=row.name,
        description=row.description,
        permissions=list(row.permissions or []),
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
