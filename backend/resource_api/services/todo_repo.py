"""
Todo storage behind one abstract repository.

``InMemoryTodoRepo`` and ``SqlTodoRepo`` are interchangeable; the application
picks one when it is composed (see ``resource_api.main.create_app``).
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlmodel import Session

from resource_api.models.todo import Todo, TodoRecord
from resource_api.services.resource_store import ResourceStore

logger = logging.getLogger(__name__)

todos_table = TodoRecord.__table__

# API columns only; created_at stays in the table
_todo_columns = (todos_table.c.id, todos_table.c.title, todos_table.c.description, todos_table.c.done)


class TodoRepo(ABC):
    @abstractmethod
    def get_all(self) -> List[Todo]: ...

    @abstractmethod
    def create(self, title: str, description: str) -> Todo: ...

    @abstractmethod
    def get(self, todo_id: int) -> Optional[Todo]: ...

    @abstractmethod
    def update(
        self,
        todo_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        done: Optional[bool] = None,
    ) -> Optional[Todo]: ...

    @abstractmethod
    def delete(self, todo_id: int) -> Optional[Todo]: ...


class InMemoryTodoRepo(TodoRepo):
    """Process-local todos; identifiers start at 1 like the database column."""

    def __init__(self):
        self._store: ResourceStore[Todo] = ResourceStore(Todo, first_id=1, name="todo")

    def get_all(self) -> List[Todo]:
        return self._store.list()

    def create(self, title: str, description: str) -> Todo:
        return self._store.create({"title": title, "description": description, "done": False})

    def get(self, todo_id: int) -> Optional[Todo]:
        return self._store.get(todo_id)

    def update(self, todo_id, title=None, description=None, done=None):
        return self._store.update(todo_id, {"title": title, "description": description, "done": done})

    def delete(self, todo_id: int) -> Optional[Todo]:
        return self._store.delete(todo_id)


def _to_todo(row) -> Optional[Todo]:
    if row is None:
        return None
    return Todo.model_validate(dict(row))


class SqlTodoRepo(TodoRepo):
    """Todos persisted in the ``todos`` table.

    Every call runs in its own session and commits before returning; the
    database provides atomicity, there is no in-process lock.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def get_all(self) -> List[Todo]:
        with Session(self.engine) as session:
            rows = session.execute(sa.select(*_todo_columns)).mappings().all()
        return [_to_todo(row) for row in rows]

    def create(self, title: str, description: str) -> Todo:
        stmt = (
            sa.insert(todos_table)
            .values(title=title, description=description, done=False)
            .returning(*_todo_columns)
        )
        with Session(self.engine) as session:
            row = session.execute(stmt).mappings().one()
            session.commit()
        todo = _to_todo(row)
        logger.debug("Inserted todo %d", todo.id)
        return todo

    def get(self, todo_id: int) -> Optional[Todo]:
        stmt = sa.select(*_todo_columns).where(todos_table.c.id == todo_id)
        with Session(self.engine) as session:
            row = session.execute(stmt).mappings().first()
        return _to_todo(row)

    def update(self, todo_id, title=None, description=None, done=None):
        # Single statement: a column is overwritten only when a value was supplied
        stmt = (
            sa.update(todos_table)
            .where(todos_table.c.id == todo_id)
            .values(
                title=sa.func.coalesce(sa.literal(title, sa.String), todos_table.c.title),
                description=sa.func.coalesce(sa.literal(description, sa.String), todos_table.c.description),
                done=sa.func.coalesce(sa.literal(done, sa.Boolean), todos_table.c.done),
            )
            .returning(*_todo_columns)
        )
        with Session(self.engine) as session:
            row = session.execute(stmt).mappings().first()
            session.commit()
        return _to_todo(row)

    def delete(self, todo_id: int) -> Optional[Todo]:
        stmt = sa.delete(todos_table).where(todos_table.c.id == todo_id).returning(*_todo_columns)
        with Session(self.engine) as session:
            row = session.execute(stmt).mappings().first()
            session.commit()
        return _to_todo(row)
