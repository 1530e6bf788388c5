"""Plain-SQL access to the todos table, without the repository layer."""

from typing import List

from sqlalchemy import text
from sqlmodel import Session


def select_sum(session: Session) -> int:
    return session.execute(text("SELECT 1 + 1 AS sum")).mappings().one()["sum"]


def select_all(session: Session) -> List[dict]:
    rows = session.execute(text("SELECT * FROM todos")).mappings().all()
    return [dict(row) for row in rows]


def insert_todo(session: Session, title: str, description: str, done: bool = False) -> int:
    """Insert a row and return the id the database assigned."""
    row = session.execute(
        text("INSERT INTO todos (title, description, done) VALUES (:title, :description, :done) RETURNING id"),
        {"title": title, "description": description, "done": done},
    ).one()
    session.commit()
    return row.id


def set_done(session: Session, todo_id: int, done: bool) -> int:
    result = session.execute(
        text("UPDATE todos SET done = :done WHERE id = :id"),
        {"id": todo_id, "done": done},
    )
    session.commit()
    return result.rowcount


def delete_todo(session: Session, todo_id: int) -> int:
    result = session.execute(text("DELETE FROM todos WHERE id = :id"), {"id": todo_id})
    session.commit()
    return result.rowcount
