import pytest
from sqlalchemy import text

from resource_api.models.todo import Todo
from resource_api.services.todo_repo import InMemoryTodoRepo, TodoRepo


@pytest.fixture(params=["sql", "memory"])
def repo(request) -> TodoRepo:
    if request.param == "sql":
        return request.getfixturevalue("sql_repo")
    return InMemoryTodoRepo()


def test_create_and_get(repo: TodoRepo):
    todo = repo.create("Learn SQL", "select star")

    assert todo == Todo(id=1, title="Learn SQL", description="select star", done=False)
    assert repo.get(todo.id) == todo


def test_get_all_reflects_contents(repo: TodoRepo):
    a = repo.create("a", "first")
    b = repo.create("b", "second")
    repo.delete(a.id)

    assert {t.id for t in repo.get_all()} == {b.id}


def test_update_merges_supplied_fields(repo: TodoRepo):
    todo = repo.create("title", "description")

    updated = repo.update(todo.id, description="changed")
    assert updated == Todo(id=todo.id, title="title", description="changed", done=False)

    updated = repo.update(todo.id, done=True)
    assert updated == Todo(id=todo.id, title="title", description="changed", done=True)

    # done=False is a value, not an absent field
    updated = repo.update(todo.id, done=False)
    assert updated.done is False


def test_missing_todo_returns_none(repo: TodoRepo):
    assert repo.get(5) is None
    assert repo.update(5, title="x") is None
    assert repo.delete(5) is None


def test_delete_returns_row(repo: TodoRepo):
    todo = repo.create("gone", "soon")

    assert repo.delete(todo.id) == todo
    assert repo.get(todo.id) is None


def test_sql_repo_stores_created_at(sql_repo, session):
    todo = sql_repo.create("timestamped", "has created_at")

    created_at = session.execute(text("SELECT created_at FROM todos WHERE id = :id"), {"id": todo.id}).scalar_one()
    assert created_at is not None


def test_sql_repo_sees_rows_written_elsewhere(sql_repo, session):
    session.execute(text("INSERT INTO todos (title, description, done) VALUES ('raw', 'insert', 1)"))
    session.commit()

    todos = sql_repo.get_all()
    assert len(todos) == 1
    assert todos[0].title == "raw"
    assert todos[0].done is True
