from resource_api.services import todo_queries


def test_select_one_plus_one(session):
    assert todo_queries.select_sum(session) == 2


def test_insert_returns_positive_id(session):
    todo_id = todo_queries.insert_todo(session, "Learn SQL", "I should really learn SQL")

    assert todo_id > 0
    rows = todo_queries.select_all(session)
    assert [row["title"] for row in rows] == ["Learn SQL"]
    assert not rows[0]["done"]


def test_set_done(session):
    todo_id = todo_queries.insert_todo(session, "Finish", "the exercises")

    assert todo_queries.set_done(session, todo_id, True) == 1
    assert todo_queries.select_all(session)[0]["done"]


def test_set_done_on_missing_row_touches_nothing(session):
    assert todo_queries.set_done(session, 123, True) == 0


def test_delete_todo(session):
    todo_id = todo_queries.insert_todo(session, "Delete", "me")

    assert todo_queries.delete_todo(session, todo_id) == 1
    assert todo_queries.select_all(session) == []
    assert todo_queries.delete_todo(session, todo_id) == 0
