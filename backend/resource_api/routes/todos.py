"""
Todo API Routes
Handlers only see the abstract TodoRepo; the concrete repository is chosen
when the application is built.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Request

from resource_api.errors import MissingResourceError
from resource_api.models.todo import Todo, TodoCreate, TodoUpdate
from resource_api.services.todo_repo import TodoRepo

router = APIRouter()

# Identifiers are unsigned; negative ids are rejected with 422
NonNegativeId = Annotated[int, Path(ge=0)]


def get_todo_repo(request: Request) -> TodoRepo:
    return request.app.state.todo_repo


@router.get("/todos", response_model=List[Todo])
def get_todos(repo: TodoRepo = Depends(get_todo_repo)):
    return repo.get_all()


@router.get("/todos/{todo_id}", response_model=Todo)
def get_todo(todo_id: NonNegativeId, repo: TodoRepo = Depends(get_todo_repo)):
    todo = repo.get(todo_id)
    if todo is None:
        raise MissingResourceError("todo", todo_id)
    return todo


@router.post("/todos", response_model=Todo)
def create_todo(spec: TodoCreate, repo: TodoRepo = Depends(get_todo_repo)):
    """Create a todo; new todos are never done"""
    return repo.create(spec.title, spec.description)


@router.put("/todos/{todo_id}", response_model=Todo)
def update_todo(todo_id: NonNegativeId, update: TodoUpdate, repo: TodoRepo = Depends(get_todo_repo)):
    todo = repo.update(todo_id, title=update.title, description=update.description, done=update.done)
    if todo is None:
        raise MissingResourceError("todo", todo_id)
    return todo


@router.delete("/todos/{todo_id}", response_model=Todo)
def delete_todo(todo_id: NonNegativeId, repo: TodoRepo = Depends(get_todo_repo)):
    todo = repo.delete(todo_id)
    if todo is None:
        raise MissingResourceError("todo", todo_id)
    return todo
