from resource_api.models.todo import Todo, TodoCreate, TodoRecord, TodoUpdate
from resource_api.models.user import User, UserCreate, UserUpdate

__all__ = [
    "Todo",
    "TodoCreate",
    "TodoRecord",
    "TodoUpdate",
    "User",
    "UserCreate",
    "UserUpdate",
]
