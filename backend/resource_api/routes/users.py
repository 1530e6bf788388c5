"""
Users API Routes
In-memory CRUD over the shared UsersState held on the application.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Request

from resource_api.errors import MissingResourceError
from resource_api.models.user import User, UserCreate, UserUpdate
from resource_api.services.users_state import UsersState

router = APIRouter()

# Identifiers are unsigned; negative ids are rejected with 422
NonNegativeId = Annotated[int, Path(ge=0)]


def get_users_state(request: Request) -> UsersState:
    return request.app.state.users


@router.get("/users", response_model=List[User])
def get_users(state: UsersState = Depends(get_users_state)):
    """List all users (order unspecified)"""
    return state.get_users()


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: NonNegativeId, state: UsersState = Depends(get_users_state)):
    user = state.get_user(user_id)
    if user is None:
        raise MissingResourceError("user", user_id)
    return user


@router.post("/users", response_model=User)
def create_user(proto_user: UserCreate, state: UsersState = Depends(get_users_state)):
    return state.create_user(proto_user)


@router.put("/users/{user_id}", response_model=User)
def update_user(user_id: NonNegativeId, update: UserUpdate, state: UsersState = Depends(get_users_state)):
    """Partial update: omitted fields keep their current values"""
    user = state.update_user(user_id, update)
    if user is None:
        raise MissingResourceError("user", user_id)
    return user


@router.delete("/users/{user_id}", response_model=User)
def delete_user(user_id: NonNegativeId, state: UsersState = Depends(get_users_state)):
    user = state.delete_user(user_id)
    if user is None:
        raise MissingResourceError("user", user_id)
    return user
