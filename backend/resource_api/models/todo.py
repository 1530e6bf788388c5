from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel


class TodoRecord(SQLModel, table=True):
    """Row of the ``todos`` table."""

    __tablename__ = "todos"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    done: bool = Field(default=False, sa_column_kwargs={"server_default": sa.text("false")})
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"server_default": sa.text("CURRENT_TIMESTAMP")},
    )


class Todo(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    description: str
    done: bool


class TodoCreate(BaseModel):
    title: str
    description: str


class TodoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    done: Optional[bool] = None
