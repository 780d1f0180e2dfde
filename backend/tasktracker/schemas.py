from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import TaskPriority, TaskStatus


class AuthIn(BaseModel):
    email: str
    password: str


class GoogleAuthIn(BaseModel):
    id_token: str = Field(validation_alias=AliasChoices("idToken", "token"))


class UserOut(BaseModel):
    id: str
    email: str


class MessageOut(BaseModel):
    message: str


class DeletedOut(BaseModel):
    id: str


# request bodies use the frontend's camelCase keys (dueDate)
class TaskCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None


class TaskUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None


class TaskOut(BaseModel):
    # read from ORM rows by attribute name, written out in camelCase
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )

    id: str
    user_id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
