import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskboard.schemas.users import UserOut

_DUE_DATE = AliasChoices("due_date", "dueDate", "duedate")

# loosely typed on purpose: the controller checks members before it looks
# at field types or lengths, so nothing here may reject a body early
class TaskCreateIn(BaseModel):
    title: Any = None
    description: Any = None
    tag: Any = None
    due_date: Any = Field(default=None, validation_alias=_DUE_DATE)
    users: Any = None

class TaskUpdateIn(BaseModel):
    title: str | None = None
    description: str | None = None
    tag: str | None = None
    due_date: datetime | None = Field(default=None, validation_alias=_DUE_DATE)
    status: str | None = None

# responses go out camelCased (dueDate, assignedMembers, createdAt)
class TaskOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    owner: uuid.UUID
    title: str
    description: str
    tag: str | None
    due_date: datetime | None
    status: str
    assigned_members: list[uuid.UUID]
    created_at: datetime | None = None

class TaskUpdatedOut(BaseModel):
    task: TaskOut

class TaskViewOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    owner: UserOut | None
    title: str
    description: str
    tag: str | None
    due_date: datetime | None
    status: str
    assigned_members: list[str | None]
    created_at: datetime | None = None

class TaskDeletedOut(BaseModel):
    success: str = "Task has been deleted"
