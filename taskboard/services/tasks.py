from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from taskboard.errors import NotAllowedError, TaskNotFoundError, TaskValidationError, UnknownUserError
from taskboard.models.task import Task, TaskAssignee
from taskboard.models.user import User
from taskboard.rbac.perms import allowed
from taskboard.schemas.tasks import TaskViewOut
from taskboard.services.task_views import enrich_tasks
from taskboard.services.users import first_missing_user, list_users, parse_member_id, parse_uuid

logger = logging.getLogger(__name__)

TITLE_MIN_LEN = 3
DESCRIPTION_MIN_LEN = 5

UPDATABLE_FIELDS = ("title", "description", "tag", "due_date", "status")

_DATETIME = TypeAdapter(datetime)

def as_text(value: Any) -> str | None:
    """Read a scalar body value as text (12345 -> "12345"); lists and objects give None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None

def as_member_ids(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return ["null" if v is None else (as_text(v) or str(v)) for v in value]

def parse_due_date(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    return _DATETIME.validate_python(value)

def _field_error(field: str, msg: str, value: Any) -> dict[str, Any]:
    return {"field": field, "msg": msg, "value": value, "location": "body"}

def field_errors(title: Any, description: Any) -> list[dict[str, Any]]:
    errors: list[dict[str, Any]] = []
    if len(as_text(title) or "") < TITLE_MIN_LEN:
        errors.append(_field_error("title", "Enter a valid Title", title))
    if len(as_text(description) or "") < DESCRIPTION_MIN_LEN:
        errors.append(_field_error("description", "Description must be of at least 5 characters", description))
    return errors

class TaskAccessController:
    """
    Who may see, create, change and remove tasks.

    Every operation takes the caller's user id explicitly. Visibility is
    owner-or-assignee, updates are owner-only and deletes are assignee-only.
    Store errors are not caught here; they reach the app's handlers as-is.
    """

    def __init__(self, db: Session, *, authorize_before_update: bool = True):
        self.db = db
        self.authorize_before_update = authorize_before_update

    def list_all_users(self, caller_id: uuid.UUID) -> list[User]:
        return list_users(self.db)

    def visible_tasks(self, caller_id: uuid.UUID) -> list[Task]:
        assigned = select(TaskAssignee.task_id).where(TaskAssignee.user_id == caller_id)
        q = (
            select(Task)
            .where(or_(Task.owner_id == caller_id, Task.id.in_(assigned)))
            .order_by(Task.created_at, Task.id)
        )
        return list(self.db.scalars(q).all())

    def list_visible_tasks(self, caller_id: uuid.UUID) -> list[TaskViewOut]:
        return enrich_tasks(self.db, self.visible_tasks(caller_id))

    def create_task(
        self,
        caller_id: uuid.UUID,
        *,
        title: Any,
        description: Any,
        tag: Any = None,
        due_date: Any = None,
        member_ids: Any = None,
    ) -> Task:
        """
        Body values arrive untyped. Member references are checked first;
        only then are title, description and due date validated, with every
        failing field reported together.
        """
        member_ids = as_member_ids(member_ids)

        missing = first_missing_user(self.db, member_ids)
        if missing is not None:
            raise UnknownUserError(missing)

        errors = field_errors(title, description)
        try:
            due = parse_due_date(due_date)
        except ValidationError:
            due = None
            errors.append(_field_error("due_date", "Enter a valid due date", due_date))
        if errors:
            raise TaskValidationError(errors)

        t = Task(
            owner_id=caller_id,
            title=as_text(title),
            description=as_text(description),
            tag=as_text(tag),
            due_date=due,
            assignees=[
                TaskAssignee(position=i, user_id=parse_member_id(m)) for i, m in enumerate(member_ids)
            ],
        )
        self.db.add(t)
        self.db.commit()
        self.db.refresh(t)
        logger.info("task %s created by %s with %d member(s)", t.id, caller_id, len(member_ids))
        return t

    def update_task(self, caller_id: uuid.UUID, task_id: str | uuid.UUID, patch: dict[str, Any]) -> Task:
        t = self._get(task_id)

        if self.authorize_before_update:
            self._require("tasks:update", t, caller_id, "Not allowed to update this task")
            self._apply(t, patch)
            return t

        self._apply(t, patch)
        self._require("tasks:update", t, caller_id, "Not allowed to update this task")
        return t

    def delete_task(self, caller_id: uuid.UUID, task_id: str | uuid.UUID) -> None:
        t = self._get(task_id)
        self._require("tasks:delete", t, caller_id, "Not Allowed")

        self.db.delete(t)
        self.db.commit()
        logger.info("task %s deleted by %s", task_id, caller_id)

    def _get(self, task_id: str | uuid.UUID) -> Task:
        parsed = parse_uuid(task_id)
        t = self.db.get(Task, parsed) if parsed is not None else None
        if t is None:
            raise TaskNotFoundError()
        return t

    def _require(self, action: str, t: Task, caller_id: uuid.UUID, message: str) -> None:
        if not allowed(action, t, caller_id):
            logger.info("%s denied for %s on task %s", action, caller_id, t.id)
            raise NotAllowedError(message)

    def _apply(self, t: Task, patch: dict[str, Any]) -> None:
        # falsy values mean "leave as is"
        changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS and v}
        for k, v in changes.items():
            setattr(t, k, v)
        self.db.add(t)
        self.db.commit()
        self.db.refresh(t)
