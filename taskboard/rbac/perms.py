import uuid
from collections.abc import Callable

from taskboard.models.task import Task

def is_owner(task: Task, user_id: uuid.UUID) -> bool:
    return task.owner_id == user_id

def is_assigned(task: Task, user_id: uuid.UUID) -> bool:
    return user_id in task.assigned_member_ids

# update follows ownership, delete follows assignment; the owner does not
# get delete rights unless they assigned themselves. Read access is the
# owner-or-assignee filter in TaskAccessController.visible_tasks.
PERMS: dict[str, Callable[[Task, uuid.UUID], bool]] = {
    "tasks:update": is_owner,
    "tasks:delete": is_assigned,
}

def allowed(action: str, task: Task, user_id: uuid.UUID) -> bool:
    rule = PERMS.get(action)
    if rule is None:
        raise RuntimeError(f"unknown permission action: {action}")
    return rule(task, user_id)
