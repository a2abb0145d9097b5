from sqlalchemy.orm import Session

from taskboard.models.task import Task
from taskboard.schemas.tasks import TaskOut, TaskViewOut
from taskboard.schemas.users import UserOut
from taskboard.services.users import names_by_id

def task_out(t: Task) -> TaskOut:
    return TaskOut(
        id=t.id,
        owner=t.owner_id,
        title=t.title,
        description=t.description,
        tag=t.tag,
        due_date=t.due_date,
        status=t.status,
        assigned_members=t.assigned_member_ids,
        created_at=t.created_at,
    )

def enrich_tasks(db: Session, tasks: list[Task]) -> list[TaskViewOut]:
    """
    Swap owner and member ids for display names.

    All names come from one lookup. Members whose user row is gone are
    dropped from the list; a missing owner is rendered as null.
    """
    ids = set()
    for t in tasks:
        ids.add(t.owner_id)
        ids.update(t.assigned_member_ids)
    names = names_by_id(db, ids)

    out: list[TaskViewOut] = []
    for t in tasks:
        owner = UserOut(id=t.owner_id, name=names[t.owner_id]) if t.owner_id in names else None
        out.append(
            TaskViewOut(
                id=t.id,
                owner=owner,
                title=t.title,
                description=t.description,
                tag=t.tag,
                due_date=t.due_date,
                status=t.status,
                assigned_members=[names[m] for m in t.assigned_member_ids if m in names],
                created_at=t.created_at,
            )
        )
    return out
