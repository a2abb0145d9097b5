from fastapi import APIRouter, Depends

from taskboard.auth.deps import CallerContext, get_caller
from taskboard.rbac.deps import get_task_controller
from taskboard.schemas.tasks import (
    TaskCreateIn,
    TaskDeletedOut,
    TaskOut,
    TaskUpdatedOut,
    TaskUpdateIn,
    TaskViewOut,
)
from taskboard.services.task_views import task_out
from taskboard.services.tasks import TaskAccessController

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=list[TaskViewOut])
def list_tasks(
    caller: CallerContext = Depends(get_caller),
    tasks: TaskAccessController = Depends(get_task_controller),
) -> list[TaskViewOut]:
    return tasks.list_visible_tasks(caller.user_id)

@router.post("", response_model=TaskOut)
def create_task(
    payload: TaskCreateIn,
    caller: CallerContext = Depends(get_caller),
    tasks: TaskAccessController = Depends(get_task_controller),
) -> TaskOut:
    t = tasks.create_task(
        caller.user_id,
        title=payload.title,
        description=payload.description,
        tag=payload.tag,
        due_date=payload.due_date,
        member_ids=payload.users,
    )
    return task_out(t)

@router.put("/{task_id}", response_model=TaskUpdatedOut)
def update_task(
    task_id: str,
    payload: TaskUpdateIn,
    caller: CallerContext = Depends(get_caller),
    tasks: TaskAccessController = Depends(get_task_controller),
) -> TaskUpdatedOut:
    t = tasks.update_task(caller.user_id, task_id, payload.model_dump())
    return TaskUpdatedOut(task=task_out(t))

@router.delete("/{task_id}", response_model=TaskDeletedOut)
def delete_task(
    task_id: str,
    caller: CallerContext = Depends(get_caller),
    tasks: TaskAccessController = Depends(get_task_controller),
) -> TaskDeletedOut:
    tasks.delete_task(caller.user_id, task_id)
    return TaskDeletedOut()
