from fastapi import APIRouter, Depends

from taskboard.auth.deps import CallerContext, get_caller
from taskboard.rbac.deps import get_task_controller
from taskboard.schemas.users import UserOut
from taskboard.services.tasks import TaskAccessController

router = APIRouter(prefix="/users", tags=["users"])

# any signed-in user may list everyone, for assignment pickers
@router.get("", response_model=list[UserOut])
def list_users(
    caller: CallerContext = Depends(get_caller),
    tasks: TaskAccessController = Depends(get_task_controller),
) -> list[UserOut]:
    return [UserOut(id=u.id, name=u.name) for u in tasks.list_all_users(caller.user_id)]
