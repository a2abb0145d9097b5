from fastapi import Depends
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.db import get_db
from taskboard.services.tasks import TaskAccessController

def get_task_controller(db: Session = Depends(get_db)) -> TaskAccessController:
    return TaskAccessController(db, authorize_before_update=settings.tasks_authorize_before_update)
