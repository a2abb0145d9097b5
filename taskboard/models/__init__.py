from taskboard.models.auth_magic_link import AuthMagicLink
from taskboard.models.task import Task, TaskAssignee
from taskboard.models.user import User

__all__ = ["User", "Task", "TaskAssignee", "AuthMagicLink"]
