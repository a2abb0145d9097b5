from __future__ import annotations

from typing import Any

class TaskError(Exception):
    """Base for errors the task endpoints turn into structured responses."""

    status_code = 400

    def payload(self) -> dict[str, Any]:
        return {"error": str(self)}

class TaskValidationError(TaskError):
    status_code = 400

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__("validation failed")
        self.errors = errors

    def payload(self) -> dict[str, Any]:
        return {"errors": self.errors}

class UnknownUserError(TaskError):
    status_code = 400

    def __init__(self, user_id: str):
        super().__init__(f"User with ID {user_id} does not exist")
        self.user_id = user_id

class TaskNotFoundError(TaskError):
    status_code = 404

    def __init__(self) -> None:
        super().__init__("Task not found")

class NotAllowedError(TaskError):
    status_code = 401
