"""
Domain exceptions for task operations
"""
from .common_exceptions import NotFoundError, ValidationError


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found"""
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found", "TASK_NOT_FOUND")


class TaskValidationError(ValidationError):
    """Raised when task data is invalid"""
    def __init__(self, message: str):
        super().__init__(message, "TASK_VALIDATION_ERROR")
