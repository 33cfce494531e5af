"""
Task management service - use case layer
"""
import logging
from typing import List, Optional

from taskhub.domain.entity.task_entity import Task
from taskhub.domain.exception.common_exceptions import StorageError
from taskhub.domain.exception.task_exceptions import TaskValidationError
from taskhub.port.task_repository import TaskRepository


class TaskService:
    """Service for task management operations"""

    def __init__(self, task_repository: TaskRepository):
        self._task_repository = task_repository
        self.logger = logging.getLogger(__name__)

    async def create_task(self, title: str, description: str) -> Task:
        """Create a new task"""
        if title == "":
            raise TaskValidationError("Title is required")
        if description == "":
            raise TaskValidationError("Description is required")

        task = Task.create(title, description)
        if not task.is_valid():
            raise TaskValidationError("Task is not valid")

        try:
            created = await self._task_repository.create(task)
        except StorageError as e:
            raise StorageError(f"Could not create task: {e}", operation="create_task") from e

        self.logger.info("Task created", extra={"task_id": created.id})
        return created

    async def get_task_by_id(self, task_id: int) -> Task:
        """Get task by ID"""
        self._require_id(task_id)
        return await self._fetch(task_id, "get_task_by_id")

    async def get_all_tasks(self) -> List[Task]:
        """Get all tasks (an empty store yields an empty list)"""
        try:
            return list(await self._task_repository.get_all())
        except StorageError as e:
            raise StorageError(f"Could not get tasks: {e}", operation="get_all_tasks") from e

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str,
        completed: Optional[bool] = None,
    ) -> Task:
        """
        Update a task with the partial merge policy.

        Empty strings keep the current value; completed=None keeps the
        current status.
        """
        self._require_id(task_id)
        task = await self._fetch(task_id, "update_task")

        final_title = title if title != "" else task.title
        final_description = description if description != "" else task.description
        task.update(final_title, final_description)

        if completed is not None:
            if completed:
                task.mark_as_completed()
            else:
                task.mark_as_uncompleted()

        if not task.is_valid():
            raise TaskValidationError("Updated task is not valid")

        updated = await self._save(task, "update_task")
        self.logger.info("Task updated", extra={"task_id": task_id})
        return updated

    async def delete_task(self, task_id: int) -> None:
        """Delete task after checking that it exists"""
        self._require_id(task_id)
        await self._fetch(task_id, "delete_task")

        try:
            await self._task_repository.delete(task_id)
        except StorageError as e:
            raise StorageError(
                f"Could not delete task with ID {task_id}: {e}", operation="delete_task"
            ) from e

        self.logger.info("Task deleted", extra={"task_id": task_id})

    async def get_tasks_by_status(self, completed: bool) -> List[Task]:
        """Get tasks filtered by completion status"""
        try:
            return list(await self._task_repository.get_by_status(completed))
        except StorageError as e:
            raise StorageError(
                f"Could not get tasks with completed={completed}: {e}",
                operation="get_tasks_by_status",
            ) from e

    async def mark_task_as_completed(self, task_id: int) -> Task:
        self._require_id(task_id)
        task = await self._fetch(task_id, "mark_task_as_completed")
        task.mark_as_completed()
        return await self._save(task, "mark_task_as_completed")

    async def mark_task_as_uncompleted(self, task_id: int) -> Task:
        self._require_id(task_id)
        task = await self._fetch(task_id, "mark_task_as_uncompleted")
        task.mark_as_uncompleted()
        return await self._save(task, "mark_task_as_uncompleted")

    @staticmethod
    def _require_id(task_id: int) -> None:
        if task_id == 0:
            raise TaskValidationError("Task ID is required and cannot be zero")

    async def _fetch(self, task_id: int, operation: str) -> Task:
        # TaskNotFoundError はそのまま呼び出し元へ伝播させる
        try:
            return await self._task_repository.get_by_id(task_id)
        except StorageError as e:
            raise StorageError(
                f"Could not get task with ID {task_id}: {e}", operation=operation
            ) from e

    async def _save(self, task: Task, operation: str) -> Task:
        try:
            return await self._task_repository.update(task)
        except StorageError as e:
            raise StorageError(
                f"Could not update task with ID {task.id}: {e}", operation=operation
            ) from e
