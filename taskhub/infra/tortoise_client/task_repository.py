"""
Tortoise ORM task repository
"""
from typing import List

from ...domain.entity.task_entity import Task, next_timestamp, utc_now
from ...domain.exception.task_exceptions import TaskNotFoundError
from ...port.task_repository import TaskRepository
from .errors import storage_errors
from .models import Task as TaskModel


class TortoiseTaskRepository(TaskRepository):
    """タスクのTortoise ORMリポジトリ"""

    async def create(self, task: Task) -> Task:
        now = utc_now()
        with storage_errors("create"):
            record = await TaskModel.create(
                title=task.title,
                description=task.description,
                completed=task.completed,
                created_at=now,
                updated_at=now,
            )
        return Task(
            id=record.id,
            title=record.title,
            description=record.description,
            completed=record.completed,
            created_at=now,
            updated_at=now,
        )

    async def get_by_id(self, task_id: int) -> Task:
        with storage_errors("get_by_id"):
            record = await TaskModel.get_or_none(id=task_id)
        if record is None:
            raise TaskNotFoundError(task_id)
        return self._to_entity(record)

    async def get_all(self) -> List[Task]:
        with storage_errors("get_all"):
            records = await TaskModel.all().order_by("id")
        return [self._to_entity(record) for record in records]

    async def update(self, task: Task) -> Task:
        with storage_errors("update"):
            updated_count = await TaskModel.filter(id=task.id).update(
                title=task.title,
                description=task.description,
                completed=task.completed,
                updated_at=next_timestamp(task.updated_at),
            )
            if updated_count == 0:
                raise TaskNotFoundError(task.id)
            # 更新後の状態を取得し直す
            record = await TaskModel.get_or_none(id=task.id)
        if record is None:
            raise TaskNotFoundError(task.id)
        return self._to_entity(record)

    async def delete(self, task_id: int) -> None:
        with storage_errors("delete"):
            deleted_count = await TaskModel.filter(id=task_id).delete()
        if deleted_count == 0:
            raise TaskNotFoundError(task_id)

    async def get_by_status(self, completed: bool) -> List[Task]:
        with storage_errors("get_by_status"):
            records = await TaskModel.filter(completed=completed).order_by("-created_at", "-id")
        return [self._to_entity(record) for record in records]

    @staticmethod
    def _to_entity(record: TaskModel) -> Task:
        return Task(
            id=record.id,
            title=record.title,
            description=record.description,
            completed=record.completed,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
