import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from peewee import PeeweeException, SqliteDatabase

from ...domain.entity.task_entity import Task, next_timestamp, utc_now
from ...domain.exception.common_exceptions import StorageError
from ...domain.exception.task_exceptions import TaskNotFoundError
from ...port.task_repository import TaskRepository

TASK_COLUMNS = "id, title, description, completed, created_at, updated_at"


def _format(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


class SqliteTaskRepository(TaskRepository):
    """
    peewee の SQLite 接続に直接SQLを発行する TaskRepository の実装
    """

    def __init__(self, db: SqliteDatabase):
        self.db = db

    async def create(self, task: Task) -> Task:
        now = utc_now()
        cursor = await self._execute(
            "INSERT INTO tasks (title, description, completed, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (task.title, task.description, task.completed, _format(now), _format(now)),
            "create",
        )
        return Task(
            id=cursor.lastrowid,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=now,
            updated_at=now,
        )

    async def get_by_id(self, task_id: int) -> Task:
        cursor = await self._execute(
            f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = ?", (task_id,), "get_by_id"
        )
        row = cursor.fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._to_entity(row)

    async def get_all(self) -> List[Task]:
        cursor = await self._execute(
            f"SELECT {TASK_COLUMNS} FROM tasks ORDER BY id ASC", (), "get_all"
        )
        return [self._to_entity(row) for row in cursor.fetchall()]

    async def update(self, task: Task) -> Task:
        now = next_timestamp(task.updated_at)
        cursor = await self._execute(
            "UPDATE tasks SET title = ?, description = ?, completed = ?, updated_at = ? "
            "WHERE id = ?",
            (task.title, task.description, task.completed, _format(now), task.id),
            "update",
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError(task.id)
        task.updated_at = now
        return task

    async def delete(self, task_id: int) -> None:
        cursor = await self._execute("DELETE FROM tasks WHERE id = ?", (task_id,), "delete")
        if cursor.rowcount == 0:
            raise TaskNotFoundError(task_id)

    async def get_by_status(self, completed: bool) -> List[Task]:
        cursor = await self._execute(
            f"SELECT {TASK_COLUMNS} FROM tasks WHERE completed = ? "
            "ORDER BY created_at DESC, id DESC",
            (completed,),
            "get_by_status",
        )
        return [self._to_entity(row) for row in cursor.fetchall()]

    async def _execute(self, sql: str, params: Sequence, operation: str):
        # キャンセル済みのタスクではSQLを発行しない
        await asyncio.sleep(0)
        try:
            return self.db.execute_sql(sql, params)
        except PeeweeException as e:
            raise StorageError(f"SQLite {operation} failed: {e}", operation=operation) from e

    @staticmethod
    def _parse_datetime(value) -> Optional[datetime]:
        if value is None:
            return None
        if not isinstance(value, datetime):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def _to_entity(cls, row) -> Task:
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            completed=bool(row[3]),
            created_at=cls._parse_datetime(row[4]),
            updated_at=cls._parse_datetime(row[5]),
        )
