"""
Port interface for task repository
"""
from abc import ABC, abstractmethod
from typing import List

from taskhub.domain.entity.task_entity import Task


class TaskRepository(ABC):
    """
    Port interface for task persistence.

    Every adapter must honour the same contract:
    - lookups, updates and deletes of a missing id raise TaskNotFoundError
    - create assigns a fresh id and sets created_at == updated_at
    - store failures surface as StorageError
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        """Persist a new task and return it with its assigned ID"""
        pass

    @abstractmethod
    async def get_by_id(self, task_id: int) -> Task:
        """Get task by ID"""
        pass

    @abstractmethod
    async def get_all(self) -> List[Task]:
        """Get all tasks ordered by ID"""
        pass

    @abstractmethod
    async def update(self, task: Task) -> Task:
        """Update existing task"""
        pass

    @abstractmethod
    async def delete(self, task_id: int) -> None:
        """Delete task by ID"""
        pass

    @abstractmethod
    async def get_by_status(self, completed: bool) -> List[Task]:
        """Get tasks by completion status, newest first"""
        pass
