from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional, Annotated

from ...domain.entity.task_entity import Task
from ...domain.entity.user_entity import User

# tortoise_client.models.Task.title の CharField と揃える
TITLE_MAX_LENGTH = 255


class TaskCreateRequest(BaseModel):
    # 空文字のチェックはサービス層で行う
    title: Annotated[str, Field(max_length=TITLE_MAX_LENGTH)]
    description: str


class TaskUpdateRequest(BaseModel):
    # 空文字は「変更しない」、completed は省略時に現在の状態を維持
    title: Annotated[str, Field(max_length=TITLE_MAX_LENGTH)] = ""
    description: str = ""
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]
    count: int


class UserCreateRequest(BaseModel):
    username: str
    email: str
    password: str
    first_name: str
    last_name: str


class UserUpdateRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        # password_hash はレスポンスに含めない
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            active=user.active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserListResponse(BaseModel):
    users: List[UserResponse]
    count: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
