from fastapi import APIRouter, Depends, Query, Request, status

from ..dependencies import bounded, get_task_service
from ..schemas import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
    TaskListResponse,
    MessageResponse,
)
from ....usecase.task_management.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    service: TaskService = Depends(get_task_service),
):
    """新しいタスクを作成"""
    task = await bounded(request, service.create_task(body.title, body.description))
    return TaskResponse.from_entity(task)


@router.get("", response_model=TaskListResponse)
async def get_all_tasks(
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    """タスク一覧を取得"""
    tasks = await bounded(request, service.get_all_tasks())
    return TaskListResponse(tasks=[TaskResponse.from_entity(t) for t in tasks], count=len(tasks))


# "/{task_id}" より先に登録する
@router.get("/status", response_model=TaskListResponse)
async def get_tasks_by_status(
    request: Request,
    completed: bool = Query(...),
    service: TaskService = Depends(get_task_service),
):
    """完了状態でタスクを絞り込む"""
    tasks = await bounded(request, service.get_tasks_by_status(completed))
    return TaskListResponse(tasks=[TaskResponse.from_entity(t) for t in tasks], count=len(tasks))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    request: Request,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    task = await bounded(request, service.get_task_by_id(task_id))
    return TaskResponse.from_entity(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    request: Request,
    task_id: int,
    body: TaskUpdateRequest,
    service: TaskService = Depends(get_task_service),
):
    """タスクを部分更新（空の項目は変更しない）"""
    task = await bounded(
        request,
        service.update_task(task_id, body.title, body.description, body.completed),
    )
    return TaskResponse.from_entity(task)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    request: Request,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    await bounded(request, service.delete_task(task_id))
    return MessageResponse(message="Task deleted successfully")


@router.patch("/{task_id}/complete", response_model=TaskResponse)
async def mark_task_as_completed(
    request: Request,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    task = await bounded(request, service.mark_task_as_completed(task_id))
    return TaskResponse.from_entity(task)


@router.patch("/{task_id}/uncomplete", response_model=TaskResponse)
async def mark_task_as_uncompleted(
    request: Request,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    task = await bounded(request, service.mark_task_as_uncompleted(task_id))
    return TaskResponse.from_entity(task)
