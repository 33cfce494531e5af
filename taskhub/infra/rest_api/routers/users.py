from fastapi import APIRouter, Depends, Request, status

from ..dependencies import bounded, get_user_service
from ..schemas import (
    UserCreateRequest,
    UserUpdateRequest,
    UserResponse,
    UserListResponse,
    MessageResponse,
)
from ....usecase.user_management.user_service import UserService

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"]
)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    request: Request,
    req: UserCreateRequest,
    service: UserService = Depends(get_user_service),
):
    """
    新規ユーザー登録
    """
    user = await bounded(
        request,
        service.create_user(req.username, req.email, req.password, req.first_name, req.last_name),
    )
    return UserResponse.from_entity(user)


@router.get("", response_model=UserListResponse)
async def get_all_users(
    request: Request,
    service: UserService = Depends(get_user_service),
):
    users = await bounded(request, service.get_all_users())
    return UserListResponse(users=[UserResponse.from_entity(u) for u in users], count=len(users))


@router.get("/active", response_model=UserListResponse)
async def get_active_users(
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """有効なユーザーのみ取得"""
    users = await bounded(request, service.get_active_users())
    return UserListResponse(users=[UserResponse.from_entity(u) for u in users], count=len(users))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    request: Request,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await bounded(request, service.get_user_by_id(user_id))
    return UserResponse.from_entity(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    request: Request,
    user_id: int,
    req: UserUpdateRequest,
    service: UserService = Depends(get_user_service),
):
    user = await bounded(request, service.update_user(user_id, req.first_name, req.last_name))
    return UserResponse.from_entity(user)


@router.patch("/{user_id}/activate", response_model=UserResponse)
async def activate_user(
    request: Request,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await bounded(request, service.activate_user(user_id))
    return UserResponse.from_entity(user)


@router.patch("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    request: Request,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    user = await bounded(request, service.deactivate_user(user_id))
    return UserResponse.from_entity(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    request: Request,
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    await bounded(request, service.delete_user(user_id))
    return MessageResponse(message="User deleted successfully")
