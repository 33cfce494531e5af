from typing import Annotated
from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm

from taskhub.infra.auth import create_access_token, get_current_user
from taskhub.infra.logging_config import get_logger
from taskhub.infra.rest_api.dependencies import bounded, get_settings, get_user_service
from taskhub.infra.rest_api.schemas import TokenResponse, UserResponse
from taskhub.infra.config import Settings
from taskhub.usecase.user_management.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = get_logger("api.auth")


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    # 認証失敗は InvalidCredentialsError / InactiveUserError として共通ハンドラーで 401 になる
    user = await bounded(request, service.authenticate_user(form_data.username, form_data.password))

    access_token = create_access_token(data={"sub": str(user.id)}, settings=settings)

    logger.info("User logged in successfully", extra={"user_id": user.id, "username": user.username})

    return TokenResponse(access_token=access_token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    request: Request,
    current_user_id: int = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user = await bounded(request, service.get_user_by_id(current_user_id))
    return UserResponse.from_entity(user)
