from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Dict, Any
import asyncio
from ..logging_config import get_logger
from ...domain.exception.common_exceptions import (
    DomainException,
    ValidationError,
    AlreadyExistsError,
    NotFoundError,
    StorageError,
    AuthenticationError,
)

logger = get_logger("api.errors")


def _expose_details(request: Request) -> bool:
    # 開発環境のみ例外メッセージをレスポンスに含める
    return request.app.state.settings.is_development


def create_error_response(
    error_type: str,
    user_message: str,
    detail: Any = None,
    status_code: int = 500,
    retry_available: bool = False,
    additional_data: Dict[str, Any] = None
) -> JSONResponse:
    """統一されたエラーレスポンスを作成"""
    content = {
        "error_type": error_type,
        "user_message": user_message,
        "retry_available": retry_available
    }

    if detail:
        content["detail"] = detail

    if additional_data:
        content.update(additional_data)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(content)
    )


async def handle_timeout_error(request: Request, exc: asyncio.TimeoutError):
    """タイムアウトエラーのハンドリング"""
    logger.warning(
        "Request timeout",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )

    return create_error_response(
        error_type="timeout",
        user_message="処理がタイムアウトしました。もう一度お試しください。",
        detail="Request timed out",
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        retry_available=True
    )


async def handle_domain_exception(request: Request, exc: DomainException):
    """ドメイン例外のハンドリング"""
    # 判定順序に注意: AlreadyExistsError は ValidationError のサブクラス
    if isinstance(exc, AlreadyExistsError):
        status_code = status.HTTP_409_CONFLICT
        user_message = "既に使用されている値です。"
    elif isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        user_message = "入力内容に問題があります。内容を確認してください。"
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        user_message = "指定されたリソースが見つかりません。"
    elif isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
        user_message = "認証に失敗しました。"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        user_message = "予期しないエラーが発生しました。"

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Domain exception: {exc.__class__.__name__}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.error_code,
            "error": str(exc)
        }
    )

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    response = create_error_response(
        error_type=(exc.error_code or "domain_error").lower(),
        user_message=user_message,
        detail=str(exc),
        status_code=status_code,
        retry_available=False
    )
    if headers:
        response.headers.update(headers)
    return response


async def handle_storage_error(request: Request, exc: StorageError):
    """永続化層のエラーのハンドリング"""
    logger.error(
        "Storage error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "operation": exc.operation,
            "error": str(exc)
        },
        exc_info=exc
    )

    return create_error_response(
        error_type="storage_error",
        user_message="データの保存・取得に失敗しました。",
        detail=str(exc) if _expose_details(request) else None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=False
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """FastAPIバリデーションエラーのハンドリング"""
    logger.warning(
        "FastAPI validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors()
        }
    )

    return create_error_response(
        error_type="validation_error",
        user_message="入力データが無効です",
        detail=exc.errors(),
        status_code=422,
        retry_available=False
    )


async def handle_generic_error(request: Request, exc: Exception):
    """その他のエラーのハンドリング"""
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
            "error_type": type(exc).__name__
        },
        exc_info=exc
    )

    return create_error_response(
        error_type="internal_error",
        user_message="予期しないエラーが発生しました。問題が続く場合はサポートにお問い合わせください。",
        detail=str(exc) if _expose_details(request) else None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=True
    )
