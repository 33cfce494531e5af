import asyncio
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskhub.infra.config import Settings
from taskhub.infra.di import DIContainer
from taskhub.infra.logging_config import LoggingMiddleware, configure_logging, get_logger

from .routers.tasks import router as tasks_router
from .routers.users import router as users_router
from .routers.auth import router as auth_router
from .error_handlers import (
    handle_timeout_error,
    handle_domain_exception,
    handle_storage_error,
    handle_validation_exception,
    handle_generic_error,
)
from ...domain.exception.common_exceptions import DomainException, StorageError

APP_VERSION = "0.1.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    アプリケーションファクトリ

    設定と DI コンテナは app.state に保持し、モジュールレベルのグローバルは持たない。
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)
    logger = get_logger("app", level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=APP_VERSION,
        debug=False,
    )
    app.state.settings = settings
    app.state.container = DIContainer(settings)

    # Add logging middleware
    app.add_middleware(LoggingMiddleware)

    # CORS 設定（環境設定に基づく）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 各機能モジュールのルーター登録
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(users_router)

    @app.on_event("startup")
    async def startup_event():
        """アプリケーション起動時の初期化処理"""
        logger.info("Application starting up", extra={"environment": settings.environment})
        await app.state.container.startup()

    @app.on_event("shutdown")
    async def shutdown_event():
        """アプリケーション終了時のクリーンアップ"""
        await app.state.container.shutdown()
        logger.info("Application shutdown complete")

    @app.get("/api/v1/health")
    async def health_check():
        """ヘルスチェックエンドポイント"""
        return {"status": "healthy", "version": APP_VERSION}

    # エラーハンドラーの登録
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(DomainException, handle_domain_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(asyncio.TimeoutError, handle_timeout_error)
    app.add_exception_handler(Exception, handle_generic_error)

    return app


#uvicorn taskhub.infra.rest_api.main:create_app --factory --reload
