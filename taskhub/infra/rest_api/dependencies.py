"""
FastAPI依存性注入の定義

このモジュールは、FastAPIエンドポイントで使用される依存性注入関数を提供します。
起動時に生成された DIContainer（app.state.container）からサービスを取得し、
FastAPIの依存性システムに統合するためのアダプターレイヤーとして機能します。
"""

import asyncio
from typing import Awaitable, TypeVar

from fastapi import Request

from ..config import Settings
from ..di import DIContainer
from ...usecase.task_management.task_service import TaskService
from ...usecase.user_management.user_service import UserService

T = TypeVar("T")


def get_container(request: Request) -> DIContainer:
    return request.app.state.container


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_task_service(request: Request) -> TaskService:
    """
    タスクサービスの依存性を取得

    Returns:
        TaskService: 設定で選択されたリポジトリを持つタスクサービス
    """
    return get_container(request).task_service


def get_user_service(request: Request) -> UserService:
    """
    ユーザーサービスの依存性を取得

    Returns:
        UserService: ユーザー管理サービス
    """
    return get_container(request).user_service


async def bounded(request: Request, call: Awaitable[T]) -> T:
    """
    サービス呼び出しをリクエストのタイムアウトで制限する

    タイムアウト時は呼び出しをキャンセルし asyncio.TimeoutError を送出する。
    """
    return await asyncio.wait_for(call, timeout=get_settings(request).request_timeout_seconds)
