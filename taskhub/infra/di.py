from pathlib import Path
from typing import Optional

from peewee import SqliteDatabase
from tortoise import Tortoise

from .config import Settings
from .auth import BcryptPasswordHasher
from .logging_config import get_logger
from .sqlite_client.database import initialize_database, close_database
from .sqlite_client.task_repository import SqliteTaskRepository
from .tortoise_client.config import build_tortoise_config
from .tortoise_client.task_repository import TortoiseTaskRepository
from .tortoise_client.user_repository import TortoiseUserRepository
from ..port.task_repository import TaskRepository
from ..port.user_repository import UserRepository
from ..port.password_hasher import PasswordHasher
from ..usecase.task_management.task_service import TaskService
from ..usecase.user_management.user_service import UserService

logger = get_logger("di")

SQLITE_URL_PREFIX = "sqlite://"


def ensure_sqlite_directory(database_url: str) -> None:
    """sqlite:// のURLであればDBファイルの親ディレクトリを作成する"""
    if not database_url.startswith(SQLITE_URL_PREFIX):
        return
    path = database_url[len(SQLITE_URL_PREFIX):].split("?", 1)[0]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


class DIContainer:
    """
    依存性注入コンテナ

    起動時に一度だけ生成し、app.state 経由で各リクエストに渡す。
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._sqlite_db: Optional[SqliteDatabase] = None
        self._task_repository: Optional[TaskRepository] = None
        self._user_repository: Optional[UserRepository] = None
        self._password_hasher: Optional[PasswordHasher] = None
        self._task_service: Optional[TaskService] = None
        self._user_service: Optional[UserService] = None

    async def startup(self) -> None:
        """ストレージへの接続を開く"""
        ensure_sqlite_directory(self.settings.database_url)
        await Tortoise.init(config=build_tortoise_config(self.settings.database_url))
        if self.settings.generate_schemas:
            await Tortoise.generate_schemas(safe=True)
        logger.info("Tortoise ORM initialized")

        if self.settings.task_repository_backend == "sqlite":
            self._sqlite_db = initialize_database(self.settings.database_path)

    async def shutdown(self) -> None:
        if self._sqlite_db is not None:
            close_database(self._sqlite_db)
            self._sqlite_db = None
        await Tortoise.close_connections()
        logger.info("Storage connections closed")

    @property
    def sqlite_db(self) -> SqliteDatabase:
        if self._sqlite_db is None:
            self._sqlite_db = initialize_database(self.settings.database_path)
        return self._sqlite_db

    @property
    def task_repository(self) -> TaskRepository:
        """設定に応じてタスクリポジトリの実装を選択する"""
        if self._task_repository is None:
            if self.settings.task_repository_backend == "sqlite":
                self._task_repository = SqliteTaskRepository(self.sqlite_db)
            else:
                self._task_repository = TortoiseTaskRepository()
            logger.info(
                "Task repository selected",
                extra={"backend": self.settings.task_repository_backend},
            )
        return self._task_repository

    @property
    def user_repository(self) -> UserRepository:
        if self._user_repository is None:
            self._user_repository = TortoiseUserRepository()
        return self._user_repository

    @property
    def password_hasher(self) -> PasswordHasher:
        if self._password_hasher is None:
            self._password_hasher = BcryptPasswordHasher()
        return self._password_hasher

    @property
    def task_service(self) -> TaskService:
        if self._task_service is None:
            self._task_service = TaskService(self.task_repository)
        return self._task_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(self.user_repository, self.password_hasher)
        return self._user_service
