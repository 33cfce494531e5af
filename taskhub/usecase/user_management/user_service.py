import logging
from typing import List

from ...port.user_repository import UserRepository
from ...port.password_hasher import PasswordHasher
from ...domain.entity.user_entity import User
from ...domain.exception.common_exceptions import StorageError
from ...domain.exception.user_exceptions import (
    UserNotFoundError,
    UserValidationError,
    UsernameAlreadyExistsException,
    EmailAlreadyExistsException,
    InvalidCredentialsError,
    InactiveUserError,
)


class UserService:
    """
    ユーザー管理のユースケース実装
    """
    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.logger = logging.getLogger(__name__)

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """
        新規ユーザーを登録する

        重複チェックはハッシュ化・永続化より前に行う。
        """
        required = (
            ("username", username),
            ("email", email),
            ("password", password),
            ("first_name", first_name),
            ("last_name", last_name),
        )
        for field_name, value in required:
            if value == "":
                raise UserValidationError(f"{field_name} is required")

        if await self._exists(self.user_repository.get_by_username, username, "get_by_username"):
            raise UsernameAlreadyExistsException(username)
        if await self._exists(self.user_repository.get_by_email, email, "get_by_email"):
            raise EmailAlreadyExistsException(email)

        password_hash = self.password_hasher.hash(password)
        user = User.create(username, email, password_hash, first_name, last_name)

        try:
            created = await self.user_repository.create(user)
        except StorageError as e:
            raise StorageError(f"Could not create user: {e}", operation="create_user") from e

        self.logger.info("User created", extra={"user_id": created.id, "username": created.username})
        return created

    async def authenticate_user(self, username: str, password: str) -> User:
        """
        ユーザー名とパスワードで認証する

        検証が全て成功した場合のみユーザーを返す。
        """
        if username == "" or password == "":
            raise UserValidationError("username and password are required")

        try:
            user = await self.user_repository.get_by_username(username)
        except UserNotFoundError as e:
            self.logger.warning("Login attempt for non-existent user", extra={"username": username})
            raise InvalidCredentialsError() from e
        except StorageError as e:
            raise StorageError(
                f"Could not get user '{username}': {e}", operation="authenticate_user"
            ) from e

        if not user.active:
            self.logger.warning("Login attempt for inactive user", extra={"username": username})
            raise InactiveUserError(username)

        if not self.password_hasher.verify(password, user.password_hash):
            self.logger.warning("Login attempt with incorrect password", extra={"username": username})
            raise InvalidCredentialsError()

        return user

    async def get_user_by_id(self, user_id: int) -> User:
        self._require_id(user_id)
        return await self._fetch(user_id, "get_user_by_id")

    async def get_all_users(self) -> List[User]:
        try:
            return list(await self.user_repository.get_all())
        except StorageError as e:
            raise StorageError(f"Could not get users: {e}", operation="get_all_users") from e

    async def update_user(self, user_id: int, first_name: str, last_name: str) -> User:
        """氏名を部分更新する（空文字は現在値を維持）"""
        self._require_id(user_id)
        user = await self._fetch(user_id, "update_user")

        user.update(first_name, last_name)
        if not user.is_valid():
            raise UserValidationError("Updated user is not valid")

        return await self._save(user, "update_user")

    async def deactivate_user(self, user_id: int) -> User:
        self._require_id(user_id)
        user = await self._fetch(user_id, "deactivate_user")
        user.deactivate()
        return await self._save(user, "deactivate_user")

    async def activate_user(self, user_id: int) -> User:
        self._require_id(user_id)
        user = await self._fetch(user_id, "activate_user")
        user.activate()
        return await self._save(user, "activate_user")

    async def delete_user(self, user_id: int) -> None:
        """存在確認の後にユーザーを削除する"""
        self._require_id(user_id)
        await self._fetch(user_id, "delete_user")

        try:
            await self.user_repository.delete(user_id)
        except StorageError as e:
            raise StorageError(
                f"Could not delete user with ID {user_id}: {e}", operation="delete_user"
            ) from e

        self.logger.info("User deleted", extra={"user_id": user_id})

    async def get_active_users(self) -> List[User]:
        try:
            return list(await self.user_repository.get_active_users())
        except StorageError as e:
            raise StorageError(
                f"Could not get active users: {e}", operation="get_active_users"
            ) from e

    @staticmethod
    def _require_id(user_id: int) -> None:
        if user_id == 0:
            raise UserValidationError("User ID is required and cannot be zero")

    @staticmethod
    async def _exists(lookup, value: str, operation: str) -> bool:
        # UserNotFoundError のみ「未使用」とみなす。それ以外の失敗は登録を中断する。
        try:
            await lookup(value)
        except UserNotFoundError:
            return False
        except StorageError as e:
            raise StorageError(
                f"Could not check whether '{value}' is taken: {e}", operation=operation
            ) from e
        return True

    async def _fetch(self, user_id: int, operation: str) -> User:
        try:
            return await self.user_repository.get_by_id(user_id)
        except StorageError as e:
            raise StorageError(
                f"Could not get user with ID {user_id}: {e}", operation=operation
            ) from e

    async def _save(self, user: User, operation: str) -> User:
        try:
            return await self.user_repository.update(user)
        except StorageError as e:
            raise StorageError(
                f"Could not update user with ID {user.id}: {e}", operation=operation
            ) from e
