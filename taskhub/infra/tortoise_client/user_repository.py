from typing import List

from ...port.user_repository import UserRepository
from ...domain.entity.task_entity import next_timestamp, utc_now
from ...domain.entity.user_entity import User
from ...domain.exception.user_exceptions import UserNotFoundError
from .errors import storage_errors
from .models import User as UserModel


class TortoiseUserRepository(UserRepository):
    """
    Tortoise ORM を用いた UserRepository の実装
    """

    async def create(self, user: User) -> User:
        now = utc_now()
        with storage_errors("create"):
            record = await UserModel.create(
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                active=user.active,
                created_at=now,
                updated_at=now,
            )
        created = self._to_entity(record)
        created.created_at = now
        created.updated_at = now
        return created

    async def get_by_id(self, user_id: int) -> User:
        with storage_errors("get_by_id"):
            record = await UserModel.get_or_none(id=user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return self._to_entity(record)

    async def get_by_username(self, username: str) -> User:
        """ユーザー名でユーザーを取得"""
        with storage_errors("get_by_username"):
            record = await UserModel.get_or_none(username=username)
        if record is None:
            raise UserNotFoundError(username)
        return self._to_entity(record)

    async def get_by_email(self, email: str) -> User:
        """メールアドレスでユーザーを取得"""
        with storage_errors("get_by_email"):
            record = await UserModel.get_or_none(email=email)
        if record is None:
            raise UserNotFoundError(email)
        return self._to_entity(record)

    async def get_all(self) -> List[User]:
        """全ユーザーを取得"""
        with storage_errors("get_all"):
            records = await UserModel.all().order_by("id")
        return [self._to_entity(record) for record in records]

    async def update(self, user: User) -> User:
        with storage_errors("update"):
            updated_count = await UserModel.filter(id=user.id).update(
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                active=user.active,
                updated_at=next_timestamp(user.updated_at),
            )
            if updated_count == 0:
                raise UserNotFoundError(user.id)
            record = await UserModel.get_or_none(id=user.id)
        if record is None:
            raise UserNotFoundError(user.id)
        return self._to_entity(record)

    async def delete(self, user_id: int) -> None:
        with storage_errors("delete"):
            deleted_count = await UserModel.filter(id=user_id).delete()
        if deleted_count == 0:
            raise UserNotFoundError(user_id)

    async def get_active_users(self) -> List[User]:
        """有効なユーザーのみ取得"""
        with storage_errors("get_active_users"):
            records = await UserModel.filter(active=True).order_by("-created_at", "-id")
        return [self._to_entity(record) for record in records]

    @staticmethod
    def _to_entity(record: UserModel) -> User:
        return User(
            id=record.id,
            username=record.username,
            email=record.email,
            password_hash=record.password_hash,
            first_name=record.first_name,
            last_name=record.last_name,
            active=record.active,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
