from typing import Protocol, List

from ..domain.entity.user_entity import User


class UserRepository(Protocol):
    """
    ユーザーデータの永続化インターフェース。

    見つからない場合は None ではなく UserNotFoundError を送出する。
    """

    async def create(self, user: User) -> User:
        ...

    async def get_by_id(self, user_id: int) -> User:
        ...

    async def get_by_username(self, username: str) -> User:
        ...

    async def get_by_email(self, email: str) -> User:
        ...

    async def get_all(self) -> List[User]:
        ...

    async def update(self, user: User) -> User:
        ...

    async def delete(self, user_id: int) -> None:
        ...

    async def get_active_users(self) -> List[User]:
        ...
