import re
from dataclasses import dataclass, field
from datetime import datetime

from .task_entity import next_timestamp, utc_now
from ..exception.user_exceptions import UserValidationError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_HASH_LENGTH = 6


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


@dataclass
class User:
    """
    ユーザーのビジネスドメインモデル

    password_hash はハッシュ化済みの値のみを保持する。
    不正な値では生成できない（UserValidationError を送出する）。
    """
    username: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    id: int = 0
    active: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.is_valid():
            raise UserValidationError("User is not valid")

    @classmethod
    def create(
        cls,
        username: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> "User":
        """新規ユーザーを生成する（有効状態で作成される）"""
        now = utc_now()
        return cls(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            active=True,
            created_at=now,
            updated_at=now,
        )

    def is_valid(self) -> bool:
        if len(self.username) < MIN_USERNAME_LENGTH:
            return False
        if not is_valid_email(self.email):
            return False
        if len(self.password_hash) < MIN_PASSWORD_HASH_LENGTH:
            return False
        if self.first_name == "" or self.last_name == "":
            return False
        return True

    def update(self, first_name: str, last_name: str) -> None:
        """空でない値だけを上書きする"""
        if first_name != "":
            self.first_name = first_name
        if last_name != "":
            self.last_name = last_name
        self._touch()

    def activate(self) -> None:
        self.active = True
        self._touch()

    def deactivate(self) -> None:
        self.active = False
        self._touch()

    def _touch(self) -> None:
        self.updated_at = next_timestamp(self.updated_at)
