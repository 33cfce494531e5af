from typing import Protocol


class PasswordHasher(Protocol):
    """
    パスワードの一方向変換インターフェース。
    """

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...
