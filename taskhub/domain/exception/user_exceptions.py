"""
ユーザー関連の例外クラス

このモジュールは、ユーザー管理に関する様々な例外を定義します。
認証、登録、データ取得等のユーザー操作で発生する例外を統一的に管理します。
"""
from typing import Union

from .common_exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)


class UserNotFoundError(NotFoundError):
    """指定されたユーザーが見つからない場合の例外"""
    def __init__(self, identifier: Union[int, str]):
        self.identifier = identifier
        super().__init__(f"User {identifier} not found", "USER_NOT_FOUND")


class UserValidationError(ValidationError):
    """ユーザーの入力値が不正な場合の例外"""
    def __init__(self, message: str):
        super().__init__(message, "USER_VALIDATION_ERROR")


class UsernameAlreadyExistsException(AlreadyExistsError):
    """指定のユーザー名は既に存在しています。"""
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username '{username}' is already taken", "USERNAME_ALREADY_EXISTS")


class EmailAlreadyExistsException(AlreadyExistsError):
    """指定のメールアドレスは既に使用されています。"""
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email '{email}' is already in use", "EMAIL_ALREADY_EXISTS")


class InvalidCredentialsError(AuthenticationError):
    """ユーザー名またはパスワードが正しくありません。"""
    def __init__(self):
        super().__init__("Incorrect username or password", "INVALID_CREDENTIALS")


class InactiveUserError(AuthenticationError):
    """無効化されたユーザーです。"""
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' is inactive", "INACTIVE_USER")
