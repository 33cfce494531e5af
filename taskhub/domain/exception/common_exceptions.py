"""共通のドメイン例外クラス"""

from typing import Optional


class DomainException(Exception):
    """ドメイン例外の基底クラス"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ValidationError(DomainException):
    """入力値やエンティティの不変条件が満たされない場合の例外"""
    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code)


class AlreadyExistsError(ValidationError):
    """一意であるべき値が既に使われている場合の例外"""
    def __init__(self, message: str, error_code: str = "ALREADY_EXISTS"):
        super().__init__(message, error_code)


class NotFoundError(DomainException):
    """対象のレコードが存在しない場合の例外"""
    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message, error_code)


class StorageError(DomainException):
    """永続化層の I/O・クエリ失敗"""
    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, "STORAGE_ERROR")
        self.operation = operation


class AuthenticationError(DomainException):
    """認証失敗の基底例外"""
    def __init__(self, message: str, error_code: str = "AUTHENTICATION_ERROR"):
        super().__init__(message, error_code)
