from contextlib import contextmanager

from tortoise.exceptions import BaseORMException

from ...domain.exception.common_exceptions import StorageError


@contextmanager
def storage_errors(operation: str):
    """Tortoise の例外を StorageError に変換する"""
    try:
        yield
    except BaseORMException as e:
        raise StorageError(f"Tortoise {operation} failed: {e}", operation=operation) from e
