"""
共通テストフィクスチャ
"""
import os

import pytest
import pytest_asyncio
from tortoise import Tortoise

# Settings は SECRET_KEY を必須とするため、import 前に設定しておく
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")

from taskhub.infra.config import Settings  # noqa: E402
from taskhub.infra.sqlite_client.database import initialize_database, close_database  # noqa: E402
from taskhub.infra.tortoise_client.config import MODEL_MODULES  # noqa: E402

TEST_SECRET_KEY = "test-secret-key-that-is-at-least-32-characters-long"


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """テスト用の設定（.env を読まないよう一時ディレクトリで生成）"""
    monkeypatch.chdir(tmp_path)
    return Settings(
        secret_key=TEST_SECRET_KEY,
        environment="test",
        database_path=str(tmp_path / "tasks.db"),
        database_url="sqlite://:memory:",
        task_repository_backend="sqlite",
        request_timeout_seconds=5,
    )


@pytest.fixture
def sqlite_db():
    """インメモリの SQLite データベース"""
    db = initialize_database(":memory:")
    yield db
    close_database(db)


@pytest_asyncio.fixture
async def tortoise_db():
    """インメモリ DB で Tortoise ORM を初期化する"""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": MODEL_MODULES},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()
