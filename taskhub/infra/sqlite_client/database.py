from pathlib import Path
from peewee import SqliteDatabase

from ..logging_config import get_logger

logger = get_logger("sqlite_client")

CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    completed BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""


def initialize_database(db_path: str) -> SqliteDatabase:
    """
    SQLite データベースに接続し、テーブルが無ければ作成する

    ":memory:" を指定した場合はインメモリデータベースを使用する。
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    db = SqliteDatabase(db_path, pragmas={"journal_mode": "wal"} if db_path != ":memory:" else {})
    db.connect(reuse_if_open=True)

    version = db.execute_sql("SELECT sqlite_version()").fetchone()[0]
    logger.info("SQLite connection established", extra={"db_path": db_path, "sqlite_version": version})

    db.execute_sql(CREATE_TASKS_TABLE)
    return db


def close_database(db: SqliteDatabase) -> None:
    if not db.is_closed():
        db.close()
