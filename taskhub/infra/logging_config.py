"""
構造化ログ（JSON）の設定

- JSONFormatter: 1レコード1行の JSON を出力し、extra の値もそのまま含める
- configure_logging: パッケージのルートロガー "taskhub" にハンドラーを設定する。
  logging.getLogger(__name__) で取得したユースケース層のロガーはここへ伝播する
- LoggingMiddleware: リクエストごとに開始・完了をリクエストIDと処理時間付きで記録する
"""
import logging
import json
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

ROOT_LOGGER_NAME = "taskhub"
REQUEST_ID_HEADER = "X-Request-ID"

# LogRecord が標準で持つ属性。これ以外は extra として出力する
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message',
])


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = False
) -> logging.Logger:
    """
    指定ロガーのハンドラーを JSON 出力で張り替える

    ファイルもコンソールも指定されない場合は標準出力に書く。
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    handlers = []
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    if console or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = JSONFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    return setup_logging(ROOT_LOGGER_NAME, level=level, log_file=log_file)


_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str, **kwargs) -> logging.Logger:
    if name not in _loggers:
        _loggers[name] = setup_logging(name, **kwargs)
    return _loggers[name]


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    アクセスログ用ミドルウェア

    クライアントが X-Request-ID を送ってきた場合はその値を引き継ぐ。
    """

    def __init__(self, app):
        super().__init__(app)
        self.logger = get_logger("api.access")

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        started = time.perf_counter()

        self.logger.info(
            "Request started",
            extra={**context, "client": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception("Request failed", extra={**context, "duration_ms": _elapsed_ms(started)})
            raise

        self.logger.info(
            "Request completed",
            extra={**context, "status_code": response.status_code, "duration_ms": _elapsed_ms(started)},
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
