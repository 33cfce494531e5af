from typing import List, Literal
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="Task Manager API")
    environment: str = Field(default="development")
    log_level: str = Field(default="info")

    # Server
    server_host: str = Field(default="localhost")
    server_port: int = Field(default=8080)
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Database
    # database_path: 直接SQLで扱う SQLite ファイル, database_url: Tortoise ORM の接続URL
    database_path: str = Field(default="./data/tasks.db")
    database_url: str = Field(default="sqlite://./data/tasks_orm.db")
    task_repository_backend: Literal["sqlite", "tortoise"] = Field(default="tortoise")
    generate_schemas: bool = Field(default=True)

    # Security
    secret_key: str = Field(...)
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30)

    # CORS
    cors_origins: List[str] = Field(default=["http://localhost:5173"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        if not v:
            raise ValueError("SECRET_KEY must be provided")
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_server_port(cls, v):
        if not 0 < v < 65536:
            raise ValueError(f"SERVER_PORT must be a valid port number: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @model_validator(mode="after")
    def validate_database(self):
        if not self.database_path and not self.database_url:
            raise ValueError("Either DATABASE_PATH (local) or DATABASE_URL (remote) must be set")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def server_address(self) -> str:
        return f"{self.server_host}:{self.server_port}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )
