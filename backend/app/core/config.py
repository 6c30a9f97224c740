from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # backend/.env, independent of the working directory uvicorn is started from.
    model_config = SettingsConfigDict(env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore")

    project_name: str = "Class Scheduling API"
    api_prefix: str = "/api"

    database_url: str = "sqlite+pysqlite:///./class_scheduling.db"

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"

    log_level: str = "INFO"
    max_request_size_bytes: int = 1_000_000

    # Recurring templates expand to at most this many weeks of sessions.
    max_template_weeks: int = 52
    # Wall-clock budget for validating one batch of drafts.
    batch_validation_min_seconds: float = 5.0
    batch_validation_seconds_per_draft: float = 0.05

    notifications_enabled: bool = True

    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        if not isinstance(value, str):
            return value
        raw = value.strip()
        items = json.loads(raw) if raw.startswith("[") else raw.split(",")
        return [str(item).strip() for item in items if str(item).strip()]

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    def batch_validation_budget(self, draft_count: int) -> float:
        return max(self.batch_validation_min_seconds, self.batch_validation_seconds_per_draft * draft_count)


@lru_cache
def get_settings() -> Settings:
    return Settings()
