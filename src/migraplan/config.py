from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "migraplan"

    database_url_async: str = "sqlite+aiosqlite:///./migraplan.db"

    migrations_dir: str = "migrations"
    application: str = "default"
    meta_table: str = "migration_meta"

    db_pool_size: int = 5
    db_max_overflow: int = 5
    db_pool_recycle: int = 1800

    debug: bool = False
    log_json: bool = True


settings = Settings()
