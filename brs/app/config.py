from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Book Review Service"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    storage_path: str = "data/brs.sqlite"
    books_table: str = "books"
    reviews_table: str = "reviews"
    top_reviews_limit: int = 10

    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(env_prefix="BRS_", extra="ignore")


settings = Settings()
