from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Error layer settings loaded from environment variables.

    Pydantic Settings reads env vars prefixed with HTTPERRORS_ (case-insensitive).
    In development, it also reads from .env file if present.
    """

    # Title of the FastAPI app built by create_app()
    title: str = "httperrors"

    # Indentation of the JSON error envelope
    json_indent: int = 4

    model_config = SettingsConfigDict(
        env_prefix="HTTPERRORS_",
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
