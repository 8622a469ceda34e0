"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Inner Flame"
    debug: bool = False

    # Database: empty -> in-memory storage
    database_url: str = ""
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # console | json

    # Registration rules
    password_min_length: int = 8
    password_max_bytes: int = 72  # bcrypt hard limit

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
