"""
Application Configuration
Централизованное управление настройками приложения
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "thingstruct"
    require_database: bool = False  # True: падаем при старте без БД

    # State stream
    stream_window_hours: int = 72

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    allowed_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
