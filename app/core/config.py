from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "CHANGE_ME_IN_PRODUCTION"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    DATABASE_URL: str = "sqlite:///./data/contest_hub.db"
    UPLOAD_DIR: str = "public/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    ENVIRONMENT: str = "production"  # "development" exposes error detail in 500s
    LOG_LEVEL: str = "INFO"
    CORS_ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    CHAT_PAGE_SIZE: int = 50
    CHAT_MAX_PAGE_SIZE: int = 200
    CHAT_POLL_INTERVAL_SECONDS: float = 3.0

    class Config:
        env_file = ".env"

settings = Settings()
