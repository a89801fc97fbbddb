# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./database_storeratings.db"

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Optional administrator created on startup
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_NAME: str = "System Administrator Account"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
