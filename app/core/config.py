# app/core/config.py
import os
from dataclasses import dataclass
from typing import FrozenSet

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ALLOWED_EXTENSIONS = ".pdf,.docx,.xlsx"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "Lecturer Claims API")
    ENV: str = os.getenv("ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # DB
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    DB_HOST: str = os.getenv("DB_HOST")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_NAME: str = os.getenv("DB_NAME")
    DB_USER: str = os.getenv("DB_USER")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")
    AUTO_CREATE_TABLES: bool = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

    # AUTH (tokens are issued by the identity provider)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # STORAGE
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")

    # FRONTEND
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173"
    )


settings = Settings()


@dataclass(frozen=True)
class UploadPolicy:
    allowed_extensions: FrozenSet[str]
    max_bytes: int

    def allows_extension(self, ext: str) -> bool:
        return ext.lower() in self.allowed_extensions


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def get_upload_policy() -> UploadPolicy:
    """
    Upload policy is read from the environment on every call so operators
    can change it without restarting the API.
    """
    raw = os.getenv("UPLOAD_ALLOWED_EXTENSIONS", DEFAULT_ALLOWED_EXTENSIONS)
    allowed = frozenset(
        _normalize_extension(ext) for ext in raw.split(",") if ext.strip()
    )
    max_bytes = int(os.getenv("UPLOAD_MAX_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
    return UploadPolicy(allowed_extensions=allowed, max_bytes=max_bytes)
