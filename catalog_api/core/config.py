"""Application configuration loaded via pydantic settings."""

from dataclasses import dataclass
from typing import List
import secrets

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Catalog Management API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    JWT_EXPIRATION_SECONDS: int = 86400  # 24 hours
    # Reserved for a refresh flow that does not exist yet. The value is ten
    # times the documented 7 days and is kept as-is.
    JWT_REFRESH_EXPIRATION_SECONDS: int = 6048000
    BCRYPT_ROUNDS: int = 8

    # Database
    DATABASE_URL: str = "sqlite:///./catalog_api/catalog.db"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./catalog_api/logs/app.log"

    # Development seed admin
    SEED_ADMIN: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@catalog.local"
    ADMIN_PASSWORD: str = "Admin1234!"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@dataclass(frozen=True)
class TokenConfig:
    """
    Explicit credential configuration handed to the token verifier and issuer.

    Required fields: ``secret`` and ``algorithm``. Lifetimes are in seconds.
    """

    secret: str
    algorithm: str = "HS256"
    access_expiration: int = 86400
    refresh_expiration: int = 6048000
    hash_rounds: int = 8

    @classmethod
    def from_settings(cls, source: "Settings") -> "TokenConfig":
        return cls(
            secret=source.SECRET_KEY,
            algorithm=source.ALGORITHM,
            access_expiration=source.JWT_EXPIRATION_SECONDS,
            refresh_expiration=source.JWT_REFRESH_EXPIRATION_SECONDS,
            hash_rounds=source.BCRYPT_ROUNDS,
        )


settings = Settings()
token_config = TokenConfig.from_settings(settings)
