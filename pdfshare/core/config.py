"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "PDF Share"
    ENV: str = os.getenv("ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pdfshare.db")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "")

    # Auth JWT Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

    # Share link Configuration
    SHARE_JWT_KEY: str = os.getenv("SHARE_JWT_KEY", "change-me-share-key")
    SHARE_JWT_ISSUER: str = os.getenv("SHARE_JWT_ISSUER", "pdf-management-api")
    SHARE_JWT_AUDIENCE: str = os.getenv("SHARE_JWT_AUDIENCE", "pdf-management-client")
    SHARE_TOKEN_DEFAULT_DAYS: int = int(os.getenv("SHARE_TOKEN_DEFAULT_DAYS", 7))

    # File Storage Configuration
    FILE_STORAGE_PROVIDER: str = os.getenv("FILE_STORAGE_PROVIDER", "local")  # local, gcs
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "./uploads")
    MAX_UPLOAD_SIZE: int = int(os.getenv("MAX_UPLOAD_SIZE", 10485760))  # 10MB
    ALLOWED_CONTENT_TYPES: List[str] = ["application/pdf"]

    # Google Cloud Storage Configuration
    GCS_BUCKET_NAME: str = os.getenv("GCS_BUCKET_NAME", "")
    GCS_PROJECT_ID: str = os.getenv("GCS_PROJECT_ID", "")

    # Rate limiting for anonymous comments
    PUBLIC_COMMENT_RATE_LIMIT: int = int(os.getenv("PUBLIC_COMMENT_RATE_LIMIT", 5))
    PUBLIC_COMMENT_RATE_WINDOW_SECONDS: int = int(os.getenv("PUBLIC_COMMENT_RATE_WINDOW_SECONDS", 60))

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[str], str] = "*"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def share_base_url(self) -> str:
        """Frontend base used to build share links, without trailing slash."""
        return (self.FRONTEND_URL or "http://localhost:3000").rstrip("/")

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
