"""
Environment configuration for the hostel lifecycle backend.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from typing import Annotated, List, Optional, Union
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


def _parse_int_list(v: Union[str, List[int]]) -> List[int]:
    if isinstance(v, str):
        if v.startswith('[') and v.endswith(']'):
            try:
                return [int(x) for x in json.loads(v)]
            except json.JSONDecodeError:
                pass
        return [int(x.strip()) for x in v.split(",") if x.strip()]
    return v


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Hostel Lifecycle Service", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    TIMEZONE: str = "UTC"
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "hostel_lifecycle"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_ECHO: bool = False
    DB_STATEMENT_TIMEOUT_MS: int = 30000

    # Redis / Celery configuration
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: Optional[str] = None
    CELERY_RESULT_BACKEND: Optional[str] = None

    # Cache settings
    CACHE_BACKEND: str = "memory"
    PAYMENT_SUMMARY_TTL_SECONDS: int = 10

    # Email configuration
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    EMAIL_FROM_NAME: str = "Hostel Management System"
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")
    PORTAL_NAME: str = "Hostel Portal"

    # Lifecycle jobs
    SEMESTER_SWEEP_HOUR: int = 8
    SUBSCRIPTION_SWEEP_HOUR: int = 9
    SUBSCRIPTION_NOTICE_DAYS: Annotated[List[int], NoDecode] = Field(default=[30, 15, 7, 3, 1])
    UPCOMING_SEMESTER_WINDOW_DAYS: int = 7
    SUPER_ADMIN_DIGEST_WINDOW_DAYS: int = 30
    SUBSCRIPTION_WARNING_DAYS: int = 30

    # Payments
    DEFAULT_CURRENCY: str = Field(default="UGX", alias="CURRENCY")

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_JSON: bool = True

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                return json.loads(v)
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('SUBSCRIPTION_NOTICE_DAYS', mode='before')
    @classmethod
    def parse_notice_days(cls, v: Union[str, List[int]]) -> List[int]:
        """Parse SUBSCRIPTION_NOTICE_DAYS from JSON or comma separated string"""
        return _parse_int_list(v)

    @field_validator('SEMESTER_SWEEP_HOUR', 'SUBSCRIPTION_SWEEP_HOUR')
    @classmethod
    def validate_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("sweep hour must be between 0 and 23")
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    def get_broker_url(self) -> str:
        return self.CELERY_BROKER_URL or self.REDIS_URL

    def get_result_backend(self) -> str:
        return self.CELERY_RESULT_BACKEND or self.REDIS_URL

    def smtp_configured(self) -> bool:
        """SMTP delivery requires a host and a sender address"""
        return bool(self.SMTP_HOST and (self.EMAIL_FROM_ADDRESS or self.SMTP_USER))

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
