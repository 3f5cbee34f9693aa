"""
Base configuration settings for the application
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import validator, Field, SecretStr
import secrets


class Settings(BaseSettings):
    """Base settings with common functionality and validation"""

    model_config = {
        "title": "Storefront API Configuration",
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "str_strip_whitespace": True,
        "validate_default": True,
        "env_prefix": "STOREFRONT_",
        "validate_assignment": True,
        "extra": "ignore"
    }

    # API Settings
    API_V1_STR: str = Field("/api/v1", description="API version prefix")
    PROJECT_NAME: str = Field("Storefront API", description="Project name")
    VERSION: str = Field("1.0.0", description="API version")
    DESCRIPTION: str = Field(
        "Storefront and admin API for catalog, vouchers, orders and payments",
        description="API description"
    )
    DEBUG: bool = Field(False, description="Debug mode")

    # Security Settings
    SECRET_KEY: SecretStr = Field(
        default_factory=lambda: SecretStr(secrets.token_urlsafe(32)),
        description="Secret key for JWT encoding"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        60 * 24, ge=1, le=60 * 24 * 30,
        description="Access token expiration in minutes"
    )
    ALGORITHM: str = Field("HS256", description="JWT algorithm")
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31, description="bcrypt cost factor")

    # Bootstrap admin, created on startup when both are set
    ADMIN_EMAIL: Optional[str] = Field(None, description="Bootstrap admin email")
    ADMIN_PASSWORD: Optional[SecretStr] = Field(None, description="Bootstrap admin password")

    # CORS Settings
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # Redirects
    REDIRECTS_ENABLED: bool = Field(True, description="Serve stored URL redirects")

    # Logging Settings
    LOG_LEVEL: str = Field("INFO", description="Logging level")
    LOG_TO_FILE: bool = Field(False, description="Enable file logging")

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @validator("ALGORITHM")
    def validate_algorithm(cls, v):
        if v not in {"HS256", "HS384", "HS512"}:
            raise ValueError("Only HMAC JWT algorithms are supported")
        return v


# Create global settings instance
settings = Settings()
