"""
Application Configuration
"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import model_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Travelers Claim Orchestrator"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False  # Secure default
    PORT: int = 3000
    CORS_ORIGIN_ALLOWED: str = "*"

    # Logging
    LOG_FILE: Optional[str] = None

    # Claims platform (InsureMO general claim)
    TRAVELERS_CLAIM_SERVER_URL: str = (
        "https://us-vault-punetst-gw.insuremo.com/aw/1.0/general-claim"
    )
    TRAVELERS_CLAIM_SERVER_TOKEN: str = ""
    UPSTREAM_TIMEOUT_SECONDS: float = 60.0

    # iHub payment notification
    TRAVELERS_IHUB_NOTIFICATION_URL: str = (
        "https://portal-gw.insuremo.com/ebaoeco/1.0/us/sales/travelers/v1/claim/payment/notification"
    )
    TRAVELERS_IHUB_TOKEN: str = ""

    # Business configuration
    ORGAN_ID: int = 1000000000002
    PRODUCT_LINE_CODE: str = "1"
    PRODUCT_TREE_INDEX: int = 2

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate critical settings for non-development environments."""
        if self.APP_ENV != "development":
            if not self.TRAVELERS_CLAIM_SERVER_TOKEN:
                raise ValueError(
                    "TRAVELERS_CLAIM_SERVER_TOKEN is required in production/staging environments. "
                    "Set it in your .env file or environment variables."
                )
            if not self.TRAVELERS_IHUB_TOKEN:
                raise ValueError(
                    "TRAVELERS_IHUB_TOKEN is required in production/staging environments. "
                    "Set it in your .env file or environment variables."
                )

            # Warn about DEBUG mode in production
            if self.DEBUG:
                import warnings
                warnings.warn(
                    "DEBUG mode is enabled in a non-development environment. "
                    "This is not recommended for production.",
                    UserWarning,
                )

        if self.PRODUCT_TREE_INDEX < 0:
            raise ValueError("PRODUCT_TREE_INDEX must not be negative")

        return self

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
