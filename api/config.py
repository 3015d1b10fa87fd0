"""Configuration management using Pydantic Settings."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden using environment variables or .env file.
    """

    # FMCSA SAFER Configuration
    safer_base_url: str = Field(
        default="https://safer.fmcsa.dot.gov/query.asp",
        description="SAFER Company Snapshot query endpoint"
    )
    safer_user_agent: str = Field(
        default="DispatchLink Carrier Verification/1.0",
        description="User-Agent header sent to SAFER"
    )
    safer_timeout_seconds: float = Field(
        default=12.0,
        gt=0,
        description="Timeout for SAFER fetches made by the verify-carrier endpoint"
    )
    safer_function_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for SAFER fetches made by the verify-dot-mc endpoint"
    )

    # FMCSA QC Mobile API Configuration
    fmcsa_web_key: Optional[str] = Field(
        default=None,
        description="QC Mobile webKey. If not set, only the SAFER scrape is used"
    )
    qc_mobile_base_url: str = Field(
        default="https://mobile.fmcsa.dot.gov/qc/services",
        description="QC Mobile API base URL"
    )
    qc_mobile_timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Timeout for QC Mobile API calls"
    )

    # Application Settings
    app_name: str = Field(
        default="Carrier Verification API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode flag"
    )
    cors_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file. If not set, logs go to the console only"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

        # Allow extra fields from environment
        extra = "ignore"

        # Example values for documentation
        json_schema_extra = {
            "example": {
                "safer_timeout_seconds": 12.0,
                "fmcsa_web_key": "your_web_key_here",
                "debug": False,
                "log_level": "INFO"
            }
        }


# Create a singleton instance
settings = Settings()
