"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses the in-memory booking API and mock notifier
    - PRODUCTION: Uses the remote booking API, Twilio and SendGrid

The ENV_MODE variable controls which services are instantiated throughout
the application, so the admin views can be exercised locally without
credentials for any external system.

Usage:
    from catering.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock services
    else:
        # Use real APIs

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with mock services
        PRODUCTION: Live environment with real API integrations
        STAGING: Pre-production testing against a staging booking API
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (API tokens) should NEVER be committed to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # Booking API
        booking_api_base_url: Base URL of the booking service
        booking_api_token: Bearer token for admin endpoints
        booking_api_timeout: Request timeout in seconds

        # Redis
        redis_url: Redis connection string for Celery

        # Notifications
        twilio_*: Twilio SMS credentials
        sendgrid_*: SendGrid email credentials

        # Business Configuration
        company_name: Name printed on receipts and messages
        timezone: Business time zone used to bucket bookings by day
        urgent_window_hours: Dockets are flagged urgent inside this window
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Catering Booking Admin",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )

    # ==========================================================================
    # BOOKING API
    # ==========================================================================

    booking_api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the booking service"
    )
    booking_api_token: Optional[str] = Field(
        default=None,
        description="Bearer token for the booking admin endpoints"
    )
    booking_api_timeout: float = Field(
        default=15.0,
        description="Booking API request timeout in seconds"
    )
    booking_fetch_limit: int = Field(
        default=1000,
        description="Maximum bookings requested per fetch"
    )

    # ==========================================================================
    # REDIS / CELERY
    # ==========================================================================

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )

    # ==========================================================================
    # TWILIO (SMS)
    # ==========================================================================

    twilio_account_sid: Optional[str] = Field(
        default=None,
        description="Twilio Account SID"
    )
    twilio_auth_token: Optional[str] = Field(
        default=None,
        description="Twilio Auth Token"
    )
    twilio_phone_number: Optional[str] = Field(
        default=None,
        description="Twilio phone number for sending SMS"
    )

    # ==========================================================================
    # SENDGRID (EMAIL)
    # ==========================================================================

    sendgrid_api_key: Optional[str] = Field(
        default=None,
        description="SendGrid API Key"
    )
    sendgrid_from_email: str = Field(
        default="bookings@catering.example.com",
        description="From email address for SendGrid"
    )

    # ==========================================================================
    # NOTIFICATIONS
    # ==========================================================================

    notify_on_status_change: bool = Field(
        default=True,
        description="Send customer SMS/email after a successful status change"
    )
    admin_email: Optional[str] = Field(
        default=None,
        description="Admin inbox for booking notifications"
    )
    admin_phone: Optional[str] = Field(
        default=None,
        description="Admin phone for booking SMS"
    )
    mock_notification_failure_rate: float = Field(
        default=0.05,
        description="Simulated failure rate of the mock notifier"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    company_name: str = Field(
        default="MC Catering Services",
        description="Company name printed on receipts and messages"
    )
    company_phone: str = Field(
        default="+61 2 0000 0000",
        description="Company contact number"
    )
    company_email: str = Field(
        default="bookings@catering.example.com",
        description="Company contact email"
    )
    company_website: str = Field(
        default="www.catering.example.com",
        description="Website printed on receipts"
    )
    currency: str = Field(
        default="AUD",
        description="Currency code for prices"
    )
    timezone: str = Field(
        default="Australia/Sydney",
        description="Business time zone (IANA name)"
    )
    urgent_window_hours: int = Field(
        default=24,
        description="Hours before delivery when a docket is marked urgent"
    )

    # ==========================================================================
    # FILE STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )
    excel_filename: str = Field(
        default="bookings.xlsx",
        description="Excel export filename"
    )
    excel_lock_timeout: int = Field(
        default=30,
        description="Seconds to wait for file lock"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.booking_api_token:
                missing.append("BOOKING_API_TOKEN")
            if not (self.twilio_account_sid and self.twilio_auth_token):
                missing.append("TWILIO_ACCOUNT_SID/TWILIO_AUTH_TOKEN")
            if not self.sendgrid_api_key:
                missing.append("SENDGRID_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and shared for the application lifecycle.
    Call ``get_settings.cache_clear()`` after changing the environment.

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    # Set level based on debug mode
    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("catering")
