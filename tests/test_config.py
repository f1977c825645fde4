import pytest
from pydantic import ValidationError

from catering.core.config import EnvironmentMode, Settings


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestSettings:

    def test_env_mode_is_case_insensitive(self):
        settings = make_settings(env_mode="PRODUCTION")

        assert settings.env_mode == EnvironmentMode.PRODUCTION
        assert settings.use_real_services

    def test_invalid_env_mode(self):
        with pytest.raises(ValidationError):
            make_settings(env_mode="qa")

    def test_development_needs_no_credentials(self):
        assert make_settings(env_mode="development").validate_production_config() == []

    def test_production_lists_missing_credentials(self):
        settings = make_settings(
            env_mode="production",
            booking_api_token="",
            twilio_account_sid="",
            twilio_auth_token="",
            sendgrid_api_key="",
        )

        assert settings.validate_production_config() == [
            "BOOKING_API_TOKEN",
            "TWILIO_ACCOUNT_SID/TWILIO_AUTH_TOKEN",
            "SENDGRID_API_KEY",
        ]

    def test_business_defaults(self):
        settings = make_settings()

        assert settings.timezone == "Australia/Sydney"
        assert settings.urgent_window_hours == 24
        assert settings.currency == "AUD"
