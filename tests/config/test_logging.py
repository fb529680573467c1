"""Tests for structlog configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from millbook.application import create_services
from millbook.config import Settings, configure_logging, get_settings
from millbook.config.logging import app_context_processor


@pytest.fixture(autouse=True)
def restore_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_explicit_settings_win_over_process_settings(self):
        assert get_settings().environment == "development"
        production = Settings(environment="production", app_name="Mill East")

        configure_logging(production)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_uses_console(self):
        configure_logging(Settings(environment="development"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_app_context_comes_from_given_settings(self):
        processor = app_context_processor(
            Settings(app_name="Mill East", app_version="2.0.0", environment="staging")
        )

        event = processor(None, "info", {"event": "sale_created"})

        assert event["app"] == "Mill East"
        assert event["version"] == "2.0.0"
        assert event["environment"] == "staging"


class TestCreateServicesLogging:
    async def test_passes_its_settings_to_logging(self, tmp_path: Path):
        settings = Settings(environment="production")

        with patch("millbook.application.services.configure_logging") as configure:
            services = await create_services(settings=settings, db_path=tmp_path / "mill.db")
            await services.close()

        configure.assert_called_once_with(settings)
