"""
Tests for configuration and logging setup.
"""

import logging

import pytest

from kappsync.config.provider import EnvConfigProvider
from kappsync.logging_config import (
    DIFF_LOGGER_NAME,
    RESOURCE_LOGGER_NAME,
    HealthCheckFilter,
    LabeledLogger,
    NoopLogger,
    get_logging_config,
)


class TestEnvConfigProvider:
    """Test environment-based configuration."""

    def test_defaults(self, monkeypatch):
        for name in ("KAPP_BINARY", "KBLD_BINARY", "API_HOST", "API_PORT", "API_DEBUG", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        provider = EnvConfigProvider()

        tools = provider.get_tools_config()
        api = provider.get_api_config()

        assert (tools.kapp_binary, tools.kbld_binary) == ("kapp", "kbld")
        assert (api.host, api.port, api.debug) == ("0.0.0.0", 8080, False)
        assert provider.get_logging_config().level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("KAPP_BINARY", "/usr/local/bin/kapp")
        monkeypatch.setenv("API_PORT", "9090")
        monkeypatch.setenv("API_DEBUG", "TRUE")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        provider = EnvConfigProvider()

        assert provider.get_tools_config().kapp_binary == "/usr/local/bin/kapp"
        assert provider.get_api_config().port == 9090
        assert provider.get_api_config().debug is True
        assert provider.get_logging_config().level == "DEBUG"

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("API_PORT", "eighty")

        with pytest.raises(ValueError) as exc_info:
            EnvConfigProvider().get_api_config()
        assert "API_PORT" in str(exc_info.value)


class TestLoggingConfig:
    """Test logging configuration."""

    def test_levels(self):
        config = get_logging_config("warning")

        assert config["loggers"]["kappsync"]["level"] == "WARNING"
        assert config["loggers"][RESOURCE_LOGGER_NAME]["level"] == "DEBUG"
        assert config["loggers"][DIFF_LOGGER_NAME]["level"] == "INFO"

    def test_health_check_filter(self):
        health_filter = HealthCheckFilter()

        def record(name, msg):
            return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)

        assert health_filter.filter(record("uvicorn.access", 'GET /health HTTP/1.1" 200')) is False
        assert health_filter.filter(record("uvicorn.access", 'GET /apps/prod/web HTTP/1.1" 200')) is True
        assert health_filter.filter(record("kappsync", "GET /health")) is True


class TestLabeledLogger:
    """Test label paths on logger handles."""

    def test_labels_prefix_messages(self, caplog):
        caplog.set_level(logging.INFO, logger="tests.labels")
        logger = LabeledLogger(logging.getLogger("tests.labels")).with_label("prod/web")

        logger.with_label("create").info("started")
        logger.info("plain")

        assert [r.getMessage() for r in caplog.records] == [
            "[prod/web] [create] started",
            "[prod/web] plain",
        ]

    def test_with_label_does_not_mutate(self):
        base = LabeledLogger(logging.getLogger("tests.labels"), ["a"])
        child = base.with_label("b")

        assert base.labels == ("a",)
        assert child.labels == ("a", "b")

    def test_noop_logger_drops_records(self, caplog):
        caplog.set_level(logging.DEBUG)
        logger = NoopLogger().with_label("prod/web")

        logger.debug("hidden")
        logger.error("hidden")

        assert isinstance(logger, NoopLogger)
        assert caplog.records == []
