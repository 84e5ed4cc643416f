"""Tests for peerwatch logging utilities."""

from __future__ import annotations

import json

import structlog

from peerwatch.logging import add_log_level, configure_logging, get_logger


class TestAddLogLevel:
    """Tests for add_log_level processor."""

    def test_sets_level(self) -> None:
        assert add_log_level(None, "info", {})["level"] == "info"

    def test_translates_warn(self) -> None:
        assert add_log_level(None, "warn", {})["level"] == "warning"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, capsys) -> None:
        configure_logging(level="INFO", json_output=True)

        get_logger("test").info("peer_timeout", role="client")

        line = capsys.readouterr().err.strip()
        data = json.loads(line)
        assert data["event"] == "peer_timeout"
        assert data["role"] == "client"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_level_filtering(self, capsys) -> None:
        configure_logging(level="ERROR", json_output=True)

        get_logger("test").warning("keepalive_stop_ignored")

        assert capsys.readouterr().err == ""

    def test_console_output(self, capsys) -> None:
        configure_logging(level="DEBUG", json_output=False)

        get_logger("test").debug("probe_sent")

        assert "probe_sent" in capsys.readouterr().err

    def test_logger_is_structlog(self) -> None:
        configure_logging()
        assert hasattr(get_logger(), "bind")
        assert structlog.is_configured()


class TestGetLogger:
    """Tests for get_logger."""

    def test_events_carry_protocol_name(self, capsys) -> None:
        configure_logging(level="INFO", json_output=True)

        get_logger("test").info("keepalive_started")

        data = json.loads(capsys.readouterr().err.strip())
        assert data["protocol"] == "KeepAliveProtocol"

    def test_module_logger_follows_later_configuration(self, capsys) -> None:
        logger = get_logger("test")
        configure_logging(level="ERROR", json_output=True)

        logger.info("probe_sent")
        logger.error("peer_timeout")

        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["peer_timeout"]
