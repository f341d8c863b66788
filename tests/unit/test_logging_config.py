"""Tests for stacked_pr/utils/logging_config.py."""

import json

import structlog

from stacked_pr.utils.logging_config import configure_logging


class TestConfigureLogging:
    """Test structlog configuration."""

    def test_json_logs_to_stderr(self, capsys) -> None:
        configure_logging("INFO", json_logs=True)

        structlog.get_logger("test").info("pr_fetch_failed", number=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "pr_fetch_failed"
        assert record["number"] == 3
        assert record["level"] == "info"

    def test_level_filtering(self, capsys) -> None:
        configure_logging("WARNING", json_logs=True)

        log = structlog.get_logger("test")
        log.info("hidden")
        log.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_console_renderer(self, capsys) -> None:
        configure_logging("debug")

        structlog.get_logger("test").debug("stack_strategy", strategy="declared")

        err = capsys.readouterr().err
        assert "stack_strategy" in err
        assert "declared" in err
