"""
Tests for harness logging setup.
"""

import logging

import pytest
import structlog

from modelguard import logging_config


@pytest.fixture
def reset_logging(monkeypatch):
    """Let each test configure logging from scratch."""
    monkeypatch.setattr(logging_config, "_configured", False)
    yield
    structlog.reset_defaults()
    logging.getLogger("modelguard").setLevel(logging.NOTSET)


class TestConfigureLogging:
    """Test configure_logging behavior."""

    def test_sets_harness_logger_level(self, reset_logging):
        logging_config.configure_logging("DEBUG")

        assert logging.getLogger("modelguard").level == logging.DEBUG

    def test_is_idempotent(self, reset_logging):
        logging_config.configure_logging("WARNING")
        logging_config.configure_logging("DEBUG")

        assert logging.getLogger("modelguard").level == logging.WARNING

    def test_force_reconfigures(self, reset_logging):
        logging_config.configure_logging("WARNING")
        logging_config.configure_logging("ERROR", force=True)

        assert logging.getLogger("modelguard").level == logging.ERROR

    def test_renders_json_through_stdlib(self, reset_logging, caplog):
        logging_config.configure_logging("INFO", force=True)

        structlog.get_logger("modelguard.test").info("Checked", cls="pkg.Model")

        messages = [record.getMessage() for record in caplog.records]
        assert any('"event": "Checked"' in message for message in messages)
        assert any('"cls": "pkg.Model"' in message for message in messages)

    def test_debug_filtered_at_info(self, reset_logging, caplog):
        logging_config.configure_logging("INFO", force=True)

        structlog.get_logger("modelguard.test").debug("Hidden")

        assert not any("Hidden" in record.getMessage() for record in caplog.records)
