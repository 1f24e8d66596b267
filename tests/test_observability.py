"""
Tests for observability — logging setup.
"""

import logging

import pytest

from spicectl.core.observability.logging_config import (
    _parse_level,
    configure_cli_logging,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_fallback(self):
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("") == logging.WARNING
        assert _parse_level("chatty") == logging.WARNING


class TestSetupLogging:
    def test_console_only(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_handler_has_own_level(self, tmp_path):
        log_file = tmp_path / "spicectl.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("spicectl.test").debug("written to file only")
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text()

    def test_debug_console_format_has_location(self):
        setup_logging("DEBUG")
        (handler,) = logging.getLogger().handlers
        assert "%(lineno)d" in handler.formatter._fmt


class TestResolveLevel:
    def test_flag_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True, env={"SPICECTL_LOG_LEVEL": "DEBUG"}) == "ERROR"

    def test_env_then_default(self):
        assert resolve_level(env={"SPICECTL_LOG_LEVEL": "INFO"}) == "INFO"
        assert resolve_level(env={}) == "WARNING"


class TestConfigureCliLogging:
    def test_reads_file_env(self, tmp_path, monkeypatch):
        log_file = tmp_path / "cli.log"
        monkeypatch.setenv("SPICECTL_LOG_FILE", str(log_file))
        monkeypatch.setenv("SPICECTL_LOG_FILE_LEVEL", "INFO")

        configure_cli_logging(debug=False, verbose=False, quiet=True)

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 2
