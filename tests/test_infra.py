"""Tests for logging setup and the exception hook."""
import logging
import logging.handlers
import sys
import threading

from trigger_fsm.config import LoggingConfig
from trigger_fsm.infra import configure_logging, install_exception_hook


class TestConfigureLogging:
    def test_file_and_console_handlers(self, tmp_path, restore_root_logging):
        config = LoggingConfig(level="DEBUG", filepath=tmp_path / "logs" / "fsm.log", console=True)

        configure_logging(config)
        logging.getLogger("fsm.test").debug("hello %s", "file")

        handler_types = {type(handler) for handler in restore_root_logging.handlers}
        assert logging.handlers.RotatingFileHandler in handler_types
        assert logging.StreamHandler in handler_types
        assert restore_root_logging.level == logging.DEBUG
        for handler in restore_root_logging.handlers:
            handler.flush()
        assert "hello file" in (tmp_path / "logs" / "fsm.log").read_text(encoding="utf-8")

    def test_level_override(self, tmp_path, restore_root_logging):
        config = LoggingConfig(level="DEBUG", filepath=tmp_path / "fsm.log")

        configure_logging(config, level_override="error")

        assert restore_root_logging.level == logging.ERROR
        assert len(restore_root_logging.handlers) == 1


class TestExceptionHook:
    def test_install_and_uninstall(self):
        original = sys.excepthook
        original_thread = threading.excepthook

        hook = install_exception_hook()
        assert sys.excepthook is not original

        hook.uninstall()
        assert sys.excepthook is original
        assert threading.excepthook is original_thread

    def test_unhandled_exception_is_logged(self, caplog):
        calls = []
        original = sys.excepthook
        hook = install_exception_hook()
        hook._original_excepthook = lambda *args: calls.append(args)  # noqa: SLF001
        try:
            error = RuntimeError("lost")
            with caplog.at_level(logging.CRITICAL, logger="fsm.exceptions"):
                sys.excepthook(RuntimeError, error, None)
        finally:
            hook._original_excepthook = original  # noqa: SLF001
            hook.uninstall()

        assert "Unhandled exception: lost" in caplog.text
        assert calls and calls[0][1] is error
