"""Tests for codelight.setup_logging."""

from __future__ import annotations

import logging
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from codelight import setup_logging


@pytest.fixture
def root_handlers() -> Generator[None]:
    """Restore the root logger's handlers and level after the test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


@pytest.mark.usefixtures("root_handlers")
class TestSetupLogging:
    """Console plus rotating file logging."""

    def test_creates_log_file(self, tmp_path: Path) -> None:
        log_file = setup_logging(tmp_path / "logs")

        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("codelight.")
        assert log_file.exists()

    def test_installs_rotating_handler(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)

        rotating = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, RotatingFileHandler)
        ]
        assert rotating
        assert rotating[-1].maxBytes == 10 * 1024 * 1024
        assert rotating[-1].backupCount == 5

    def test_module_records_reach_file(self, tmp_path: Path) -> None:
        log_file = setup_logging(tmp_path)

        logging.getLogger("codelight.page").warning("block skipped")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "WARNING" in text
        assert "codelight.page" in text
        assert "block skipped" in text

    def test_defaults_to_settings_log_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APP__LOG_DIR", str(tmp_path / "from-env"))

        log_file = setup_logging()

        assert log_file.parent == tmp_path / "from-env"
