# tests/test_logger.py
import io
import sys

from route_planner.core.config import settings
from route_planner.core.logger import logger, setup_logging


def _capture(monkeypatch, emit) -> str:
    buffer = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buffer)
    try:
        setup_logging()
        emit()
        logger.complete()
    finally:
        monkeypatch.undo()
        setup_logging()
    return buffer.getvalue()


def test_setup_logging_writes_formatted_lines_to_stdout(monkeypatch):
    output = _capture(monkeypatch, lambda: logger.info("Route planner ready"))

    assert "| INFO     |" in output
    assert "test_logger" in output
    assert output.rstrip().endswith("Route planner ready")


def test_setup_logging_honours_configured_level(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "warning")

    def emit() -> None:
        logger.info("hidden")
        logger.warning("shown")

    output = _capture(monkeypatch, emit)

    assert "hidden" not in output
    assert "shown" in output
