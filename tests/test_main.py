"""Tests for logging setup."""
import json
import logging

import pytest
import structlog

from ow_exporter.main import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def _json_lines(out):
    return [json.loads(line) for line in out.splitlines() if line.strip()]


def test_json_logs_are_valid_json(restore_logging, capsys):
    setup_logging("INFO", "json")

    logging.getLogger("ow_exporter.collector").error('Error fetching weather data: failed to decode "x"')

    records = _json_lines(capsys.readouterr().out)
    assert len(records) == 1
    assert records[0]["event"] == 'Error fetching weather data: failed to decode "x"'
    assert records[0]["level"] == "error"
    assert records[0]["logger"] == "ow_exporter.collector"
    assert "timestamp" in records[0]


def test_json_logs_keep_tracebacks_inside_the_record(restore_logging, capsys):
    setup_logging("DEBUG", "json")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("ow_exporter.collector").error("Error in refresh cycle: boom", exc_info=True)

    records = _json_lines(capsys.readouterr().out)
    assert len(records) == 1
    assert "RuntimeError: boom" in records[0]["exception"]


def test_json_level_filters(restore_logging, capsys):
    setup_logging("WARNING", "json")

    logging.getLogger("ow_exporter").info("hidden")
    logging.getLogger("ow_exporter").warning("shown")

    assert [r["event"] for r in _json_lines(capsys.readouterr().out)] == ["shown"]
