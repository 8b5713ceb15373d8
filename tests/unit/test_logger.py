"""Tests for the structured logging setup."""

import json
import logging

import pytest

from silence_journal.observability.logger import bind_context, clear_context, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    clear_context()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_format_renders_stdlib_records(capsys):
    setup_logging("INFO", "json")
    bind_context(command="metrics")
    logging.getLogger("silence_journal.test").info("computed %d trades", 3)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "computed 3 trades"
    assert record["level"] == "info"
    assert record["command"] == "metrics"


def test_level_filters_records(capsys):
    setup_logging("WARNING", "console")
    logging.getLogger("silence_journal.test").info("hidden")
    logging.getLogger("silence_journal.test").warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
