"""Tests for loguru sink setup and structured context formatting."""

import pytest
from loguru import logger

from lifting.core.logger import context_suffix, setup_logger


@pytest.fixture(autouse=True)
def reset_sinks():
    yield
    logger.remove()


def test_context_suffix_without_context():
    assert context_suffix({"extra": {}}) == ""


def test_context_suffix_lists_bound_keys_in_order():
    record = {"extra": {"workout_id": "w-1", "set_number": 4}}

    assert context_suffix(record) == " | workout_id={extra[workout_id]} set_number={extra[set_number]}"


def test_console_sink_prints_context(capsys):
    setup_logger(level="INFO")

    logger.info("Set added", workout_id="w-1", set_number=4)

    err = capsys.readouterr().err
    assert "Set added" in err
    assert "| workout_id=w-1 set_number=4" in err


def test_console_sink_respects_level(capsys):
    setup_logger(level="WARNING")

    logger.info("Mesocycle started", mesocycle_id="m-1")

    assert "Mesocycle started" not in capsys.readouterr().err


def test_file_sink_creates_parent_directory(tmp_path):
    log_file = tmp_path / "logs" / "lifting.log"

    setup_logger(level="INFO", log_file=str(log_file))

    assert log_file.parent.is_dir()
