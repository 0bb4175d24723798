import logging
import os
import re

import pytest

from gitshell.logger import LOGGER_NAME, LogSettings, configure, configure_standalone


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def log_path(tmp_path):
    path = tmp_path / "logtest"
    path.write_text("")
    return path


def _log():
    return logging.getLogger(LOGGER_NAME)


def test_configure(log_path):
    closer = configure(LogSettings(log_file=str(log_path), log_format="json"))
    try:
        _log().info("this is a test")
        _log().debug("debug log message")
    finally:
        closer.close()

    data = log_path.read_text()
    assert '"msg":"this is a test"' in data
    assert '"msg":"debug log message"' not in data
    assert '"msg":"unknown log level' not in data


def test_configure_with_debug_log_level(log_path):
    closer = configure(LogSettings(log_file=str(log_path), log_format="json", log_level="debug"))
    try:
        _log().debug("debug log message")
    finally:
        closer.close()

    assert 'msg":"debug log message"' in log_path.read_text()


def test_configure_with_permission_error(tmp_path):
    settings = LogSettings(log_file=str(tmp_path), log_format="json")
    closer = configure(settings)
    try:
        _log().info("this is a test")
    finally:
        closer.close()

    assert settings.log_file == os.devnull
    assert closer.baseFilename == os.path.abspath(os.devnull)


def test_configure_without_log_file_uses_null_device():
    settings = LogSettings(log_format="json")
    closer = configure(settings)
    closer.close()
    assert settings.log_file == os.devnull


def test_log_in_utc(log_path):
    closer = configure(LogSettings(log_file=str(log_path), log_format="json"))
    try:
        _log().info("this is a test")
    finally:
        closer.close()

    data = log_path.read_text()
    utc = r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z"
    lines = [line for line in data.splitlines() if '"msg":"this is a test"' in line]
    assert len(lines) == 1
    assert len(re.findall(utc, lines[0])) == 1


def test_combined_format_means_json(log_path):
    closer = configure(LogSettings(log_file=str(log_path), log_format="combined"))
    try:
        _log().info("combined message")
    finally:
        closer.close()
    assert '"msg":"combined message"' in log_path.read_text()


def test_text_format_and_fields(log_path):
    closer = configure(LogSettings(log_file=str(log_path), log_format="text"))
    try:
        _log().info("this is a test", extra={"fields": {"user_id": "6"}})
    finally:
        closer.close()
    data = log_path.read_text()
    assert 'msg="this is a test"' in data
    assert 'user_id="6"' in data


def test_json_fields(log_path):
    closer = configure(LogSettings(log_file=str(log_path)))
    try:
        _log().info("with fields", extra={"fields": {"remote_ip": "10.0.0.1"}})
    finally:
        closer.close()
    assert '"remote_ip":"10.0.0.1"' in log_path.read_text()


def test_standalone_empty_log_file_goes_to_stderr(capsys):
    settings = LogSettings(log_format="json")
    configure_standalone(settings)
    _log().info("to stderr")
    assert '"msg":"to stderr"' in capsys.readouterr().err
    assert settings.log_file == ""


def test_standalone_falls_back_to_stdout(tmp_path, capsys):
    settings = LogSettings(log_file=str(tmp_path), log_format="json")
    configure_standalone(settings)
    out = capsys.readouterr().out
    assert settings.log_file == "stdout"
    assert "Unable to configure logging, falling back to STDOUT" in out
    assert '"log_file":"stdout"' in out