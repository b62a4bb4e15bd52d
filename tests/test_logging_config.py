import logging

import pytest

from managed_events import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_configure_logging_replaces_handlers(restore_root_logger):
    configure_logging(logging.DEBUG)
    configure_logging(logging.DEBUG)
    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_reads_env(monkeypatch, restore_root_logger):
    monkeypatch.setenv("ME_LOG_LEVEL", "warning")
    configure_logging()
    assert restore_root_logger.level == logging.WARNING


def test_configure_logging_accepts_level_name(restore_root_logger):
    configure_logging("error")
    assert restore_root_logger.level == logging.ERROR


def test_configure_logging_reads_level_from_settings_file(tmp_path, monkeypatch, restore_root_logger):
    fp = tmp_path / "settings.toml"
    fp.write_text('[bus]\nlog_level = "DEBUG"\n', encoding="utf-8")
    monkeypatch.setenv("ME_SETTINGS_FILE", str(fp))
    configure_logging()
    assert restore_root_logger.level == logging.DEBUG


def test_env_level_wins_over_settings_file(tmp_path, monkeypatch, restore_root_logger):
    fp = tmp_path / "settings.toml"
    fp.write_text('log_level = "DEBUG"\n', encoding="utf-8")
    monkeypatch.setenv("ME_SETTINGS_FILE", str(fp))
    monkeypatch.setenv("ME_LOG_LEVEL", "error")
    configure_logging()
    assert restore_root_logger.level == logging.ERROR
