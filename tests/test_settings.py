from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from managed_events import BusSettings, SettingsError


def test_defaults():
    s = BusSettings.from_sources(env={})
    assert s.log_level == "INFO"
    assert s.log_payloads is False
    assert s.catch_listener_errors is True
    assert s.max_pending == 0


def test_env_overrides():
    s = BusSettings.from_sources(
        env={
            "ME_LOG_LEVEL": "debug",
            "ME_LOG_PAYLOADS": "yes",
            "ME_CATCH_LISTENER_ERRORS": "off",
            "ME_MAX_PENDING": "16",
        }
    )
    assert s.log_level == "DEBUG"
    assert s.log_payloads is True
    assert s.catch_listener_errors is False
    assert s.max_pending == 16


def test_invalid_env_values_are_ignored(caplog):
    s = BusSettings.from_sources(env={"ME_MAX_PENDING": "-3", "ME_LOG_PAYLOADS": "maybe", "ME_LOG_LEVEL": "loud"})
    assert s.max_pending == 0
    assert s.log_payloads is False
    assert s.log_level == "INFO"
    assert sum("Invalid env" in r.getMessage() for r in caplog.records) == 3


def test_file_then_env_precedence(tmp_path: Path):
    fp = tmp_path / "settings.toml"
    fp.write_text(
        textwrap.dedent(
            """
            log_level = "warning"

            [bus]
            max_pending = 8
            log_payloads = true
            """
        ),
        encoding="utf-8",
    )
    s = BusSettings.from_sources(env={"ME_MAX_PENDING": "2"}, file_path=fp)
    assert s.log_level == "WARNING"
    assert s.log_payloads is True
    assert s.max_pending == 2


def test_settings_file_from_env_var(tmp_path: Path):
    fp = tmp_path / "custom.toml"
    fp.write_text("max_pending = 5\n", encoding="utf-8")
    s = BusSettings.from_sources(env={"ME_SETTINGS_FILE": str(fp)})
    assert s.max_pending == 5


def test_settings_file_in_user_config_dir(tmp_path: Path, monkeypatch):
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    cfg_dir = config_home / "managed-events"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "settings.toml").write_text("log_payloads = true\n", encoding="utf-8")
    assert BusSettings.from_sources(env={}).log_payloads is True


def test_unknown_file_keys_are_ignored(tmp_path: Path, caplog):
    fp = tmp_path / "settings.toml"
    fp.write_text("volume = 11\nmax_pending = 1\n", encoding="utf-8")
    s = BusSettings.from_sources(env={}, file_path=fp)
    assert s.max_pending == 1
    assert any("unknown settings keys" in r.getMessage() for r in caplog.records)


def test_missing_explicit_file_raises(tmp_path: Path):
    with pytest.raises(SettingsError):
        BusSettings.from_sources(env={}, file_path=tmp_path / "nope.toml")


def test_broken_discovered_file_is_logged_and_skipped(tmp_path: Path, caplog):
    fp = tmp_path / "broken.toml"
    fp.write_text("max_pending = = 3\n", encoding="utf-8")
    s = BusSettings.from_sources(env={"ME_SETTINGS_FILE": str(fp)})
    assert s.max_pending == 0
    assert any("Failed to read settings TOML" in r.getMessage() for r in caplog.records)


def test_invalid_model_values_raise():
    with pytest.raises(ValidationError):
        BusSettings(max_pending=-1)
    with pytest.raises(ValidationError):
        BusSettings(log_level="chatty")
