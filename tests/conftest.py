import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from managed_events import BusSettings, EventManager, reset_event_manager  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_default_manager(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    # Keep the process-wide manager and user settings out of each test
    monkeypatch.delenv("ME_SETTINGS_FILE", raising=False)
    for key in ("ME_LOG_LEVEL", "ME_LOG_PAYLOADS", "ME_CATCH_LISTENER_ERRORS", "ME_MAX_PENDING"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    reset_event_manager()
    yield
    reset_event_manager()


@pytest.fixture
def manager() -> EventManager:
    return EventManager(BusSettings())


class Recorder:
    """Callable listener that remembers every payload it receives."""

    def __init__(self, name: str = "recorder", log=None) -> None:
        self.name = name
        self.calls = []
        self._log = log

    def __call__(self, payload) -> None:
        self.calls.append(payload)
        if self._log is not None:
            self._log.append(self.name)


@pytest.fixture
def recorder_factory():
    return Recorder
