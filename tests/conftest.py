import textwrap

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path, monkeypatch):
    """Keeps every XDG lookup inside the test's temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / ".local" / "state"))
    monkeypatch.setenv("XDG_DATA_DIRS", str(tmp_path / "system-share"))
    for var in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def write_desktop():
    """Writes a descriptor file; the body is dedented so tests can inline it."""

    def _write(directory, file_name, body):
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file_name
        path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
        return path

    return _write


class RecordingLogger:
    """Minimal stand-in for a structlog logger that remembers messages."""

    def __init__(self):
        self.messages = []

    def _log(self, level):
        def log(message, *args, **kwargs):
            self.messages.append((level, message))

        return log

    def __getattr__(self, level):
        return self._log(level)


@pytest.fixture
def logger():
    return RecordingLogger()
