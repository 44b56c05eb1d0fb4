"""
Shared test fixtures for meetingguard.

These fixtures isolate tests from the OS automation layer:
- fake_backend: scripted AutomationBackend that records every query
- isolated_config: points CONFIG_FILE at a temp dir and clears env overrides
"""

import sys
from pathlib import Path

import pytest

# Project root on the Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from meetingguard.detector.automation import AutomationBackend  # noqa: E402


class FakeBackend(AutomationBackend):
    """
    Answers queries from a script -> output mapping.
    Unknown scripts return "" like a failed automation call.
    """

    name = "fake"

    def __init__(self, responses=None, error=None):
        super().__init__(timeout=0.1)
        self.responses = dict(responses or {})
        self.error = error
        self.calls = []

    def run_query(self, payload):
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return self.responses.get(payload, "")


@pytest.fixture
def fake_backend():
    """
    Factory for scripted backends.

    Usage:
        backend = fake_backend({"check": "true", "walk": "Mute Audio~"})
    """

    def _create(responses=None, error=None):
        return FakeBackend(responses, error)

    return _create


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Config file in tmp_path, no MEETINGGUARD_* env vars."""
    import meetingguard.config as config_module

    config_file = tmp_path / "config.yaml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setattr("meetingguard.cli.app.CONFIG_FILE", config_file)
    for key in (
        "MEETINGGUARD_POLL_INTERVAL",
        "MEETINGGUARD_AUTOMATION_TIMEOUT",
        "MEETINGGUARD_CLIENT_PROCESS",
        "MEETINGGUARD_BROWSER_APP",
        "MEETINGGUARD_BROWSER_MARKER",
        "MEETINGGUARD_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return config_file
