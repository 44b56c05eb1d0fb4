"""
Layered configuration for Meeting Guard.
Priority: defaults → ~/.meetingguard/config.yaml → environment variables
"""
from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = Path.home() / ".meetingguard"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class PollConfig(BaseModel):
    interval_seconds: float = Field(default=1.0, gt=0)


class AutomationConfig(BaseModel):
    # Per automation call; bounds worst-case tick latency
    timeout_seconds: float = Field(default=3.0, gt=0, le=3.0)


class ClientConfig(BaseModel):
    name: str = "Zoom"
    macos_process: str = "zoom.us"
    windows_process: str = "Zoom"
    windows_window: str = "Zoom"   # UI Automation name of the top-level window


class BrowserConfig(BaseModel):
    name: str = "Google Meet"
    application: str = "Google Chrome"
    title_marker: str = "meet"


class DisplayConfig(BaseModel):
    log_level: str = "INFO"
    show_banners: bool = True


class Config(BaseModel):
    poll: PollConfig = Field(default_factory=PollConfig)
    automation: AutomationConfig = Field(default_factory=AutomationConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def load_config() -> Config:
    """Load config from file with safe defaults for any missing key."""
    raw: dict = {}

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE) as f:
            loaded = yaml.safe_load(f)
            if isinstance(loaded, dict):
                raw = loaded

    # Environment variable overrides (MEETINGGUARD_* format)
    _apply_env_overrides(raw)

    return Config(**raw)


def _apply_env_overrides(raw: dict) -> None:
    mappings = {
        "MEETINGGUARD_POLL_INTERVAL": [("poll", "interval_seconds")],
        "MEETINGGUARD_AUTOMATION_TIMEOUT": [("automation", "timeout_seconds")],
        "MEETINGGUARD_CLIENT_PROCESS": [
            ("client", "macos_process"),
            ("client", "windows_process"),
        ],
        "MEETINGGUARD_BROWSER_APP": [("browser", "application")],
        "MEETINGGUARD_BROWSER_MARKER": [("browser", "title_marker")],
        "MEETINGGUARD_LOG_LEVEL": [("display", "log_level")],
    }
    for env_key, targets in mappings.items():
        val = os.getenv(env_key)
        if val:
            for section, key in targets:
                # An empty "poll:" block loads as None
                if not isinstance(raw.get(section), dict):
                    raw[section] = {}
                raw[section][key] = val
