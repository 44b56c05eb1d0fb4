"""
macOS detector: Zoom and Google Meet via AppleScript.

Zoom exposes its UI through the macOS Accessibility tree. We query the
meeting toolbar buttons by name, the same way VoiceOver sees them.

REQUIRED: System Settings → Privacy & Security → Accessibility
          → the terminal (or app) running Meeting Guard must be allowed
"""
from __future__ import annotations

from typing import Optional

from ..config import Config
from .automation import AutomationBackend, OsascriptBackend
from .base import (
    BrowserMeetingDetector,
    BrowserScripts,
    ClientScripts,
    FirstMatchDetector,
    MeetingClientDetector,
)
from .signals import MACOS_ZOOM


def _escape(text: str) -> str:
    """Escape a string for safe embedding in AppleScript."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def process_check_script(process_name: str) -> str:
    return f"""
    tell application "System Events"
        return (name of processes) contains "{_escape(process_name)}"
    end tell
    """


def toolbar_script(process_name: str) -> str:
    # Zoom puts meeting controls directly on the window (no toolbar wrapper).
    # Each button contributes "|name~description".
    return f"""
    tell application "System Events"
        tell process "{_escape(process_name)}"
            try
                set allText to ""
                repeat with b in buttons of window 1
                    try
                        set allText to allText & "|" & (name of b) & "~" & (description of b)
                    end try
                end repeat
                return allText
            on error
                return ""
            end try
        end tell
    end tell
    """


def window_titles_script(process_name: str) -> str:
    # Zoom opens a "Waiting Room" panel or title when someone is waiting
    return f"""
    tell application "System Events"
        tell process "{_escape(process_name)}"
            try
                set winNames to name of every window
                set AppleScript's text item delimiters to "|"
                return winNames as string
            on error
                return ""
            end try
        end tell
    end tell
    """


def active_tab_title_script(application: str) -> str:
    return f"""
    tell application "{_escape(application)}"
        try
            return title of active tab of front window
        on error
            return ""
        end try
    end tell
    """


def build_detector(
    config: Config, backend: Optional[AutomationBackend] = None
) -> FirstMatchDetector:
    """Zoom first; fall back to a Meet tab in the browser."""
    backend = backend or OsascriptBackend(timeout=config.automation.timeout_seconds)

    client_process = config.client.macos_process
    zoom = MeetingClientDetector(
        backend,
        ClientScripts(
            process_check=process_check_script(client_process),
            toolbar=toolbar_script(client_process),
            window_titles=window_titles_script(client_process),
        ),
        MACOS_ZOOM,
        name=config.client.name,
    )
    meet = BrowserMeetingDetector(
        backend,
        BrowserScripts(
            process_check=process_check_script(config.browser.application),
            active_title=active_tab_title_script(config.browser.application),
        ),
        title_marker=config.browser.title_marker,
        name=config.browser.name,
    )
    return FirstMatchDetector([zoom, meet])
