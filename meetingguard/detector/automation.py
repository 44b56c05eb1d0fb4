"""
Automation query backends.

Each backend runs one opaque script against the OS accessibility layer
and hands back whatever it printed:

  macOS   → osascript (AppleScript via System Events)
  Windows → powershell (UI Automation via .NET)

All failures (missing tool, permission denial, timeout, non-zero exit)
come back as an empty string. Callers treat "" as "absent", never as an
error to retry.
"""
from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 3.0


class AutomationBackend:
    """Runs a script payload in a short-lived subprocess with a hard timeout."""

    name = "automation"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = timeout

    def command(self, payload: str) -> list[str]:
        raise NotImplementedError

    def run_query(self, payload: str) -> str:
        """Run the payload and return stripped stdout. Returns '' on any failure."""
        try:
            result = subprocess.run(
                self.command(payload),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"{self.name} query timed out after {self.timeout}s")
            return ""
        except Exception as exc:
            logger.debug(f"{self.name} query failed: {exc}")
            return ""

        if result.returncode != 0:
            logger.debug(f"{self.name} error: {(result.stderr or '').strip()[:200]}")
            return ""
        return (result.stdout or "").strip()


class OsascriptBackend(AutomationBackend):
    name = "osascript"

    def command(self, payload: str) -> list[str]:
        return ["osascript", "-e", payload]


class PowerShellBackend(AutomationBackend):
    name = "powershell"

    def command(self, payload: str) -> list[str]:
        # -NonInteractive -NoProfile for speed
        return ["powershell", "-NonInteractive", "-NoProfile", "-Command", payload]
