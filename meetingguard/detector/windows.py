"""
Windows detector: Zoom via PowerShell + UI Automation.

UI Automation lets us walk the accessibility tree of any app, same as
AppleScript on macOS. No special permissions are needed on Windows.
"""
from __future__ import annotations

from typing import Optional

from ..config import Config
from .automation import AutomationBackend, PowerShellBackend
from .base import ClientScripts, MeetingClientDetector
from .signals import WINDOWS_ZOOM


def _escape(text: str) -> str:
    """Escape a string for a double-quoted PowerShell literal."""
    return text.replace("`", "``").replace('"', '`"').replace("$", "`$")


def process_check_script(process_name: str) -> str:
    # [bool] collapses several matching processes into a single True
    return (
        f'[bool](Get-Process -Name "{_escape(process_name)}" '
        "-ErrorAction SilentlyContinue)"
    )


def toolbar_script(window_name: str) -> str:
    # Comma-joined names of every button under the top-level window
    return f"""
Add-Type -AssemblyName UIAutomationClient
Add-Type -AssemblyName UIAutomationTypes
$root = [System.Windows.Automation.AutomationElement]::RootElement
$condition = New-Object System.Windows.Automation.PropertyCondition(
  [System.Windows.Automation.AutomationElement]::NameProperty, "{_escape(window_name)}")
$win = $root.FindFirst(
  [System.Windows.Automation.TreeScope]::Children, $condition)
if ($win -eq $null) {{ exit }}
$buttons = $win.FindAll(
  [System.Windows.Automation.TreeScope]::Descendants,
  (New-Object System.Windows.Automation.PropertyCondition(
    [System.Windows.Automation.AutomationElement]::ControlTypeProperty,
    [System.Windows.Automation.ControlType]::Button)))
$names = @()
foreach ($b in $buttons) {{ $names += $b.Current.Name }}
$names -join ","
""".strip()


def window_titles_script(process_name: str) -> str:
    # Top-level window names owned by the client process
    return f"""
Add-Type -AssemblyName UIAutomationClient
Add-Type -AssemblyName UIAutomationTypes
$ids = @(Get-Process -Name "{_escape(process_name)}" -ErrorAction SilentlyContinue | ForEach-Object {{ $_.Id }})
if ($ids.Count -eq 0) {{ exit }}
$root = [System.Windows.Automation.AutomationElement]::RootElement
$wins = $root.FindAll(
  [System.Windows.Automation.TreeScope]::Children,
  [System.Windows.Automation.Condition]::TrueCondition)
$names = @()
foreach ($w in $wins) {{
  if ($ids -contains $w.Current.ProcessId) {{ $names += $w.Current.Name }}
}}
$names -join "|"
""".strip()


def build_detector(
    config: Config, backend: Optional[AutomationBackend] = None
) -> MeetingClientDetector:
    backend = backend or PowerShellBackend(timeout=config.automation.timeout_seconds)

    process = config.client.windows_process
    return MeetingClientDetector(
        backend,
        ClientScripts(
            process_check=process_check_script(process),
            toolbar=toolbar_script(config.client.windows_window),
            window_titles=window_titles_script(process),
        ),
        WINDOWS_ZOOM,
        name=config.client.name,
    )
