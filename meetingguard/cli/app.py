"""
Meeting Guard CLI — all commands.

Commands:
  watch         Poll for meeting state and show alert banners (blocks until Ctrl+C)
  detect        Run one detection and print the state
  doctor        Diagnose setup issues
  config show   Print current configuration
  config path   Show path to the config file
"""
from __future__ import annotations

import json
import logging
import shutil
import signal
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..config import CONFIG_FILE, Config, load_config
from ..detector.automation import OsascriptBackend, PowerShellBackend
from ..detector.models import MeetingState
from ..detector.router import DetectorRouter, get_platform
from ..presentation.alerts import BannerReconciler, tray_label
from ..watcher.poller import MeetingPoller
from . import display

app = typer.Typer(
    name="meetingguard",
    help="Always-visible mute, camera and screen-share alerts for video meetings.",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)
console = Console()
logger = logging.getLogger(__name__)

_AUTOMATION_TOOLS = {"macos": "osascript", "windows": "powershell"}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_config_or_exit() -> Config:
    try:
        return load_config()
    except (ValidationError, yaml.YAMLError) as exc:
        display.print_error(f"Invalid configuration in {CONFIG_FILE}:\n{escape(str(exc))}")
        raise typer.Exit(1)


class ConsoleOverlay:
    """Terminal stand-in for the overlay window and tray label."""

    def __init__(self, config: Config):
        self.config = config
        self.reconciler = BannerReconciler()
        self._label: Optional[str] = None

    def __call__(self, state: MeetingState) -> None:
        label = tray_label(state, self.config.client.name, self.config.browser.name)
        if label != self._label:
            self._label = label
            display.print_tray_label(label)

        if self.config.display.show_banners:
            diff = self.reconciler.apply(state)
            if not diff.empty:
                display.print_banner_diff(diff)


# ── watch ─────────────────────────────────────────────────────────────────────

@app.command()
def watch(
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between polls (default: from config)"
    ),
) -> None:
    """Watch meeting state and show alerts until Ctrl+C."""
    config = _load_config_or_exit()
    _setup_logging(config.display.log_level)

    if interval is not None and interval <= 0:
        display.print_error("--interval must be greater than 0")
        raise typer.Exit(1)

    display.print_banner()

    router = DetectorRouter(config)
    if not router.supported:
        display.print_warn(
            f"No meeting client support on {router.platform} — state will stay idle."
        )

    poll_interval = interval or config.poll.interval_seconds
    poller = MeetingPoller(router, interval_seconds=poll_interval)
    poller.subscribe(ConsoleOverlay(config))

    def _shutdown(signum=None, frame=None) -> None:
        logger.info("Signal received — stopping poller")
        poller.stop()

    signal.signal(signal.SIGTERM, _shutdown)

    display.print_watch_status(router.platform, poll_interval)
    try:
        poller.run()
    except KeyboardInterrupt:
        poller.stop()
        display.print_info("\nStopped.")


# ── detect ────────────────────────────────────────────────────────────────────

@app.command()
def detect(
    as_json: bool = typer.Option(False, "--json", help="Print the state as JSON"),
) -> None:
    """Run one detection and print the resulting meeting state."""
    config = _load_config_or_exit()
    _setup_logging(config.display.log_level)

    state = DetectorRouter(config).detect()
    if as_json:
        typer.echo(json.dumps(state.to_dict(), indent=2))
        return
    display.print_state(state)


# ── doctor ────────────────────────────────────────────────────────────────────

@app.command()
def doctor() -> None:
    """Diagnose Meeting Guard setup."""
    config = _load_config_or_exit()
    console.print("\n[bold]meetingguard doctor[/bold]\n")
    all_ok = True

    platform = get_platform()
    supported = platform in _AUTOMATION_TOOLS
    display.print_check(
        f"Platform ({platform})",
        supported,
        "no meeting client support — detection always reports idle" if not supported else "",
    )
    all_ok = all_ok and supported

    if supported:
        tool = _AUTOMATION_TOOLS[platform]
        tool_ok = shutil.which(tool) is not None
        display.print_check(
            f"Automation tool ({tool})",
            tool_ok,
            "not found on PATH" if not tool_ok else "",
        )
        all_ok = all_ok and tool_ok

        if tool_ok:
            query_ok = _probe_automation(platform, config.automation.timeout_seconds)
            hint = ""
            if not query_ok:
                hint = (
                    "allow this terminal under Privacy & Security → Accessibility"
                    if platform == "macos"
                    else "UI Automation query returned nothing"
                )
            display.print_check("Accessibility query", query_ok, hint)
            all_ok = all_ok and query_ok

    config_exists = CONFIG_FILE.exists()
    display.print_check(
        f"Config file ({CONFIG_FILE})",
        config_exists,
        "using defaults" if not config_exists else "",
    )

    console.print()
    if all_ok:
        display.print_success("All checks passed. Run 'meetingguard watch' to start.")
    else:
        display.print_error("Some checks failed. Fix issues above, then re-run 'meetingguard doctor'.")


def _probe_automation(platform: str, timeout: float) -> bool:
    """Ask the automation layer something that always exists."""
    if platform == "macos":
        backend = OsascriptBackend(timeout=timeout)
        out = backend.run_query(
            'tell application "System Events" to return (count of processes) > 0'
        )
    else:
        backend = PowerShellBackend(timeout=timeout)
        out = backend.run_query(
            "Add-Type -AssemblyName UIAutomationClient; "
            "[System.Windows.Automation.AutomationElement]::RootElement -ne $null"
        )
    return out.strip().lower() == "true"


# ── config ────────────────────────────────────────────────────────────────────

config_app = typer.Typer(name="config", help="View configuration.", no_args_is_help=True)
app.add_typer(config_app)


@config_app.command("show")
def config_show() -> None:
    """Print current configuration."""
    config = _load_config_or_exit()
    console.print(yaml.dump(config.model_dump(), default_flow_style=False))


@config_app.command("path")
def config_path() -> None:
    """Show path to the config file."""
    console.print(str(CONFIG_FILE))
