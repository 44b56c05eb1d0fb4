"""
Rich display helpers for the Meeting Guard CLI.
All terminal output goes through this module for consistency.
"""
from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..detector.models import MeetingState
from ..presentation.alerts import ALERTS_BY_ID, BannerDiff, Severity

console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.WARNING: "bold yellow",
    Severity.INFO: "bold cyan",
}


# ── Banners ───────────────────────────────────────────────────────────────────

def print_banner() -> None:
    console.print()
    console.print(Panel.fit(
        "[bold]Meeting Guard[/bold]  ·  mute, camera & screen-share alerts",
        border_style="dim",
        padding=(0, 2),
    ))
    console.print()


def print_watch_status(platform: str, interval: float) -> None:
    console.print(
        f"[bold green]●[/bold green] Watching · [dim]{platform}, every {interval:g}s[/dim]"
    )
    console.print("  [dim]Ctrl+C to stop[/dim]")
    console.print()


# ── Overlay deltas ────────────────────────────────────────────────────────────

def _stamp() -> str:
    return f"[dim][{datetime.now().strftime('%H:%M:%S')}][/dim]"


def print_banner_diff(diff: BannerDiff) -> None:
    """Apply one banner delta to the terminal: new banners in, cleared ones out."""
    if diff.border_changed:
        if diff.border is None:
            console.print(f"{_stamp()} [dim]border cleared[/dim]")
        else:
            style = SEVERITY_STYLES[diff.border]
            console.print(f"{_stamp()} border → [{style}]{diff.border.value}[/{style}]")

    for alert in diff.added:
        style = SEVERITY_STYLES[alert.severity]
        console.print(
            f"{_stamp()} [{style}]▲ {alert.label}[/{style}]  [dim]{alert.sublabel}[/dim]"
        )

    for alert_id in diff.removed:
        alert = ALERTS_BY_ID.get(alert_id)
        label = alert.label if alert else alert_id
        console.print(f"{_stamp()} [dim]▼ {label}[/dim]")


def print_tray_label(label: str) -> None:
    console.print(f"{_stamp()} [bold]{label}[/bold]")


# ── State ─────────────────────────────────────────────────────────────────────

def print_state(state: MeetingState) -> None:
    table = Table(
        show_header=True,
        header_style="bold",
        box=None,
        padding=(0, 1),
        show_edge=False,
    )
    table.add_column("Signal", width=16, no_wrap=True)
    table.add_column("Value", no_wrap=True)

    table.add_row("platform", Text(state.platform.value, style="cyan"))
    for key, value in state.to_dict().items():
        if key == "platform":
            continue
        if state.browser_only and key in ("muted", "cam_off", "screen_sharing", "lobby_waiting"):
            table.add_row(key, Text("unknown", style="dim"))
            continue
        table.add_row(key, Text("yes" if value else "no", style="green" if value else "dim"))

    console.print(table)


# ── Doctor ────────────────────────────────────────────────────────────────────

def print_check(label: str, ok: bool, note: str = "") -> None:
    icon = "[green]✓[/green]" if ok else "[red]✗[/red]"
    line = f"  {icon}  {label}"
    if note:
        line += f"  [dim]{note}[/dim]"
    console.print(line)


# ── Utility ───────────────────────────────────────────────────────────────────

def print_error(msg: str) -> None:
    console.print(f"\n[bold red]Error:[/bold red] {msg}\n")


def print_success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green]  {msg}")


def print_warn(msg: str) -> None:
    console.print(f"[yellow]⚠[/yellow]   {msg}")


def print_info(msg: str) -> None:
    console.print(f"[dim]{msg}[/dim]")
