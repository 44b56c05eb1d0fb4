"""
Alert banners derived from meeting state.

The overlay shows a colored border plus one banner per active alert.
BannerReconciler turns each new MeetingState into a delta (banners to
add, banners to remove, border severity) so a renderer only ever
applies changes and never redraws what's already on screen.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..detector.models import MeetingState, Platform


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# Priority order for border color
SEVERITY_RANK = {Severity.CRITICAL: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class Alert:
    id: str
    severity: Severity
    label: str
    sublabel: str
    check: Callable[[MeetingState], bool] = field(compare=False, repr=False)


ALERTS: tuple[Alert, ...] = (
    Alert(
        "muted", Severity.CRITICAL,
        "YOU ARE MUTED", "Nobody can hear you",
        lambda s: s.muted,
    ),
    Alert(
        "screen_sharing", Severity.WARNING,
        "STILL SHARING YOUR SCREEN", "Everything on screen is visible",
        lambda s: s.screen_sharing,
    ),
    Alert(
        "lobby_waiting", Severity.INFO,
        "PEOPLE WAITING IN YOUR LOBBY", "Admit them when ready",
        lambda s: s.lobby_waiting,
    ),
    Alert(
        "cam_off", Severity.INFO,
        "YOUR CAMERA IS OFF", "You are not visible to others",
        lambda s: s.cam_off,
    ),
    # Browser meetings can't be read in detail; unknown is not the same as "all clear"
    Alert(
        "browser_check", Severity.INFO,
        "CHECK YOUR MEETING TAB", "Mic and camera state unavailable in the browser",
        lambda s: s.browser_only,
    ),
)

ALERTS_BY_ID = {a.id: a for a in ALERTS}


def active_alerts(state: Optional[MeetingState]) -> list[Alert]:
    """Alerts that apply to this state, in display order."""
    if state is None or not state.in_meeting:
        return []
    return [a for a in ALERTS if a.check(state)]


def border_severity(alerts: list[Alert]) -> Optional[Severity]:
    """Highest severity wins. None means no border."""
    if not alerts:
        return None
    return min((a.severity for a in alerts), key=SEVERITY_RANK.__getitem__)


@dataclass(frozen=True)
class BannerDiff:
    added: tuple[Alert, ...] = ()
    removed: tuple[str, ...] = ()
    border: Optional[Severity] = None
    border_changed: bool = False

    @property
    def empty(self) -> bool:
        return not self.added and not self.removed and not self.border_changed


class BannerReconciler:
    """Tracks which banners are shown and computes add/remove deltas."""

    def __init__(self) -> None:
        self._shown: list[str] = []
        self._border: Optional[Severity] = None

    @property
    def shown(self) -> tuple[str, ...]:
        return tuple(self._shown)

    @property
    def border(self) -> Optional[Severity]:
        return self._border

    def apply(self, state: Optional[MeetingState]) -> BannerDiff:
        active = active_alerts(state)
        active_ids = {a.id for a in active}

        added = tuple(a for a in active if a.id not in self._shown)
        removed = tuple(i for i in self._shown if i not in active_ids)

        self._shown = [i for i in self._shown if i in active_ids]
        self._shown.extend(a.id for a in added)

        border = border_severity(active)
        border_changed = border != self._border
        self._border = border

        return BannerDiff(
            added=added,
            removed=removed,
            border=border,
            border_changed=border_changed,
        )


def tray_label(
    state: Optional[MeetingState],
    client_name: str = "Zoom",
    browser_name: str = "Google Meet",
) -> str:
    """Summary line for a tray menu or status bar."""
    if state is None or state.platform == Platform.NONE:
        return "Meeting Guard — No active meeting"
    name = client_name if state.platform == Platform.MEETING_CLIENT else browser_name
    return f"Meeting Guard — {name}"
