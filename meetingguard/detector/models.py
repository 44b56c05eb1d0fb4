"""
Meeting state snapshots.
Frozen dataclasses so a snapshot handed to a listener can never change under it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class Platform(str, Enum):
    NONE = "none"
    MEETING_CLIENT = "meeting-client"
    BROWSER_MEETING = "browser-meeting"


@dataclass(frozen=True)
class SignalSet:
    in_meeting: bool = False
    muted: bool = False
    cam_off: bool = False
    screen_sharing: bool = False
    lobby_waiting: bool = False

    @classmethod
    def empty(cls) -> "SignalSet":
        return cls()


@dataclass(frozen=True)
class MeetingState:
    platform: Platform = Platform.NONE
    in_meeting: bool = False
    muted: bool = False
    cam_off: bool = False
    screen_sharing: bool = False
    lobby_waiting: bool = False
    browser_only: bool = False   # sub-signals unknown, reported as False

    @classmethod
    def none(cls) -> "MeetingState":
        """The all-absent state: no meeting detected."""
        return cls()

    @classmethod
    def from_signals(cls, platform: Platform, signals: SignalSet) -> "MeetingState":
        if not signals.in_meeting:
            return cls.none()
        return cls(
            platform=platform,
            in_meeting=True,
            muted=signals.muted,
            cam_off=signals.cam_off,
            screen_sharing=signals.screen_sharing,
            lobby_waiting=signals.lobby_waiting,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["platform"] = self.platform.value
        return data
