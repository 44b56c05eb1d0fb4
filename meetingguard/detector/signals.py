"""
Signal extraction from raw accessibility text.

The meeting client never exposes its state directly. It exposes the
action a button would perform, so every label has to be inverted:

  "Mute Audio"   → mic is ON  (click to mute)
  "Unmute Audio" → mic is OFF (click to unmute = currently muted)
  "Start Video"  → cam is OFF
  "Stop Video"   → cam is ON
  "Stop Share"   → screen sharing is active

A Vocabulary is the rule table for one platform. extract() is a pure
function over it, so the rules can be tested without any OS automation.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .models import SignalSet


@dataclass(frozen=True)
class Vocabulary:
    """Case-insensitive regex patterns per signal."""

    toolbar: tuple[str, ...]
    muted: tuple[str, ...]
    unmuted: tuple[str, ...]
    cam_off: tuple[str, ...]
    sharing: tuple[str, ...]
    lobby: tuple[str, ...]
    # Lobby evidence accepted inside the toolbar blob itself
    toolbar_lobby: tuple[str, ...] = ()


# "unmute audio" contains "mute audio"; the look-behind keeps it out of the unmuted rule
_MUTE_ACTION = r"(?<!un)mute audio"

MACOS_ZOOM = Vocabulary(
    # Any audio control on window 1 means the meeting toolbar is up
    toolbar=(r"audio",),
    muted=(r"audio muted", r"unmute audio"),
    unmuted=(_MUTE_ACTION,),
    cam_off=(r"start video", r"video muted"),
    sharing=(r"stop share", r"stop screen share"),
    lobby=(r"waiting",),
)

WINDOWS_ZOOM = Vocabulary(
    toolbar=(r"mute", r"video", r"share"),
    muted=(r"unmute audio",),
    unmuted=(_MUTE_ACTION,),
    cam_off=(r"start video",),
    sharing=(r"stop share",),
    lobby=(r"waiting room", r"admit"),
    toolbar_lobby=(r"waiting room", r"admit"),
)


def _matches(patterns: tuple[str, ...], text: str) -> bool:
    return any(re.search(p, text, re.IGNORECASE) for p in patterns)


def extract(raw_text: str, vocabulary: Vocabulary) -> SignalSet:
    """
    Classify a blob of element names/descriptions into meeting signals.

    No toolbar evidence means not in a meeting, and then every other
    signal is False too. When muted and unmuted evidence both appear,
    unmuted wins.
    """
    text = (raw_text or "").lower()
    if not _matches(vocabulary.toolbar, text):
        return SignalSet.empty()

    muted = _matches(vocabulary.muted, text) and not _matches(vocabulary.unmuted, text)
    return SignalSet(
        in_meeting=True,
        muted=muted,
        cam_off=_matches(vocabulary.cam_off, text),
        screen_sharing=_matches(vocabulary.sharing, text),
        lobby_waiting=_matches(vocabulary.toolbar_lobby, text),
    )


def has_lobby_marker(titles: str, vocabulary: Vocabulary) -> bool:
    """True if window/panel titles show a waiting-room marker."""
    return _matches(vocabulary.lobby, (titles or "").lower())
