"""
Platform detectors.

A detector turns one or more automation queries into a single
MeetingState. Detection order inside a detector is cheapest first:

  process check  → one short query, bails out if the app isn't running
  tree walk      → the expensive, failure-prone step
  window titles  → lobby check, only once we know a meeting is up

detect() never raises. Anything unexpected degrades to MeetingState.none().
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from .automation import AutomationBackend
from .models import MeetingState, Platform
from .signals import Vocabulary, extract, has_lobby_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientScripts:
    process_check: str
    toolbar: str
    window_titles: str


@dataclass(frozen=True)
class BrowserScripts:
    process_check: str
    active_title: str


def _is_true(output: str) -> bool:
    return output.strip().lower() == "true"


class NullDetector:
    """Used on platforms with no supported meeting client."""

    def detect(self) -> MeetingState:
        return MeetingState.none()


class MeetingClientDetector:
    """Reads toolbar state from a native meeting client's accessibility tree."""

    def __init__(
        self,
        backend: AutomationBackend,
        scripts: ClientScripts,
        vocabulary: Vocabulary,
        name: str = "meeting client",
    ):
        self.backend = backend
        self.scripts = scripts
        self.vocabulary = vocabulary
        self.name = name

    def detect(self) -> MeetingState:
        try:
            return self._detect()
        except Exception as exc:
            logger.debug(f"{self.name} detection error: {exc}")
            return MeetingState.none()

    def _detect(self) -> MeetingState:
        if not _is_true(self.backend.run_query(self.scripts.process_check)):
            return MeetingState.none()

        raw = self.backend.run_query(self.scripts.toolbar)
        signals = extract(raw, self.vocabulary)
        if not signals.in_meeting:
            return MeetingState.none()

        # Waiting-room panels aren't reliably in the toolbar walk
        if not signals.lobby_waiting:
            titles = self.backend.run_query(self.scripts.window_titles)
            if has_lobby_marker(titles, self.vocabulary):
                signals = replace(signals, lobby_waiting=True)

        return MeetingState.from_signals(Platform.MEETING_CLIENT, signals)


class BrowserMeetingDetector:
    """
    Infers a browser meeting from the active tab title only.
    Mute/camera/share/lobby can't be read this way, so the state is
    flagged browser_only and those fields stay False.
    """

    def __init__(
        self,
        backend: AutomationBackend,
        scripts: BrowserScripts,
        title_marker: str,
        name: str = "browser",
    ):
        self.backend = backend
        self.scripts = scripts
        self.title_marker = title_marker.lower()
        self.name = name

    def detect(self) -> MeetingState:
        try:
            return self._detect()
        except Exception as exc:
            logger.debug(f"{self.name} detection error: {exc}")
            return MeetingState.none()

    def _detect(self) -> MeetingState:
        if not _is_true(self.backend.run_query(self.scripts.process_check)):
            return MeetingState.none()

        title = self.backend.run_query(self.scripts.active_title)
        if not self.title_marker or self.title_marker not in title.lower():
            return MeetingState.none()

        return MeetingState(
            platform=Platform.BROWSER_MEETING,
            in_meeting=True,
            browser_only=True,
        )


class FirstMatchDetector:
    """Tries detectors in order, returns the first one that finds a meeting."""

    def __init__(self, detectors: Sequence):
        self.detectors = list(detectors)

    def detect(self) -> MeetingState:
        for detector in self.detectors:
            try:
                state = detector.detect()
            except Exception as exc:
                logger.debug(f"{type(detector).__name__} error: {exc}")
                continue
            if state.in_meeting:
                return state
        return MeetingState.none()
