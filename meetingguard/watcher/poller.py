"""
MeetingPoller: polls the detector and reconciles successive states.

Every tick runs a full detection. Only a state that differs (by value)
from the last one reaches listeners, so downstream consumers see exactly
one notification per real change:

  tick ──(detect raises)──► skipped, nothing changes
  tick ──(same state)──► no-op
  tick ──(new state)──► replace last state, notify each listener once

Ticks run one after another on the poll thread. A slow detection delays
the next tick instead of overlapping it.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..detector.models import MeetingState

logger = logging.getLogger(__name__)

Listener = Callable[[MeetingState], None]

POLL_INTERVAL_SECONDS = 1.0


class StateCell:
    """Holds the last observed state. None until the first successful poll."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[MeetingState] = None

    def get(self) -> Optional[MeetingState]:
        with self._lock:
            return self._value

    def set(self, state: Optional[MeetingState]) -> None:
        with self._lock:
            self._value = state

    def replace_if_changed(self, state: MeetingState) -> bool:
        """Store state if it differs from the current value. Returns True if stored."""
        with self._lock:
            if self._value is not None and self._value == state:
                return False
            self._value = state
            return True


class MeetingPoller:
    """
    Owns the polling cadence and the last observed MeetingState.
    Use run() to block the calling thread, or start()/stop() for a
    background thread.
    """

    def __init__(
        self,
        detector,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        cell: Optional[StateCell] = None,
    ):
        self.detector = detector
        self.interval_seconds = interval_seconds
        self.cell = cell or StateCell()

        self._listeners: list[Listener] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._running = False

    # ── Listeners ─────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def current_state(self) -> MeetingState:
        """Latest snapshot, or the no-meeting state before the first poll."""
        return self.cell.get() or MeetingState.none()

    @property
    def running(self) -> bool:
        """True while a poll loop is active."""
        return self._running

    # ── Polling ───────────────────────────────────────────────────────────────

    def tick(self) -> bool:
        """Run one detection. Returns True if the state changed."""
        return self._tick(self._stop_event)

    def _tick(self, stop_event: threading.Event) -> bool:
        try:
            state = self.detector.detect()
        except Exception as exc:
            logger.warning(f"Detection failed, skipping tick: {exc}")
            return False

        if stop_event.is_set():
            # Stopped while detection was in flight
            return False

        if not self.cell.replace_if_changed(state):
            return False

        logger.info(f"Meeting state changed: {state.to_dict()}")
        self._notify(state)
        return True

    def _notify(self, state: MeetingState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as exc:
                logger.error(f"State listener error: {exc}", exc_info=True)

    def run(self) -> None:
        """Main poll loop. Blocks until stop() is called."""
        # Each loop keeps its own stop flag; a later start() can't revive it
        stop_event = self._stop_event
        self._running = True
        logger.info(f"Meeting poller started — every {self.interval_seconds}s")

        try:
            while not stop_event.is_set():
                self._tick(stop_event)
                stop_event.wait(self.interval_seconds)
        finally:
            self._running = False

        logger.info("Meeting poller stopped")

    def start(self) -> None:
        thread = self._thread
        if thread and thread.is_alive():
            if not self._stop_event.is_set():
                return
            # Previous loop is still finishing a detection
            thread.join()

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self.run,
            daemon=True,
            name="meetingguard-poller",
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        if thread and not thread.is_alive():
            self._thread = None
