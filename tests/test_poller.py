"""Tests for the poll loop and state reconciliation."""

import threading
from unittest.mock import Mock

from meetingguard.detector.models import MeetingState, Platform
from meetingguard.watcher.poller import MeetingPoller, StateCell

IN_MEETING = MeetingState(platform=Platform.MEETING_CLIENT, in_meeting=True)
MUTED = MeetingState(platform=Platform.MEETING_CLIENT, in_meeting=True, muted=True)


def _detector(*states):
    detector = Mock()
    detector.detect.side_effect = list(states)
    return detector


class TestStateCell:
    def test_starts_unset(self):
        assert StateCell().get() is None

    def test_first_value_always_stored(self):
        cell = StateCell()

        assert cell.replace_if_changed(MeetingState.none()) is True
        assert cell.get() == MeetingState.none()

    def test_equal_value_not_stored(self):
        cell = StateCell()
        cell.set(MUTED)

        assert cell.replace_if_changed(
            MeetingState(platform=Platform.MEETING_CLIENT, in_meeting=True, muted=True)
        ) is False

    def test_different_value_replaces(self):
        cell = StateCell()
        cell.set(IN_MEETING)

        assert cell.replace_if_changed(MUTED) is True
        assert cell.get() is MUTED


class TestTick:
    """One notification per real change, none otherwise."""

    def test_identical_detections_notify_once(self):
        poller = MeetingPoller(_detector(MUTED, MUTED, MUTED))
        listener = Mock()
        poller.subscribe(listener)

        results = [poller.tick() for _ in range(3)]

        assert results == [True, False, False]
        listener.assert_called_once_with(MUTED)

    def test_two_idle_polls_notify_once(self):
        """Starting from unset, two no-meeting polls give exactly one notification."""
        poller = MeetingPoller(_detector(MeetingState.none(), MeetingState.none()))
        listener = Mock()
        poller.subscribe(listener)

        poller.tick()
        poller.tick()

        listener.assert_called_once_with(MeetingState.none())

    def test_each_change_notifies(self):
        poller = MeetingPoller(_detector(IN_MEETING, MUTED, MUTED, IN_MEETING))
        seen = []
        poller.subscribe(seen.append)

        for _ in range(4):
            poller.tick()

        assert seen == [IN_MEETING, MUTED, IN_MEETING]

    def test_detect_exception_skips_tick(self):
        detector = Mock()
        detector.detect.side_effect = [IN_MEETING, RuntimeError("boom"), IN_MEETING]
        poller = MeetingPoller(detector)
        listener = Mock()
        poller.subscribe(listener)

        assert poller.tick() is True
        assert poller.tick() is False
        assert poller.tick() is False

        listener.assert_called_once_with(IN_MEETING)
        assert poller.current_state == IN_MEETING

    def test_failing_listener_does_not_block_others(self):
        poller = MeetingPoller(_detector(MUTED))
        bad = Mock(side_effect=ValueError("render failed"))
        good = Mock()
        poller.subscribe(bad)
        poller.subscribe(good)

        assert poller.tick() is True
        good.assert_called_once_with(MUTED)

    def test_unsubscribe(self):
        poller = MeetingPoller(_detector(IN_MEETING, MUTED))
        listener = Mock()
        poller.subscribe(listener)
        poller.tick()
        poller.unsubscribe(listener)
        poller.tick()

        listener.assert_called_once_with(IN_MEETING)

    def test_result_discarded_after_stop(self):
        """A detection that finishes after stop() has no effect."""
        poller = MeetingPoller(Mock())
        listener = Mock()
        poller.subscribe(listener)

        def _slow_detect():
            poller.stop()
            return MUTED

        poller.detector.detect.side_effect = _slow_detect

        assert poller.tick() is False
        listener.assert_not_called()
        assert poller.current_state == MeetingState.none()


class TestCurrentState:
    def test_defaults_to_no_meeting(self):
        assert MeetingPoller(Mock()).current_state == MeetingState.none()

    def test_tracks_latest_change(self):
        poller = MeetingPoller(_detector(IN_MEETING, MUTED))
        poller.tick()
        poller.tick()

        assert poller.current_state == MUTED


class TestRunLoop:
    def test_background_thread_polls_and_stops(self):
        changed = threading.Event()
        detector = Mock()
        detector.detect.return_value = MUTED

        poller = MeetingPoller(detector, interval_seconds=0.01)
        poller.subscribe(lambda state: changed.set())
        poller.start()
        try:
            assert changed.wait(timeout=2.0)
        finally:
            poller.stop(timeout=2.0)

        assert poller.current_state == MUTED
        assert poller.running is False

    def test_run_returns_when_stopped_from_listener(self):
        detector = Mock()
        detector.detect.return_value = IN_MEETING
        poller = MeetingPoller(detector, interval_seconds=0.01)
        poller.subscribe(lambda state: poller.stop())

        poller.run()

        assert detector.detect.call_count == 1

    def test_not_running_before_start(self):
        assert MeetingPoller(Mock()).running is False

    def test_running_while_loop_active(self):
        polled = threading.Event()
        detector = Mock()
        detector.detect.side_effect = lambda: polled.set() or IN_MEETING

        poller = MeetingPoller(detector, interval_seconds=0.01)
        poller.start()
        try:
            assert polled.wait(timeout=2.0)
            assert poller.running is True
        finally:
            poller.stop(timeout=2.0)

        assert poller.running is False

    def test_restart_after_timed_out_stop_keeps_one_loop(self):
        """start() after a stop() that timed out never runs two loops at once."""
        entered = threading.Event()
        release = threading.Event()
        lock = threading.Lock()
        counts = {"active": 0, "max": 0}

        def slow_detect():
            with lock:
                counts["active"] += 1
                counts["max"] = max(counts["max"], counts["active"])
            entered.set()
            release.wait(timeout=2.0)
            with lock:
                counts["active"] -= 1
            return IN_MEETING

        detector = Mock()
        detector.detect.side_effect = slow_detect
        poller = MeetingPoller(detector, interval_seconds=0.01)

        poller.start()
        assert entered.wait(timeout=2.0)
        poller.stop(timeout=0.01)

        # start() waits for the old loop, so run it off the test thread
        restarter = threading.Thread(target=poller.start)
        restarter.start()
        release.set()
        restarter.join(timeout=2.0)

        threading.Event().wait(0.05)
        poller.stop(timeout=2.0)

        assert counts["max"] == 1
        assert not any(
            t.name == "meetingguard-poller" and t.is_alive() for t in threading.enumerate()
        )
