"""Tests for platform routing."""

from unittest.mock import Mock, patch

from meetingguard.config import Config
from meetingguard.detector.base import FirstMatchDetector, MeetingClientDetector, NullDetector
from meetingguard.detector.models import MeetingState, Platform
from meetingguard.detector.router import DetectorRouter, get_platform, select_detector


class TestGetPlatform:
    def test_darwin(self):
        with patch("sys.platform", "darwin"):
            assert get_platform() == "macos"

    def test_win32(self):
        with patch("sys.platform", "win32"):
            assert get_platform() == "windows"

    def test_linux(self):
        with patch("sys.platform", "linux"):
            assert get_platform() == "linux"

    def test_unknown_does_not_raise(self):
        with patch("sys.platform", "sunos5"):
            assert get_platform() == "unsupported"


class TestSelectDetector:
    def test_macos(self):
        assert isinstance(select_detector("macos", Config()), FirstMatchDetector)

    def test_windows(self):
        assert isinstance(select_detector("windows", Config()), MeetingClientDetector)

    def test_linux_gets_null_detector(self):
        detector = select_detector("linux", Config())

        assert isinstance(detector, NullDetector)
        assert detector.detect() == MeetingState.none()

    def test_backend_is_injected(self, fake_backend):
        backend = fake_backend({})
        detector = select_detector("windows", Config(), backend)

        assert detector.backend is backend


class TestDetectorRouter:
    def test_selection_happens_once(self):
        """The detector is picked at construction and reused for every call."""
        with patch("meetingguard.detector.router.select_detector") as mock_select:
            mock_select.return_value = NullDetector()
            router = DetectorRouter(Config(), platform="linux")
            router.detect()
            router.detect()

            mock_select.assert_called_once()

    def test_delegates_to_detector(self):
        detector = Mock()
        detector.detect.return_value = MeetingState(
            platform=Platform.MEETING_CLIENT, in_meeting=True, muted=True
        )

        router = DetectorRouter(platform="macos", detector=detector)

        assert router.detect().muted is True

    def test_unsupported_platform_is_idle(self):
        router = DetectorRouter(Config(), platform="linux")

        assert router.supported is False
        assert router.detect() == MeetingState.none()

    def test_supported_flag(self):
        assert DetectorRouter(platform="windows", detector=NullDetector()).supported is True
