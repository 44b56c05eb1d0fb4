"""
Routes to the right platform-specific detector.

The choice is made once, when the router is built. Platforms without a
supported meeting client get a NullDetector that always reports no meeting.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

from ..config import Config, load_config
from .automation import AutomationBackend
from .base import NullDetector
from .models import MeetingState

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORMS = ("macos", "windows")


def get_platform() -> str:
    """
    Returns:
        'macos', 'windows', 'linux' or 'unsupported'
    """
    if sys.platform == "darwin":
        return "macos"
    elif sys.platform == "win32":
        return "windows"
    elif sys.platform.startswith("linux"):
        return "linux"
    return "unsupported"


def select_detector(
    platform: str, config: Config, backend: Optional[AutomationBackend] = None
):
    """Factory for the platform-specific detector."""
    if platform == "macos":
        from .macos import build_detector

        return build_detector(config, backend)
    elif platform == "windows":
        from .windows import build_detector

        return build_detector(config, backend)
    # Linux: no desktop meeting client support
    return NullDetector()


class DetectorRouter:
    """Uniform detect() over whichever detector fits this OS."""

    def __init__(
        self,
        config: Optional[Config] = None,
        platform: Optional[str] = None,
        detector=None,
    ):
        self.platform = platform or get_platform()
        if detector is None:
            detector = select_detector(self.platform, config or load_config())
        self.detector = detector
        logger.debug(f"Using {type(detector).__name__} for platform {self.platform}")

    @property
    def supported(self) -> bool:
        return self.platform in SUPPORTED_PLATFORMS

    def detect(self) -> MeetingState:
        return self.detector.detect()
