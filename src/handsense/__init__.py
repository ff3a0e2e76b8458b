"""handsense - rule-based hand gesture recognition core.

Classifies hand landmark frames into gestures with three classifiers
(static pose, frame-difference motion, fingertip spread), arbitrates
between them per frame and keeps bounded session history and stats.

Quick Start:
    >>> from handsense import GestureArbiter, GestureSettings
    >>> arbiter = GestureArbiter()
    >>> arbiter.start()
    >>> outcome = arbiter.submit_frame(hands, image, GestureSettings())
    >>> if outcome:
    ...     print(f"{outcome.label}: {outcome.confidence:.0f}%")
"""

from handsense.types import (
    ClassificationResult,
    ClassifierKind,
    DetectionMethod,
    GestureLabel,
    HandLandmarkIndex,
    Point3D,
    UNKNOWN_LABEL,
)
from handsense.classifiers import classify_motion, classify_static, classify_tracking
from handsense.config import BackendSettings, GestureSettings, load_settings
from handsense.session import (
    FrameBuffer,
    GestureHistoryEntry,
    GestureSessionState,
    SessionStats,
)
from handsense.arbiter import ArbiterState, ClassificationOutcome, GestureArbiter
from handsense.backends.base import HandLandmarks, HandLandmarkBackend
from handsense.clock import Frame, FrameClock, ManualClock, VideoClock
from handsense.recognizer import GestureRecognizer
from handsense.errors import DetectorUnavailableError, HandsenseError, SettingsError

__version__ = "0.1.0"

__all__ = [
    # Types
    "ClassificationResult",
    "ClassifierKind",
    "DetectionMethod",
    "GestureLabel",
    "HandLandmarkIndex",
    "Point3D",
    "UNKNOWN_LABEL",
    # Classifiers
    "classify_static",
    "classify_motion",
    "classify_tracking",
    # Config
    "GestureSettings",
    "BackendSettings",
    "load_settings",
    # Session
    "FrameBuffer",
    "GestureHistoryEntry",
    "GestureSessionState",
    "SessionStats",
    # Arbiter
    "ArbiterState",
    "ClassificationOutcome",
    "GestureArbiter",
    # Detection and clocks
    "HandLandmarks",
    "HandLandmarkBackend",
    "Frame",
    "FrameClock",
    "ManualClock",
    "VideoClock",
    "GestureRecognizer",
    # Errors
    "HandsenseError",
    "DetectorUnavailableError",
    "SettingsError",
]
