"""Gesture recognition domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

import numpy as np

NUM_LANDMARKS = 21

# Label that is never recorded in history, sequence or stats.
UNKNOWN_LABEL = "Unknown"


class HandLandmarkIndex:
    """MediaPipe hand landmark indices.

    21 landmarks per hand as defined by MediaPipe Hands.

    Example:
        >>> lms = as_landmark_array(hand)
        >>> thumb_tip = lms[HandLandmarkIndex.THUMB_TIP]
        >>> index_tip = lms[HandLandmarkIndex.INDEX_FINGER_TIP]
    """

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# (tip, pip) pairs for index, middle, ring, pinky.
FINGER_JOINTS = (
    (HandLandmarkIndex.INDEX_FINGER_TIP, HandLandmarkIndex.INDEX_FINGER_PIP),
    (HandLandmarkIndex.MIDDLE_FINGER_TIP, HandLandmarkIndex.MIDDLE_FINGER_PIP),
    (HandLandmarkIndex.RING_FINGER_TIP, HandLandmarkIndex.RING_FINGER_PIP),
    (HandLandmarkIndex.PINKY_TIP, HandLandmarkIndex.PINKY_PIP),
)


class GestureLabel(str, Enum):
    """Gesture labels known to the application.

    The classifiers emit a subset of these; the remaining labels
    (Stop, Victory, Hello, Goodbye) are listed for display.
    """

    THUMBS_UP = "Thumbs Up"
    PEACE_SIGN = "Peace Sign"
    OK_HAND = "OK Hand"
    POINTING = "Pointing"
    OPEN_PALM = "Open Palm"
    FIST = "Fist"
    STOP = "Stop"
    VICTORY = "Victory"
    HELLO = "Hello"
    GOODBYE = "Goodbye"
    SWIPE_LEFT = "Swipe Left"
    SWIPE_RIGHT = "Swipe Right"
    SWIPE_UP = "Swipe Up"
    SWIPE_DOWN = "Swipe Down"
    PINCH = "Pinch"
    SPREAD = "Spread"


class ClassifierKind(str, Enum):
    """Which classifier produced a result."""

    STATIC = "static"
    MOTION = "motion"
    TRACKING = "tracking"


class DetectionMethod(str, Enum):
    """Secondary classifier selection.

    MANUAL runs the static classifier only, FRAME_DIFF adds the motion
    classifier, OBJECT_DETECTION adds the tracking classifier.
    """

    MANUAL = "manual"
    FRAME_DIFF = "frame-diff"
    OBJECT_DETECTION = "object-detection"

    @classmethod
    def from_string(cls, s: str) -> "DetectionMethod":
        """Parse a detection method from its string form.

        Args:
            s: String like "manual", "frame-diff", "object-detection".
                Underscores are accepted in place of dashes.

        Returns:
            Corresponding DetectionMethod.

        Raises:
            ValueError: If string is not a valid method name.
        """
        key = s.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(
            f"Unknown detection method: {s}. "
            f"Valid methods: {', '.join(m.value for m in cls)}"
        )


@dataclass(frozen=True)
class Point3D:
    """One landmark. x, y normalized to [0, 1]; z is relative depth."""

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class ClassificationResult:
    """Single classifier output.

    Attributes:
        label: Gesture label.
        confidence: Heuristic score in [0, 100].
        source: Classifier that produced the result.
    """

    label: str
    confidence: float
    source: ClassifierKind = ClassifierKind.STATIC


def _point_xyz(point: Any) -> tuple:
    if isinstance(point, Mapping):
        return (point["x"], point["y"], point.get("z", 0.0))
    if hasattr(point, "x") and hasattr(point, "y"):
        return (point.x, point.y, getattr(point, "z", 0.0))
    return tuple(point)


def as_landmark_array(hand: Any) -> Optional[np.ndarray]:
    """Normalize a hand to a (21, 3) float array.

    Accepts HandLandmarks, an (N, 2) or (N, 3) array, or a sequence of
    Point3D / {"x", "y", "z"} mappings / (x, y[, z]) tuples.

    Returns:
        (21, 3) float64 array, or None when the input has fewer than 21
        points, carries non-finite coordinates, or all points coincide
        (an empty detection).
    """
    if hand is None:
        return None

    data = getattr(hand, "landmarks", hand)

    try:
        if isinstance(data, np.ndarray):
            arr = np.asarray(data, dtype=np.float64)
        else:
            arr = np.asarray([_point_xyz(p) for p in data], dtype=np.float64)
    except (TypeError, ValueError, KeyError):
        return None

    if arr.ndim != 2 or arr.shape[0] < NUM_LANDMARKS or arr.shape[1] < 2:
        return None

    arr = arr[:NUM_LANDMARKS]
    if arr.shape[1] == 2:
        arr = np.hstack([arr, np.zeros((NUM_LANDMARKS, 1))])
    else:
        arr = arr[:, :3]

    if not np.all(np.isfinite(arr)):
        return None

    # Zero extent in both x and y means the detector gave us nothing usable
    if np.ptp(arr[:, 0]) == 0.0 and np.ptp(arr[:, 1]) == 0.0:
        return None

    return arr


__all__ = [
    "NUM_LANDMARKS",
    "UNKNOWN_LABEL",
    "HandLandmarkIndex",
    "FINGER_JOINTS",
    "GestureLabel",
    "ClassifierKind",
    "DetectionMethod",
    "Point3D",
    "ClassificationResult",
    "as_landmark_array",
]
