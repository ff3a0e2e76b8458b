"""Shared fixtures for handsense tests.

All hands and frames are synthetic; NO ML models needed.
"""

import numpy as np
import pytest

from handsense.backends.base import HandLandmarks
from handsense.types import HandLandmarkIndex

# Fingertip x positions for index, middle, ring, pinky (0.06 apart)
_FINGER_X = (0.44, 0.50, 0.56, 0.62)
_FINGERS = (
    (HandLandmarkIndex.INDEX_FINGER_MCP, HandLandmarkIndex.INDEX_FINGER_PIP,
     HandLandmarkIndex.INDEX_FINGER_DIP, HandLandmarkIndex.INDEX_FINGER_TIP),
    (HandLandmarkIndex.MIDDLE_FINGER_MCP, HandLandmarkIndex.MIDDLE_FINGER_PIP,
     HandLandmarkIndex.MIDDLE_FINGER_DIP, HandLandmarkIndex.MIDDLE_FINGER_TIP),
    (HandLandmarkIndex.RING_FINGER_MCP, HandLandmarkIndex.RING_FINGER_PIP,
     HandLandmarkIndex.RING_FINGER_DIP, HandLandmarkIndex.RING_FINGER_TIP),
    (HandLandmarkIndex.PINKY_MCP, HandLandmarkIndex.PINKY_PIP,
     HandLandmarkIndex.PINKY_DIP, HandLandmarkIndex.PINKY_TIP),
)


def build_hand(fingers="dddd", thumb_up=False, tip_x=None):
    """Build a (21, 3) landmark array.

    Args:
        fingers: 4 chars for index, middle, ring, pinky; "u" = extended
            (tip above PIP), "d" = curled (tip below PIP).
        thumb_up: Thumb tip above its IP and MCP joints.
        tip_x: Optional x positions for the 4 fingertips.
    """
    lms = np.zeros((21, 3), dtype=np.float32)
    lms[HandLandmarkIndex.WRIST] = [0.5, 0.8, 0.0]

    if thumb_up:
        lms[HandLandmarkIndex.THUMB_CMC] = [0.42, 0.72, 0.0]
        lms[HandLandmarkIndex.THUMB_MCP] = [0.40, 0.65, 0.0]
        lms[HandLandmarkIndex.THUMB_IP] = [0.40, 0.55, 0.0]
        lms[HandLandmarkIndex.THUMB_TIP] = [0.40, 0.45, 0.0]
    else:
        lms[HandLandmarkIndex.THUMB_CMC] = [0.42, 0.75, 0.0]
        lms[HandLandmarkIndex.THUMB_MCP] = [0.38, 0.70, 0.0]
        lms[HandLandmarkIndex.THUMB_IP] = [0.34, 0.70, 0.0]
        lms[HandLandmarkIndex.THUMB_TIP] = [0.30, 0.72, 0.0]

    xs = tip_x or _FINGER_X
    for (mcp, pip, dip, tip), state, x in zip(_FINGERS, fingers, xs):
        lms[mcp] = [x, 0.60, 0.0]
        lms[pip] = [x, 0.50, 0.0]
        if state == "u":
            lms[dip] = [x, 0.42, 0.0]
            lms[tip] = [x, 0.35, 0.0]
        else:
            lms[dip] = [x, 0.55, 0.0]
            lms[tip] = [x, 0.58, 0.0]
    return lms


@pytest.fixture
def make_hand():
    """Factory fixture returning HandLandmarks built by build_hand()."""
    def _make(fingers="dddd", thumb_up=False, tip_x=None, handedness="Right"):
        return HandLandmarks(
            landmarks=build_hand(fingers, thumb_up, tip_x),
            handedness=handedness,
            confidence=0.9,
        )
    return _make


@pytest.fixture
def fist_hand(make_hand):
    return make_hand("dddd")


@pytest.fixture
def open_palm_hand(make_hand):
    return make_hand("uuuu")


@pytest.fixture
def spread_hand(make_hand):
    """All fingers up with fingertips 0.2 apart (spread 0.6)."""
    return make_hand("uuuu", tip_x=(0.2, 0.4, 0.6, 0.8))


@pytest.fixture
def pinch_hand(make_hand):
    """All fingers curled with fingertips 0.01 apart (spread 0.03)."""
    return make_hand("dddd", tip_x=(0.50, 0.51, 0.52, 0.53))


@pytest.fixture
def unmatched_hand(make_hand):
    """Index and ring up, middle and pinky down: no static rule matches."""
    return make_hand("udud")


@pytest.fixture
def blank_frame():
    return np.zeros((10, 20, 3), dtype=np.uint8)


@pytest.fixture
def swipe_right_frames(blank_frame):
    """Three frames: two blank, then +80 luminance on the right half."""
    current = blank_frame.copy()
    current[:, 10:] += 80
    return [blank_frame.copy(), blank_frame.copy(), current]
