"""Rule-based static gesture classification from one hand's landmarks."""

from typing import Any, List, Optional

import numpy as np

from handsense.types import (
    FINGER_JOINTS,
    ClassificationResult,
    ClassifierKind,
    GestureLabel,
    HandLandmarkIndex,
    as_landmark_array,
)

# Thumb tip to index tip distance (normalized x/y) below which the hand is an OK sign
OK_HAND_DISTANCE = 0.05

CONFIDENCE = {
    GestureLabel.OK_HAND: 90.0,
    GestureLabel.THUMBS_UP: 92.0,
    GestureLabel.PEACE_SIGN: 88.0,
    GestureLabel.POINTING: 85.0,
    GestureLabel.OPEN_PALM: 83.0,
    GestureLabel.FIST: 80.0,
}


def fingers_extended(landmarks: np.ndarray) -> List[bool]:
    """Fingers whose tip is above (smaller y than) the PIP joint.

    Args:
        landmarks: Hand landmarks array (21, 3).

    Returns:
        List of 4 booleans [index, middle, ring, pinky].
    """
    return [bool(landmarks[tip, 1] < landmarks[pip, 1]) for tip, pip in FINGER_JOINTS]


def fingers_curled(landmarks: np.ndarray) -> List[bool]:
    """Fingers whose tip is below (larger y than) the PIP joint.

    Equal y counts as neither extended nor curled.
    """
    return [bool(landmarks[tip, 1] > landmarks[pip, 1]) for tip, pip in FINGER_JOINTS]


def thumb_index_distance(landmarks: np.ndarray) -> float:
    """Euclidean x/y distance between the thumb tip and the index tip."""
    thumb_tip = landmarks[HandLandmarkIndex.THUMB_TIP, :2]
    index_tip = landmarks[HandLandmarkIndex.INDEX_FINGER_TIP, :2]
    return float(np.linalg.norm(thumb_tip - index_tip))


def _is_thumb_up(landmarks: np.ndarray) -> bool:
    tip_y = landmarks[HandLandmarkIndex.THUMB_TIP, 1]
    return bool(
        tip_y < landmarks[HandLandmarkIndex.THUMB_IP, 1]
        and tip_y < landmarks[HandLandmarkIndex.THUMB_MCP, 1]
    )


def _result(label: GestureLabel) -> ClassificationResult:
    return ClassificationResult(
        label=label.value,
        confidence=CONFIDENCE[label],
        source=ClassifierKind.STATIC,
    )


def classify_static(hand: Any) -> Optional[ClassificationResult]:
    """Classify a static hand pose.

    Rules are checked in order and the first match wins. The OK sign is
    decided by thumb-index distance alone, so it is checked before the
    finger curl rules and overrides them.

    Args:
        hand: HandLandmarks, (21, 3) array or sequence of 21 points.

    Returns:
        ClassificationResult, or None for no match or malformed input.
    """
    landmarks = as_landmark_array(hand)
    if landmarks is None:
        return None

    if thumb_index_distance(landmarks) < OK_HAND_DISTANCE:
        return _result(GestureLabel.OK_HAND)

    index_up, middle_up, ring_up, pinky_up = fingers_extended(landmarks)
    index_down, middle_down, ring_down, pinky_down = fingers_curled(landmarks)
    all_down = index_down and middle_down and ring_down and pinky_down

    if _is_thumb_up(landmarks) and all_down:
        return _result(GestureLabel.THUMBS_UP)

    if index_up and middle_up and ring_down and pinky_down:
        return _result(GestureLabel.PEACE_SIGN)

    if index_up and middle_down and ring_down and pinky_down:
        return _result(GestureLabel.POINTING)

    if index_up and middle_up and ring_up and pinky_up:
        return _result(GestureLabel.OPEN_PALM)

    if all_down:
        return _result(GestureLabel.FIST)

    return None


__all__ = [
    "OK_HAND_DISTANCE",
    "classify_static",
    "fingers_extended",
    "fingers_curled",
    "thumb_index_distance",
]
