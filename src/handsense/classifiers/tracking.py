"""Pinch/spread classification from fingertip spread."""

from typing import Any, Optional

import numpy as np

from handsense.types import (
    ClassificationResult,
    ClassifierKind,
    GestureLabel,
    HandLandmarkIndex,
    as_landmark_array,
)

FINGERTIPS = (
    HandLandmarkIndex.INDEX_FINGER_TIP,
    HandLandmarkIndex.MIDDLE_FINGER_TIP,
    HandLandmarkIndex.RING_FINGER_TIP,
    HandLandmarkIndex.PINKY_TIP,
)

PINCH_SPREAD = 0.15
WIDE_SPREAD = 0.4


def fingertip_spread(landmarks: np.ndarray) -> float:
    """Sum of x/y distances index-middle, middle-ring, ring-pinky."""
    tips = landmarks[list(FINGERTIPS), :2]
    return float(np.linalg.norm(np.diff(tips, axis=0), axis=1).sum())


def classify_tracking(hand: Any) -> Optional[ClassificationResult]:
    """Classify pinch or spread from how far apart the fingertips are.

    The wrist is not used; only the four non-thumb fingertips are.

    Args:
        hand: HandLandmarks, (21, 3) array or sequence of 21 points.

    Returns:
        Pinch (87) below 0.15, Spread (85) above 0.4, otherwise None.
    """
    landmarks = as_landmark_array(hand)
    if landmarks is None:
        return None

    spread = fingertip_spread(landmarks)
    if spread < PINCH_SPREAD:
        return ClassificationResult(
            label=GestureLabel.PINCH.value, confidence=87.0, source=ClassifierKind.TRACKING
        )
    if spread > WIDE_SPREAD:
        return ClassificationResult(
            label=GestureLabel.SPREAD.value, confidence=85.0, source=ClassifierKind.TRACKING
        )
    return None


__all__ = ["classify_tracking", "fingertip_spread", "FINGERTIPS"]
