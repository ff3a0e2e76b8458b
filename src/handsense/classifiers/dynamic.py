"""Swipe classification from pixel differences between buffered frames."""

from typing import Optional, Sequence

import numpy as np

from handsense.types import ClassificationResult, ClassifierKind, GestureLabel

MIN_FRAMES = 3

DEFAULT_MOTION_THRESHOLD = 50.0
MIN_MOTION_THRESHOLD = 10.0
MAX_MOTION_THRESHOLD = 100.0

# Summed luminance difference above which motion counts as a swipe
SWIPE_MAGNITUDE = 1000.0

# Outer bands used for direction: x > 0.6*w is right, x < 0.4*w is left
BAND_HIGH = 0.6
BAND_LOW = 0.4

BASE_CONFIDENCE = 60.0
MAX_CONFIDENCE = 85.0


def clamp_motion_threshold(value: float) -> float:
    """Clamp a per-pixel motion threshold to [10, 100]."""
    return float(min(MAX_MOTION_THRESHOLD, max(MIN_MOTION_THRESHOLD, value)))


def luminance(frame: np.ndarray) -> np.ndarray:
    """Mean of the first three channels, as float64 (H, W)."""
    return frame[..., :3].astype(np.float64).mean(axis=-1)


def _usable_pair(current, previous) -> bool:
    for frame in (current, previous):
        if not isinstance(frame, np.ndarray) or frame.ndim != 3 or frame.shape[2] < 3:
            return False
        if frame.shape[0] == 0 or frame.shape[1] == 0:
            return False
    return current.shape[:2] == previous.shape[:2]


def motion_vectors(
    current: np.ndarray,
    previous: np.ndarray,
    motion_threshold: float = DEFAULT_MOTION_THRESHOLD,
) -> tuple:
    """Accumulate motion between two frames.

    Only pixels whose luminance changed by more than ``motion_threshold``
    contribute. Horizontal motion is positive on the right band and
    negative on the left band; vertical motion is positive on the bottom
    band and negative on the top band.

    Returns:
        Tuple of (motion_magnitude, horizontal_motion, vertical_motion).
    """
    height, width = current.shape[:2]
    diff = np.abs(luminance(current) - luminance(previous))
    moving = diff > motion_threshold
    moved = np.where(moving, diff, 0.0)

    xs = np.arange(width)
    ys = np.arange(height)
    x_sign = (xs > width * BAND_HIGH).astype(np.float64) - (xs < width * BAND_LOW)
    y_sign = (ys > height * BAND_HIGH).astype(np.float64) - (ys < height * BAND_LOW)

    magnitude = float(moved.sum())
    horizontal = float((moved.sum(axis=0) * x_sign).sum())
    vertical = float((moved.sum(axis=1) * y_sign).sum())
    return magnitude, horizontal, vertical


def classify_motion(
    frames: Sequence[np.ndarray],
    motion_threshold: float = DEFAULT_MOTION_THRESHOLD,
) -> Optional[ClassificationResult]:
    """Classify a swipe from the two most recent frames.

    Args:
        frames: Buffered frames in arrival order, each (H, W, C) with C >= 3
            (RGB, RGBA or BGR; luminance is a plain channel mean).
        motion_threshold: Per-pixel luminance change that counts as motion,
            clamped to [10, 100].

    Returns:
        Swipe result, or None with fewer than 3 frames, unusable frames,
        or too little motion.
    """
    if frames is None or len(frames) < MIN_FRAMES:
        return None

    current, previous = frames[-1], frames[-2]
    if not _usable_pair(current, previous):
        return None

    magnitude, horizontal, vertical = motion_vectors(
        current, previous, clamp_motion_threshold(motion_threshold)
    )
    if magnitude <= SWIPE_MAGNITUDE:
        return None

    if abs(horizontal) > abs(vertical):
        label = GestureLabel.SWIPE_RIGHT if horizontal > 0 else GestureLabel.SWIPE_LEFT
    else:
        label = GestureLabel.SWIPE_DOWN if vertical > 0 else GestureLabel.SWIPE_UP

    return ClassificationResult(
        label=label.value,
        confidence=min(MAX_CONFIDENCE, BASE_CONFIDENCE + magnitude / 100.0),
        source=ClassifierKind.MOTION,
    )


__all__ = [
    "DEFAULT_MOTION_THRESHOLD",
    "MIN_FRAMES",
    "classify_motion",
    "clamp_motion_threshold",
    "luminance",
    "motion_vectors",
]
