"""Hand landmark backend protocol and its result type."""

from dataclasses import dataclass
from typing import Iterable, List, Protocol

import numpy as np

from handsense.types import NUM_LANDMARKS


@dataclass
class HandLandmarks:
    """One detected hand.

    Attributes:
        landmarks: Array of shape (21, 3) with (x, y, z) per landmark.
            x and y are normalized to [0, 1] of the frame, origin top-left.
        handedness: "Left" or "Right".
        confidence: Handedness score from the detector [0, 1].
    """

    landmarks: np.ndarray
    handedness: str = "Right"
    confidence: float = 1.0

    @classmethod
    def from_points(
        cls, points: Iterable, handedness: str = "Right", confidence: float = 1.0
    ) -> "HandLandmarks":
        """Build from objects with ``.x``, ``.y`` and ``.z`` (detector output)."""
        arr = np.array([[p.x, p.y, getattr(p, "z", 0.0)] for p in points], dtype=np.float32)
        return cls(landmarks=arr, handedness=handedness, confidence=float(confidence))

    @property
    def is_complete(self) -> bool:
        return self.landmarks.ndim == 2 and self.landmarks.shape[0] >= NUM_LANDMARKS


class HandLandmarkBackend(Protocol):
    """Protocol for hand landmark detection backends.

    ``initialize()`` raises DetectorUnavailableError when the model cannot
    be loaded; ``detect()`` before ``initialize()`` raises RuntimeError.
    """

    def initialize(self, device: str = "cpu") -> None:
        ...

    def detect(self, image: np.ndarray) -> List[HandLandmarks]:
        """Detect hands in a BGR image (H, W, 3)."""
        ...

    def cleanup(self) -> None:
        ...


__all__ = ["HandLandmarks", "HandLandmarkBackend"]
