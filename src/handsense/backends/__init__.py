"""Hand landmark detection backends."""

from handsense.backends.base import HandLandmarks, HandLandmarkBackend
from handsense.backends.mediapipe_hands import MediaPipeHandsBackend

__all__ = ["HandLandmarks", "HandLandmarkBackend", "MediaPipeHandsBackend"]
