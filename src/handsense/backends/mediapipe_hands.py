"""MediaPipe Hand Landmarker backend."""

from pathlib import Path
from typing import List, Optional
import logging
import os
import urllib.request

import cv2
import numpy as np

from handsense.backends.base import HandLandmarks
from handsense.errors import DetectorUnavailableError

logger = logging.getLogger(__name__)

HAND_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

MODEL_FILENAME = "hand_landmarker.task"


def get_models_dir() -> Path:
    """Model cache directory, ``$HANDSENSE_HOME/models`` or ``~/.cache/handsense/models``."""
    home = os.environ.get("HANDSENSE_HOME")
    base = Path(home) if home else Path.home() / ".cache" / "handsense"
    return base / "models"


def _get_model_path(models_dir: Optional[Path] = None) -> Path:
    """Path to the hand landmarker model, downloading it on first use."""
    cache_dir = models_dir or get_models_dir()
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DetectorUnavailableError(
            f"Cannot create model directory {cache_dir}: {e}"
        ) from e
    model_path = cache_dir / MODEL_FILENAME

    if not model_path.exists():
        logger.info("Downloading hand landmarker model to %s...", model_path)
        try:
            urllib.request.urlretrieve(HAND_LANDMARKER_MODEL_URL, model_path)
        except Exception as e:
            raise DetectorUnavailableError(
                f"Failed to download hand landmarker model: {e}\n"
                f"You can manually download from: {HAND_LANDMARKER_MODEL_URL}\n"
                f"And save to: {model_path}"
            ) from e
        logger.info("Download complete.")

    return model_path


class MediaPipeHandsBackend:
    """Hand landmark detection with the MediaPipe Tasks HandLandmarker.

    Detects up to ``max_num_hands`` hands with 21 normalized landmarks each.

    Args:
        max_num_hands: Maximum number of hands to detect (default: 2).
        min_detection_confidence: Minimum confidence for detection (default: 0.5).
        min_tracking_confidence: Minimum confidence for tracking (default: 0.5).
        model_path: Local .task model file; downloaded when omitted.
    """

    def __init__(
        self,
        max_num_hands: int = 2,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        model_path: Optional[Path] = None,
    ):
        self._max_num_hands = max_num_hands
        self._min_detection_confidence = min_detection_confidence
        self._min_tracking_confidence = min_tracking_confidence
        self._model_path = model_path
        self._landmarker: Optional[object] = None
        self._initialized = False

    def initialize(self, device: str = "cpu") -> None:
        """Load the HandLandmarker.

        Raises:
            DetectorUnavailableError: If mediapipe is missing or the model
                cannot be loaded.
        """
        if self._initialized:
            return

        try:
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise DetectorUnavailableError(
                "MediaPipe is required for hand detection. "
                "Install it with: pip install handsense[mediapipe]"
            ) from e

        model_path = self._model_path or _get_model_path()
        delegate = (
            python.BaseOptions.Delegate.GPU if device == "gpu" else python.BaseOptions.Delegate.CPU
        )
        try:
            base_options = python.BaseOptions(
                model_asset_path=str(model_path), delegate=delegate
            )
            options = vision.HandLandmarkerOptions(
                base_options=base_options,
                running_mode=vision.RunningMode.IMAGE,
                num_hands=self._max_num_hands,
                min_hand_detection_confidence=self._min_detection_confidence,
                min_tracking_confidence=self._min_tracking_confidence,
            )
            self._landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError, OSError) as e:
            raise DetectorUnavailableError(f"Cannot load hand landmarker: {e}") from e

        self._initialized = True
        logger.info("MediaPipe Hands backend initialized (%s)", device)

    def detect(self, image: np.ndarray) -> List[HandLandmarks]:
        """Detect hands and landmarks in a BGR image (H, W, 3)."""
        if not self._initialized or self._landmarker is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import mediapipe as mp

        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image_rgb)
        result = self._landmarker.detect(mp_image)

        hands = []
        for idx, hand_lms in enumerate(result.hand_landmarks or []):
            handedness = "Right"
            confidence = 0.8
            if result.handedness and idx < len(result.handedness) and result.handedness[idx]:
                handedness = result.handedness[idx][0].category_name
                confidence = result.handedness[idx][0].score
            hands.append(HandLandmarks.from_points(hand_lms, handedness, confidence))

        return hands

    def cleanup(self) -> None:
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self._initialized = False
        logger.info("MediaPipe Hands backend cleaned up")


__all__ = ["MediaPipeHandsBackend", "HAND_LANDMARKER_MODEL_URL", "get_models_dir"]
