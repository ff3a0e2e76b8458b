"""GestureRecognizer: detector + clock + arbiter wiring."""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from handsense.arbiter import ClassificationOutcome, GestureArbiter, OutcomeCallback
from handsense.backends.base import HandLandmarkBackend
from handsense.clock import Frame, FrameClock
from handsense.config import BackendSettings, GestureSettings
from handsense.errors import DetectorUnavailableError

logger = logging.getLogger(__name__)


class GestureRecognizer:
    """Runs hand detection and gesture arbitration once per frame.

    When the landmark detector cannot be loaded the recognizer enters
    degraded mode: it logs a warning, reports ``degraded`` and never
    submits frames. It does not retry.

    Args:
        hand_backend: Hand landmark backend (default: MediaPipeHandsBackend
            built from ``backend_settings``).
        settings: Initial gesture settings.
        backend_settings: Options for the default backend.
        arbiter: Arbiter to drive (default: a new one).

    Example:
        >>> recognizer = GestureRecognizer(settings=GestureSettings(learning_mode=True))
        >>> clock = VideoClock(0)
        >>> with recognizer:
        ...     recognizer.attach(clock)
        ...     recognizer.start()
        ...     clock.run(max_frames=300)
    """

    def __init__(
        self,
        hand_backend: Optional[HandLandmarkBackend] = None,
        settings: Optional[GestureSettings] = None,
        backend_settings: Optional[BackendSettings] = None,
        arbiter: Optional[GestureArbiter] = None,
    ):
        self._hand_backend = hand_backend
        self._settings = settings or GestureSettings()
        self._backend_settings = backend_settings or BackendSettings()
        self._arbiter = arbiter or GestureArbiter()
        self._initialized = False
        self._degraded = False
        self._degraded_reason = ""
        self._last_outcome: Optional[ClassificationOutcome] = None

    @property
    def arbiter(self) -> GestureArbiter:
        return self._arbiter

    @property
    def settings(self) -> GestureSettings:
        return self._settings

    @settings.setter
    def settings(self, value: GestureSettings) -> None:
        self._settings = value

    @property
    def degraded(self) -> bool:
        """True when the detector failed to load; no gestures will be reported."""
        return self._degraded

    @property
    def degraded_reason(self) -> str:
        return self._degraded_reason

    @property
    def last_outcome(self) -> Optional[ClassificationOutcome]:
        """Most recent accepted classification since the last reset."""
        return self._last_outcome

    # ========== Lifecycle ==========

    def initialize(self) -> bool:
        """Load the hand detector.

        Returns:
            True if the detector is ready, False if running degraded.
        """
        if self._initialized:
            return not self._degraded

        if self._hand_backend is None:
            from handsense.backends.mediapipe_hands import MediaPipeHandsBackend

            bs = self._backend_settings
            self._hand_backend = MediaPipeHandsBackend(
                max_num_hands=bs.max_num_hands,
                min_detection_confidence=bs.min_detection_confidence,
                min_tracking_confidence=bs.min_tracking_confidence,
            )

        try:
            self._hand_backend.initialize(self._backend_settings.device)
        except DetectorUnavailableError as e:
            self._degraded = True
            self._degraded_reason = str(e)
            logger.warning("Hand detector unavailable, running without gestures: %s", e)
        else:
            logger.info("GestureRecognizer initialized")

        self._initialized = True
        return not self._degraded

    def cleanup(self) -> None:
        """Stop recording and release the detector."""
        self._arbiter.stop()
        if self._hand_backend is not None and not self._degraded:
            self._hand_backend.cleanup()
        self._initialized = False
        self._degraded = False
        self._degraded_reason = ""
        logger.info("GestureRecognizer cleaned up")

    def __enter__(self) -> "GestureRecognizer":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    # ========== Session control ==========

    def start(self) -> None:
        self._arbiter.start()

    def stop(self) -> None:
        self._arbiter.stop()

    def reset(self) -> None:
        self._arbiter.reset()
        self._last_outcome = None

    def add_listener(self, callback: OutcomeCallback) -> None:
        self._arbiter.add_listener(callback)

    def attach(self, clock: FrameClock) -> None:
        """Register this recognizer on ``clock`` so every tick is processed."""
        clock.on_frame(self.process)

    # ========== Per-frame processing ==========

    def process(self, frame: Union[Frame, np.ndarray]) -> Optional[ClassificationOutcome]:
        """Detect hands in ``frame`` and submit them to the arbiter.

        Returns:
            The accepted ClassificationOutcome, or None.

        Raises:
            RuntimeError: If called before ``initialize()``.
        """
        if not self._initialized:
            raise RuntimeError("Recognizer not initialized. Call initialize() first.")
        if self._degraded or not self._arbiter.is_active:
            return None

        image = frame.data if isinstance(frame, Frame) else frame
        try:
            hands = self._hand_backend.detect(image)
        except Exception as e:
            frame_id = frame.frame_id if isinstance(frame, Frame) else None
            logger.warning("Error processing frame %s: %s", frame_id, e)
            return None
        if not hands:
            return None

        outcome = self._arbiter.submit_frame(hands, image, self._settings)
        if outcome is not None:
            self._last_outcome = outcome
        return outcome


__all__ = ["GestureRecognizer"]
