"""Gesture arbiter: per-frame classifier selection and session bookkeeping."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from handsense.classifiers.dynamic import classify_motion
from handsense.classifiers.static import classify_static
from handsense.classifiers.tracking import classify_tracking
from handsense.config import GestureSettings
from handsense.session import GestureHistoryEntry, GestureSessionState
from handsense.types import UNKNOWN_LABEL, ClassificationResult, ClassifierKind, DetectionMethod

logger = logging.getLogger(__name__)

# Confidence a result must exceed to be learned as a custom gesture
LEARNING_CONFIDENCE = 70.0


class ArbiterState(str, Enum):
    """Recording state of the arbiter."""

    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class ClassificationOutcome:
    """Event emitted for every accepted classification.

    Collections are snapshots taken after the update; mutating the
    arbiter afterwards does not change them.

    Attributes:
        label: Winning gesture label.
        confidence: Winning confidence in [0, 100].
        source: Classifier that produced the winner.
        history: Gesture history, oldest first (at most 20).
        sequence: Most recent labels, oldest first (at most 5).
        stats: (gestures_detected, accuracy, session_time).
        custom_gestures: Learned labels in learning order.
        newly_learned: True if this frame added ``label`` to custom gestures.
    """

    label: str
    confidence: float
    source: ClassifierKind
    history: Tuple[GestureHistoryEntry, ...]
    sequence: Tuple[str, ...]
    stats: Tuple[int, int, int]
    custom_gestures: Tuple[str, ...]
    newly_learned: bool = False

    @property
    def gestures_detected(self) -> int:
        return self.stats[0]

    @property
    def accuracy(self) -> int:
        return self.stats[1]

    @property
    def session_time(self) -> int:
        return self.stats[2]


OutcomeCallback = Callable[[ClassificationOutcome], None]


def select_result(
    hand: Any,
    frames: Sequence[np.ndarray],
    settings: GestureSettings,
) -> Optional[ClassificationResult]:
    """Pick the best classification for one hand.

    The static classifier always runs. The detection method decides
    which secondary classifier also runs; its result replaces the static
    one only when its confidence is strictly greater.

    Args:
        hand: First detected hand.
        frames: Frame buffer contents in arrival order.
        settings: Current settings.

    Returns:
        Winning ClassificationResult, or None.
    """
    best = classify_static(hand)
    method = settings.detection_method

    if method is DetectionMethod.MANUAL:
        secondary = None
    elif method is DetectionMethod.FRAME_DIFF:
        secondary = classify_motion(frames, settings.motion_threshold)
    elif method is DetectionMethod.OBJECT_DETECTION:
        secondary = classify_tracking(hand)
    else:
        raise ValueError(f"Unhandled detection method: {method!r}")

    best_confidence = best.confidence if best is not None else 0.0
    if secondary is not None and secondary.confidence > best_confidence:
        best = secondary
    return best


class GestureArbiter:
    """Combines classifier outputs per frame and owns the session state.

    Frames are only processed while Active (between ``start()`` and
    ``stop()``). ``reset()`` works in either state and keeps the learned
    custom gestures. All state changes happen under a lock, so one
    arbiter can be fed from a capture thread and read from another.

    Args:
        state: Session state to own (default: a fresh one).

    Example:
        >>> arbiter = GestureArbiter()
        >>> arbiter.start()
        >>> outcome = arbiter.submit_frame(hands, image, GestureSettings())
        >>> if outcome is not None:
        ...     print(outcome.label, outcome.confidence)
    """

    def __init__(self, state: Optional[GestureSessionState] = None):
        self._state = state if state is not None else GestureSessionState()
        self._status = ArbiterState.IDLE
        self._listeners: List[OutcomeCallback] = []
        self._lock = threading.Lock()

    # ========== Session control ==========

    @property
    def status(self) -> ArbiterState:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is ArbiterState.ACTIVE

    @property
    def state(self) -> GestureSessionState:
        """The owned session state. Read it; do not mutate it directly."""
        return self._state

    def start(self) -> None:
        """Idle -> Active. No-op when already active."""
        with self._lock:
            if self._status is ArbiterState.ACTIVE:
                return
            self._status = ArbiterState.ACTIVE
        logger.info("Recording started")

    def stop(self) -> None:
        """Active -> Idle. No-op when already idle."""
        with self._lock:
            if self._status is ArbiterState.IDLE:
                return
            self._status = ArbiterState.IDLE
        logger.info("Recording stopped")

    def reset(self) -> None:
        """Clear frame buffer, history, sequence and stats."""
        with self._lock:
            self._state.reset()
        logger.info("Session reset")

    def clear_custom_gestures(self) -> None:
        with self._lock:
            self._state.clear_custom_gestures()

    def add_listener(self, callback: OutcomeCallback) -> None:
        """Register ``callback(outcome)`` for every accepted classification.

        A listener that raises is logged; later listeners still run.
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: OutcomeCallback) -> None:
        self._listeners.remove(callback)

    # ========== Per-frame processing ==========

    def submit_frame(
        self,
        hands: Sequence[Any],
        raw_image: Optional[np.ndarray] = None,
        settings: Optional[GestureSettings] = None,
    ) -> Optional[ClassificationOutcome]:
        """Classify one frame and update the session.

        Args:
            hands: Detected hands; only the first one is classified.
            raw_image: Raw frame pixels for motion analysis (H, W, C).
            settings: Current settings (default: GestureSettings()).

        Returns:
            ClassificationOutcome when a gesture was accepted, else None
            (idle, no hands, no classifier match, or the "Unknown" label).
        """
        if settings is None:
            settings = GestureSettings()

        with self._lock:
            if self._status is not ArbiterState.ACTIVE or not hands:
                return None

            state = self._state
            if raw_image is not None:
                state.frame_buffer.append(raw_image)

            result = select_result(hands[0], state.frame_buffer.frames(), settings)
            if result is None or result.label == UNKNOWN_LABEL:
                return None

            state.record(result.label, result.confidence)

            newly_learned = False
            if settings.learning_mode and result.confidence > LEARNING_CONFIDENCE:
                newly_learned = state.learn(result.label)

            outcome = ClassificationOutcome(
                label=result.label,
                confidence=result.confidence,
                source=result.source,
                history=tuple(state.history),
                sequence=tuple(state.sequence),
                stats=state.stats.as_tuple(),
                custom_gestures=tuple(state.custom_gestures),
                newly_learned=newly_learned,
            )

        logger.debug(
            "Accepted %s (%.1f) from %s classifier",
            outcome.label, outcome.confidence, outcome.source.value,
        )
        if newly_learned:
            logger.info("Learned custom gesture %r", outcome.label)

        for callback in list(self._listeners):
            try:
                callback(outcome)
            except Exception:
                logger.exception("Outcome listener %r failed", callback)
        return outcome


__all__ = [
    "ArbiterState",
    "ClassificationOutcome",
    "GestureArbiter",
    "LEARNING_CONFIDENCE",
    "select_result",
]
