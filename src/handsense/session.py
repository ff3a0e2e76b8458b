"""Bounded, in-memory session state owned by the gesture arbiter."""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

import numpy as np

FRAME_BUFFER_SIZE = 10
HISTORY_SIZE = 20
SEQUENCE_SIZE = 5


def round_half_up(value: float) -> int:
    """Round .5 up, like the dashboard's Math.round."""
    return int(math.floor(value + 0.5))


class FrameBuffer:
    """Fixed-capacity FIFO of recent raw frames for motion analysis.

    Args:
        capacity: Maximum number of frames kept (default: 10).

    Example:
        >>> buf = FrameBuffer()
        >>> for frame in frames:
        ...     buf.append(frame)
        >>> current, previous = buf[-1], buf[-2]
    """

    def __init__(self, capacity: int = FRAME_BUFFER_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._frames: Deque[np.ndarray] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._frames.maxlen

    def append(self, frame: np.ndarray) -> None:
        """Append a frame, evicting the oldest when full."""
        self._frames.append(frame)

    def clear(self) -> None:
        self._frames.clear()

    def frames(self) -> List[np.ndarray]:
        """Frames in arrival order (oldest first)."""
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._frames[index]

    def __iter__(self):
        return iter(self._frames)


@dataclass(frozen=True)
class GestureHistoryEntry:
    """One accepted classification.

    Attributes:
        label: Gesture label.
        timestamp: Wall-clock time in milliseconds since the epoch.
        confidence: Confidence in [0, 100].
    """

    label: str
    timestamp: int
    confidence: float


@dataclass
class SessionStats:
    """Running statistics for the current session.

    Attributes:
        gestures_detected: Number of accepted classifications.
        accuracy: Two-point running mean of confidence, ``(prev + new) / 2``
            rounded half-up. Recency weighted, not a cumulative average.
        session_time: Incremented once per accepted classification.
    """

    gestures_detected: int = 0
    accuracy: int = 0
    session_time: int = 0

    def record(self, confidence: float) -> None:
        self.gestures_detected += 1
        self.accuracy = round_half_up((self.accuracy + confidence) / 2)
        self.session_time += 1

    def reset(self) -> None:
        self.gestures_detected = 0
        self.accuracy = 0
        self.session_time = 0

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.gestures_detected, self.accuracy, self.session_time)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class GestureSessionState:
    """All mutable state of one recognition session.

    The frame buffer, history, sequence and stats are cleared by
    ``reset()``. Custom gestures survive a reset and only grow; they are
    dropped only by ``clear_custom_gestures()``.
    """

    frame_buffer: FrameBuffer = field(default_factory=FrameBuffer)
    history: Deque[GestureHistoryEntry] = field(
        default_factory=lambda: deque(maxlen=HISTORY_SIZE)
    )
    sequence: Deque[str] = field(default_factory=lambda: deque(maxlen=SEQUENCE_SIZE))
    stats: SessionStats = field(default_factory=SessionStats)
    custom_gestures: List[str] = field(default_factory=list)

    def record(
        self, label: str, confidence: float, timestamp: Optional[int] = None
    ) -> GestureHistoryEntry:
        """Record an accepted classification in history, sequence and stats."""
        entry = GestureHistoryEntry(
            label=label,
            timestamp=_now_ms() if timestamp is None else timestamp,
            confidence=confidence,
        )
        self.history.append(entry)
        self.sequence.append(label)
        self.stats.record(confidence)
        return entry

    def learn(self, label: str) -> bool:
        """Add ``label`` to the custom gestures. Returns True if it was new."""
        if label in self.custom_gestures:
            return False
        self.custom_gestures.append(label)
        return True

    def reset(self) -> None:
        self.frame_buffer.clear()
        self.history.clear()
        self.sequence.clear()
        self.stats.reset()

    def clear_custom_gestures(self) -> None:
        self.custom_gestures.clear()


__all__ = [
    "FRAME_BUFFER_SIZE",
    "HISTORY_SIZE",
    "SEQUENCE_SIZE",
    "FrameBuffer",
    "GestureHistoryEntry",
    "SessionStats",
    "GestureSessionState",
    "round_half_up",
]
