"""Frame clocks: explicit per-frame tick sources.

A clock owns a list of ``on_frame`` callbacks and calls them in
registration order once per video frame. Each tick runs every callback
to completion before the next frame is read.

Example:
    >>> clock = VideoClock(0)                 # camera index or file path
    >>> clock.on_frame(lambda frame: print(frame.frame_id))
    >>> clock.run(max_frames=100)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """One video frame.

    Attributes:
        data: BGR image (H, W, 3) uint8.
        frame_id: Sequential frame number from the clock.
        t_src_ns: Source timestamp in nanoseconds.
    """

    data: np.ndarray
    frame_id: int
    t_src_ns: int

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @classmethod
    def blank(
        cls, width: int = 640, height: int = 480, frame_id: int = 0, t_src_ns: int = 0
    ) -> "Frame":
        """Black BGR frame, handy for tests and warmup."""
        data = np.zeros((height, width, 3), dtype=np.uint8)
        return cls(data=data, frame_id=frame_id, t_src_ns=t_src_ns)


FrameCallback = Callable[[Frame], None]


class FrameClock:
    """Base clock holding ``on_frame`` registrations."""

    def __init__(self) -> None:
        self._callbacks: List[FrameCallback] = []
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        """Number of ticks delivered so far."""
        return self._frame_count

    def on_frame(self, callback: FrameCallback) -> FrameCallback:
        """Register ``callback(frame)``. Returns it, so it works as a decorator."""
        self._callbacks.append(callback)
        return callback

    def remove(self, callback: FrameCallback) -> None:
        self._callbacks.remove(callback)

    def _dispatch(self, frame: Frame) -> None:
        for callback in list(self._callbacks):
            callback(frame)
        self._frame_count += 1


class ManualClock(FrameClock):
    """Clock ticked explicitly by the caller (tests, replays)."""

    def tick(self, frame: Union[Frame, np.ndarray]) -> Frame:
        """Deliver one frame to all callbacks.

        Raw arrays are wrapped in a Frame with the next frame id.
        """
        if not isinstance(frame, Frame):
            frame = Frame(
                data=frame,
                frame_id=self._frame_count,
                t_src_ns=time.monotonic_ns(),
            )
        self._dispatch(frame)
        return frame


class VideoClock(FrameClock):
    """Clock driven by an OpenCV capture (camera index or video file).

    Args:
        source: Camera index (int) or path/URL of a video file.
        capture: Pre-opened ``cv2.VideoCapture``-like object (overrides
            ``source``; used in tests).
    """

    def __init__(self, source: Union[int, str] = 0, capture: Optional[object] = None):
        super().__init__()
        self._source = source
        self._capture = capture
        self._stopped = False

    @property
    def fps(self) -> float:
        if self._capture is None:
            return 0.0
        return float(self._capture.get(cv2.CAP_PROP_FPS) or 0.0)

    def open(self) -> None:
        """Open the capture.

        Raises:
            IOError: If the source cannot be opened.
        """
        if self._capture is None:
            self._capture = cv2.VideoCapture(self._source)
        if not self._capture.isOpened():
            raise IOError(f"Cannot open video source: {self._source}")
        logger.info("Opened video source %s", self._source)

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def stop(self) -> None:
        """Stop after the tick currently in flight completes."""
        self._stopped = True

    def run(self, max_frames: Optional[int] = None) -> int:
        """Read frames and tick until the source ends, ``stop()`` or ``max_frames``.

        Returns:
            Number of frames delivered during this run.
        """
        self._stopped = False
        delivered = 0
        try:
            self.open()
            while not self._stopped:
                ok, image = self._capture.read()
                if not ok or image is None:
                    break

                pos_ms = self._capture.get(cv2.CAP_PROP_POS_MSEC) or 0.0
                t_src_ns = int(pos_ms * 1_000_000) if pos_ms > 0 else time.monotonic_ns()
                self._dispatch(Frame(data=image, frame_id=self._frame_count, t_src_ns=t_src_ns))
                delivered += 1

                if max_frames and delivered >= max_frames:
                    break
        finally:
            self.close()
        return delivered


__all__ = ["Frame", "FrameClock", "ManualClock", "VideoClock", "FrameCallback"]
