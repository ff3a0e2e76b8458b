"""OpenCV overlay for the live gesture display."""

from typing import Optional

import cv2
import numpy as np

from handsense.arbiter import ClassificationOutcome


class GestureOverlay:
    """Draws the recording indicator, detected gesture and recent sequence.

    Args:
        font_scale: OpenCV font scale.
        color: BGR text color.
        thickness: Text thickness.
    """

    RECORDING_COLOR = (0, 0, 220)
    PANEL_COLOR = (20, 20, 20)
    BAR_COLOR = (0, 200, 0)

    def __init__(
        self,
        font_scale: float = 0.6,
        color: tuple = (255, 255, 255),
        thickness: int = 1,
    ):
        self._font_scale = font_scale
        self._color = color
        self._thickness = thickness
        self._font = cv2.FONT_HERSHEY_SIMPLEX

    @property
    def line_height(self) -> int:
        """Approximate height per text line in pixels."""
        return int(24 * self._font_scale / 0.6)

    def draw(
        self,
        frame: np.ndarray,
        outcome: Optional[ClassificationOutcome],
        recording: bool = False,
        degraded: bool = False,
    ) -> np.ndarray:
        """Draw onto ``frame`` in place and return it.

        Args:
            frame: BGR image (H, W, 3).
            outcome: Latest accepted classification, or None.
            recording: Whether the arbiter is active.
            degraded: Whether the detector failed to load.
        """
        h, w = frame.shape[:2]

        if recording:
            cv2.circle(frame, (w - 110, 22), 6, self.RECORDING_COLOR, -1)
            self._text(frame, "Recording", (w - 98, 28))

        if degraded:
            self._text(frame, "Detector unavailable - no gesture overlay", (10, 28))
            return frame

        if not recording:
            return frame

        if outcome is None:
            self._text(frame, "No gesture detected", (10, h - 20))
            return frame

        panel_top = h - 3 * self.line_height - 20
        cv2.rectangle(frame, (0, panel_top), (w, h), self.PANEL_COLOR, -1)

        y = panel_top + self.line_height
        self._text(frame, f"{outcome.label}  {outcome.confidence:.0f}%", (10, y))

        # Confidence bar
        y += 8
        bar_w = int((w - 20) * max(0.0, min(100.0, outcome.confidence)) / 100.0)
        cv2.rectangle(frame, (10, y), (10 + bar_w, y + 6), self.BAR_COLOR, -1)

        y += self.line_height + 4
        if outcome.sequence:
            self._text(frame, " > ".join(outcome.sequence), (10, y))

        return frame

    def _text(self, frame: np.ndarray, text: str, org: tuple) -> None:
        cv2.putText(
            frame,
            text,
            org,
            self._font,
            self._font_scale,
            self._color,
            self._thickness,
        )


__all__ = ["GestureOverlay"]
