"""Tests for frame-difference swipe classification."""

import numpy as np
import pytest

from handsense.classifiers.dynamic import (
    clamp_motion_threshold,
    classify_motion,
    luminance,
    motion_vectors,
)
from handsense.types import ClassifierKind


def _frames(previous, current):
    return [previous.copy(), previous.copy(), current]


class TestSwipeDirection:
    def test_swipe_right(self, swipe_right_frames):
        result = classify_motion(swipe_right_frames, 50)
        assert result.label == "Swipe Right"
        assert result.confidence == 85.0
        assert result.source == ClassifierKind.MOTION

    def test_swipe_right_vectors(self, swipe_right_frames):
        magnitude, horizontal, vertical = motion_vectors(
            swipe_right_frames[-1], swipe_right_frames[-2], 50
        )
        assert magnitude == 8000.0
        assert horizontal == 5600.0
        assert vertical == -800.0

    def test_swipe_left(self, blank_frame):
        current = blank_frame.copy()
        current[:, :10] += 80
        assert classify_motion(_frames(blank_frame, current)).label == "Swipe Left"

    def test_swipe_down(self):
        blank = np.zeros((20, 20, 3), dtype=np.uint8)
        current = blank.copy()
        current[10:, :] += 80
        assert classify_motion(_frames(blank, current)).label == "Swipe Down"

    def test_swipe_up(self):
        blank = np.zeros((20, 20, 3), dtype=np.uint8)
        current = blank.copy()
        current[:10, :] += 80
        assert classify_motion(_frames(blank, current)).label == "Swipe Up"

    def test_confidence_scales_with_magnitude(self, blank_frame):
        current = blank_frame.copy()
        current[0:2, 10:20] += 80
        result = classify_motion(_frames(blank_frame, current), 50)
        # magnitude 1600, horizontal 1120, vertical -1600
        assert result.label == "Swipe Up"
        assert result.confidence == pytest.approx(76.0)

    def test_tie_goes_vertical(self):
        blank = np.zeros((10, 10, 3), dtype=np.uint8)
        current = blank.copy()
        current[7:, 7:] += 200
        magnitude, horizontal, vertical = motion_vectors(current, blank, 50)
        assert horizontal == vertical == magnitude == 1800.0
        assert classify_motion(_frames(blank, current)).label == "Swipe Down"

    def test_non_array_frames(self):
        assert classify_motion([[0], [0], [0]]) is None

    def test_only_last_two_frames_used(self, blank_frame, swipe_right_frames):
        noisy = np.full_like(blank_frame, 200)
        frames = [noisy] + swipe_right_frames
        assert classify_motion(frames).label == "Swipe Right"

    def test_rgba_frames(self, swipe_right_frames):
        frames = [np.dstack([f, np.full(f.shape[:2], 255, np.uint8)]) for f in swipe_right_frames]
        assert classify_motion(frames).label == "Swipe Right"


class TestNoMotion:
    def test_fewer_than_three_frames(self, swipe_right_frames):
        assert classify_motion(swipe_right_frames[1:]) is None
        assert classify_motion([]) is None
        assert classify_motion(None) is None

    def test_identical_frames(self, blank_frame):
        assert classify_motion([blank_frame] * 3) is None

    def test_change_below_threshold(self, blank_frame):
        current = blank_frame.copy()
        current[:, 10:] += 40
        assert classify_motion(_frames(blank_frame, current), 50) is None

    def test_magnitude_at_limit_is_not_a_swipe(self, blank_frame):
        # 10 pixels * 100 = exactly 1000
        current = blank_frame.copy()
        current[:, 19] += 100
        assert classify_motion(_frames(blank_frame, current), 50) is None

    def test_mismatched_shapes(self, blank_frame):
        frames = [blank_frame, blank_frame, np.zeros((12, 20, 3), dtype=np.uint8)]
        assert classify_motion(frames) is None

    def test_empty_frames(self):
        empty = np.zeros((0, 0, 3), dtype=np.uint8)
        assert classify_motion([empty] * 3) is None

    def test_grayscale_frames_rejected(self):
        gray = np.zeros((10, 20), dtype=np.uint8)
        assert classify_motion([gray] * 3) is None


class TestThreshold:
    @pytest.mark.parametrize(
        "value, expected",
        [(5, 10.0), (10, 10.0), (50, 50.0), (100, 100.0), (250, 100.0)],
    )
    def test_clamp(self, value, expected):
        assert clamp_motion_threshold(value) == expected

    def test_low_threshold_is_clamped(self, blank_frame):
        # A change of 8 is below the clamped minimum of 10
        current = blank_frame.copy()
        current[:, 10:] += 8
        assert classify_motion(_frames(blank_frame, current), 1) is None

    def test_high_threshold_is_clamped(self, blank_frame):
        # A change of 150 exceeds the clamped maximum of 100
        current = blank_frame.copy()
        current[:, 10:] += 150
        assert classify_motion(_frames(blank_frame, current), 500).label == "Swipe Right"


class TestLuminance:
    def test_channel_mean(self):
        frame = np.zeros((1, 1, 3), dtype=np.uint8)
        frame[0, 0] = (30, 60, 90)
        assert luminance(frame)[0, 0] == 60.0

    def test_ignores_alpha(self):
        frame = np.zeros((1, 1, 4), dtype=np.uint8)
        frame[0, 0] = (30, 60, 90, 255)
        assert luminance(frame)[0, 0] == 60.0
