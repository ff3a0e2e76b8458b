"""Tests for GestureArbiter selection and session bookkeeping."""

import threading

import numpy as np
import pytest

from handsense.arbiter import ArbiterState, GestureArbiter, select_result
from handsense.config import GestureSettings
from handsense.types import ClassificationResult, ClassifierKind, DetectionMethod

FRAME_DIFF = GestureSettings(detection_method=DetectionMethod.FRAME_DIFF)
TRACKING = GestureSettings(detection_method=DetectionMethod.OBJECT_DETECTION)


@pytest.fixture
def arbiter():
    arb = GestureArbiter()
    arb.start()
    return arb


class TestLifecycle:
    def test_starts_idle(self):
        arb = GestureArbiter()
        assert arb.status is ArbiterState.IDLE
        assert arb.is_active is False

    def test_idle_ignores_frames(self, fist_hand, blank_frame):
        arb = GestureArbiter()
        assert arb.submit_frame([fist_hand], blank_frame) is None
        assert len(arb.state.frame_buffer) == 0
        assert arb.state.stats.gestures_detected == 0

    def test_start_stop_idempotent(self):
        arb = GestureArbiter()
        arb.start()
        arb.start()
        assert arb.status is ArbiterState.ACTIVE
        arb.stop()
        arb.stop()
        assert arb.status is ArbiterState.IDLE

    def test_stop_keeps_state(self, arbiter, fist_hand):
        arbiter.submit_frame([fist_hand])
        arbiter.stop()
        assert arbiter.submit_frame([fist_hand]) is None
        assert arbiter.state.stats.gestures_detected == 1

    def test_reset_while_idle(self, arbiter, fist_hand):
        arbiter.submit_frame([fist_hand])
        arbiter.stop()
        arbiter.reset()
        assert arbiter.state.stats.as_tuple() == (0, 0, 0)
        assert len(arbiter.state.history) == 0


class TestSubmitFrame:
    def test_no_hands(self, arbiter, blank_frame):
        assert arbiter.submit_frame([], blank_frame) is None
        assert len(arbiter.state.frame_buffer) == 0

    def test_fist_outcome(self, arbiter, fist_hand):
        outcome = arbiter.submit_frame([fist_hand])
        assert outcome.label == "Fist"
        assert outcome.confidence == 80.0
        assert outcome.source is ClassifierKind.STATIC
        assert outcome.sequence == ("Fist",)
        assert outcome.stats == (1, 40, 1)

    def test_running_stats(self, arbiter, fist_hand):
        arbiter.submit_frame([fist_hand])
        outcome = arbiter.submit_frame([fist_hand])
        assert outcome.gestures_detected == 2
        assert outcome.accuracy == 60
        assert outcome.session_time == 2

    def test_only_first_hand_classified(self, arbiter, fist_hand, open_palm_hand):
        assert arbiter.submit_frame([fist_hand, open_palm_hand]).label == "Fist"

    def test_no_match_not_recorded(self, arbiter, unmatched_hand):
        assert arbiter.submit_frame([unmatched_hand]) is None
        assert arbiter.state.stats.gestures_detected == 0
        assert len(arbiter.state.history) == 0

    def test_unknown_label_not_recorded(self, arbiter, fist_hand, monkeypatch):
        monkeypatch.setattr(
            "handsense.arbiter.classify_static",
            lambda hand: ClassificationResult("Unknown", 95.0),
        )
        assert arbiter.submit_frame([fist_hand]) is None
        assert arbiter.state.stats.gestures_detected == 0
        assert len(arbiter.state.sequence) == 0

    def test_history_bounded(self, arbiter, fist_hand, monkeypatch):
        ticks = iter(range(1, 26))
        monkeypatch.setattr("handsense.session._now_ms", lambda: next(ticks))
        for _ in range(25):
            outcome = arbiter.submit_frame([fist_hand])
        assert [e.timestamp for e in outcome.history] == list(range(6, 26))
        assert len(outcome.sequence) == 5

    def test_frame_buffer_bounded(self, arbiter, fist_hand):
        for i in range(15):
            arbiter.submit_frame([fist_hand], np.full((2, 2, 3), i, dtype=np.uint8))
        values = [int(f[0, 0, 0]) for f in arbiter.state.frame_buffer]
        assert values == list(range(5, 15))

    def test_frame_appended_even_without_match(self, arbiter, unmatched_hand, blank_frame):
        arbiter.submit_frame([unmatched_hand], blank_frame)
        assert len(arbiter.state.frame_buffer) == 1

    def test_outcome_is_snapshot(self, arbiter, fist_hand):
        first = arbiter.submit_frame([fist_hand])
        arbiter.submit_frame([fist_hand])
        assert first.sequence == ("Fist",)
        assert len(first.history) == 1


class TestMethodSelection:
    def test_manual_ignores_secondary(self, arbiter, spread_hand):
        assert arbiter.submit_frame([spread_hand]).label == "Open Palm"

    def test_motion_overrides_weaker_static(self, arbiter, fist_hand, swipe_right_frames):
        outcomes = [arbiter.submit_frame([fist_hand], f, FRAME_DIFF) for f in swipe_right_frames]
        assert [o.label for o in outcomes] == ["Fist", "Fist", "Swipe Right"]
        assert outcomes[-1].source is ClassifierKind.MOTION
        assert outcomes[-1].confidence == 85.0

    def test_stronger_static_beats_motion(self, arbiter, make_hand, swipe_right_frames):
        thumbs_up = make_hand("dddd", thumb_up=True)
        for frame in swipe_right_frames:
            outcome = arbiter.submit_frame([thumbs_up], frame, FRAME_DIFF)
        assert outcome.label == "Thumbs Up"

    def test_motion_without_static_match(self, arbiter, unmatched_hand, swipe_right_frames):
        for frame in swipe_right_frames:
            outcome = arbiter.submit_frame([unmatched_hand], frame, FRAME_DIFF)
        assert outcome.label == "Swipe Right"

    def test_tracking_spread(self, arbiter, spread_hand):
        outcome = arbiter.submit_frame([spread_hand], settings=TRACKING)
        assert outcome.label == "Spread"
        assert outcome.source is ClassifierKind.TRACKING

    def test_tracking_pinch(self, arbiter, pinch_hand):
        assert arbiter.submit_frame([pinch_hand], settings=TRACKING).label == "Pinch"

    def test_equal_confidence_keeps_static(self, fist_hand, monkeypatch):
        monkeypatch.setattr(
            "handsense.arbiter.classify_tracking",
            lambda hand: ClassificationResult("Pinch", 80.0, ClassifierKind.TRACKING),
        )
        assert select_result(fist_hand, [], TRACKING).label == "Fist"


class TestLearning:
    def _patch_tracking(self, monkeypatch, confidence):
        monkeypatch.setattr(
            "handsense.arbiter.classify_tracking",
            lambda hand: ClassificationResult("Spread", confidence, ClassifierKind.TRACKING),
        )

    def test_learns_high_confidence(self, arbiter, unmatched_hand, monkeypatch):
        self._patch_tracking(monkeypatch, 90.0)
        settings = TRACKING.replace(learning_mode=True)
        outcome = arbiter.submit_frame([unmatched_hand], settings=settings)
        assert outcome.newly_learned is True
        assert outcome.custom_gestures == ("Spread",)

    def test_low_confidence_recorded_not_learned(self, arbiter, unmatched_hand, monkeypatch):
        self._patch_tracking(monkeypatch, 65.0)
        settings = TRACKING.replace(learning_mode=True)
        outcome = arbiter.submit_frame([unmatched_hand], settings=settings)
        assert outcome.label == "Spread"
        assert outcome.newly_learned is False
        assert outcome.custom_gestures == ()
        assert outcome.gestures_detected == 1

    def test_learning_off(self, arbiter, fist_hand):
        outcome = arbiter.submit_frame([fist_hand])
        assert outcome.custom_gestures == ()

    def test_learned_once(self, arbiter, fist_hand):
        settings = GestureSettings(learning_mode=True)
        assert arbiter.submit_frame([fist_hand], settings=settings).newly_learned is True
        second = arbiter.submit_frame([fist_hand], settings=settings)
        assert second.newly_learned is False
        assert second.custom_gestures == ("Fist",)

    def test_reset_keeps_learned(self, arbiter, fist_hand):
        arbiter.submit_frame([fist_hand], settings=GestureSettings(learning_mode=True))
        arbiter.reset()
        assert arbiter.state.custom_gestures == ["Fist"]
        arbiter.clear_custom_gestures()
        assert arbiter.state.custom_gestures == []


class TestListeners:
    def test_listener_called_on_accept(self, arbiter, fist_hand, unmatched_hand):
        received = []
        arbiter.add_listener(received.append)
        arbiter.submit_frame([unmatched_hand])
        outcome = arbiter.submit_frame([fist_hand])
        assert received == [outcome]

    def test_remove_listener(self, arbiter, fist_hand):
        received = []
        arbiter.add_listener(received.append)
        arbiter.remove_listener(received.append)
        arbiter.submit_frame([fist_hand])
        assert received == []

    def test_listener_may_reenter(self, arbiter, fist_hand):
        arbiter.add_listener(lambda outcome: arbiter.stop())
        arbiter.submit_frame([fist_hand])
        assert arbiter.is_active is False

    def test_failing_listener_is_isolated(self, arbiter, fist_hand, caplog):
        def broken(outcome):
            raise RuntimeError("display closed")

        received = []
        arbiter.add_listener(broken)
        arbiter.add_listener(received.append)
        with caplog.at_level("ERROR", logger="handsense.arbiter"):
            outcome = arbiter.submit_frame([fist_hand])
        assert outcome.label == "Fist"
        assert received == [outcome]
        assert "Outcome listener" in caplog.text
        assert arbiter.submit_frame([fist_hand]).gestures_detected == 2


class TestConcurrency:
    def test_parallel_submits(self, arbiter, fist_hand):
        def worker():
            for _ in range(50):
                arbiter.submit_frame([fist_hand])

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert arbiter.state.stats.gestures_detected == 200
        assert len(arbiter.state.history) == 20
