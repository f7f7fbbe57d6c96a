import unittest
from unittest.mock import MagicMock

from mindmotion.detectors import RaiseHandDetector
from mindmotion.landmarks import PoseLandmark

from pose_fixtures import make_frame

HANDS_DOWN = make_frame()
LEFT_RAISED = make_frame({
    PoseLandmark.LEFT_ELBOW: (0.65, 0.25),
    PoseLandmark.LEFT_WRIST: (0.7, 0.15),
})
# Wrist above the shoulder but the forearm is folded onto the elbow
LEFT_FOLDED = make_frame({
    PoseLandmark.LEFT_ELBOW: (0.69, 0.18),
    PoseLandmark.LEFT_WRIST: (0.7, 0.15),
})
# Wrist straight above the shoulder, no horizontal separation
LEFT_OVER_SHOULDER = make_frame({
    PoseLandmark.LEFT_ELBOW: (0.61, 0.3),
    PoseLandmark.LEFT_WRIST: (0.61, 0.15),
})


class TestRaiseHandDetector(unittest.TestCase):

    def setUp(self):
        self.detector = RaiseHandDetector()
        self.listener = MagicMock()
        self.detector.set_listener(self.listener)
        self.detector.start_detection(frame_time=0.0)
        self.t = 0.0

    def feed(self, frames, step=0.25):
        for frame in frames:
            self.t += step
            self.detector.analyze_pose_result(frame, frame_time=self.t)

    def test_raise_counts_after_hold(self):
        self.feed([LEFT_RAISED])
        self.assertTrue(self.detector.state.hand_raised)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.feed([LEFT_RAISED, LEFT_RAISED])
        self.assertEqual(self.detector.get_current_count(), 1)
        self.assertEqual(self.detector.state.raised_hand, "left")

    def test_brief_raise_does_not_count(self):
        self.feed([LEFT_RAISED, HANDS_DOWN] * 6, step=0.2)
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_long_hold_counts_once(self):
        self.feed([LEFT_RAISED] * 50, step=0.1)
        self.assertEqual(self.detector.get_current_count(), 1)
        self.assertTrue(self.detector.state.raise_counted)

    def test_lower_and_raise_again(self):
        self.feed([LEFT_RAISED] * 3)
        self.feed([HANDS_DOWN] * 4)
        self.assertFalse(self.detector.state.hand_raised)
        # The smoothed height needs a few frames to climb back
        self.feed([LEFT_RAISED] * 5)
        self.assertEqual(self.detector.get_current_count(), 2)

    def test_cooldown_between_raises(self):
        self.feed([LEFT_RAISED] * 3)
        self.feed([HANDS_DOWN] + [LEFT_RAISED] * 6, step=0.1)
        self.assertEqual(self.detector.get_current_count(), 1)
        self.assertTrue(self.detector.state.hand_raised)
        self.assertFalse(self.detector.state.raise_counted)

    def test_three_raises_complete(self):
        for _ in range(3):
            self.feed([LEFT_RAISED] * 6)
            self.feed([HANDS_DOWN] * 5)
        self.assertEqual(self.detector.get_current_count(), 3)
        self.assertFalse(self.detector.is_active())
        self.listener.on_completed.assert_called_once()

    def raise_cycles(self, count):
        for _ in range(count):
            self.feed([LEFT_RAISED] * 6)
            self.feed([HANDS_DOWN] * 5)

    def test_no_counts_after_completion(self):
        self.raise_cycles(3)
        self.raise_cycles(3)
        self.assertEqual(self.detector.get_current_count(), 3)
        self.assertFalse(self.detector.is_active())
        self.listener.on_completed.assert_called_once()

    def test_inactive_ignores_frames(self):
        self.detector.stop_detection()
        self.raise_cycles(3)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertFalse(self.detector.state.hand_raised)
        self.listener.on_detected.assert_not_called()

    def test_reset(self):
        self.feed([LEFT_RAISED] * 3)
        self.detector.reset()
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertFalse(self.detector.is_active())
        self.assertFalse(self.detector.state.hand_raised)
        self.assertEqual(self.detector.state.left_height, 0.0)

    def test_timeout_fires_once_without_counting(self):
        self.feed([LEFT_RAISED] * 2)
        # Held long enough to count, but past the deadline
        self.detector.analyze_pose_result(LEFT_RAISED, frame_time=30.5)
        self.listener.on_detection_timeout.assert_called_once()
        self.listener.on_detected.assert_not_called()
        self.assertFalse(self.detector.is_active())

        self.detector.analyze_pose_result(LEFT_RAISED, frame_time=31.0)
        self.listener.on_detection_timeout.assert_called_once()
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_folded_arm_rejected(self):
        self.feed([LEFT_FOLDED] * 8)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertFalse(self.detector.state.hand_raised)

    def test_hand_over_shoulder_rejected(self):
        self.feed([LEFT_OVER_SHOULDER] * 8)
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_threshold_scales_with_shoulder_width(self):
        near = make_frame({PoseLandmark.LEFT_SHOULDER: (0.8, 0.35),
                           PoseLandmark.RIGHT_SHOULDER: (0.2, 0.35)})
        far = make_frame({PoseLandmark.LEFT_SHOULDER: (0.51, 0.35),
                          PoseLandmark.RIGHT_SHOULDER: (0.49, 0.35)})
        detector = self.detector
        self.assertAlmostEqual(detector._adaptive_threshold(*self._shoulders(near)), 0.15)
        # Narrow shoulders fall back to the minimum width
        self.assertAlmostEqual(detector._adaptive_threshold(*self._shoulders(far)), 0.0125)

    def test_hidden_wrist_waits(self):
        hidden = make_frame({PoseLandmark.LEFT_WRIST: (0.7, 0.15, 0.1),
                             PoseLandmark.LEFT_ELBOW: (0.65, 0.25)})
        self.feed([hidden] * 8)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertTrue(self.detector.is_active())

    @staticmethod
    def _shoulders(frame):
        person = frame[0]
        return person[PoseLandmark.LEFT_SHOULDER], person[PoseLandmark.RIGHT_SHOULDER]


if __name__ == '__main__':
    unittest.main()
