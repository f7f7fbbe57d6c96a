import unittest
from unittest.mock import MagicMock

from mindmotion.detectors import MarchDetector
from mindmotion.landmarks import PoseLandmark

from pose_fixtures import make_frame

STAND = make_frame()
LEFT_UP = make_frame({PoseLandmark.LEFT_KNEE: (0.56, 0.62)})
RIGHT_UP = make_frame({PoseLandmark.RIGHT_KNEE: (0.44, 0.62)})


class TestMarchDetector(unittest.TestCase):

    def setUp(self):
        self.detector = MarchDetector()
        self.listener = MagicMock()
        self.debug_listener = MagicMock()
        self.detector.set_listener(self.listener)
        self.detector.set_debug_listener(self.debug_listener)
        self.detector.start_detection(frame_time=0.0)
        self.t = 0.0

    def feed(self, frames, step=0.25):
        for frame in frames:
            self.t += step
            self.detector.analyze_pose_result(frame, frame_time=self.t)

    def calibrate(self):
        self.feed([STAND] * 10)

    def test_calibration_frames_never_count(self):
        self.feed([LEFT_UP, LEFT_UP, RIGHT_UP, RIGHT_UP, STAND] * 2)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertTrue(self.detector.state.baseline_set)
        self.listener.on_detected.assert_not_called()

    def test_baseline_is_mean_knee_height(self):
        self.calibrate()
        self.assertAlmostEqual(self.detector.state.baseline_knee_y["left"], 0.75)
        self.assertAlmostEqual(self.detector.state.baseline_knee_y["right"], 0.75)
        self.debug_listener.on_debug_update.assert_called_with(
            "Baseline Set!", "OK", "OK", "Start marching!")

    def test_alternating_steps_complete(self):
        self.calibrate()
        self.feed([LEFT_UP, LEFT_UP, STAND, RIGHT_UP, RIGHT_UP, STAND] * 3)

        self.assertEqual(self.detector.get_current_count(), 6)
        self.assertFalse(self.detector.is_active())
        self.listener.on_completed.assert_called_once()
        self.listener.on_progress.assert_called_with(6, 6)

    def test_step_needs_consecutive_lifted_frames(self):
        self.calibrate()
        self.feed([LEFT_UP, STAND, RIGHT_UP, STAND] * 3)
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_holding_knee_up_counts_once(self):
        self.calibrate()
        self.feed([LEFT_UP] * 12)
        self.assertEqual(self.detector.get_current_count(), 1)

    def test_cooldown_between_steps(self):
        self.calibrate()
        self.feed([LEFT_UP, LEFT_UP, STAND, RIGHT_UP, RIGHT_UP], step=0.05)
        self.assertEqual(self.detector.get_current_count(), 1)

    def test_small_knee_motion_ignored(self):
        self.calibrate()
        nudge = make_frame({PoseLandmark.LEFT_KNEE: (0.56, 0.72)})
        self.feed([nudge] * 5)
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_partially_hidden_legs_still_visible(self):
        frame = make_frame(visibility=0.4)
        self.feed([frame] * 10)
        self.assertTrue(self.detector.state.baseline_set)

    def test_hidden_legs_do_not_calibrate(self):
        hidden = make_frame({PoseLandmark.RIGHT_ANKLE: (0.44, 0.9, 0.1)})
        self.feed([hidden] * 10)
        self.assertFalse(self.detector.state.baseline_set)
        self.assertEqual(self.detector.state.baseline_frames, 0)

    def test_no_counts_after_completion(self):
        self.calibrate()
        self.feed([LEFT_UP, LEFT_UP, STAND, RIGHT_UP, RIGHT_UP, STAND] * 3)
        self.feed([LEFT_UP, LEFT_UP, STAND, RIGHT_UP, RIGHT_UP, STAND] * 10)
        self.assertEqual(self.detector.get_current_count(), 6)
        self.assertFalse(self.detector.is_active())
        self.listener.on_completed.assert_called_once()

    def test_inactive_ignores_frames(self):
        self.detector.stop_detection()
        self.calibrate()
        self.feed([LEFT_UP, LEFT_UP, STAND, RIGHT_UP, RIGHT_UP, STAND] * 3)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertFalse(self.detector.state.baseline_set)
        self.listener.on_detected.assert_not_called()

    def test_timeout_fires_once_without_counting(self):
        self.calibrate()
        self.feed([LEFT_UP])
        # This frame would complete the lift, but the session is over
        self.detector.analyze_pose_result(LEFT_UP, frame_time=30.5)
        self.listener.on_detection_timeout.assert_called_once()
        self.listener.on_detected.assert_not_called()
        self.assertFalse(self.detector.is_active())

        self.detector.analyze_pose_result(RIGHT_UP, frame_time=31.0)
        self.listener.on_detection_timeout.assert_called_once()
        self.assertEqual(self.detector.get_current_count(), 0)

    def test_reset_clears_baseline(self):
        self.calibrate()
        self.detector.reset()
        self.assertFalse(self.detector.state.baseline_set)
        self.assertEqual(self.detector.get_current_count(), 0)
        self.assertFalse(self.detector.is_active())


if __name__ == '__main__':
    unittest.main()
