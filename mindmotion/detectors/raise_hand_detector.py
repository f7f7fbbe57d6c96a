import logging
from dataclasses import dataclass
from typing import Optional

from mindmotion.consts import (
    ADAPTIVE_THRESHOLD_RATIO,
    BASE_HAND_RAISE_THRESHOLD,
    MIN_ARM_LENGTH,
    MIN_HORIZ_SEP,
    MIN_RAISE_DURATION,
    MIN_SHOULDER_WIDTH,
    RAISE_COOLDOWN,
    RAISE_SMOOTH_ALPHA,
    REQUIRED_RAISE_COUNT,
)
from mindmotion.geometry import check_visibility, distance, ema
from mindmotion.landmarks import PoseLandmark

from .base import DetectionEvent, DetectorState, GestureDetector

logger = logging.getLogger(__name__)


@dataclass
class RaiseHandState(DetectorState):
    hand_raised: bool = False
    raise_start_time: float = 0.0
    raise_counted: bool = False  # Current raise already counted; wait for the hand to drop
    left_height: float = 0.0   # EMA of wrist height above shoulder
    right_height: float = 0.0

    # Debug info
    hands_visible: bool = False
    raised_hand: str = "none"


class RaiseHandDetector(GestureDetector):
    """
    Detects a hand being raised and held above the shoulder.

    The raise threshold scales with shoulder width so it holds at any distance
    from the camera. Folded arms and hands resting next to the shoulder are
    rejected by minimum forearm length and horizontal separation checks. A
    raise counts once after being held briefly; the hand must come down before
    the next one can count.
    """

    required_landmarks = max(PoseLandmark.RIGHT_WRIST, PoseLandmark.RIGHT_SHOULDER) + 1

    def __init__(self, **kwargs):
        super().__init__("raise_hand", REQUIRED_RAISE_COUNT, RAISE_COOLDOWN, **kwargs)
        self.smooth_alpha = RAISE_SMOOTH_ALPHA
        self.min_raise_duration = MIN_RAISE_DURATION

    def _new_state(self) -> RaiseHandState:
        return RaiseHandState()

    def _adaptive_threshold(self, left_shoulder, right_shoulder) -> float:
        shoulder_width = abs(left_shoulder.x - right_shoulder.x)
        # NaN compares False, so it falls through to the floor too
        if not shoulder_width > MIN_SHOULDER_WIDTH:
            shoulder_width = MIN_SHOULDER_WIDTH
        return max(shoulder_width * ADAPTIVE_THRESHOLD_RATIO, BASE_HAND_RAISE_THRESHOLD * 0.12)

    @staticmethod
    def _arm_valid(shoulder, elbow, wrist) -> bool:
        return (distance(elbow, wrist) >= MIN_ARM_LENGTH and
                abs(shoulder.x - wrist.x) >= MIN_HORIZ_SEP)

    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        left_wrist = landmarks[PoseLandmark.LEFT_WRIST]
        right_wrist = landmarks[PoseLandmark.RIGHT_WRIST]
        left_shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        right_shoulder = landmarks[PoseLandmark.RIGHT_SHOULDER]
        left_elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        right_elbow = landmarks[PoseLandmark.RIGHT_ELBOW]

        state.hands_visible = check_visibility(left_wrist, right_wrist, left_shoulder, right_shoulder)
        if not state.hands_visible:
            self._debug("Hands not visible", "N/A", "N/A", "Active - Show hands")
            return None

        threshold = self._adaptive_threshold(left_shoulder, right_shoulder)

        # Positive when the wrist is above the shoulder
        state.left_height = ema(state.left_height, left_shoulder.y - left_wrist.y, self.smooth_alpha)
        state.right_height = ema(state.right_height, right_shoulder.y - right_wrist.y, self.smooth_alpha)

        left_valid = self._arm_valid(left_shoulder, left_elbow, left_wrist)
        right_valid = self._arm_valid(right_shoulder, right_elbow, right_wrist)
        left_raised = left_valid and state.left_height > threshold
        right_raised = right_valid and state.right_height > threshold

        if left_raised and right_raised:
            state.raised_hand = "both"
        elif left_raised:
            state.raised_hand = "left"
        elif right_raised:
            state.raised_hand = "right"
        else:
            state.raised_hand = "none"

        event = None
        if left_raised or right_raised:
            if not state.hand_raised:
                state.hand_raised = True
                state.raise_start_time = frame_time
                state.raise_counted = False
                logger.debug("Hand raised (entered): %s | threshold=%.3f", state.raised_hand, threshold)
            elif not state.raise_counted:
                held = frame_time - state.raise_start_time
                if held >= self.min_raise_duration and self.can_detect(frame_time):
                    state.raise_counted = True
                    event = self.record_repetition(frame_time, hand=state.raised_hand, held=held)
        elif state.hand_raised:
            logger.debug("Hand lowered - ready for next raise")
            state.hand_raised = False
            state.raise_start_time = 0.0
            state.raise_counted = False

        if state.hand_raised:
            status = "Active - Holding {} hand ({}ms){} ({}/{} raises)".format(
                state.raised_hand, int((frame_time - state.raise_start_time) * 1000),
                " [COUNTED]" if state.raise_counted else "",
                self.get_current_count(), self.required_count)
        else:
            status = f"Active - Raise hand ({self.get_current_count()}/{self.required_count} raises)"

        self._debug(
            "Hands visible",
            "{:.3f} (thresh: {:.3f}) {}{}".format(
                state.left_height, threshold, "✓" if left_raised else "✗",
                "" if left_valid else " (armInvalid)"),
            "{:.3f} (thresh: {:.3f}) {}{}".format(
                state.right_height, threshold, "✓" if right_raised else "✗",
                "" if right_valid else " (armInvalid)"),
            status
        )
        return event

    def _summary(self):
        state = self.state
        return (
            "Hands visible" if state.hands_visible else "Hands not visible",
            f"L: {state.left_height:.3f}",
            f"R: {state.right_height:.3f}",
            "Active" if state.active else "Inactive",
        )
