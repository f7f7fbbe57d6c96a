from dataclasses import dataclass
from typing import Optional

from mindmotion.consts import (
    REQUIRED_WAVE_COUNT,
    REQUIRED_WAVE_COUNT_LENIENT,
    WAVE_COOLDOWN,
    WAVE_HANDS_UP_THRESHOLD,
    WAVE_HORIZONTAL_THRESHOLD,
    WAVE_LENIENT_COOLDOWN,
    WAVE_LENIENT_HANDS_UP_THRESHOLD,
    WAVE_LENIENT_HORIZONTAL_THRESHOLD,
    WAVE_SINGLE_HAND_THRESHOLD,
)
from mindmotion.geometry import check_visibility
from mindmotion.landmarks import PoseLandmark

from .base import DetectionEvent, DetectorState, GestureDetector


@dataclass
class WaveState(DetectorState):
    prev_left_x: Optional[float] = None
    prev_right_x: Optional[float] = None

    # Debug info
    hands_visible: bool = False
    left_height: float = 0.0
    right_height: float = 0.0
    waving: bool = False


class WaveDetector(GestureDetector):
    """
    Detects waving with both hands raised.

    Each frame where the two wrists move horizontally in opposite directions
    (both beyond the displacement threshold) is one wave.

    The lenient variant only asks for the hands to be roughly at shoulder
    height, so seated users can wave too, and also accepts a single hand
    moving far on its own.
    """

    required_landmarks = max(PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_WRIST) + 1

    def __init__(self, lenient: bool = False, **kwargs):
        self.lenient = lenient
        if lenient:
            super().__init__("wave", REQUIRED_WAVE_COUNT_LENIENT, WAVE_LENIENT_COOLDOWN, **kwargs)
            self.hands_up_threshold = WAVE_LENIENT_HANDS_UP_THRESHOLD
            self.horizontal_threshold = WAVE_LENIENT_HORIZONTAL_THRESHOLD
        else:
            super().__init__("wave", REQUIRED_WAVE_COUNT, WAVE_COOLDOWN, **kwargs)
            self.hands_up_threshold = WAVE_HANDS_UP_THRESHOLD
            self.horizontal_threshold = WAVE_HORIZONTAL_THRESHOLD
        self.single_hand_threshold = WAVE_SINGLE_HAND_THRESHOLD

    def _new_state(self) -> WaveState:
        return WaveState()

    def _detect_wave_motion(self, left_x: float, right_x: float) -> bool:
        """Compare wrist x positions with the previous frame."""
        state = self.state
        if state.prev_left_x is None or state.prev_right_x is None:
            state.prev_left_x = left_x
            state.prev_right_x = right_x
            return False

        left_movement = left_x - state.prev_left_x
        right_movement = right_x - state.prev_right_x
        state.prev_left_x = left_x
        state.prev_right_x = right_x

        left_moved = abs(left_movement) > self.horizontal_threshold
        right_moved = abs(right_movement) > self.horizontal_threshold

        # Hands moving apart or together
        if left_moved and right_moved:
            return (left_movement < 0 < right_movement) or (right_movement < 0 < left_movement)

        if not self.lenient:
            return False

        # Lenient: one hand waving while the other stays put
        return (abs(left_movement) > self.single_hand_threshold or
                abs(right_movement) > self.single_hand_threshold)

    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        left_wrist = landmarks[PoseLandmark.LEFT_WRIST]
        right_wrist = landmarks[PoseLandmark.RIGHT_WRIST]
        left_shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        right_shoulder = landmarks[PoseLandmark.RIGHT_SHOULDER]

        state.hands_visible = check_visibility(left_wrist, right_wrist, left_shoulder, right_shoulder)
        if not state.hands_visible:
            self._debug("Hands not visible", "N/A", "N/A", "Active - Show both hands up")
            return None

        # Positive = hand above shoulder
        state.left_height = left_shoulder.y - left_wrist.y
        state.right_height = right_shoulder.y - right_wrist.y

        hands_up = (state.left_height > self.hands_up_threshold and
                    state.right_height > self.hands_up_threshold)
        if not hands_up:
            state.prev_left_x = None
            state.prev_right_x = None
            state.waving = False
            self._debug(
                "Hands visible",
                f"L:{state.left_height:.3f} R:{state.right_height:.3f} (need >{self.hands_up_threshold:.3f})",
                "Hands not raised",
                "Active - Raise both hands"
            )
            return None

        state.waving = self._detect_wave_motion(left_wrist.x, right_wrist.x)

        event = None
        if state.waving and self.can_detect(frame_time):
            event = self.record_repetition(frame_time, left_x=left_wrist.x, right_x=right_wrist.x)

        self._debug(
            "Both hands visible",
            f"L:{state.left_height:.3f} R:{state.right_height:.3f} (thresh:{self.hands_up_threshold:.3f})",
            f"L-X:{left_wrist.x:.3f} R-X:{right_wrist.x:.3f}",
            "Active - {} ({}/{} waves)".format(
                "WAVING" if state.waving else "Wave both hands",
                self.get_current_count(), self.required_count)
        )
        return event

    def _summary(self):
        state = self.state
        return (
            "Both hands visible" if state.hands_visible else "Hands not visible",
            f"L:{state.left_height:.3f} R:{state.right_height:.3f}",
            "N/A",
            "Active" if state.active else "Inactive",
        )
