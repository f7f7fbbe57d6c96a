from dataclasses import dataclass
from typing import Optional

from mindmotion.consts import CLAP_COOLDOWN, CLAP_DISTANCE_THRESHOLD, REQUIRED_CLAP_COUNT
from mindmotion.geometry import check_visibility, distance
from mindmotion.landmarks import PoseLandmark

from .base import DetectionEvent, DetectorState, GestureDetector


@dataclass
class ClapState(DetectorState):
    # Debug info
    hands_visible: bool = False
    wrist_distance: float = 0.0
    finger_distance: float = 0.0
    clapping: bool = False


class ClapDetector(GestureDetector):
    """
    Detects hand clapping gestures.

    A clap pose is both wrists and both index fingertips close together. The
    first clap pose seen after the cooldown counts as one clap.
    """

    required_landmarks = max(PoseLandmark.LEFT_INDEX, PoseLandmark.RIGHT_INDEX) + 1

    def __init__(self, **kwargs):
        super().__init__("clap", REQUIRED_CLAP_COUNT, CLAP_COOLDOWN, **kwargs)
        self.distance_threshold = CLAP_DISTANCE_THRESHOLD

    def _new_state(self) -> ClapState:
        return ClapState()

    def _get_hand_landmarks(self, landmarks):
        """Extract wrists and index fingertips."""
        return (
            landmarks[PoseLandmark.LEFT_WRIST],
            landmarks[PoseLandmark.RIGHT_WRIST],
            landmarks[PoseLandmark.LEFT_INDEX],
            landmarks[PoseLandmark.RIGHT_INDEX],
        )

    def _is_clap(self, wrist_distance: float, finger_distance: float) -> bool:
        """Both wrists AND fingers must be close together for a proper clap."""
        return wrist_distance < self.distance_threshold and finger_distance < self.distance_threshold

    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        left_wrist, right_wrist, left_index, right_index = self._get_hand_landmarks(landmarks)

        state.hands_visible = check_visibility(left_wrist, right_wrist, left_index, right_index)
        if not state.hands_visible:
            self._debug("Hands not visible", "N/A", "N/A", "Active - Show both hands")
            return None

        state.wrist_distance = distance(left_wrist, right_wrist)
        state.finger_distance = distance(left_index, right_index)
        state.clapping = self._is_clap(state.wrist_distance, state.finger_distance)

        event = None
        if state.clapping and self.can_detect(frame_time):
            event = self.record_repetition(
                frame_time,
                wrist_distance=state.wrist_distance,
                finger_distance=state.finger_distance
            )

        self._debug(
            "Both hands visible",
            f"{state.wrist_distance:.3f} (thresh: {self.distance_threshold:.3f})",
            f"{state.finger_distance:.3f} (thresh: {self.distance_threshold:.3f})",
            "Active - {} ({}/{} claps)".format(
                "CLAPPING" if state.clapping else "Waiting for clap",
                self.get_current_count(), self.required_count)
        )
        return event

    def _summary(self):
        state = self.state
        return (
            "Both hands visible" if state.hands_visible else "Hands not visible",
            f"{state.wrist_distance:.3f}",
            f"{state.finger_distance:.3f}",
            "Active" if state.active else "Inactive",
        )
