import logging
from dataclasses import dataclass
from typing import Optional

from mindmotion.consts import (
    MARCH_BASE_THRESHOLD,
    MARCH_BASELINE_FRAMES,
    MARCH_COOLDOWN,
    MARCH_HEIGHT_MULTIPLIER,
    MARCH_MIN_FRAMES_LIFTED,
    MARCH_MIN_VISIBILITY,
    REQUIRED_MARCH_COUNT,
)
from mindmotion.geometry import check_visibility
from mindmotion.landmarks import PoseLandmark

from .base import DetectionEvent, DetectorState, GestureDetector

logger = logging.getLogger(__name__)

LEGS = {
    "left": (PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE),
    "right": (PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE),
}


@dataclass
class LegState:
    frames_lifted: int = 0
    was_lifted: bool = False
    lift: float = 0.0
    threshold: float = 0.0


@dataclass
class MarchState(DetectorState):
    baseline_set: bool = False
    baseline_frames: int = 0
    knee_sums: dict = None
    baseline_knee_y: dict = None
    legs: dict = None

    # Debug info
    body_visible: bool = False
    lifted_leg: str = "none"

    def __post_init__(self):
        self.knee_sums = {leg: 0.0 for leg in LEGS}
        self.baseline_knee_y = {leg: 0.0 for leg in LEGS}
        self.legs = {leg: LegState() for leg in LEGS}


class MarchDetector(GestureDetector):
    """
    Detects marching in place by knee lifts.

    The standing knee height is averaged over the first visible frames. After
    that, each knee counts a step when it rises above a threshold scaled by
    that leg's length and stays up for a few frames.
    """

    required_landmarks = PoseLandmark.RIGHT_ANKLE + 1

    def __init__(self, **kwargs):
        super().__init__("march", REQUIRED_MARCH_COUNT, MARCH_COOLDOWN, **kwargs)
        self.baseline_frames = MARCH_BASELINE_FRAMES
        self.base_threshold = MARCH_BASE_THRESHOLD
        self.height_multiplier = MARCH_HEIGHT_MULTIPLIER
        self.min_frames_lifted = MARCH_MIN_FRAMES_LIFTED
        self.min_visibility = MARCH_MIN_VISIBILITY

    def _new_state(self) -> MarchState:
        return MarchState()

    def _summary(self):
        if self.state.active:
            return ("Initializing...", "Wait", "Wait", "Calibrating baseline...")
        return ("Stopped", "N/A", "N/A", "Inactive")

    def _calibrate(self, landmarks) -> None:
        state = self.state
        for leg, (_, knee_id) in LEGS.items():
            state.knee_sums[leg] += landmarks[knee_id].y
        state.baseline_frames += 1

        if state.baseline_frames >= self.baseline_frames:
            for leg in LEGS:
                state.baseline_knee_y[leg] = state.knee_sums[leg] / state.baseline_frames
            state.baseline_set = True
            logger.debug("March baseline set: %s", state.baseline_knee_y)
            self._debug("Baseline Set!", "OK", "OK", "Start marching!")
        else:
            self._debug(f"Calibrating ({state.baseline_frames}/{self.baseline_frames})",
                        "Wait", "Wait", "Stand still")

    def _update_leg(self, leg: str, landmarks) -> bool:
        """Update one leg's lift tracking. Returns True on a new lift."""
        hip_id, knee_id = LEGS[leg]
        hip = landmarks[hip_id]
        knee = landmarks[knee_id]
        leg_state = self.state.legs[leg]

        leg_state.lift = self.state.baseline_knee_y[leg] - knee.y
        leg_length = abs(hip.y - knee.y)
        leg_state.threshold = self.base_threshold + leg_length * self.height_multiplier

        lifted = leg_state.lift > leg_state.threshold
        if lifted:
            leg_state.frames_lifted += 1
        else:
            leg_state.frames_lifted = 0
            leg_state.was_lifted = False

        if leg_state.frames_lifted >= self.min_frames_lifted and not leg_state.was_lifted:
            leg_state.was_lifted = True
            return True
        return False

    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        state.body_visible = check_visibility(
            *(landmarks[i] for i in (
                PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP,
                PoseLandmark.LEFT_KNEE, PoseLandmark.RIGHT_KNEE,
                PoseLandmark.LEFT_ANKLE, PoseLandmark.RIGHT_ANKLE,
            )),
            threshold=self.min_visibility
        )
        if not state.body_visible:
            self._debug("Body not fully visible", "N/A", "N/A", "Adjust camera")
            return None

        if not state.baseline_set:
            self._calibrate(landmarks)
            return None

        event = None
        for leg in LEGS:
            if self._update_leg(leg, landmarks) and event is None and self.can_detect(frame_time):
                event = self.record_repetition(frame_time, leg=leg)

        state.lifted_leg = next(
            (leg for leg in LEGS if state.legs[leg].frames_lifted >= self.min_frames_lifted),
            "none"
        )

        left, right = state.legs["left"], state.legs["right"]
        self._debug(
            "Body OK",
            f"{left.lift:.3f} (thr {left.threshold:.3f}) [{left.frames_lifted}]",
            f"{right.lift:.3f} (thr {right.threshold:.3f}) [{right.frames_lifted}]",
            f"Lift: {state.lifted_leg}   Steps: {self.get_current_count()}/{self.required_count}"
        )
        return event
