import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

import numpy as np

from mindmotion.consts import (
    JUMP_AIRBORNE_MAX_FRAMES,
    JUMP_BASELINE_FRACTION,
    JUMP_COOLDOWN,
    JUMP_FALL_MAX_FRAMES,
    JUMP_FALL_VELOCITY,
    JUMP_LAND_HEIGHT,
    JUMP_LAND_VELOCITY,
    JUMP_MIN_AIRBORNE_FRAMES,
    JUMP_MIN_PEAK_HEIGHT,
    JUMP_MIN_WINDOW,
    JUMP_PEAK_VELOCITY,
    JUMP_RISE_HEIGHT,
    JUMP_RISE_MAX_FRAMES,
    JUMP_RISE_VELOCITY,
    JUMP_VELOCITY_SMOOTHING,
    JUMP_WINDOW_SIZE,
    REQUIRED_JUMP_COUNT,
)
from mindmotion.geometry import check_visibility
from mindmotion.landmarks import PoseLandmark

from .base import DetectionEvent, DetectorState, GestureDetector

logger = logging.getLogger(__name__)


class JumpPhase(Enum):
    WAITING = auto()
    DETECTED_RISE = auto()
    AIRBORNE = auto()
    DETECTED_FALL = auto()


@dataclass
class JumpState(DetectorState):
    hip_history: deque = field(default_factory=lambda: deque(maxlen=JUMP_WINDOW_SIZE))
    prev_hip_y: Optional[float] = None
    velocity: float = 0.0  # Smoothed hip y velocity per frame, positive = downward
    phase: JumpPhase = JumpPhase.WAITING
    phase_frames: int = 0
    airborne_frames: int = 0
    peak_height: float = 0.0

    # Debug info
    body_visible: bool = False
    baseline: float = 0.0
    height: float = 0.0


class JumpDetector(GestureDetector):
    """
    Detects jumps from the vertical motion of the hips.

    The ground baseline is recomputed every frame as the mean of the lowest
    hip positions in a short rolling window, so it stays valid while the body
    is partway through a jump. A single jump walks through
    WAITING -> DETECTED_RISE -> AIRBORNE -> DETECTED_FALL -> WAITING and is
    counted on landing if it went high enough for long enough. A phase that
    overruns its frame budget is dropped as a false alarm.
    """

    required_landmarks = PoseLandmark.RIGHT_ANKLE + 1

    def __init__(self, **kwargs):
        super().__init__("jump", REQUIRED_JUMP_COUNT, JUMP_COOLDOWN, **kwargs)
        self.baseline_fraction = JUMP_BASELINE_FRACTION
        self.min_window = JUMP_MIN_WINDOW
        self.smoothing = JUMP_VELOCITY_SMOOTHING
        self.min_peak_height = JUMP_MIN_PEAK_HEIGHT
        self.min_airborne_frames = JUMP_MIN_AIRBORNE_FRAMES

    def _new_state(self) -> JumpState:
        return JumpState()

    def _ground_baseline(self) -> float:
        """Mean hip y of the lowest samples (largest y, since y grows downward)."""
        samples = np.sort(np.asarray(self.state.hip_history, dtype=float))
        keep = max(1, int(round(len(samples) * self.baseline_fraction)))
        return float(np.mean(samples[-keep:]))

    def _set_phase(self, phase: JumpPhase) -> None:
        logger.debug("Jump phase %s -> %s (height %.3f, velocity %.4f)",
                     self.state.phase.name, phase.name, self.state.height, self.state.velocity)
        self.state.phase = phase
        self.state.phase_frames = 0

    def _abort(self, reason: str) -> None:
        logger.debug("Jump discarded: %s", reason)
        self._set_phase(JumpPhase.WAITING)
        self.state.airborne_frames = 0
        self.state.peak_height = 0.0

    def _update_velocity(self, hip_y: float) -> None:
        state = self.state
        raw = 0.0 if state.prev_hip_y is None else hip_y - state.prev_hip_y
        state.velocity = self.smoothing * raw + (1.0 - self.smoothing) * state.velocity
        state.prev_hip_y = hip_y

    def _step_phase(self, frame_time: float) -> Optional[DetectionEvent]:
        """Advance the jump state machine by one frame."""
        state = self.state
        height = state.height
        velocity = state.velocity

        if state.phase == JumpPhase.WAITING:
            if velocity < -JUMP_RISE_VELOCITY and height > JUMP_RISE_HEIGHT:
                self._set_phase(JumpPhase.DETECTED_RISE)
                state.airborne_frames = 1
                state.peak_height = height
            return None

        state.phase_frames += 1
        state.peak_height = max(state.peak_height, height)
        if height > JUMP_LAND_HEIGHT:
            state.airborne_frames += 1

        if state.phase == JumpPhase.DETECTED_RISE:
            if height < JUMP_RISE_HEIGHT:
                self._abort("dropped back before the peak")
            elif velocity > -JUMP_PEAK_VELOCITY:
                self._set_phase(JumpPhase.AIRBORNE)
            elif state.phase_frames > JUMP_RISE_MAX_FRAMES:
                self._abort("rise took too long")

        elif state.phase == JumpPhase.AIRBORNE:
            if velocity > JUMP_FALL_VELOCITY:
                self._set_phase(JumpPhase.DETECTED_FALL)
            elif state.phase_frames > JUMP_AIRBORNE_MAX_FRAMES:
                self._abort("stayed up too long")

        elif state.phase == JumpPhase.DETECTED_FALL:
            if abs(velocity) < JUMP_LAND_VELOCITY and height < JUMP_LAND_HEIGHT:
                return self._land(frame_time)
            if state.phase_frames > JUMP_FALL_MAX_FRAMES:
                self._abort("fall took too long")

        return None

    def _land(self, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        peak = state.peak_height
        airborne = state.airborne_frames
        logger.debug("Landing detected - frames in air: %d, peak height: %.3f", airborne, peak)

        self._set_phase(JumpPhase.WAITING)
        state.airborne_frames = 0
        state.peak_height = 0.0

        if peak < self.min_peak_height or airborne < self.min_airborne_frames:
            return None
        if not self.can_detect(frame_time):
            return None
        return self.record_repetition(frame_time, peak_height=peak, airborne_frames=airborne)

    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        state = self.state
        left_hip = landmarks[PoseLandmark.LEFT_HIP]
        right_hip = landmarks[PoseLandmark.RIGHT_HIP]

        state.body_visible = check_visibility(
            left_hip, right_hip,
            landmarks[PoseLandmark.LEFT_KNEE], landmarks[PoseLandmark.RIGHT_KNEE],
            landmarks[PoseLandmark.LEFT_ANKLE], landmarks[PoseLandmark.RIGHT_ANKLE],
            landmarks[PoseLandmark.LEFT_SHOULDER], landmarks[PoseLandmark.RIGHT_SHOULDER],
        )
        if not state.body_visible:
            state.prev_hip_y = None
            self._debug("Body not fully visible", "N/A", "N/A", "Active - Show full body")
            return None

        hip_y = (left_hip.y + right_hip.y) / 2.0
        self._update_velocity(hip_y)

        if len(state.hip_history) < self.min_window:
            state.hip_history.append(hip_y)
            self._debug("Body visible", "Calibrating baseline...", "On ground", "Active - Stand still")
            return None

        state.baseline = self._ground_baseline()
        state.height = state.baseline - hip_y  # Positive = above the ground baseline
        state.hip_history.append(hip_y)

        event = self._step_phase(frame_time)

        in_air = state.phase != JumpPhase.WAITING
        self._debug(
            "Full body visible",
            f"Hip:{hip_y:.3f} Base:{state.baseline:.3f} (height:{state.height:.3f})",
            f"{state.phase.name} v:{state.velocity:.4f}" +
            (f" (frames:{state.airborne_frames})" if in_air else ""),
            "Active - {} ({}/{} jumps)".format(
                "JUMPING" if in_air else "Jump now",
                self.get_current_count(), self.required_count)
        )
        return event

    def _summary(self):
        state = self.state
        return (
            "Full body visible" if state.body_visible else "Body not visible",
            f"Base:{state.baseline:.3f} Height:{state.height:.3f}",
            state.phase.name,
            "Active" if state.active else "Inactive",
        )
