"""
Routes pose frames to the detector for the current motion and relays its
callbacks, tagged with the motion type, to a single host listener.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from mindmotion.detectors import (
    ClapDetector,
    DebugListener,
    DetectionEvent,
    GestureDetector,
    GestureListener,
    JumpDetector,
    MarchDetector,
    RaiseHandDetector,
    WaveDetector,
)

logger = logging.getLogger(__name__)


class MotionType(str, Enum):
    CLAPPING = "clapping"
    WAVE = "wave"
    JUMPING = "jumping"
    MARCHING = "marching"
    RAISING_HAND = "raising_hand"

    @classmethod
    def parse(cls, value) -> "MotionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown motion type: {value!r}") from None


class HostListener:
    """Session-level callbacks. Subclass and override the ones you need."""

    def on_motion_progress(self, motion: MotionType, current: int, required: int) -> None:
        pass

    def on_motion_detected(self, motion: MotionType, count: int) -> None:
        pass

    def on_motion_completed(self, motion: MotionType) -> None:
        pass

    def on_motion_timeout(self, motion: MotionType) -> None:
        pass

    def on_motion_debug(self, motion: MotionType, pose_status: str,
                        metric1: str, metric2: str, status: str) -> None:
        pass


@dataclass
class ReplaySummary:
    """Outcome of running one motion over a sequence of frames."""
    motion: MotionType
    frames: int
    count: int
    required: int
    outcome: str  # "completed", "timeout" or "incomplete"
    events: List[DetectionEvent] = field(default_factory=list)


class _Relay(GestureListener, DebugListener):
    """Forwards one detector's callbacks to the host."""

    def __init__(self, host: "DetectorHost", motion: MotionType):
        self.host = host
        self.motion = motion

    def on_detected(self, count):
        self.host._notify("on_motion_detected", self.motion, count)

    def on_progress(self, current, required):
        self.host._notify("on_motion_progress", self.motion, current, required)

    def on_completed(self):
        logger.info("Motion %s completed", self.motion.value)
        self.host._finish(self.motion)
        self.host._notify("on_motion_completed", self.motion)

    def on_detection_timeout(self):
        logger.info("Motion %s timed out", self.motion.value)
        self.host._finish(self.motion)
        self.host._notify("on_motion_timeout", self.motion)

    def on_debug_update(self, pose_status, metric1, metric2, status):
        self.host._notify("on_motion_debug", self.motion, pose_status, metric1, metric2, status)


class DetectorHost:
    """Owns one detector per motion type and keeps at most one of them active."""

    def __init__(self, listener: Optional[HostListener] = None,
                 clock: Callable[[], float] = time.monotonic,
                 lenient_wave: bool = False):
        self.listener = listener
        self.current_motion: Optional[MotionType] = None
        self.detectors: Dict[MotionType, GestureDetector] = {
            MotionType.CLAPPING: ClapDetector(clock=clock),
            MotionType.WAVE: WaveDetector(lenient=lenient_wave, clock=clock),
            MotionType.JUMPING: JumpDetector(clock=clock),
            MotionType.MARCHING: MarchDetector(clock=clock),
            MotionType.RAISING_HAND: RaiseHandDetector(clock=clock),
        }
        for motion, detector in self.detectors.items():
            relay = _Relay(self, motion)
            detector.set_listener(relay)
            detector.set_debug_listener(relay)

    def detector(self, motion) -> GestureDetector:
        return self.detectors[MotionType.parse(motion)]

    def start_motion(self, motion, frame_time: Optional[float] = None) -> GestureDetector:
        """Stop whatever is running and start detecting ``motion``."""
        motion = MotionType.parse(motion)
        self.stop_all()
        logger.info("Starting motion %s", motion.value)
        self.current_motion = motion
        detector = self.detectors[motion]
        detector.start_detection(frame_time)
        return detector

    def stop_all(self) -> None:
        for detector in self.detectors.values():
            if detector.is_active():
                detector.stop_detection()
        self.current_motion = None

    def analyze_pose_result(self, result, frame_time: Optional[float] = None) -> Optional[DetectionEvent]:
        if self.current_motion is None:
            return None
        detector = self.detectors[self.current_motion]
        if not detector.is_active():
            return None
        return detector.analyze_pose_result(result, frame_time)

    def run(self, frames: Iterable[Tuple[float, object]], motion) -> ReplaySummary:
        """
        Run one motion over timestamped frames until it finishes or the frames run out.

        Args:
            frames: (frame_time, pose result) pairs in time order
            motion: Motion type to detect

        Returns:
            ReplaySummary describing the outcome
        """
        motion = MotionType.parse(motion)
        detector = None
        frame_count = 0
        events = []

        try:
            for frame_time, result in frames:
                if detector is None:
                    detector = self.start_motion(motion, frame_time)
                frame_count += 1
                event = self.analyze_pose_result(result, frame_time)
                if event is not None:
                    events.append(event)
                if not detector.is_active():
                    break
        except Exception:
            # A broken frame source ends the session
            self.stop_all()
            raise

        if detector is None:
            detector = self.detectors[motion]
            detector.reset()
        count = detector.get_current_count()
        required = detector.get_required_count()

        if count >= required:
            outcome = "completed"
        elif frame_count and not detector.is_active():
            outcome = "timeout"
        else:
            outcome = "incomplete"
            self.stop_all()

        return ReplaySummary(motion=motion, frames=frame_count, count=count,
                             required=required, outcome=outcome, events=events)

    def _finish(self, motion: MotionType) -> None:
        if self.current_motion == motion:
            self.current_motion = None

    def _notify(self, method: str, *args) -> None:
        if self.listener is not None:
            getattr(self.listener, method)(*args)
