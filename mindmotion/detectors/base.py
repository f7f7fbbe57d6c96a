import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from mindmotion.consts import DETECTION_TIMEOUT
from mindmotion.landmarks import first_person

logger = logging.getLogger(__name__)


@dataclass
class DetectionEvent:
    """Represents one counted repetition."""
    name: str
    timestamp: float
    count: int  # Repetitions counted so far, including this one
    required: int
    metadata: Optional[dict] = None

    @property
    def completed(self) -> bool:
        return self.count >= self.required


class GestureListener:
    """Progress callbacks. Subclass and override the ones you need."""

    def on_detected(self, count: int) -> None:
        pass

    def on_completed(self) -> None:
        pass

    def on_progress(self, current: int, required: int) -> None:
        pass

    def on_detection_timeout(self) -> None:
        pass


class DebugListener:
    """Human-readable diagnostics. Never used for control flow."""

    def on_debug_update(self, pose_status: str, metric1: str, metric2: str, status: str) -> None:
        pass


@dataclass
class DetectorState:
    """Session state common to every detector; gestures extend it with their own fields."""
    active: bool = False
    detection_start_time: float = 0.0
    rep_times: List[float] = field(default_factory=list)
    last_rep_time: Optional[float] = None


class GestureDetector(ABC):
    """
    Base class for all gesture detectors.

    A detector is built once and reused across sessions. ``start_detection``
    resets the state and activates it, ``analyze_pose_result`` consumes one
    frame at a time, and the detector deactivates itself once the required
    repetitions are counted or the session times out.
    """

    # Landmarks needed per person (highest index used + 1)
    required_landmarks = 0

    def __init__(self, name: str, required_count: int, cooldown: float,
                 timeout: float = DETECTION_TIMEOUT,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize gesture detector.

        Args:
            name: Name of the gesture
            required_count: Repetitions needed to complete the motion
            cooldown: Minimum time (seconds) between counted repetitions
            timeout: Seconds allowed to complete the motion
            clock: Time source used when a frame carries no timestamp
        """
        self.name = name
        self.required_count = required_count
        self.cooldown = cooldown
        self.timeout = timeout
        self.clock = clock
        self.listener = None
        self.debug_listener = None
        self.state = self._new_state()

    @abstractmethod
    def _new_state(self) -> DetectorState:
        """Return a fresh state object for this gesture."""

    @abstractmethod
    def _analyze(self, landmarks, frame_time: float) -> Optional[DetectionEvent]:
        """
        Run the gesture-specific recognition step on one frame.

        Called only while active, within the timeout and with enough landmarks.
        Implementations must emit a debug update before returning.
        """

    def _summary(self):
        """Debug strings reported on start/stop."""
        return ("N/A", "N/A", "N/A", "Active" if self.state.active else "Inactive")

    def set_listener(self, listener: Optional[GestureListener]) -> None:
        self.listener = listener

    def set_debug_listener(self, debug_listener: Optional[DebugListener]) -> None:
        self.debug_listener = debug_listener

    def start_detection(self, frame_time: Optional[float] = None) -> None:
        logger.debug("Starting %s detection...", self.name)
        self.reset()
        self.state.active = True
        self.state.detection_start_time = self._now(frame_time)
        self._notify("on_progress", 0, self.required_count)
        self._debug(*self._summary())

    def stop_detection(self) -> None:
        logger.debug("Stopping %s detection", self.name)
        self.state.active = False
        self._debug(*self._summary())

    def reset(self) -> None:
        self.state = self._new_state()

    def analyze_pose_result(self, result, frame_time: Optional[float] = None) -> Optional[DetectionEvent]:
        """
        Analyze one pose frame.

        Args:
            result: Pose result (see ``first_person`` for accepted shapes)
            frame_time: Frame timestamp in seconds; the clock is used if None

        Returns:
            DetectionEvent if a repetition was counted, None otherwise
        """
        landmarks = first_person(result)
        if not self.state.active or landmarks is None:
            self._debug("No pose detected", "N/A", "N/A",
                        "Active - Waiting for pose" if self.state.active else "Inactive")
            return None

        now = self._now(frame_time)
        if now - self.state.detection_start_time > self.timeout:
            logger.info("%s detection timed out", self.name)
            self._notify("on_detection_timeout")
            self.stop_detection()
            return None

        if len(landmarks) < self.required_landmarks:
            self._debug("Insufficient landmarks", "N/A", "N/A", "Active - Waiting for pose")
            return None

        return self._analyze(landmarks, now)

    def is_active(self) -> bool:
        return self.state.active

    def get_current_count(self) -> int:
        return len(self.state.rep_times)

    def get_required_count(self) -> int:
        return self.required_count

    def get_remaining_time(self, now: Optional[float] = None) -> float:
        if not self.state.active:
            return 0.0
        elapsed = self._now(now) - self.state.detection_start_time
        return max(0.0, self.timeout - elapsed)

    def can_detect(self, frame_time: float) -> bool:
        """Check if enough time has passed since the last counted repetition."""
        last = self.state.last_rep_time
        return last is None or (frame_time - last) > self.cooldown

    def record_repetition(self, frame_time: float, **metadata) -> DetectionEvent:
        """Count a repetition, notify the listener and finish the session if complete."""
        self.state.rep_times.append(frame_time)
        self.state.last_rep_time = frame_time
        count = len(self.state.rep_times)

        logger.info("%s detected! Count: %d/%d", self.name, count, self.required_count)
        self._notify("on_detected", count)
        self._notify("on_progress", count, self.required_count)

        if count >= self.required_count:
            logger.info("%s sequence completed!", self.name)
            self._notify("on_completed")
            self.stop_detection()

        return DetectionEvent(
            name=self.name,
            timestamp=frame_time,
            count=count,
            required=self.required_count,
            metadata=metadata
        )

    def _now(self, frame_time: Optional[float]) -> float:
        return self.clock() if frame_time is None else frame_time

    def _notify(self, method: str, *args) -> None:
        if self.listener is not None:
            getattr(self.listener, method)(*args)

    def _debug(self, pose_status: str, metric1: str, metric2: str, status: str) -> None:
        if self.debug_listener is not None:
            self.debug_listener.on_debug_update(pose_status, metric1, metric2, status)
