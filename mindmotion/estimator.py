"""
Video replay: runs the MediaPipe pose landmarker over a video file and feeds
the landmarks through a DetectorHost.
"""

import logging
import os
from typing import Iterator, List, Optional, Tuple

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision

from mindmotion.host import DetectorHost, ReplaySummary
from mindmotion.landmarks import first_person
from mindmotion.recording import save_recording

logger = logging.getLogger(__name__)


class PoseEstimator:
    """Pose estimation over video files, one frame at a time."""

    def __init__(self, model_path: str, host: Optional[DetectorHost] = None):
        """
        Initialize pose estimator.

        Args:
            model_path: Path to a MediaPipe pose landmarker ``.task`` model
            host: Detector host to feed (a default one is created if None)
        """
        if not os.path.exists(model_path):
            raise FileNotFoundError(f"Pose model not found: {model_path}")

        options = vision.PoseLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.VIDEO,
            num_poses=1,
            min_pose_detection_confidence=0.5,
            min_tracking_confidence=0.5,
        )
        self.landmarker = vision.PoseLandmarker.create_from_options(options)
        self.host = host or DetectorHost()

    def frames(self, source: str, recorded: Optional[List[Tuple[float, object]]] = None) -> Iterator[Tuple[float, object]]:
        """
        Decode a video and yield (frame_time, pose result) pairs.

        Args:
            source: Video file path
            recorded: If given, (frame_time, landmarks) pairs are appended to it
        """
        cap = cv2.VideoCapture(source)
        if not cap.isOpened():
            raise FileNotFoundError(f"Could not open video file: {source}")

        fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
        logger.info("Opened %s (%d frames at %.1f FPS)",
                    source, int(cap.get(cv2.CAP_PROP_FRAME_COUNT)), fps)

        frame_index = 0
        try:
            while True:
                success, frame = cap.read()
                if not success:
                    logger.info("End of video reached.")
                    break

                frame_time = frame_index / fps
                frame_index += 1

                image = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)
                result = self.landmarker.detect_for_video(mp_image, int(frame_time * 1000))

                if recorded is not None:
                    recorded.append((frame_time, first_person(result)))
                yield frame_time, result
        finally:
            cap.release()

    def run(self, source: str, motion, record_path: Optional[str] = None) -> ReplaySummary:
        """Detect ``motion`` in a video file, optionally saving the landmarks."""
        recorded = [] if record_path else None
        frames = self.frames(source, recorded)
        try:
            summary = self.host.run(frames, motion)
        finally:
            frames.close()

        if record_path:
            written = save_recording(record_path, recorded)
            logger.info("Saved %d frames to %s", written, record_path)
        return summary

    def close(self):
        self.landmarker.close()
