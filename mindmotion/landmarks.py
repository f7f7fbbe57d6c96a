"""Pose landmark indices and frame normalization."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence


class PoseLandmark(IntEnum):
    """MediaPipe Pose landmark indices."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


NUM_LANDMARKS = len(PoseLandmark)


@dataclass(frozen=True)
class Landmark:
    """A normalized 2D body point. ``visibility`` of None means always visible."""
    x: float
    y: float
    visibility: Optional[float] = None


def first_person(result) -> Optional[Sequence]:
    """
    Extract the first detected person's landmarks from a pose result.

    Accepts None, a MediaPipe Tasks ``PoseLandmarkerResult`` (``pose_landmarks``
    is a list of persons), a legacy ``solutions.pose`` result
    (``pose_landmarks.landmark``), or a plain sequence of persons.

    Returns:
        The landmark sequence of the first person, or None if nobody was detected
    """
    if result is None:
        return None

    persons = getattr(result, "pose_landmarks", result)
    if persons is None:
        return None
    if hasattr(persons, "landmark"):
        persons = [persons.landmark]

    if len(persons) == 0:
        return None
    return persons[0]
