"""Low-level landmark helpers shared by the gesture detectors."""

import numpy as np

from mindmotion.consts import MIN_VISIBILITY


def distance(point1, point2) -> float:
    """
    Calculate 2D Euclidean distance between two landmarks.

    Args:
        point1: First landmark with x, y coordinates
        point2: Second landmark with x, y coordinates

    Returns:
        Distance as float
    """
    return float(np.sqrt(
        (point1.x - point2.x)**2 +
        (point1.y - point2.y)**2
    ))


def is_visible(landmark, threshold: float = MIN_VISIBILITY) -> bool:
    """Landmarks without a visibility score are trusted."""
    if landmark is None:
        return False
    visibility = getattr(landmark, "visibility", None)
    if visibility is None:
        return True
    return visibility > threshold


def check_visibility(*landmarks, threshold: float = MIN_VISIBILITY) -> bool:
    """Check that every given landmark is visible."""
    return all(is_visible(landmark, threshold) for landmark in landmarks)


def ema(previous: float, current: float, alpha: float) -> float:
    """
    Exponential moving average.

    A previous value of exactly 0.0 is treated as "no data yet" and the
    current sample is returned unchanged.
    """
    if previous == 0.0:
        return current
    return previous * (1.0 - alpha) + current * alpha
