"""Landmark recordings stored as JSON Lines, one frame per line."""

import json
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from mindmotion.landmarks import Landmark


class RecordingError(ValueError):
    """A recording line could not be parsed."""


def _encode_landmarks(landmarks: Optional[Sequence]) -> Optional[List[list]]:
    if landmarks is None:
        return None
    return [[lm.x, lm.y, getattr(lm, "visibility", None)] for lm in landmarks]


def save_recording(path: str, frames: Iterable[Tuple[float, Optional[Sequence]]]) -> int:
    """
    Write frames to a recording.

    Args:
        path: Output file
        frames: (frame_time, landmarks) pairs; landmarks is None for no person

    Returns:
        Number of frames written
    """
    count = 0
    with open(path, 'w') as f:
        for frame_time, landmarks in frames:
            f.write(json.dumps({"t": frame_time, "landmarks": _encode_landmarks(landmarks)}) + "\n")
            count += 1
    return count


def load_recording(path: str) -> Iterator[Tuple[float, Optional[List[List[Landmark]]]]]:
    """
    Read frames from a recording.

    Yields:
        (frame_time, frame) where frame is a one-person list of landmarks, or
        None when nobody was detected
    """
    with open(path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
                frame_time = float(record["t"])
                points = record["landmarks"]
                if points is None:
                    frame = None
                else:
                    frame = [[Landmark(float(p[0]), float(p[1]),
                                       None if len(p) < 3 or p[2] is None else float(p[2]))
                              for p in points]]
            except (ValueError, KeyError, TypeError, IndexError) as e:
                raise RecordingError(f"{path}:{line_number}: invalid frame ({e})") from e
            yield frame_time, frame
