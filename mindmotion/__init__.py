"""MindMotion - gesture repetition counting from pose landmarks"""

from .detectors import (
    ClapDetector, DebugListener, DetectionEvent, GestureDetector, GestureListener,
    JumpDetector, MarchDetector, RaiseHandDetector, WaveDetector,
)
from .host import DetectorHost, HostListener, MotionType
from .landmarks import Landmark, PoseLandmark, first_person

__version__ = "1.0.0"
__all__ = [
    'ClapDetector', 'WaveDetector', 'JumpDetector', 'MarchDetector', 'RaiseHandDetector',
    'GestureDetector', 'GestureListener', 'DebugListener', 'DetectionEvent',
    'DetectorHost', 'HostListener', 'MotionType',
    'Landmark', 'PoseLandmark', 'first_person',
]
