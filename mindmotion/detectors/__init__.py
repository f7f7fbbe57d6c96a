from .base import DebugListener, DetectionEvent, DetectorState, GestureDetector, GestureListener
from .clap_detector import ClapDetector
from .jump_detector import JumpDetector, JumpPhase
from .march_detector import MarchDetector
from .raise_hand_detector import RaiseHandDetector
from .wave_detector import WaveDetector

__all__ = ["DebugListener", "DetectionEvent", "DetectorState", "GestureDetector", "GestureListener",
           "ClapDetector", "JumpDetector", "JumpPhase", "MarchDetector", "RaiseHandDetector", "WaveDetector"]
