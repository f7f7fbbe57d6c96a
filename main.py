#!/usr/bin/env python3
"""
Gesture repetition counting with MediaPipe pose landmarks.
Counts claps, waves, jumps, marching steps and hand raises.

Run ``python main.py --help`` for usage.
"""

import sys

from mindmotion.cli import main

if __name__ == "__main__":
    sys.exit(main())
