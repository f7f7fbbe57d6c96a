#!/usr/bin/env python3
"""
Command-line replay of a motion session.

Usage:
    mindmotion session.jsonl --motion clapping
    mindmotion video.mp4 --motion jumping --model pose_landmarker_lite.task
    mindmotion video.mp4 --motion wave --model pose_landmarker_lite.task --record out.jsonl --debug
"""

import argparse
import logging
import sys

from mindmotion.host import DetectorHost, HostListener, MotionType, ReplaySummary
from mindmotion.recording import RecordingError, load_recording

logger = logging.getLogger(__name__)


class ConsoleListener(HostListener):
    """Prints session progress, plus detector diagnostics in debug mode."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def on_motion_progress(self, motion, current, required):
        print(f"[{motion.value.upper()}] {current}/{required}")

    def on_motion_completed(self, motion):
        print(f"[{motion.value.upper()}] Completed!")

    def on_motion_timeout(self, motion):
        print(f"[{motion.value.upper()}] Timed out")

    def on_motion_debug(self, motion, pose_status, metric1, metric2, status):
        if self.debug:
            print(f"[DEBUG] {pose_status} | {metric1} | {metric2} | {status}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mindmotion",
        description="Count gesture repetitions in a video or a landmark recording."
    )
    parser.add_argument("source", help="Video file, or a .jsonl landmark recording")
    parser.add_argument("--motion", required=True, choices=[m.value for m in MotionType],
                        help="Motion to detect")
    parser.add_argument("--model", help="MediaPipe pose landmarker .task file (video sources)")
    parser.add_argument("--lenient-wave", action="store_true",
                        help="Accept waves with hands at shoulder height (seated users)")
    parser.add_argument("--record", metavar="OUT.jsonl",
                        help="Save the detected landmarks (video sources)")
    parser.add_argument("--debug", action="store_true", help="Show debug info")
    return parser


def print_summary(summary: ReplaySummary) -> None:
    print("\n" + "=" * 50)
    print("Detection Summary")
    print("=" * 50)
    print(f"Motion: {summary.motion.value}")
    print(f"Total frames: {summary.frames}")
    print(f"Repetitions: {summary.count}/{summary.required}")
    for event in summary.events:
        print(f"  #{event.count} at {event.timestamp:.2f}s")
    print(f"Outcome: {summary.outcome}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    host = DetectorHost(listener=ConsoleListener(args.debug), lenient_wave=args.lenient_wave)

    if args.source.endswith(".jsonl"):
        if args.record:
            logger.warning("--record is ignored when replaying a recording")
        try:
            summary = host.run(load_recording(args.source), args.motion)
        except (OSError, RecordingError) as e:
            print(f"ERROR: {e}")
            return 1
    else:
        if not args.model:
            parser.error("--model is required for video sources")

        # MediaPipe and OpenCV are only needed for video input
        from mindmotion.estimator import PoseEstimator

        try:
            estimator = PoseEstimator(args.model, host)
        except FileNotFoundError as e:
            print(f"ERROR: {e}")
            return 1
        try:
            summary = estimator.run(args.source, args.motion, record_path=args.record)
        except FileNotFoundError as e:
            print(f"ERROR: {e}")
            return 1
        finally:
            estimator.close()

    print_summary(summary)
    return 0 if summary.outcome == "completed" else 1


if __name__ == "__main__":
    sys.exit(main())
