from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from lidarplot.config import PlotConfig, load_config
from lidarplot.pipeline import ScanPipeline
from lidarplot.render import FrameRenderer
from lidarplot.sink import DisplayUnavailableError, FrameSink, PygameDisplay, VideoRecorder
from telemetry.logger import ConsoleReporter, TelemetryLogger


def build_pipeline(cfg: PlotConfig, record: bool, verbose: bool = False) -> ScanPipeline:
    size = cfg.view.image_size
    display = PygameDisplay(cfg.display.window_name, (size, size))

    recorder = None
    if record and cfg.recording.enabled:
        recorder = VideoRecorder.open(
            cfg.recording.path,
            codec=cfg.recording.codec,
            fps=cfg.recording.fps,
            frame_size=(size, size),
        )

    listeners = [ConsoleReporter(verbose=verbose)]
    if cfg.telemetry.enabled:
        listeners.append(TelemetryLogger(cfg.telemetry.path))

    return ScanPipeline(FrameRenderer(cfg.view), FrameSink(display, recorder), listeners)


def run_sim(pipeline: ScanPipeline, cfg: PlotConfig, max_frames: Optional[int]) -> None:
    from ingest.sim_scanner import SimulatedScanner

    scanner = SimulatedScanner.from_config(cfg.sim)
    x, y, yaw = cfg.sim.pose
    for message in scanner.stream((x, y, yaw), cfg.sim.yaw_rate, max_frames=max_frames):
        pipeline(message)
        if pipeline.quit_requested:
            break


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Live top-down plot and recording of 2D lidar scans.")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/lidarplot.yaml",
        help="Path to lidarplot YAML config.",
    )
    parser.add_argument(
        "--source",
        choices=["ros", "sim"],
        default="ros",
        help="Scan source: a ROS 2 LaserScan topic or the built-in simulated scanner.",
    )
    parser.add_argument("--no-record", action="store_true", help="Do not write a video file.")
    parser.add_argument("--max-frames", type=int, default=None, help="Stop after N simulated scans.")
    parser.add_argument("--verbose", action="store_true", help="Print per-frame rejection counts.")
    args = parser.parse_args(argv)

    cfg = load_config(args.config)

    try:
        pipeline = build_pipeline(cfg, record=not args.no_record, verbose=args.verbose)
    except DisplayUnavailableError as exc:
        print(f"Cannot start: {exc}", file=sys.stderr)
        return 1

    try:
        if args.source == "sim":
            run_sim(pipeline, cfg, args.max_frames)
        else:
            from ingest import ros_node

            ros_node.run(pipeline, topic=cfg.ros.topic, node_name=cfg.ros.node_name)
    except KeyboardInterrupt:
        print("Stopping (KeyboardInterrupt).")
    finally:
        pipeline.close()
        for listener in pipeline.listeners:
            if isinstance(listener, TelemetryLogger):
                listener.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
