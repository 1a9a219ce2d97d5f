from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .geometry import ViewConfig


@dataclass
class DisplayConfig:
    window_name: str = "Lidar Scan"


@dataclass
class RecordingConfig:
    """Video output settings; fixed for the whole run."""

    enabled: bool = True
    path: str = "lidar_scan.avi"
    codec: str = "MJPG"
    fps: float = 10.0


@dataclass
class RosConfig:
    topic: str = "/scan"
    node_name: str = "lidarplot"


@dataclass
class TelemetryConfig:
    enabled: bool = False
    path: str = "runs/lidarplot_events.jsonl"


@dataclass
class SimConfig:
    """Simulated scanner used when no sensor is attached."""

    world_width: float = 8.0
    world_height: float = 6.0
    obstacles: List[Dict[str, float]] = field(default_factory=list)
    pose: List[float] = field(default_factory=lambda: [4.0, 3.0, 0.0])
    yaw_rate: float = 0.3
    num_beams: int = 360
    range_min: float = 0.15
    range_max: float = 12.0
    noise_std: float = 0.01
    scan_hz: float = 10.0
    seed: int = 0


@dataclass
class PlotConfig:
    view: ViewConfig = field(default_factory=ViewConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    recording: RecordingConfig = field(default_factory=RecordingConfig)
    ros: RosConfig = field(default_factory=RosConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    sim: SimConfig = field(default_factory=SimConfig)


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def config_from_dict(cfg: Optional[Dict[str, Any]]) -> PlotConfig:
    """Build a PlotConfig from a nested dict; missing keys keep their defaults."""
    cfg = cfg or {}
    view_cfg = cfg.get("view", {}) or {}
    display_cfg = cfg.get("display", {}) or {}
    rec_cfg = cfg.get("recording", {}) or {}
    ros_cfg = cfg.get("ros", {}) or {}
    tel_cfg = cfg.get("telemetry", {}) or {}
    sim_cfg = cfg.get("sim", {}) or {}

    defaults = PlotConfig()
    view = ViewConfig(
        image_size=int(view_cfg.get("image_size", defaults.view.image_size)),
        meters_per_pixel=float(view_cfg.get("meters_per_pixel", defaults.view.meters_per_pixel)),
    )
    recording = RecordingConfig(
        enabled=bool(rec_cfg.get("enabled", defaults.recording.enabled)),
        path=str(rec_cfg.get("path", defaults.recording.path)),
        codec=str(rec_cfg.get("codec", defaults.recording.codec)),
        fps=float(rec_cfg.get("fps", defaults.recording.fps)),
    )
    if recording.fps <= 0.0:
        raise ValueError(f"recording.fps must be positive, got {recording.fps}")

    sim_defaults = defaults.sim
    sim = SimConfig(
        world_width=float(sim_cfg.get("world_width", sim_defaults.world_width)),
        world_height=float(sim_cfg.get("world_height", sim_defaults.world_height)),
        obstacles=[dict(o) for o in sim_cfg.get("obstacles", sim_defaults.obstacles)],
        pose=[float(v) for v in sim_cfg.get("pose", sim_defaults.pose)],
        yaw_rate=float(sim_cfg.get("yaw_rate", sim_defaults.yaw_rate)),
        num_beams=int(sim_cfg.get("num_beams", sim_defaults.num_beams)),
        range_min=float(sim_cfg.get("range_min", sim_defaults.range_min)),
        range_max=float(sim_cfg.get("range_max", sim_defaults.range_max)),
        noise_std=float(sim_cfg.get("noise_std", sim_defaults.noise_std)),
        scan_hz=float(sim_cfg.get("scan_hz", sim_defaults.scan_hz)),
        seed=int(sim_cfg.get("seed", sim_defaults.seed)),
    )

    return PlotConfig(
        view=view,
        display=DisplayConfig(window_name=str(display_cfg.get("window_name", defaults.display.window_name))),
        recording=recording,
        ros=RosConfig(
            topic=str(ros_cfg.get("topic", defaults.ros.topic)),
            node_name=str(ros_cfg.get("node_name", defaults.ros.node_name)),
        ),
        telemetry=TelemetryConfig(
            enabled=bool(tel_cfg.get("enabled", defaults.telemetry.enabled)),
            path=str(tel_cfg.get("path", defaults.telemetry.path)),
        ),
        sim=sim,
    )


def load_config(path: str) -> PlotConfig:
    return config_from_dict(load_yaml(path))
