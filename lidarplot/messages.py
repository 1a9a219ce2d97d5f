from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence


@dataclass
class ScanSample:
    """One measurement of a scan: beam angle (radians) and distance (meters)."""

    angle: float
    range: float


@dataclass
class ScanMessage:
    """One sweep of a planar range sensor.

    Mirrors the fields of ``sensor_msgs/LaserScan`` that the plotter reads.
    Sample ``i`` has angle ``angle_min + i * angle_increment`` and distance
    ``ranges[i]``.
    """

    angle_min: float
    angle_max: float
    angle_increment: float
    range_min: float
    range_max: float
    time_increment: float
    scan_time: float
    ranges: Sequence[float] = field(default_factory=list)
    frame_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanMessage":
        """Create a message from a plain dict (e.g. a decoded JSON record)."""
        return cls(
            angle_min=float(data["angle_min"]),
            angle_max=float(data["angle_max"]),
            angle_increment=float(data["angle_increment"]),
            range_min=float(data["range_min"]),
            range_max=float(data["range_max"]),
            time_increment=float(data.get("time_increment", 0.0)),
            scan_time=float(data.get("scan_time", 0.0)),
            ranges=[float(r) for r in data.get("ranges", [])],
            frame_id=str(data.get("frame_id", "")),
        )

    @classmethod
    def from_laser_scan(cls, msg: Any) -> "ScanMessage":
        """Create a message from a ``sensor_msgs/LaserScan`` (or anything shaped like one)."""
        return cls(
            angle_min=float(msg.angle_min),
            angle_max=float(msg.angle_max),
            angle_increment=float(msg.angle_increment),
            range_min=float(msg.range_min),
            range_max=float(msg.range_max),
            time_increment=float(msg.time_increment),
            scan_time=float(msg.scan_time),
            ranges=[float(r) for r in msg.ranges],
            frame_id=str(msg.header.frame_id),
        )

    def sample(self, index: int) -> ScanSample:
        return ScanSample(
            angle=self.angle_min + index * self.angle_increment,
            range=float(self.ranges[index]),
        )

    def samples(self, count: int) -> List[ScanSample]:
        """Return samples ``0 .. count - 1``; ``count`` must not exceed ``len(ranges)``."""
        return [self.sample(i) for i in range(count)]
