from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple
import math
import random
import time

from lidarplot.messages import ScanMessage


@dataclass
class Obstacle:
    """Axis-aligned rectangular obstacle; (x, y) is the center, in meters."""

    x: float
    y: float
    w: float
    h: float

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (xmin, ymin, xmax, ymax)."""
        half_w = self.w / 2.0
        half_h = self.h / 2.0
        return (self.x - half_w, self.y - half_h, self.x + half_w, self.y + half_h)


class SimulatedScanner:
    """360 degree planar range sensor ray casting a walled rectangular room.

    Produces ``ScanMessage`` objects shaped like a real driver's output:
    beams that hit nothing within ``range_max`` report ``inf``.
    """

    def __init__(
        self,
        width: float,
        height: float,
        obstacles: Optional[List[Obstacle]] = None,
        num_beams: int = 360,
        range_min: float = 0.15,
        range_max: float = 12.0,
        noise_std: float = 0.0,
        scan_time: float = 0.1,
        rng: Optional[random.Random] = None,
        frame_id: str = "laser",
    ) -> None:
        if num_beams <= 0:
            raise ValueError(f"num_beams must be positive, got {num_beams}")
        self.width = float(width)
        self.height = float(height)
        self.obstacles: List[Obstacle] = list(obstacles) if obstacles is not None else []
        self.num_beams = num_beams
        self.range_min = range_min
        self.range_max = range_max
        self.noise_std = noise_std
        self.scan_time = scan_time
        self.rng = rng or random.Random(0)
        self.frame_id = frame_id

    @classmethod
    def from_config(cls, sim_cfg: Any) -> "SimulatedScanner":
        return cls(
            width=sim_cfg.world_width,
            height=sim_cfg.world_height,
            obstacles=[obstacle_from_dict(o) for o in sim_cfg.obstacles],
            num_beams=sim_cfg.num_beams,
            range_min=sim_cfg.range_min,
            range_max=sim_cfg.range_max,
            noise_std=sim_cfg.noise_std,
            scan_time=1.0 / sim_cfg.scan_hz,
            rng=random.Random(sim_cfg.seed),
        )

    def scan(self, pose: Tuple[float, float, float]) -> ScanMessage:
        """Sweep once from ``pose`` = (x, y, yaw) in world coordinates.

        Beam angles are in the sensor frame, covering [-pi, pi).
        """
        x, y, yaw = pose
        increment = 2.0 * math.pi / self.num_beams
        angle_min = -math.pi

        ranges: List[float] = []
        for i in range(self.num_beams):
            r = self._cast_single_ray(x, y, yaw + angle_min + i * increment)
            if math.isfinite(r) and self.noise_std > 0.0:
                r = max(0.0, r + self.rng.gauss(0.0, self.noise_std))
            ranges.append(r)

        return ScanMessage(
            angle_min=angle_min,
            angle_max=angle_min + (self.num_beams - 1) * increment,
            angle_increment=increment,
            range_min=self.range_min,
            range_max=self.range_max,
            time_increment=self.scan_time / self.num_beams,
            scan_time=self.scan_time,
            ranges=ranges,
            frame_id=self.frame_id,
        )

    def stream(
        self,
        pose: Tuple[float, float, float],
        yaw_rate: float,
        max_frames: Optional[int] = None,
        realtime: bool = True,
    ) -> Iterator[ScanMessage]:
        """Yield scans at ``1 / scan_time`` Hz while the sensor spins in place."""
        x, y, yaw = pose
        frame = 0
        while max_frames is None or frame < max_frames:
            t_start = time.time()
            yield self.scan((x, y, yaw + yaw_rate * frame * self.scan_time))
            frame += 1
            if realtime:
                sleep_time = self.scan_time - (time.time() - t_start)
                if sleep_time > 0:
                    time.sleep(sleep_time)

    # ------------------------------------------------------------------
    # Ray casting
    # ------------------------------------------------------------------
    def _cast_single_ray(self, x: float, y: float, angle: float) -> float:
        """Distance to the nearest wall or obstacle, ``inf`` past range_max."""
        dx = math.cos(angle)
        dy = math.sin(angle)

        # The scanner sits inside the room, so walls are where the ray leaves it.
        room = self._ray_box_interval(x, y, dx, dy, (0.0, 0.0, self.width, self.height))
        distance = room[1] if room is not None and room[1] >= 0.0 else math.inf

        for obs in self.obstacles:
            hit = self._ray_box_interval(x, y, dx, dy, obs.bounds)
            if hit is None or hit[1] < 0.0:
                continue
            # A scanner inside an obstacle sees it at zero range.
            distance = min(distance, max(hit[0], 0.0))

        if distance > self.range_max:
            return math.inf
        return distance

    @staticmethod
    def _ray_box_interval(
        x: float,
        y: float,
        dx: float,
        dy: float,
        bounds: Tuple[float, float, float, float],
    ) -> Optional[Tuple[float, float]]:
        """Entry/exit distances of the line (x, y) + t * (dx, dy) through a box.

        Slab method; returns None when the line misses the box. Distances
        may be negative (box behind the origin).
        """
        xmin, ymin, xmax, ymax = bounds
        t_enter, t_exit = -math.inf, math.inf
        for origin, direction, lo, hi in ((x, dx, xmin, xmax), (y, dy, ymin, ymax)):
            if abs(direction) < 1e-8:
                if not lo <= origin <= hi:
                    return None
                continue
            t1 = (lo - origin) / direction
            t2 = (hi - origin) / direction
            t_enter = max(t_enter, min(t1, t2))
            t_exit = min(t_exit, max(t1, t2))
        if t_enter > t_exit:
            return None
        return t_enter, t_exit


def obstacle_from_dict(data: Dict[str, Any]) -> Obstacle:
    return Obstacle(float(data["x"]), float(data["y"]), float(data["w"]), float(data["h"]))
