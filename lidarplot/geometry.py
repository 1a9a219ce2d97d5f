"""
Scan-to-pixel geometry for the top-down lidar plot.

Frames:
- Sensor frame: x forward, y left (ROS REP 103).
- View frame: sensor frame rotated 90 degrees clockwise, in meters.
- Pixel frame: origin top-left, x right, y down; the view center sits at
  ``ViewConfig.center``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import math


Matrix2 = Tuple[Tuple[float, float], Tuple[float, float]]

# (x_rot, y_rot) = SENSOR_TO_VIEW @ (x, y)  ->  x_rot = y, y_rot = -x
SENSOR_TO_VIEW: Matrix2 = ((0.0, 1.0), (-1.0, 0.0))

# Pixel rows grow downward while view y grows upward.
PIXEL_Y_SIGN = -1.0


class Rejection(str, Enum):
    """Reason a sample produced no mark on the image."""

    INVALID_MEASUREMENT = "invalid-measurement"
    OUT_OF_SENSOR_RANGE = "out-of-sensor-range"
    OUT_OF_FRAME = "out-of-frame"


@dataclass(frozen=True)
class ViewConfig:
    """Fixed pixel/metric mapping of the plot.

    The default (500 px, 0.02 m/px) covers a 10 m x 10 m area around the sensor.
    """

    image_size: int = 500
    meters_per_pixel: float = 0.02

    def __post_init__(self) -> None:
        if int(self.image_size) <= 0:
            raise ValueError(f"image_size must be positive, got {self.image_size}")
        if not (self.meters_per_pixel > 0.0 and math.isfinite(self.meters_per_pixel)):
            raise ValueError(f"meters_per_pixel must be positive, got {self.meters_per_pixel}")

    @property
    def center(self) -> Tuple[int, int]:
        half = self.image_size // 2
        return half, half

    def contains(self, px: int, py: int) -> bool:
        """Return True if the pixel lies inside ``[0, image_size)`` on both axes."""
        return 0 <= px < self.image_size and 0 <= py < self.image_size


@dataclass(frozen=True)
class Projection:
    """Result of projecting one sample: a pixel or a rejection, never both."""

    pixel: Optional[Tuple[int, int]] = None
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def polar_to_cartesian(angle: float, rng: float) -> Tuple[float, float]:
    """Sensor-frame (x forward, y left) coordinates of a beam hit."""
    return rng * math.cos(angle), rng * math.sin(angle)


def sensor_to_view(x: float, y: float) -> Tuple[float, float]:
    (a, b), (c, d) = SENSOR_TO_VIEW
    return a * x + b * y, c * x + d * y


def view_to_pixel(x_rot: float, y_rot: float, view: ViewConfig) -> Tuple[float, float]:
    """Scale view-frame meters to (unrounded) pixel coordinates."""
    cx, cy = view.center
    px = cx + x_rot / view.meters_per_pixel
    py = cy + PIXEL_Y_SIGN * y_rot / view.meters_per_pixel
    return px, py


def project_sample(
    angle: float,
    rng: float,
    range_min: float,
    range_max: float,
    view: ViewConfig,
) -> Projection:
    """Map one (angle, range) sample to a pixel, or say why it is dropped.

    Pixel coordinates are truncated toward zero. Accepted samples may still
    fall outside the image; use :meth:`ViewConfig.contains` (or
    :func:`clip_projection`) before drawing.
    """
    if math.isnan(rng):
        return Projection(rejection=Rejection.INVALID_MEASUREMENT)
    if rng < range_min or rng > range_max:
        return Projection(rejection=Rejection.OUT_OF_SENSOR_RANGE)

    x, y = polar_to_cartesian(angle, rng)
    px, py = view_to_pixel(*sensor_to_view(x, y), view)
    if not (math.isfinite(px) and math.isfinite(py)):
        return Projection(rejection=Rejection.INVALID_MEASUREMENT)
    return Projection(pixel=(int(px), int(py)))


def clip_projection(projection: Projection, view: ViewConfig) -> Projection:
    """Turn an accepted projection that falls off the image into OUT_OF_FRAME."""
    if projection.pixel is None or view.contains(*projection.pixel):
        return projection
    return Projection(rejection=Rejection.OUT_OF_FRAME)
