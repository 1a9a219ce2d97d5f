from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple
import math

import numpy as np
import pygame

from .geometry import Rejection, ViewConfig, clip_projection, project_sample
from .messages import ScanMessage


Color = Tuple[int, int, int]

THEME: Dict[str, Color] = {
    "bg": (255, 255, 255),
    "crosshair": (0, 0, 0),
    "point": (255, 0, 0),
}

CROSSHAIR_HALF_LENGTH = 5
CROSSHAIR_WIDTH = 2
POINT_RADIUS = 2


@dataclass(frozen=True)
class FrameStats:
    """Per-frame bookkeeping, reported to event listeners."""

    frame_id: str
    declared_count: int
    processed: int
    plotted: int
    invalid: int
    out_of_range: int
    out_of_frame: int
    clamped: bool
    angle_min: float
    angle_max: float

    @property
    def rejected(self) -> int:
        return self.invalid + self.out_of_range + self.out_of_frame


@dataclass(frozen=True)
class RenderedFrame:
    """A finished frame. ``image`` is a read-only (H, W, 3) RGB uint8 array."""

    image: np.ndarray
    stats: FrameStats


def sample_count(message: ScanMessage) -> int:
    """Number of samples announced by the scan timing fields.

    ``scan_time / time_increment`` truncated; when that is undefined or not
    positive (some drivers leave ``time_increment`` at zero) the length of
    ``ranges`` is used instead.
    """
    try:
        count = int(message.scan_time / message.time_increment)
    except (ZeroDivisionError, OverflowError, ValueError):
        count = 0
    if count <= 0:
        count = len(message.ranges)
    return count


class FrameRenderer:
    """Rasterizes one scan message into a top-down image.

    Every call starts from a fresh surface: white background, black crosshair
    at the view center, one red disc per valid in-bounds sample.
    """

    def __init__(self, view: ViewConfig) -> None:
        self.view = view

    def render(self, message: ScanMessage) -> RenderedFrame:
        size = self.view.image_size
        surface = pygame.Surface((size, size))
        surface.fill(THEME["bg"])
        self._draw_crosshair(surface)

        declared = sample_count(message)
        # Timing fields and ranges can disagree; never index past the data.
        n = min(declared, len(message.ranges))

        counts = {
            Rejection.INVALID_MEASUREMENT: 0,
            Rejection.OUT_OF_SENSOR_RANGE: 0,
            Rejection.OUT_OF_FRAME: 0,
        }
        plotted = 0
        for sample in message.samples(n):
            projection = clip_projection(
                project_sample(
                    sample.angle,
                    sample.range,
                    message.range_min,
                    message.range_max,
                    self.view,
                ),
                self.view,
            )
            if projection.rejection is not None:
                counts[projection.rejection] += 1
                continue
            pygame.draw.circle(surface, THEME["point"], projection.pixel, POINT_RADIUS)
            plotted += 1

        stats = FrameStats(
            frame_id=message.frame_id,
            declared_count=declared,
            processed=n,
            plotted=plotted,
            invalid=counts[Rejection.INVALID_MEASUREMENT],
            out_of_range=counts[Rejection.OUT_OF_SENSOR_RANGE],
            out_of_frame=counts[Rejection.OUT_OF_FRAME],
            clamped=declared > len(message.ranges),
            angle_min=math.degrees(message.angle_min),
            angle_max=math.degrees(message.angle_max),
        )
        return RenderedFrame(image=surface_to_image(surface), stats=stats)

    def _draw_crosshair(self, surface: pygame.Surface) -> None:
        cx, cy = self.view.center
        h = CROSSHAIR_HALF_LENGTH
        color = THEME["crosshair"]
        pygame.draw.line(surface, color, (cx - h, cy), (cx + h, cy), CROSSHAIR_WIDTH)
        pygame.draw.line(surface, color, (cx, cy - h), (cx, cy + h), CROSSHAIR_WIDTH)


def surface_to_image(surface: pygame.Surface) -> np.ndarray:
    """Copy a surface into a read-only (H, W, 3) RGB array."""
    # surfarray is indexed (x, y); images are indexed (row, column).
    image = np.ascontiguousarray(np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)))
    image.flags.writeable = False
    return image


def image_to_surface(image: np.ndarray) -> pygame.Surface:
    return pygame.surfarray.make_surface(np.ascontiguousarray(np.transpose(image, (1, 0, 2))))
