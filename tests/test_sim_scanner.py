from __future__ import annotations

import math
import random

from ingest.sim_scanner import Obstacle, SimulatedScanner
from lidarplot.geometry import ViewConfig
from lidarplot.render import FrameRenderer, sample_count


def test_scan_hits_simple_wall() -> None:
    # Vertical wall in front of the scanner at x=5
    scanner = SimulatedScanner(
        width=10.0,
        height=10.0,
        obstacles=[Obstacle(x=5.0, y=5.0, w=0.1, h=10.0)],
        num_beams=4,
        range_max=20.0,
        rng=random.Random(0),
    )
    msg = scanner.scan((1.0, 5.0, 0.0))

    assert len(msg.ranges) == 4
    # beams at -pi, -pi/2, 0, pi/2
    assert math.isclose(msg.ranges[0], 1.0, rel_tol=1e-6)
    assert math.isclose(msg.ranges[1], 5.0, rel_tol=1e-6)
    assert math.isclose(msg.ranges[2], 3.95, rel_tol=1e-6)
    assert math.isclose(msg.ranges[3], 5.0, rel_tol=1e-6)


def test_beyond_max_range_reports_inf() -> None:
    scanner = SimulatedScanner(width=100.0, height=100.0, num_beams=8, range_max=5.0)
    msg = scanner.scan((50.0, 50.0, 0.0))
    assert all(math.isinf(r) for r in msg.ranges)


def test_timing_fields_match_beam_count() -> None:
    scanner = SimulatedScanner(width=4.0, height=4.0, num_beams=360, scan_time=0.1)
    msg = scanner.scan((2.0, 2.0, 0.0))
    assert math.isclose(msg.angle_increment, 2.0 * math.pi / 360)
    assert sample_count(msg) in (359, 360)
    assert len(msg.ranges) == 360


def test_stream_yields_requested_frames() -> None:
    scanner = SimulatedScanner(width=4.0, height=4.0, num_beams=16)
    msgs = list(scanner.stream((2.0, 2.0, 0.0), yaw_rate=1.0, max_frames=3, realtime=False))
    assert len(msgs) == 3
    assert msgs[0].ranges != msgs[1].ranges


def test_simulated_scan_renders_room() -> None:
    scanner = SimulatedScanner(width=6.0, height=4.0, num_beams=180, noise_std=0.01)
    msg = scanner.scan((3.0, 2.0, 0.3))
    frame = FrameRenderer(ViewConfig()).render(msg)
    # Room fits inside the 10 m view, so every beam lands on the image.
    assert frame.stats.plotted == frame.stats.processed
    assert frame.stats.plotted > 0


def test_obstacle_behind_scanner_is_ignored() -> None:
    # Box at x=0.5 is behind a scanner at x=2 looking along +x.
    scanner = SimulatedScanner(
        width=10.0,
        height=10.0,
        obstacles=[Obstacle(x=0.5, y=5.0, w=0.2, h=2.0)],
        num_beams=4,
        range_max=20.0,
    )
    msg = scanner.scan((2.0, 5.0, 0.0))
    assert math.isclose(msg.ranges[2], 8.0, rel_tol=1e-6)
    assert math.isclose(msg.ranges[0], 1.4, rel_tol=1e-6)


def test_scanner_inside_obstacle_sees_zero_range() -> None:
    scanner = SimulatedScanner(
        width=10.0,
        height=10.0,
        obstacles=[Obstacle(x=5.0, y=5.0, w=1.0, h=1.0)],
        num_beams=8,
        range_max=20.0,
    )
    msg = scanner.scan((5.0, 5.0, 0.0))
    assert all(r == 0.0 for r in msg.ranges)
