from __future__ import annotations

import math

import pytest

from lidarplot.geometry import (
    Projection,
    Rejection,
    ViewConfig,
    clip_projection,
    project_sample,
    sensor_to_view,
)


def test_projection_is_deterministic() -> None:
    view = ViewConfig()
    for angle in (-2.5, -0.3, 0.0, 0.7, 3.1):
        first = project_sample(angle, 2.345, 0.1, 10.0, view)
        second = project_sample(angle, 2.345, 0.1, 10.0, view)
        assert first == second
        assert first.accepted


@pytest.mark.parametrize("angle", [-math.pi, -1.0, 0.0, 0.5, math.pi / 2, 3.0])
def test_bad_ranges_rejected_for_any_angle(angle: float) -> None:
    view = ViewConfig()
    nan = project_sample(angle, float("nan"), 0.1, 10.0, view)
    short = project_sample(angle, 0.05, 0.1, 10.0, view)
    far = project_sample(angle, 10.5, 0.1, 10.0, view)

    assert nan.rejection == Rejection.INVALID_MEASUREMENT
    assert short.rejection == Rejection.OUT_OF_SENSOR_RANGE
    assert far.rejection == Rejection.OUT_OF_SENSOR_RANGE
    assert nan.pixel is None and short.pixel is None and far.pixel is None


def test_range_limits_are_inclusive() -> None:
    view = ViewConfig()
    assert project_sample(0.0, 0.1, 0.1, 10.0, view).accepted
    assert project_sample(0.0, 10.0, 0.1, 10.0, view).accepted


@pytest.mark.parametrize("k", [1, 10, 40, 200])
def test_forward_sample_lands_k_pixels_below_center(k: int) -> None:
    # 0.25 m/px is exact in binary, so the expected offset is exactly k.
    view = ViewConfig(image_size=500, meters_per_pixel=0.25)
    proj = project_sample(0.0, view.meters_per_pixel * k, 0.0, 1000.0, view)
    assert proj.pixel == (250, 250 + k)


@pytest.mark.parametrize("k", [1, 10, 40])
def test_left_sample_lands_k_pixels_right_of_center(k: int) -> None:
    view = ViewConfig(image_size=500, meters_per_pixel=0.25)
    proj = project_sample(math.pi / 2, view.meters_per_pixel * k, 0.0, 1000.0, view)
    assert proj.pixel == (250 + k, 250)


def test_rotation_is_quarter_turn_clockwise() -> None:
    assert sensor_to_view(1.0, 0.0) == (0.0, -1.0)
    assert sensor_to_view(0.0, 1.0) == (1.0, 0.0)


def test_pixel_edges_clip() -> None:
    view = ViewConfig(image_size=10, meters_per_pixel=1.0)

    last = project_sample(math.pi / 2, 4.0, 0.0, 100.0, view)
    assert last.pixel == (9, 5)
    assert view.contains(*last.pixel)
    assert clip_projection(last, view) == last

    past = project_sample(math.pi / 2, 5.0, 0.0, 100.0, view)
    assert past.pixel == (10, 5)
    assert not view.contains(*past.pixel)
    assert clip_projection(past, view).rejection == Rejection.OUT_OF_FRAME

    before = project_sample(-math.pi / 2, 6.0, 0.0, 100.0, view)
    assert before.pixel == (-1, 5)
    assert clip_projection(before, view).rejection == Rejection.OUT_OF_FRAME


def test_pixels_truncate_toward_zero() -> None:
    view = ViewConfig(image_size=10, meters_per_pixel=1.0)
    # 5 - 5.5 = -0.5 truncates to 0, which is on the image.
    proj = project_sample(-math.pi / 2, 5.5, 0.0, 100.0, view)
    assert proj.pixel == (0, 5)
    assert view.contains(0, 5)
    # 5 + 3.7 = 8.7 truncates to 8.
    assert project_sample(math.pi / 2, 3.7, 0.0, 100.0, view).pixel == (8, 5)


def test_non_finite_projection_is_invalid() -> None:
    view = ViewConfig()
    proj = project_sample(0.3, float("inf"), 0.0, float("inf"), view)
    assert proj.rejection == Rejection.INVALID_MEASUREMENT
    proj = project_sample(float("nan"), 1.0, 0.0, 10.0, view)
    assert proj.rejection == Rejection.INVALID_MEASUREMENT


def test_clip_leaves_rejections_alone() -> None:
    view = ViewConfig()
    rejected = Projection(rejection=Rejection.OUT_OF_SENSOR_RANGE)
    assert clip_projection(rejected, view) is rejected


def test_view_config_validation() -> None:
    assert ViewConfig().center == (250, 250)
    assert ViewConfig(image_size=501).center == (250, 250)
    with pytest.raises(ValueError):
        ViewConfig(image_size=0)
    with pytest.raises(ValueError):
        ViewConfig(meters_per_pixel=0.0)
    with pytest.raises(ValueError):
        ViewConfig(meters_per_pixel=-0.02)
