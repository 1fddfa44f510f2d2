import math

import numpy as np
import pytest

from pau_ue.histogram import Axis, Histogram1D, Histogram2D, Histogram3D


def test_uniform_axis_edges_and_bins():
    axis = Axis.uniform(55, 4.5, 59.5)
    assert axis.nbins == 55
    assert axis.low == 4.5
    assert axis.high == 59.5
    assert axis.find_bin(4.0) == 0
    assert axis.find_bin(59.5) == 56
    assert axis.find_bin(10.0) == 6
    assert axis.bin_center(6) == pytest.approx(10.0)


def test_axis_rejects_bad_edges():
    with pytest.raises(ValueError):
        Axis((1.0, 1.0))
    with pytest.raises(ValueError):
        Axis.uniform(0, 0.0, 1.0)


def test_bin_center_out_of_range():
    axis = Axis.uniform(3, 0.0, 3.0)
    with pytest.raises(IndexError):
        axis.bin_center(0)
    with pytest.raises(IndexError):
        axis.bin_center(4)


def test_variable_axis_find_bin():
    axis = Axis((0.2, 0.25, 0.3, 1.0, 15.0))
    assert axis.find_bin(0.2) == 1
    assert axis.find_bin(0.29) == 2
    assert axis.find_bin(14.9) == 4


def test_fill_integral_and_flow():
    h = Histogram1D(Axis.uniform(10, 0.0, 10.0))
    h.fill(0.5)
    h.fill(5.5, 2.0)
    h.fill(-1.0)
    h.fill(20.0)
    assert h.integral() == pytest.approx(3.0)
    assert h.integral(0, 11) == pytest.approx(5.0)
    assert h.entries == 4
    assert h.errors[6] == pytest.approx(2.0)


def test_scale_scales_errors_linearly():
    h = Histogram1D(Axis.uniform(4, 0.0, 4.0))
    h.fill(1.5)
    h.fill(1.5)
    before = h.errors[2]
    h.scale(0.5)
    assert h.contents[2] == pytest.approx(1.0)
    assert h.errors[2] == pytest.approx(before * 0.5)


def test_add_with_factor_and_mismatch():
    axis = Axis.uniform(4, 0.0, 4.0)
    a, b = Histogram1D(axis), Histogram1D(axis)
    a.fill(0.5)
    b.fill(0.5)
    a.add(b, 3.0)
    assert a.contents[1] == pytest.approx(4.0)
    assert a.sumw2[1] == pytest.approx(10.0)
    with pytest.raises(ValueError):
        a.add(Histogram1D(Axis.uniform(5, 0.0, 4.0)))


def test_mean_and_error_from_two_bins():
    h = Histogram1D(Axis.uniform(10, 0.0, 10.0))
    h.fill(2.5)
    h.fill(6.5)
    assert h.mean() == pytest.approx(4.5)
    assert h.mean_error() == pytest.approx(2.0 / math.sqrt(2.0))


def test_mean_of_empty_histogram_is_zero():
    h = Histogram1D(Axis.uniform(3, 0.0, 3.0))
    assert h.mean() == 0.0
    assert h.mean_error() == 0.0


def test_copy_is_independent():
    h = Histogram1D(Axis.uniform(3, 0.0, 3.0))
    h.fill(1.5)
    clone = h.copy()
    clone.fill(1.5)
    assert h.contents[2] == pytest.approx(1.0)
    assert clone.contents[2] == pytest.approx(2.0)


def test_2d_projections_preserve_totals():
    h = Histogram2D(Axis.uniform(5, 0.0, 5.0), Axis.uniform(4, 0.0, 4.0))
    rng = np.random.default_rng(1)
    for x, y in rng.uniform(0.0, 4.0, size=(50, 2)):
        h.fill(x, y)
    assert h.projection_x().integral() == pytest.approx(h.integral())
    assert h.projection_y().integral() == pytest.approx(h.integral())
    partial = h.projection_x(2, 2)
    assert partial.integral() == pytest.approx(h.contents[1:6, 2].sum())


def test_2d_mean_per_axis():
    h = Histogram2D(Axis.uniform(4, 0.0, 4.0), Axis.uniform(4, 0.0, 4.0))
    h.fill(0.5, 3.5)
    h.fill(1.5, 3.5)
    assert h.mean(1) == pytest.approx(1.0)
    assert h.mean(2) == pytest.approx(3.5)
    with pytest.raises(ValueError):
        h.mean(3)


def test_2d_scale_and_add():
    axes = (Axis.uniform(2, 0.0, 2.0), Axis.uniform(2, 0.0, 2.0))
    a, b = Histogram2D(*axes), Histogram2D(*axes)
    a.fill(0.5, 0.5)
    b.fill(1.5, 1.5)
    a.add(b)
    a.scale(2.0)
    assert a.integral() == pytest.approx(4.0)
    c = a.copy()
    c.scale(0.0)
    assert a.integral() == pytest.approx(4.0)


def test_3d_project_zy_puts_y_along_x():
    h = Histogram3D(Axis.uniform(3, 0.0, 3.0), Axis.uniform(4, 0.0, 4.0), Axis.uniform(5, 0.0, 5.0))
    h.fill(0.5, 1.5, 4.5, 2.0)
    h.fill(2.5, 1.5, 4.5, 1.0)
    proj = h.project("ZY")
    assert proj.x_axis == h.y_axis
    assert proj.y_axis == h.z_axis
    assert proj.contents[2, 5] == pytest.approx(3.0)


def test_3d_project_with_x_range_and_1d():
    h = Histogram3D(Axis.uniform(3, 0.0, 3.0), Axis.uniform(2, 0.0, 2.0), Axis.uniform(2, 0.0, 2.0))
    h.fill(0.5, 0.5, 0.5)
    h.fill(2.5, 0.5, 1.5)
    proj = h.project("YX")
    assert proj.contents[1, 1] == pytest.approx(1.0)
    assert proj.contents[3, 1] == pytest.approx(1.0)
    sliced = h.project("zy", x_range=(3, 3))
    assert sliced.integral() == pytest.approx(1.0)
    assert sliced.contents[1, 2] == pytest.approx(1.0)
    one = h.project("z")
    assert one.integral() == pytest.approx(2.0)


def test_3d_invalid_option():
    h = Histogram3D(Axis.uniform(1, 0.0, 1.0), Axis.uniform(1, 0.0, 1.0), Axis.uniform(1, 0.0, 1.0))
    with pytest.raises(ValueError):
        h.project("xx")
    with pytest.raises(ValueError):
        h.project("w")