import numpy as np
import pytest

from pau_ue.histogram import Axis, Histogram1D, Histogram2D
from pau_ue.response import (
    combine_corrected,
    efficiency_correct_2d,
    normalize_misses_and_fakes,
    per_jet_ue_spectra,
    project_part_level,
    weight_ue_spectra,
    weighted_det_response,
)

JET_AXIS = Axis.uniform(55, 4.5, 59.5)


def _response():
    response = Histogram2D(JET_AXIS, JET_AXIS)
    response.fill(10.0, 20.0)
    response.fill(11.0, 25.0)
    response.fill(11.0, 26.0)
    return response


def test_normalize_fractions_of_all_events():
    misses = Histogram1D(JET_AXIS)
    misses.fill(10.0, 3.0)
    misses.fill(12.0, 1.0)
    fake_a = Histogram1D(JET_AXIS)
    fake_a.fill(15.0)
    fake_b = Histogram1D(JET_AXIS)
    fake_b.fill(16.0)
    norm_misses, norm_fakes = normalize_misses_and_fakes(misses, [fake_a, fake_b], 5)
    n_events = 5 + 2 + 2
    assert norm_misses.integral() == pytest.approx(2 / n_events)
    assert [f.integral() for f in norm_fakes] == pytest.approx([1 / n_events, 1 / n_events])
    assert misses.integral() == pytest.approx(4.0)


def test_normalize_without_events_raises():
    with pytest.raises(ValueError):
        normalize_misses_and_fakes(Histogram1D(JET_AXIS), [], 0)


def test_project_part_level_unit_integrals():
    projections = project_part_level(_response())
    assert sorted(projections) == list(range(6, 27))
    assert projections[6].integral() == pytest.approx(1.0)
    assert projections[7].integral() == pytest.approx(1.0)
    assert projections[8].integral() == 0.0


def test_project_part_level_bad_range():
    with pytest.raises(IndexError):
        project_part_level(_response(), 0, 3)


def test_weighted_det_response_weights_by_misses():
    projections = project_part_level(_response())
    misses = Histogram1D(JET_AXIS)
    misses.fill(10.0, 1.0)
    misses.fill(11.0, 2.0)
    result = weighted_det_response(projections, misses, 10.0, 15.0)
    assert result.integral() == pytest.approx(1.0)
    b20, b25 = result.find_bin(20.0), result.find_bin(25.0)
    assert result.contents[b20] == pytest.approx(2 * result.contents[b25] * 2)
    assert result.contents[b25] == pytest.approx(result.contents[result.find_bin(26.0)])


def test_weighted_det_response_excludes_other_classes():
    projections = project_part_level(_response())
    misses = Histogram1D(JET_AXIS)
    misses.fill(10.0, 1.0)
    misses.fill(11.0, 2.0)
    result = weighted_det_response(projections, misses, 11.0, 15.0)
    assert result.contents[result.find_bin(20.0)] == 0.0
    assert result.integral() == pytest.approx(1.0)


def test_weighted_det_response_zero_misses_raises():
    projections = project_part_level(_response())
    with pytest.raises(ValueError):
        weighted_det_response(projections, Histogram1D(JET_AXIS), 10.0, 15.0)


def test_efficiency_correct_2d_divides_and_caps():
    ue_axis = Axis.uniform(30, 0.0, 30.0)
    ue = Histogram2D(JET_AXIS, ue_axis)
    ue.fill(10.0, 0.5, 4.0)
    ue.fill(10.0, 5.5, 8.0)
    eff = Histogram1D(ue_axis)
    eff.fill(0.5, 0.5)
    eff.fill(3.5, 0.8)
    corrected = efficiency_correct_2d(ue, eff)
    ix = JET_AXIS.find_bin(10.0)
    assert corrected.contents[ix, ue_axis.find_bin(0.5)] == pytest.approx(8.0)
    assert corrected.errors[ix, ue_axis.find_bin(0.5)] == pytest.approx(8.0)
    assert corrected.contents[ix, ue_axis.find_bin(5.5)] == pytest.approx(10.0)
    assert ue.contents[ix, ue_axis.find_bin(0.5)] == pytest.approx(4.0)


def test_efficiency_correct_2d_zero_efficiency_raises():
    ue_axis = Axis.uniform(30, 0.0, 30.0)
    ue = Histogram2D(JET_AXIS, ue_axis)
    ue.fill(10.0, 0.5)
    with pytest.raises(ValueError):
        efficiency_correct_2d(ue, Histogram1D(ue_axis))


def test_per_jet_ue_spectra_scales_by_jet_count():
    ue_axis = Axis.uniform(15, 0.0, 15.0)
    ue = Histogram2D(JET_AXIS, ue_axis)
    ue.fill(10.0, 0.5, 6.0)
    ue.fill(20.0, 0.5, 6.0)
    lead = Histogram1D(JET_AXIS)
    lead.fill(10.0, 3.0)
    spectra = per_jet_ue_spectra(ue, lead)
    assert list(spectra) == [JET_AXIS.find_bin(10.0)]
    assert spectra[JET_AXIS.find_bin(10.0)].integral() == pytest.approx(6.0 / 3.0)


def test_per_jet_ue_spectra_axis_mismatch():
    ue = Histogram2D(JET_AXIS, Axis.uniform(15, 0.0, 15.0))
    with pytest.raises(ValueError):
        per_jet_ue_spectra(ue, Histogram1D(Axis.uniform(10, 0.0, 10.0)))


def test_weight_ue_spectra_applies_weights_and_skips_zero():
    ue_axis = Axis.uniform(15, 0.0, 15.0)
    spectrum = Histogram1D(ue_axis)
    spectrum.fill(0.5, 2.0)
    other = Histogram1D(ue_axis)
    other.fill(1.5, 7.0)
    det = Histogram1D(JET_AXIS)
    det.contents[6] = 0.5
    fakes = Histogram1D(JET_AXIS)
    fakes.contents[6] = 0.2
    result = weight_ue_spectra({6: spectrum, 7: other}, det, fakes)
    assert result.contents[1] == pytest.approx(2.0 * 0.5 * (1 - 0.2))
    assert result.contents[2] == 0.0


def test_combine_corrected_identical_slices_return_reference():
    axis = Axis.uniform(4, 0.0, 4.0)
    reference = Histogram2D(axis, axis)
    reference.fill(0.5, 1.5, 2.0)
    reference.fill(2.5, 3.5, 1.0)
    combined = combine_corrected([reference.copy(), reference.copy()], reference)
    assert np.allclose(combined.contents, reference.contents)


def test_combine_corrected_errors():
    axis = Axis.uniform(4, 0.0, 4.0)
    empty = Histogram2D(axis, axis)
    with pytest.raises(ValueError):
        combine_corrected([], empty)
    with pytest.raises(ValueError):
        combine_corrected([empty], empty)