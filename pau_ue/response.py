"""Detector response of the leading jet and the UE spectra it weights.

Embedding gives, for every particle-level leading-jet pT bin, a
distribution of detector-level leading-jet pT. These distributions are
combined into a detector-level weight for each leading-jet pT class.
Charged UE spectra, measured per detector-level jet, are then summed with
those weights and with the fake-jet fraction taken out.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from .histogram import Axis, Histogram1D, Histogram2D

PART_FIRST_BIN = 6
PART_LAST_BIN = 26
EFFICIENCY_PT_CAP = 3.0


def normalize_misses_and_fakes(
    misses: Histogram1D, fakes: Sequence[Histogram1D], n_accepted: float
) -> tuple[Histogram1D, list[Histogram1D]]:
    """Scale misses and fakes so each integrates to its fraction of all events.

    All events are the accepted matches, the misses and the fakes together.
    Returns normalised copies; the inputs are left as they are. A histogram
    with an empty integral is returned unchanged.
    """
    n_missed = int(misses.entries)
    n_fakes = sum(int(fake.entries) for fake in fakes)
    n_events = int(n_accepted) + n_missed + n_fakes
    if n_events == 0:
        raise ValueError("no events to normalise to")

    def _normalised(hist: Histogram1D, count: float) -> Histogram1D:
        result = hist.copy()
        integral = result.integral()
        if integral != 0.0:
            result.scale((count / n_events) / integral)
        return result

    return _normalised(misses, n_missed), [_normalised(f, f.entries) for f in fakes]


def project_part_level(
    response: Histogram2D, first_bin: int = PART_FIRST_BIN, last_bin: int = PART_LAST_BIN
) -> dict[int, Histogram1D]:
    """Unit-normalised detector-level pT distribution for each particle-level bin.

    ``response`` holds particle-level pT along x and detector-level pT along
    y. Keys are the particle-level bin numbers first_bin..last_bin; empty
    projections are kept, with zero content.
    """
    if not 1 <= first_bin <= last_bin <= response.x_axis.nbins:
        raise IndexError(f"bin range ({first_bin}, {last_bin}) outside the response")
    projections: dict[int, Histogram1D] = {}
    for binno in range(first_bin, last_bin + 1):
        projection = response.projection_y(binno, binno)
        integral = projection.integral()
        if integral != 0.0:
            projection.scale(1.0 / integral)
        projections[binno] = projection
    return projections


def weighted_det_response(
    projections: Mapping[int, Histogram1D],
    misses: Histogram1D,
    pt_lo: float,
    pt_hi: float,
) -> Histogram1D:
    """Detector-level response of the particle-level class pt_lo..pt_hi.

    Each projection whose particle-level pT (the centre of its bin on the
    misses axis) lies in the class is added with weight 1/misses, and the
    sum is normalised to unit integral.
    """
    result: Histogram1D | None = None
    for binno, projection in sorted(projections.items()):
        pt = misses.bin_center(binno)
        if not pt_lo <= pt <= pt_hi:
            continue
        if result is None:
            result = Histogram1D(projection.axis)
        if projection.integral() == 0.0:
            continue
        missed = float(misses.contents[binno])
        if missed == 0.0:
            raise ValueError(f"no misses in particle-level bin {binno} to weight by")
        result.add(projection, 1.0 / missed)
    if result is None:
        raise ValueError(f"no particle-level bins between {pt_lo} and {pt_hi}")
    integral = result.integral()
    if integral == 0.0:
        raise ValueError(f"empty detector response between {pt_lo} and {pt_hi}")
    result.scale(1.0 / integral)
    return result


def efficiency_correct_2d(histogram: Histogram2D, efficiency: Histogram1D) -> Histogram2D:
    """Divide a (leading pT, UE pT) histogram by the tracking efficiency.

    The efficiency of each UE pT row is read at the row's centre, with pT
    above 3 GeV taken at 3 GeV. Contents and errors are both divided.
    """
    corrected = histogram.copy()
    inner_x = slice(1, histogram.x_axis.nbins + 1)
    for iy in range(1, histogram.y_axis.nbins + 1):
        pt = min(histogram.y_axis.bin_center(iy), EFFICIENCY_PT_CAP)
        effic = float(efficiency.contents[efficiency.find_bin(pt)])
        row = histogram.contents[inner_x, iy]
        if effic == 0.0:
            if row.any():
                raise ValueError(f"zero efficiency at pT {pt} for a filled row")
            continue
        corrected.contents[inner_x, iy] = row / effic
        corrected.sumw2[inner_x, iy] = histogram.sumw2[inner_x, iy] / (effic * effic)
    return corrected


def per_jet_ue_spectra(ue2d: Histogram2D, lead_pt: Histogram1D) -> dict[int, Histogram1D]:
    """UE pT spectrum per leading jet for every leading-jet pT bin holding jets.

    ``ue2d`` holds leading-jet pT along x and UE pT along y; ``lead_pt``
    counts the leading jets on the same x binning. Keys are bin numbers.
    """
    if ue2d.x_axis != lead_pt.axis:
        raise ValueError("UE histogram and leading-jet histogram have different binning")
    spectra: dict[int, Histogram1D] = {}
    for binno in range(1, ue2d.x_axis.nbins + 1):
        n_jets = int(lead_pt.contents[binno])
        if n_jets <= 0:
            continue
        spectrum = ue2d.projection_y(binno, binno)
        spectrum.scale(1.0 / n_jets)
        spectra[binno] = spectrum
    return spectra


def weight_ue_spectra(
    ue_spectra: Mapping[int, Histogram1D],
    det_weights: Histogram1D,
    fakes: Histogram1D,
    nbins: int = 15,
    low: float = 0.0,
    high: float = 15.0,
) -> Histogram1D:
    """Sum per-jet UE spectra weighted by detector response and non-fake fraction.

    Bins with zero detector weight are skipped; the others enter with
    weight ``det_weight * (1 - fake_fraction)``.
    """
    result = Histogram1D(Axis.uniform(nbins, low, high))
    for binno, spectrum in sorted(ue_spectra.items()):
        det_weight = float(det_weights.contents[binno])
        if det_weight == 0.0:
            continue
        weight = det_weight * (1.0 - float(fakes.contents[binno]))
        result.add(spectrum, weight)
    return result


def combine_corrected(corrected: Sequence[Histogram2D], reference: Histogram2D) -> Histogram2D:
    """Average of corrected slices, each weighted by its integral over the reference's."""
    if not corrected:
        raise ValueError("no corrected histograms to combine")
    reference_integral = reference.integral()
    if reference_integral == 0.0:
        raise ValueError("reference histogram is empty")
    first = corrected[0]
    result = Histogram2D(first.x_axis, first.y_axis)
    for hist in corrected:
        result.add(hist, hist.integral() / reference_integral)
    result.scale(1.0 / len(corrected))
    return result