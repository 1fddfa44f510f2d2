"""Analysis parameters shared by the underlying-event studies.

Binning, detector cuts, acceptance areas and the naming scheme of the
tracking-efficiency histograms.
"""

from __future__ import annotations

import math

PI = 3.141592653

# Variable binning of the (leading-jet pT, UE particle pT, UE particle eta) histograms.
XBINS = 55
XBIN_EDGES: tuple[float, ...] = tuple(float(v) for v in range(4, 60))
YBINS = 14
YBIN_EDGES: tuple[float, ...] = (
    0.20, 0.25, 0.30, 0.35, 0.40, 0.50, 0.60, 0.70, 0.80, 1.0, 2.0, 3.0, 5.0, 10.0, 15.0,
)
ZBINS = 20
ZBIN_EDGES: tuple[float, ...] = tuple(round(-1.0 + 0.1 * i, 10) for i in range(ZBINS + 1))

DET_BAD_TOWERS = "lists/bad_towers_pAu2015.list"

# Detector-level event, track and tower cuts.
DET_VERTEX_Z_CUT = 10.0
REF_MULT_CUT = 0
DET_MAX_EVENT_PT_CUT = 30.0
DET_MAX_EVENT_ET_CUT = 30.0
DET_MIN_EVENT_ET_CUT = 0.2
DET_VERTEX_Z_DIFF_CUT = 6.0
DET_DCA_CUT = 1.0
DET_MIN_N_FIT_POINTS_CUT = 20
DET_FIT_OVER_MAX_POINTS_CUT = 0.52
DET_MAX_PT_CUT = 30.0
DET_MAX_ET_CUT = 30.0

# Jet definition.
R = 0.4
MAX_TRACK_ETA = 1.0
MAX_JET_ETA = 1.0 - R
MIN_JET_PT = 5.0
PART_MIN_PT = 0.2
NEF_MAX = 0.9

# Leading-jet pT classes.
N_PT_BINS = 3
PT_LO: tuple[float, ...] = (10.0, 15.0, 20.0)
PT_HI: tuple[float, ...] = (15.0, 20.0, 30.0)
PT_BIN_NAME: tuple[str, ...] = ("_10_15GeV", "_15_20GeV", "_20_30GeV")
PT_BIN_STRING: tuple[str, ...] = (
    "10<p_{T}^{lead}<15", "15<p_{T}^{lead}<20", "20<p_{T}^{lead}<30",
)
PT_MARKER: tuple[int, ...] = (20, 34, 33)

# Acceptance areas of the UE regions (eta width x 2*(pi - 2) in phi).
AREA = 4 * 1.14159265
EAST_AREA = 2 * 0.7 * (math.pi - 2)
MID_AREA = 2 * 0.6 * (math.pi - 2)
WEST_AREA = 2 * 0.7 * (math.pi - 2)

MARKER: tuple[int, ...] = tuple(20 + (i % 15) for i in range(55))

# East / mid / west pseudorapidity regions.
N_ETA_BINS = 3
ETA_LO: tuple[float, ...] = (-1.0, -0.3, 0.3)
ETA_HI: tuple[float, ...] = (-0.3, 0.3, 1.0)
ETA_BIN_NAME: tuple[str, ...] = ("_eastEta", "_midEta", "_westEta")
EMW: tuple[str, ...] = ("east", "mid", "west")
EAST_MID_WEST: tuple[str, ...] = ("East", "Mid", "West")
ETA_BIN_STRING: tuple[str, ...] = (
    "-0.6<#eta_{jet}<-0.3", "-0.3<#eta_{jet}<0.3", "0.3<#eta_{jet}<0.6",
)
ETA_COLOR: tuple[int, ...] = (877, 596, 814)
REGION_AREA: tuple[float, ...] = (EAST_AREA, MID_AREA, WEST_AREA)
UE_ETA_BIN_STRING: tuple[str, ...] = (
    "-1.0 < UE #eta < -0.3", "-0.3 < UE #eta < 0.3", "0.3 < UE #eta < 1.0",
)

# Event-activity classes.
N_EA_BINS = 2
EA_BIN_NAME: tuple[str, ...] = ("Lo", "Hi")
EA_BIN_STRING: tuple[str, ...] = ("Low EA", "High EA")
EA_COLOR: tuple[int, ...] = (884, 810)
EA_MARKER: tuple[int, ...] = (24, 20)

# Pseudorapidity bins of the tracking-efficiency histograms.
EFF_ETA_BINS = 10
EFF_ETA_EDGES: tuple[float, ...] = (
    -1.0, -0.8, -0.6, -0.4, -0.2, 0.0, 0.2, 0.4, 0.6, 0.8, 1.0,
)
EFF_ETA_COLOR: tuple[int, ...] = (618, 633, 807, 800, 819, 419, 433, 862, 884, 619)
EFF_ETA_EDGE_STRING: tuple[str, ...] = (
    "-1.0", "-0.8", "-0.6", "-0.4", "-0.2", "0.0", "0.2", "0.4", "0.6", "0.8", "1.0",
)

_EFFICIENCY_LABELS = {"loEA": "2_3", "hiEA": "8_10"}


def efficiency_bin_label(ea_string: str) -> str:
    """Return the BBC bin label of the efficiency histograms for an EA class."""
    try:
        return _EFFICIENCY_LABELS[ea_string]
    except KeyError:
        raise ValueError(f"EA string {ea_string!r} is unacceptable") from None


def efficiency_histogram_name(bin_label: str, eta_bin: int) -> str:
    """Name of the efficiency histogram for a zero-based efficiency eta bin."""
    if eta_bin < 0:
        raise ValueError(f"eta bin must be non-negative, got {eta_bin}")
    number = eta_bin + 1
    return f"eff_s_bin_{bin_label}_bbc__{number}_{number}_eta"


def eta_region(eta: float) -> int:
    """Index of the east/mid/west region holding eta; shared edges go to the later region."""
    region = None
    for index, (low, high) in enumerate(zip(ETA_LO, ETA_HI)):
        if low <= eta <= high:
            region = index
    if region is None:
        raise ValueError(f"eta {eta} lies outside every region")
    return region


def pt_bin(pt: float) -> int | None:
    """Index of the leading-jet pT class holding pt, or None outside all classes."""
    found = None
    for index, (low, high) in enumerate(zip(PT_LO, PT_HI)):
        if low <= pt <= high:
            found = index
    return found