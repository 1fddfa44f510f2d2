"""Matching of particle-level and detector-level leading jets in embedding.

Each embedded event is classified as a match, a miss or a fake, and the
leading-jet pT response, misses and fakes are accumulated in histograms.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterable, Sequence

from .histogram import Axis, Histogram1D, Histogram2D, Histogram3D
from .params import N_ETA_BINS, R, eta_region

HT_TRIGGER_IDS = frozenset({500205, 500215})
SKIPPED_RUN_RANGE = (16142059, 16149001)
SKIPPED_RUNS = frozenset({16135031, 16135032})
BBC_MAX = 64000.0
BBC_MIN = 3559.12
HIGH_EA_MIN = 26718.1
LOW_EA_MAX = 10126.1
TRIGGER_ET_MIN = 5.4
LEAD_MATCH_TOLERANCE = 0.0001


@dataclass(frozen=True)
class Jet:
    """A reconstructed jet."""

    pt: float
    eta: float
    phi: float


@dataclass(frozen=True)
class Tower:
    """A calorimeter tower."""

    tower_id: int
    et: float
    eta: float
    phi: float

    @property
    def energy(self) -> float:
        """Energy of the tower taken as a massless particle."""
        return self.et * math.cosh(self.eta)


class Outcome(Enum):
    """How an embedded event was classified."""

    NO_JETS = "no_jets"
    MISSED = "missed"
    UNTRIGGERED = "untriggered"
    OUT_OF_ACCEPTANCE = "out_of_acceptance"
    FAKE = "fake"
    UNMATCHED_LEAD = "unmatched_lead"
    MATCHED = "matched"


def delta_phi(a, b) -> float:
    """Azimuth of b relative to a, in [-pi, pi]."""
    return math.remainder(b.phi - a.phi, 2.0 * math.pi)


def delta_r(a, b) -> float:
    """Distance of a and b in (eta, phi)."""
    return math.hypot(a.eta - b.eta, delta_phi(a, b))


def accept_event(
    run_id: int, trigger_ids: Collection[int], bbc_sum: float, high_ea: bool = True
) -> bool:
    """Event selection on run, high-tower trigger and BBC east ADC sum.

    Events of 0-10% and 90-100% activity are dropped; the remaining ones are
    kept in the high (``high_ea``) or the low event-activity class.
    """
    if SKIPPED_RUN_RANGE[0] <= run_id <= SKIPPED_RUN_RANGE[1]:
        return False
    if run_id in SKIPPED_RUNS:
        return False
    if not HT_TRIGGER_IDS.intersection(trigger_ids):
        return False
    if bbc_sum > BBC_MAX or bbc_sum < BBC_MIN:
        return False
    if high_ea:
        return bbc_sum >= HIGH_EA_MIN
    return bbc_sum <= LOW_EA_MAX


def select_trigger_tower(
    lead_jet: Jet, towers: Iterable[Tower], trigger_ids: Collection[int]
) -> Tower | None:
    """Trigger tower of the leading detector-level jet, or None.

    A tower qualifies with Et >= 5.4 GeV, an id among the trigger towers,
    and a position inside the jet or back to back with it. The last
    qualifying tower in the given order is kept.
    """
    chosen = None
    for tower in towers:
        if tower.et < TRIGGER_ET_MIN or tower.tower_id not in trigger_ids:
            continue
        dphi = abs(delta_phi(lead_jet, tower))
        if delta_r(lead_jet, tower) <= R or dphi >= math.pi - R:
            chosen = tower
    return chosen


def _by_pt(jets: Iterable[Jet]) -> list[Jet]:
    return sorted(jets, key=lambda jet: jet.pt, reverse=True)


def classify_event(
    part_jets: Sequence[Jet], det_jets: Sequence[Jet], trigger_tower: Tower | None
) -> tuple[Outcome, Jet | None]:
    """Classify an event; the matched particle-level jet comes with MATCHED."""
    part = _by_pt(part_jets)
    det = _by_pt(det_jets)
    if not part and not det:
        return Outcome.NO_JETS, None
    if not det:
        return Outcome.MISSED, None
    if trigger_tower is None:
        return Outcome.UNTRIGGERED, None
    lead = det[0]
    try:
        eta_region(lead.eta)
    except ValueError:
        return Outcome.OUT_OF_ACCEPTANCE, None
    if not part:
        return Outcome.FAKE, None
    matches = [jet for jet in part if delta_r(jet, lead) <= R]
    if not matches:
        return Outcome.FAKE, None
    if delta_r(matches[0], part[0]) > LEAD_MATCH_TOLERANCE:
        return Outcome.UNMATCHED_LEAD, None
    return Outcome.MATCHED, matches[0]


class ResponseAccumulator:
    """Leading-jet response, misses and fakes over many embedded events."""

    def __init__(self) -> None:
        pt_axis = Axis.uniform(55, 4.0, 59.0)
        self.response = Histogram2D(pt_axis, pt_axis)
        self.response_by_region = [Histogram2D(pt_axis, pt_axis) for _ in range(N_ETA_BINS)]
        self.fakes = [Histogram1D(pt_axis) for _ in range(N_ETA_BINS)]
        self.misses = Histogram1D(pt_axis)
        self.missed_by_region = [Histogram1D(pt_axis) for _ in range(N_ETA_BINS)]
        self.trigger_towers = Histogram3D(
            Axis.uniform(30, 0.0, 30.0),
            Axis.uniform(40, -1.0, 1.0),
            Axis.uniform(120, 0.0, 2.0 * math.pi),
        )
        self.matched: list[tuple[Jet, Jet, float]] = []

    def record(
        self,
        part_jets: Sequence[Jet],
        det_jets: Sequence[Jet],
        trigger_tower: Tower | None,
        weight: float = 1.0,
    ) -> Outcome:
        """Classify one event and fill the histograms it belongs to."""
        part = _by_pt(part_jets)
        det = _by_pt(det_jets)
        outcome, match = classify_event(part, det, trigger_tower)
        if outcome is Outcome.MISSED:
            self.misses.fill(part[0].pt, weight)
            try:
                region = eta_region(part[0].eta)
            except ValueError:
                pass
            else:
                self.missed_by_region[region].fill(part[0].pt, weight)
        elif outcome in (Outcome.UNTRIGGERED, Outcome.UNMATCHED_LEAD):
            if part:
                self.misses.fill(part[0].pt, weight)
        elif outcome is Outcome.FAKE:
            self.fakes[eta_region(det[0].eta)].fill(det[0].pt, weight)
        elif outcome is Outcome.MATCHED:
            assert match is not None and trigger_tower is not None
            lead = det[0]
            region = eta_region(lead.eta)
            self.response_by_region[region].fill(match.pt, lead.pt, weight)
            self.response.fill(match.pt, lead.pt, weight)
            self.trigger_towers.fill(
                trigger_tower.energy,
                trigger_tower.eta,
                trigger_tower.phi % (2.0 * math.pi),
                weight,
            )
            self.matched.append((match, lead, weight))
        return outcome