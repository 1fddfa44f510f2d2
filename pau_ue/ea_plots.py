"""Underlying-event density by region, event activity and leading jet.

Jet events carry charged and neutral UE densities in three pseudorapidity
regions (east, mid, west). Events are grouped into event-activity,
leading-jet pT and leading-jet eta classes, and the mean total density
(charged + neutral) of each region is taken over the selected events.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable

from .params import EAST_MID_WEST

# BBC east ADC sum windows of the low and high event-activity classes.
EA_LO_RANGE = (4107.0, 11503.0)
EA_HI_MIN = 28537.0
JET_ETA_EDGE = 0.3


def ea_class(bbc_sum: float) -> int | None:
    """Event-activity class: 0 (low), 1 (high), or None outside both windows."""
    if EA_LO_RANGE[0] < bbc_sum < EA_LO_RANGE[1]:
        return 0
    if bbc_sum > EA_HI_MIN:
        return 1
    return None


def lead_pt_class(pt: float) -> int | None:
    """Leading-jet pT class: 10-15, [15, 20], 20-30 GeV, or None."""
    if 10.0 < pt < 15.0:
        return 0
    if 15.0 <= pt <= 20.0:
        return 1
    if 20.0 < pt < 30.0:
        return 2
    return None


def jet_eta_class(eta: float) -> int | None:
    """Leading-jet eta class: 0 east, 1 mid (edges included), 2 west."""
    if eta < -JET_ETA_EDGE:
        return 0
    if -JET_ETA_EDGE <= eta <= JET_ETA_EDGE:
        return 1
    if eta > JET_ETA_EDGE:
        return 2
    return None


def _region_name(region: int | str) -> str:
    if isinstance(region, str):
        for name in EAST_MID_WEST:
            if name.lower() == region.lower():
                return name
        raise ValueError(f"unknown region {region!r}")
    if isinstance(region, int) and 0 <= region < len(EAST_MID_WEST):
        return EAST_MID_WEST[region]
    raise ValueError(f"unknown region {region!r}")


def _value(record: Any, key: str) -> float:
    if isinstance(record, Mapping):
        return float(record[key])
    return float(getattr(record, key))


def region_rho(record: Any, region: int | str) -> float:
    """Total (charged + neutral) UE density of a record in one region.

    ``record`` is a mapping or object with the fields ``chg<Region>Rho``
    and ``neu<Region>Rho``; ``region`` is 0..2 or East/Mid/West.
    """
    name = _region_name(region)
    return _value(record, f"chg{name}Rho") + _value(record, f"neu{name}Rho")


def rho_by_region(
    records: Iterable[Any], selection: Callable[[Any], bool] | None = None
) -> list[tuple[float, float]]:
    """Mean total density and its error for east, mid and west.

    Only records for which ``selection`` holds are used (all when it is
    None). The error is the standard deviation over sqrt(n); with no
    selected records both are zero.
    """
    chosen = [r for r in records if selection is None or selection(r)]
    result: list[tuple[float, float]] = []
    for region in range(len(EAST_MID_WEST)):
        values = [region_rho(r, region) for r in chosen]
        n = len(values)
        if n == 0:
            result.append((0.0, 0.0))
            continue
        mean = math.fsum(values) / n
        variance = max(math.fsum(v * v for v in values) / n - mean * mean, 0.0)
        result.append((mean, math.sqrt(variance) / math.sqrt(n)))
    return result