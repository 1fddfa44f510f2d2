"""Compare two event tables and keep the events missing from the reference.

Events come from a candidate table; those whose corrected leading-jet pT
lies in range but whose (run, event) pair is absent from the reference
table are written to a new table.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable, Sequence

log = logging.getLogger(__name__)

CHUNK_SIZE = 50000
DEFAULT_REFERENCE = "out/UE/pAuHTjetUE_HILO_diffPt_sept.csv"
DEFAULT_CANDIDATES = "out/UE/pAuHTjetUE_30cmVzCut_3cmVzDiff_HILO__binShift.csv"


@dataclass
class EventRecord:
    """One entry of the jet event table."""

    run_id: int
    event_id: int
    n_towers: int = 0
    n_primary: int = 0
    n_global: int = 0
    n_vertices: int = 0
    ref_mult: int = 0
    g_ref_mult: int = 0
    vz: float = 0.0
    lead_pt: float = 0.0
    bbc_adc_sum_east: float = 0.0
    lead_eta: float = 0.0
    lead_phi: float = 0.0
    lead_area: float = 0.0
    lead_pt_corrected: float = 0.0
    n_ht_trig: int = 0
    n_jets_above5: int = 0
    dphi_trig_lead: float = 0.0
    dr_trig_lead: float = 0.0

    @property
    def key(self) -> tuple[int, int]:
        return self.run_id, self.event_id


_BRANCHES: tuple[tuple[str, str], ...] = (
    ("RunID", "run_id"),
    ("EventID", "event_id"),
    ("nTowers", "n_towers"),
    ("nPrimary", "n_primary"),
    ("nGlobal", "n_global"),
    ("nVertices", "n_vertices"),
    ("refMult", "ref_mult"),
    ("gRefMult", "g_ref_mult"),
    ("Vz", "vz"),
    ("leadPt", "lead_pt"),
    ("BbcAdcSumEast", "bbc_adc_sum_east"),
    ("leadEta", "lead_eta"),
    ("leadPhi", "lead_phi"),
    ("leadArea", "lead_area"),
    ("leadPtCorrected", "lead_pt_corrected"),
    ("nHTtrig", "n_ht_trig"),
    ("nJetsAbove5", "n_jets_above5"),
    ("dPhiTrigLead", "dphi_trig_lead"),
    ("dRTrigLead", "dr_trig_lead"),
)

_TYPES = {f.name: (int if f.type in ("int", int) else float) for f in fields(EventRecord)}


def read_records(path: str | Path) -> list[EventRecord]:
    """Read an event table written by :func:`write_records`."""
    with open(path, newline="") as handle:
        reader = csv.DictReader(handle)
        missing = [b for b, _ in _BRANCHES if b not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing columns {', '.join(missing)}")
        records = []
        for row in reader:
            values = {}
            for branch, attr in _BRANCHES:
                convert = _TYPES[attr]
                text = row[branch]
                values[attr] = int(float(text)) if convert is int else float(text)
            records.append(EventRecord(**values))
        return records


def write_records(path: str | Path, records: Iterable[EventRecord]) -> None:
    """Write records as a CSV table with one column per branch."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(branch for branch, _ in _BRANCHES)
        for record in records:
            writer.writerow(repr(getattr(record, attr)) for _, attr in _BRANCHES)


def progress_line(event: int, total: int) -> str:
    """Progress message with the percentage to three significant digits."""
    percent = event * 100.0 / total
    return f"event number {event}/{total} \t{percent:.3g}%"


def find_missing_events(
    reference: Sequence[EventRecord],
    candidates: Sequence[EventRecord],
    start: int = 0,
    chunk_size: int = CHUNK_SIZE,
    pt_min: float = 10.0,
    pt_max: float = 30.0,
) -> list[EventRecord]:
    """Candidates in [start, start+chunk_size) with pT in range and absent from reference.

    Out-of-range candidates are skipped over, and the scan continues past
    them within the same chunk.
    """
    known = {record.key for record in reference}
    total = len(candidates)
    end = start + chunk_size
    missing: list[EventRecord] = []
    j = start
    while j < end and j < total:
        if j % 1000 == 0:
            log.info(progress_line(j, total))
        record = candidates[j]
        while not pt_min <= record.lead_pt_corrected <= pt_max:
            j += 1
            if j >= total:
                return missing
            record = candidates[j]
            if j % 1000 == 0:
                log.info(progress_line(j, total))
        if record.key not in known:
            missing.append(record)
        j += 1
    return missing


def main(argv: Sequence[str] | None = None) -> int:
    """Write the events missing from the reference table for one chunk."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("chunk", nargs="?", type=int, default=0, help="chunk index")
    parser.add_argument("--reference", default=DEFAULT_REFERENCE)
    parser.add_argument("--candidates", default=DEFAULT_CANDIDATES)
    parser.add_argument("--output-dir", default="CompareTrees")
    args = parser.parse_args(argv)

    start = args.chunk * CHUNK_SIZE
    reference = read_records(args.reference)
    candidates = read_records(args.candidates)
    missing = find_missing_events(reference, candidates, start, CHUNK_SIZE)
    write_records(Path(args.output_dir) / f"CompareTrees_{start}.csv", missing)
    sys.stdout.write(f"{len(missing)}\n\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())