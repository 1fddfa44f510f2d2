# pau_ue

Tools for studying the underlying event (UE) around leading jets in p+Au
collisions: analysis binning, barrel calorimeter tower geometry, light-weight
weighted histograms, leading-jet detector response, jet matching in
embedding, and event-activity classes.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `pau_ue.params` – analysis constants and binning: leading-jet pT classes,
  east/mid/west eta regions and their areas, detector cuts, and the helpers
  `pt_bin`, `eta_region`, `efficiency_bin_label` and
  `efficiency_histogram_name`.
- `pau_ue.bemc` – `BemcHelper` maps a tower id (1..4800) to its hardware
  location (`TowerLocation`), its eta and phi, and its vertex-corrected eta.
- `pau_ue.histogram` – `Axis`, `Histogram1D`, `Histogram2D` and
  `Histogram3D` with under/overflow bins, weighted fills, integrals, means and
  their errors, scaling, addition, copies and projections.
- `pau_ue.trees` – `EventRecord` tables stored as CSV (`read_records`,
  `write_records`) and `find_missing_events`, which picks candidate events
  with corrected leading-jet pT in range that are absent from a reference
  table.
- `pau_ue.response` – leading-jet response from embedding: normalising misses
  and fakes, projecting the response per particle-level bin, building the
  weighted detector response of a pT class, dividing a UE histogram by a
  tracking efficiency, per-jet UE spectra, weighting them by the detector
  response and the non-fake fraction, and averaging corrected slices.
- `pau_ue.matching` – particle/detector-level jet matching: `Jet`, `Tower`,
  `Outcome`, `accept_event`, `select_trigger_tower`, `classify_event`, and
  `ResponseAccumulator`, which fills response, miss and fake histograms.
- `pau_ue.ea_plots` – event-activity, leading-jet pT and jet-eta classes, and
  the mean total UE density per region with its error (`rho_by_region`).

## Example

```python
from pau_ue.bemc import BemcHelper
from pau_ue.params import pt_bin, eta_region

bemc = BemcHelper()
print(bemc.tower_eta(1), bemc.tower_phi(1))
print(bemc.vertex_corrected_eta(1, vz=10.0))

print(pt_bin(12.5), eta_region(-0.5))
```

## Command line

Compare two event tables and write out the events of the candidate table
whose corrected leading-jet pT lies between 10 and 30 GeV and that have no
counterpart in the reference table:

```
pau-ue-compare-trees 0
```

The argument selects the chunk of 50000 events to process (default 0).
`--reference` and `--candidates` name the two CSV tables, and `--output-dir`
the directory (default `CompareTrees`) where `CompareTrees_<start>.csv` is
written. The number of events found is printed.

## What the package does not do

Event tables are read from and written to CSV files only. The package draws
and saves no plots, and it has no fit of the tracking-efficiency function,
no per-eta-bin efficiency correction of UE spectra with systematic
variations, and no slicing of UE spectra by leading-jet pT into summed pT
classes.