"""Underlying-event analysis tools for p+Au jet data: binning, BEMC geometry, histograms, detector response, jet matching and event-activity classes."""

__version__ = "0.1.0"