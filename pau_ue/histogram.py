"""Binned histograms in one, two and three dimensions.

Bins are numbered as usual for physics histograms: bin 0 is the underflow,
bins 1..n are the regular bins and bin n+1 is the overflow. Every histogram
keeps the weighted bin contents and the sum of squared weights, so bin
errors are always ``sqrt(sumw2)``. Means are computed from the bin centres.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Axis:
    """Bin edges of one histogram axis."""

    edges: tuple[float, ...]

    def __post_init__(self) -> None:
        edges = tuple(float(e) for e in self.edges)
        if len(edges) < 2:
            raise ValueError("an axis needs at least two edges")
        if any(hi <= lo for lo, hi in zip(edges, edges[1:])):
            raise ValueError("axis edges must be strictly increasing")
        object.__setattr__(self, "edges", edges)

    @classmethod
    def uniform(cls, nbins: int, low: float, high: float) -> Axis:
        """Axis with nbins equal bins between low and high."""
        if nbins < 1:
            raise ValueError(f"number of bins must be positive, got {nbins}")
        if high <= low:
            raise ValueError("upper edge must lie above lower edge")
        width = (high - low) / nbins
        edges = [low + i * width for i in range(nbins)] + [high]
        return cls(tuple(edges))

    @property
    def nbins(self) -> int:
        return len(self.edges) - 1

    @property
    def low(self) -> float:
        return self.edges[0]

    @property
    def high(self) -> float:
        return self.edges[-1]

    @property
    def centers(self) -> np.ndarray:
        """Centres of the regular bins 1..n."""
        edges = np.asarray(self.edges)
        return (edges[:-1] + edges[1:]) / 2.0

    def find_bin(self, x: float) -> int:
        """Bin holding x: 0 below the axis, n+1 at or above its upper edge."""
        if x < self.edges[0]:
            return 0
        if x >= self.edges[-1]:
            return self.nbins + 1
        return bisect_right(self.edges, x)

    def bin_center(self, index: int) -> float:
        """Centre of regular bin index (1..n)."""
        if not 1 <= index <= self.nbins:
            raise IndexError(f"bin {index} outside 1..{self.nbins}")
        return (self.edges[index - 1] + self.edges[index]) / 2.0


def _slice(bounds: tuple[int, int] | None, nbins: int, default_flow: bool) -> slice:
    """Inclusive bin range as a slice over an array with flow bins."""
    if bounds is None:
        return slice(0, nbins + 2) if default_flow else slice(1, nbins + 1)
    first, last = bounds
    if not 0 <= first <= last <= nbins + 1:
        raise IndexError(f"bin range ({first}, {last}) outside 0..{nbins + 1}")
    return slice(first, last + 1)


def _moments(centers: np.ndarray, weights: np.ndarray, sumw2: np.ndarray) -> tuple[float, float]:
    """Mean and its error from weights at the given centres."""
    total = float(weights.sum())
    if total == 0.0:
        return 0.0, 0.0
    mean = float((weights * centers).sum() / total)
    variance = float((weights * centers**2).sum() / total) - mean**2
    w2 = float(sumw2.sum())
    if w2 <= 0.0:
        return mean, 0.0
    n_eff = total * total / w2
    return mean, math.sqrt(max(variance, 0.0)) / math.sqrt(n_eff)


class Histogram1D:
    """One-dimensional weighted histogram."""

    def __init__(self, axis: Axis) -> None:
        self.axis = axis
        self.contents = np.zeros(axis.nbins + 2)
        self.sumw2 = np.zeros(axis.nbins + 2)
        self.entries = 0.0

    @property
    def nbins(self) -> int:
        return self.axis.nbins

    @property
    def errors(self) -> np.ndarray:
        return np.sqrt(self.sumw2)

    def fill(self, x: float, weight: float = 1.0) -> int:
        """Add weight at x; returns the bin that was filled."""
        index = self.axis.find_bin(x)
        self.contents[index] += weight
        self.sumw2[index] += weight * weight
        self.entries += 1
        return index

    def find_bin(self, x: float) -> int:
        return self.axis.find_bin(x)

    def bin_center(self, index: int) -> float:
        return self.axis.bin_center(index)

    def integral(self, first: int | None = None, last: int | None = None) -> float:
        """Sum of contents over bins first..last inclusive (default 1..n)."""
        first = 1 if first is None else first
        last = self.nbins if last is None else last
        return float(self.contents[_slice((first, last), self.nbins, False)].sum())

    def scale(self, factor: float) -> None:
        self.contents *= factor
        self.sumw2 *= factor * factor

    def add(self, other: Histogram1D, factor: float = 1.0) -> None:
        if other.axis != self.axis:
            raise ValueError("cannot add histograms with different binning")
        self.contents += factor * other.contents
        self.sumw2 += factor * factor * other.sumw2
        self.entries += other.entries

    def mean(self) -> float:
        inner = slice(1, self.nbins + 1)
        return _moments(self.axis.centers, self.contents[inner], self.sumw2[inner])[0]

    def mean_error(self) -> float:
        inner = slice(1, self.nbins + 1)
        return _moments(self.axis.centers, self.contents[inner], self.sumw2[inner])[1]

    def copy(self) -> Histogram1D:
        clone = Histogram1D(self.axis)
        clone.contents = self.contents.copy()
        clone.sumw2 = self.sumw2.copy()
        clone.entries = self.entries
        return clone


class Histogram2D:
    """Two-dimensional weighted histogram."""

    def __init__(self, x_axis: Axis, y_axis: Axis) -> None:
        self.x_axis = x_axis
        self.y_axis = y_axis
        shape = (x_axis.nbins + 2, y_axis.nbins + 2)
        self.contents = np.zeros(shape)
        self.sumw2 = np.zeros(shape)
        self.entries = 0.0

    @property
    def errors(self) -> np.ndarray:
        return np.sqrt(self.sumw2)

    def fill(self, x: float, y: float, weight: float = 1.0) -> tuple[int, int]:
        ix, iy = self.x_axis.find_bin(x), self.y_axis.find_bin(y)
        self.contents[ix, iy] += weight
        self.sumw2[ix, iy] += weight * weight
        self.entries += 1
        return ix, iy

    def _inner(self) -> tuple[slice, slice]:
        return slice(1, self.x_axis.nbins + 1), slice(1, self.y_axis.nbins + 1)

    def integral(self) -> float:
        """Sum of contents over the regular bins."""
        return float(self.contents[self._inner()].sum())

    def scale(self, factor: float) -> None:
        self.contents *= factor
        self.sumw2 *= factor * factor

    def add(self, other: Histogram2D, factor: float = 1.0) -> None:
        if other.x_axis != self.x_axis or other.y_axis != self.y_axis:
            raise ValueError("cannot add histograms with different binning")
        self.contents += factor * other.contents
        self.sumw2 += factor * factor * other.sumw2
        self.entries += other.entries

    def _axis_moments(self, axis: int) -> tuple[float, float]:
        inner = self._inner()
        contents = self.contents[inner]
        sumw2 = self.sumw2[inner]
        if axis == 1:
            return _moments(self.x_axis.centers, contents.sum(axis=1), sumw2.sum(axis=1))
        if axis == 2:
            return _moments(self.y_axis.centers, contents.sum(axis=0), sumw2.sum(axis=0))
        raise ValueError(f"axis must be 1 (x) or 2 (y), got {axis}")

    def mean(self, axis: int = 1) -> float:
        """Mean along x (axis=1) or y (axis=2)."""
        return self._axis_moments(axis)[0]

    def mean_error(self, axis: int = 1) -> float:
        return self._axis_moments(axis)[1]

    def projection_x(self, first: int | None = None, last: int | None = None) -> Histogram1D:
        """Sum over y bins first..last (default: all, including flow bins)."""
        bounds = None if first is None and last is None else (
            0 if first is None else first,
            self.y_axis.nbins + 1 if last is None else last,
        )
        sy = _slice(bounds, self.y_axis.nbins, True)
        result = Histogram1D(self.x_axis)
        result.contents = self.contents[:, sy].sum(axis=1)
        result.sumw2 = self.sumw2[:, sy].sum(axis=1)
        result.entries = float(result.contents.sum())
        return result

    def projection_y(self, first: int | None = None, last: int | None = None) -> Histogram1D:
        """Sum over x bins first..last (default: all, including flow bins)."""
        bounds = None if first is None and last is None else (
            0 if first is None else first,
            self.x_axis.nbins + 1 if last is None else last,
        )
        sx = _slice(bounds, self.x_axis.nbins, True)
        result = Histogram1D(self.y_axis)
        result.contents = self.contents[sx, :].sum(axis=0)
        result.sumw2 = self.sumw2[sx, :].sum(axis=0)
        result.entries = float(result.contents.sum())
        return result

    def copy(self) -> Histogram2D:
        clone = Histogram2D(self.x_axis, self.y_axis)
        clone.contents = self.contents.copy()
        clone.sumw2 = self.sumw2.copy()
        clone.entries = self.entries
        return clone


class Histogram3D:
    """Three-dimensional weighted histogram."""

    def __init__(self, x_axis: Axis, y_axis: Axis, z_axis: Axis) -> None:
        self.x_axis = x_axis
        self.y_axis = y_axis
        self.z_axis = z_axis
        shape = (x_axis.nbins + 2, y_axis.nbins + 2, z_axis.nbins + 2)
        self.contents = np.zeros(shape)
        self.sumw2 = np.zeros(shape)
        self.entries = 0.0

    @property
    def axes(self) -> tuple[Axis, Axis, Axis]:
        return self.x_axis, self.y_axis, self.z_axis

    def fill(self, x: float, y: float, z: float, weight: float = 1.0) -> tuple[int, int, int]:
        index = (self.x_axis.find_bin(x), self.y_axis.find_bin(y), self.z_axis.find_bin(z))
        self.contents[index] += weight
        self.sumw2[index] += weight * weight
        self.entries += 1
        return index

    def add(self, other: Histogram3D, factor: float = 1.0) -> None:
        if other.axes != self.axes:
            raise ValueError("cannot add histograms with different binning")
        self.contents += factor * other.contents
        self.sumw2 += factor * factor * other.sumw2
        self.entries += other.entries

    def project(
        self,
        axes: str,
        x_range: tuple[int, int] | None = None,
        y_range: tuple[int, int] | None = None,
        z_range: tuple[int, int] | None = None,
    ) -> Histogram1D | Histogram2D:
        """Project onto one or two axes.

        ``axes`` is one letter for a 1D projection, or two letters "ab" for a
        2D projection with b along x and a along y ("ZY" gives y on x and z
        on y). Ranges are inclusive bin ranges; by default the regular bins
        of every axis are summed.
        """
        letters = axes.lower()
        if not 1 <= len(letters) <= 2 or any(c not in "xyz" for c in letters) or len(set(letters)) != len(letters):
            raise ValueError(f"invalid projection option {axes!r}")
        slices = tuple(
            _slice(rng, axis.nbins, False)
            for rng, axis in zip((x_range, y_range, z_range), self.axes)
        )
        contents = self.contents[slices]
        sumw2 = self.sumw2[slices]
        dims = ["xyz".index(c) for c in letters]
        summed = tuple(d for d in range(3) if d not in dims)
        contents = contents.sum(axis=summed)
        sumw2 = sumw2.sum(axis=summed)

        if len(dims) == 1:
            result: Histogram1D | Histogram2D = Histogram1D(self.axes[dims[0]])
            result.contents[1:-1] = contents
            result.sumw2[1:-1] = sumw2
        else:
            along_y, along_x = dims
            kept = sorted(dims)
            order = [kept.index(along_x), kept.index(along_y)]
            result = Histogram2D(self.axes[along_x], self.axes[along_y])
            result.contents[1:-1, 1:-1] = np.transpose(contents, order)
            result.sumw2[1:-1, 1:-1] = np.transpose(sumw2, order)
        result.entries = float(result.contents.sum())
        return result