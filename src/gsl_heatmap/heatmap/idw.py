"""
Inverse distance weighted interpolation over planar samples.

    weight_i = 1 / distance_i ** power
    estimate = sum(value_i * weight_i) / sum(weight_i)

A target closer than EPSILON (squared distance) to a sample takes that
sample's value directly; with several coincident samples the last one wins.
An empty sample set leaves every target undefined.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import numpy.typing as npt

EPSILON = 1e-12
DEFAULT_POWER = 2.0
CHUNK_SIZE = 50000


@dataclass(frozen=True, eq=False)
class RegionSamples:
    """Projected station samples of one region."""

    x: npt.NDArray
    y: npt.NDArray
    values: npt.NDArray
    station_ids: tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.values)

    @classmethod
    def from_points(
        cls,
        points: list[tuple[float, float, float]],
        station_ids: Optional[list[str]] = None
    ) -> 'RegionSamples':
        """Build samples from (x, y, value) tuples."""
        array = np.asarray(points, dtype=float).reshape(-1, 3)
        return cls(
            x=array[:, 0],
            y=array[:, 1],
            values=array[:, 2],
            station_ids=tuple(station_ids or ()),
        )

    @classmethod
    def empty(cls) -> 'RegionSamples':
        return cls.from_points([])


def idw_grid(
    x: npt.NDArray,
    y: npt.NDArray,
    samples: RegionSamples,
    power: float = DEFAULT_POWER
) -> npt.NDArray:
    """
    IDW estimates at many target points.

    Args:
        x: Target x coordinates (any shape)
        y: Target y coordinates (same shape as x)
        samples: Region samples
        power: Distance exponent

    Returns:
        Float array shaped like x; NaN where the sample set is empty or the
        target is not finite
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    result = np.full(x.size, np.nan)
    if len(samples) == 0:
        return result.reshape(x.shape)

    xf = x.ravel()
    yf = y.ravel()
    values = samples.values
    for start in range(0, xf.size, CHUNK_SIZE):
        end = start + CHUNK_SIZE
        dx = xf[start:end, None] - samples.x[None, :]
        dy = yf[start:end, None] - samples.y[None, :]
        d2 = dx * dx + dy * dy

        coincident = d2 < EPSILON
        weights = 1.0 / np.where(coincident, 1.0, d2) ** (power / 2)
        estimate = (weights @ values) / weights.sum(axis=1)

        hit = coincident.any(axis=1)
        last = coincident.shape[1] - 1 - coincident[:, ::-1].argmax(axis=1)
        estimate[hit] = values[last[hit]]
        result[start:end] = estimate

    return result.reshape(x.shape)


def idw_interpolate(
    x: float,
    y: float,
    samples: RegionSamples,
    power: float = DEFAULT_POWER
) -> Optional[float]:
    """
    IDW estimate at one target point.

    >>> s = RegionSamples.from_points([(0, 0, 1.0), (2, 0, 3.0)])
    >>> idw_interpolate(1, 0, s)
    2.0

    Returns:
        The estimate, or None when it is undefined
    """
    value = idw_grid(np.array([x]), np.array([y]), samples, power)[0]
    return None if np.isnan(value) else float(value)
