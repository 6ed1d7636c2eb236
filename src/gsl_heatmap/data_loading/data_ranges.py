"""
Color-scale ranges for the reconciled series.
"""

from collections.abc import Iterable, Mapping
from logging import Logger
from typing import Any, Optional

import numpy as np

from gsl_heatmap.variables import VARIABLES, get_variable_config

RANGE_PADDING = 0.01
MIN_HALF_WIDTH = 0.001


def _series_values(series: Mapping[str, Any]) -> np.ndarray:
    values = []
    for entry in series.values():
        if isinstance(entry, Mapping):
            values.extend(entry.values())
        elif isinstance(entry, Iterable) and not isinstance(entry, str):
            values.extend(entry)
        else:
            values.append(entry)
    array = np.array(
        [value for value in values if value is not None], dtype=float
    )
    return array[np.isfinite(array)]


def calculate_range(
    series: Mapping[str, Any],
    variable: str,
    padding: float = RANGE_PADDING
) -> tuple[float, float]:
    """
    Padded (min, max) of a variable's series, clamped to its sane bounds.

    Args:
        series: {time_point: {station_id: value}} or {time_point: value}
        variable: Variable key, selects default range and bounds
        padding: Relative padding applied to both ends

    Returns:
        (low, high) with low < high; the variable's default range when the
        series holds no finite value
    """
    config = get_variable_config(variable)
    values = _series_values(series)
    if values.size == 0:
        return config.default_range

    data_min = float(values.min())
    data_max = float(values.max())
    low = data_min - abs(data_min) * padding
    high = data_max + abs(data_max) * padding

    bound_low, bound_high = config.bounds
    low = min(max(low, bound_low), bound_high)
    high = max(min(high, bound_high), bound_low)

    if high <= low:
        mid = (low + high) / 2
        half_width = max(abs(mid) * padding, MIN_HALF_WIDTH)
        low, high = mid - half_width, mid + half_width
    return low, high


def calculate_data_ranges(
    series: Mapping[str, Mapping[str, Any]],
    logger: Optional[Logger] = None
) -> dict[str, tuple[float, float]]:
    """Range of every variable present in series."""
    ranges = {}
    for variable in VARIABLES:
        if variable not in series:
            continue
        ranges[variable] = calculate_range(series[variable], variable)
        if logger is not None:
            logger.info(
                '%s range: %.3f to %.3f',
                variable, ranges[variable][0], ranges[variable][1],
            )
    return ranges
