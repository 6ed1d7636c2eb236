"""
Read-only queries over a DataContext for charts and controls.
"""

from typing import Optional

import numpy as np
import pandas as pd

from gsl_heatmap.data_loading.data_context import DataContext
from gsl_heatmap.variables import TEMPERATURE, get_variable_config


def station_time_series(
    context: DataContext,
    variable: str,
    station_id: Optional[str] = None
) -> pd.Series:
    """
    Monthly series of one station, or the lake-wide temperature.

    Args:
        context: Loaded DataContext
        variable: 'density', 'salinity' or 'temperature'
        station_id: Station to read; ignored for temperature

    Returns:
        pandas Series indexed by month start, named after the variable;
        months without a value are left out
    """
    get_variable_config(variable)
    values = {}
    for time_point in context.time_points:
        if variable == TEMPERATURE:
            value = context.temperature_at(time_point)
        else:
            value = context.values_at(variable, time_point).get(station_id)
        if value is not None:
            values[time_point] = value

    return pd.Series(
        list(values.values()),
        index=pd.to_datetime(list(values), format='%Y-%m'),
        dtype=float,
        name=variable,
    )


def average_value(
    context: DataContext,
    variable: str,
    time_point: str
) -> Optional[float]:
    """Mean over stations at one time point (the lake value for temperature)."""
    get_variable_config(variable)
    if variable == TEMPERATURE:
        return context.temperature_at(time_point)
    values = [
        value for value in context.values_at(variable, time_point).values()
        if value is not None and np.isfinite(value)
    ]
    if not values:
        return None
    return float(np.mean(values))
