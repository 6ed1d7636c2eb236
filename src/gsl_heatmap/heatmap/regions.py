"""
Partition stations into the lake's two arms and build per-arm samples.

The north arm membership list is authoritative and every other station is
placed in the south arm. A boundary based classification is available for
stations outside the known identifier set.
"""

from logging import Logger
from typing import Any, Optional

import numpy as np

from gsl_heatmap.data_loading.data_context import DataContext, Station
from gsl_heatmap.data_loading.heatmap_properties import NORTH_ARM_SITES
from gsl_heatmap.data_loading.lake_geometry import (
    LAKE,
    REGION_NORTH_ARM,
    REGION_SOUTH_ARM,
    REGIONS,
)
from gsl_heatmap.heatmap.containment import polygon_mask
from gsl_heatmap.heatmap.idw import RegionSamples
from gsl_heatmap.variables import TEMPERATURE, get_variable_config

METHOD_MEMBERSHIP = 'membership'
METHOD_BOUNDARY = 'boundary'


def classify_station(
    station_id: str,
    north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES
) -> str:
    """
    Region of a station by the membership list.

    >>> classify_station('RD2')
    'north_arm'
    >>> classify_station('AC3')
    'south_arm'
    """
    return REGION_NORTH_ARM if station_id in north_arm_sites else REGION_SOUTH_ARM


def classify_station_by_boundary(
    station: Station,
    boundary: Any,
    north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES
) -> str:
    """
    Region whose polygons contain the station.

    Falls back to the membership list when the boundary has no named arms or
    the station lies outside every arm polygon.
    """
    regions = getattr(boundary, 'regions', {}) or {}
    for region in REGIONS:
        polygons = regions.get(region)
        if polygons and polygon_mask(
            np.array([station.longitude]), np.array([station.latitude]), polygons
        )[0]:
            return region
    return classify_station(station.id, north_arm_sites)


def partition_stations(
    stations: list[Station],
    north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES,
    method: str = METHOD_MEMBERSHIP,
    boundary: Optional[Any] = None
) -> dict[str, list[Station]]:
    """
    Split stations into disjoint regions.

    Args:
        stations: Stations in display order
        north_arm_sites: Authoritative north arm membership
        method: 'membership' or 'boundary'
        boundary: LakeBoundary, required for the boundary method

    Returns:
        {region: stations} with a key for every region in REGIONS; each
        station appears exactly once

    Raises:
        ValueError: For an unknown method or a boundary method without a
            boundary
    """
    if method == METHOD_MEMBERSHIP:
        def classify(station):
            return classify_station(station.id, north_arm_sites)
    elif method == METHOD_BOUNDARY:
        if boundary is None:
            raise ValueError('Boundary classification needs a lake boundary')

        def classify(station):
            return classify_station_by_boundary(station, boundary, north_arm_sites)
    else:
        raise ValueError(f'Unknown classification method {method!r}')

    partition = {region: [] for region in REGIONS}
    for station in stations:
        partition[classify(station)].append(station)
    return partition


def _station_value(
    context: DataContext,
    variable: str,
    time_point: str,
    station_id: str
) -> Optional[float]:
    if variable == TEMPERATURE:
        return context.temperature_at(time_point)
    return context.values_at(variable, time_point).get(station_id)


def _samples(
    stations: list[Station],
    context: DataContext,
    variable: str,
    time_point: str,
    projection: Any
) -> RegionSamples:
    values = [
        _station_value(context, variable, time_point, station.id)
        for station in stations
    ]
    kept = [
        (station, value) for station, value in zip(stations, values)
        if value is not None and np.isfinite(value)
    ]
    if not kept:
        return RegionSamples.empty()

    x, y = projection.forward(
        [station.longitude for station, _ in kept],
        [station.latitude for station, _ in kept],
    )
    x = np.atleast_1d(np.asarray(x, dtype=float))
    y = np.atleast_1d(np.asarray(y, dtype=float))
    finite = np.isfinite(x) & np.isfinite(y)
    return RegionSamples(
        x=x[finite],
        y=y[finite],
        values=np.array([value for _, value in kept], dtype=float)[finite],
        station_ids=tuple(
            station.id for (station, _), ok in zip(kept, finite) if ok
        ),
    )


def region_samples(
    context: DataContext,
    variable: str,
    time_point: str,
    projection: Any,
    logger: Optional[Logger] = None,
    north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES,
    method: str = METHOD_MEMBERSHIP
) -> dict[str, RegionSamples]:
    """
    Projected samples per region for one variable and time point.

    Stations without a finite value or a finite projection are left out.
    A boundary without named arms yields a single 'lake' region holding
    every station.

    Args:
        context: Loaded DataContext
        variable: Variable to sample
        time_point: 'YYYY-MM'
        projection: LakeProjection
        logger: Optional logger
        north_arm_sites: Authoritative north arm membership
        method: 'membership' or 'boundary'

    Returns:
        {region: RegionSamples}
    """
    get_variable_config(variable)
    stations = list(context.stations)
    boundary = context.lake_boundary
    if boundary is not None and getattr(boundary, 'single_region', False):
        partition = {LAKE: stations}
    else:
        partition = partition_stations(
            stations, north_arm_sites, method=method, boundary=boundary
        )

    samples = {
        region: _samples(members, context, variable, time_point, projection)
        for region, members in partition.items()
    }
    if logger is not None:
        logger.debug(
            '%s %s samples: %s', variable, time_point,
            {region: len(s) for region, s in samples.items()},
        )
    return samples
