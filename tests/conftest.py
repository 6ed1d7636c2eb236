"""
Shared fixtures for the gsl_heatmap test suite.
"""

import logging

import pytest

from gsl_heatmap.data_loading.data_context import (
    COORDS_GEOMETRY,
    DataContext,
    Station,
    freeze_series,
)
from gsl_heatmap.data_loading.data_ranges import calculate_data_ranges
from gsl_heatmap.data_loading.heatmap_properties import HeatmapProperties
from gsl_heatmap.data_loading.lake_geometry import (
    SOURCE_WFS,
    parse_lake_geojson,
    simplified_lake_boundary,
)

# North arm west of -112.5, south arm east of it; the two share an edge
NORTH_ARM_RING = [
    [-113.0, 41.2], [-113.0, 41.7], [-112.5, 41.7], [-112.5, 41.2],
    [-113.0, 41.2],
]
SOUTH_ARM_RING = [
    [-112.5, 40.7], [-112.5, 41.2], [-112.0, 41.2], [-112.0, 40.7],
    [-112.5, 40.7],
]


@pytest.fixture
def logger():
    """Create a test logger."""
    logger = logging.getLogger('test_gsl_heatmap')
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def props():
    """Default properties, independent of the config file."""
    return HeatmapProperties()


@pytest.fixture
def two_arm_geojson():
    """Outline FeatureCollection with both arms named."""
    return {
        'type': 'FeatureCollection',
        'features': [
            {
                'type': 'Feature',
                'properties': {'name': 'Gunnison Bay (North Arm)'},
                'geometry': {'type': 'Polygon', 'coordinates': [NORTH_ARM_RING]},
            },
            {
                'type': 'Feature',
                'properties': {'name': 'Gilbert Bay (South Arm)'},
                'geometry': {'type': 'Polygon', 'coordinates': [SOUTH_ARM_RING]},
            },
        ],
    }


@pytest.fixture
def two_arm_boundary(two_arm_geojson, logger):
    return parse_lake_geojson(two_arm_geojson, SOURCE_WFS, logger)


@pytest.fixture
def simplified_boundary(logger):
    return simplified_lake_boundary(logger)


@pytest.fixture
def arm_stations():
    """One north arm station and two south arm stations."""
    return [
        Station('RD2', 'RD2', -112.75, 41.45, COORDS_GEOMETRY),
        Station('AC3', 'AC3', -112.25, 40.95, COORDS_GEOMETRY),
        Station('FB2', 'FB2', -112.30, 41.00, COORDS_GEOMETRY),
    ]


def build_context(stations, density, boundary, temperature=None):
    """
    DataContext from a density series {time_point: {station_id: value}}.

    Salinity is a constant 150 g/L and temperature 50 °F unless given.
    """
    time_points = sorted(density)
    series = {
        'density': density,
        'salinity': {
            time_point: {station.id: 150.0 for station in stations}
            for time_point in time_points
        },
        'temperature': temperature or {
            time_point: 50.0 for time_point in time_points
        },
    }
    return DataContext(
        stations=tuple(stations),
        time_points=tuple(time_points),
        series=freeze_series(series),
        ranges=calculate_data_ranges(series),
        lake_boundary=boundary,
        strategy='test',
    )


@pytest.fixture
def arm_context(arm_stations, two_arm_boundary):
    return build_context(
        arm_stations,
        {'2010-07': {'RD2': 1.25, 'AC3': 1.05, 'FB2': 1.10}},
        two_arm_boundary,
    )


@pytest.fixture
def make_context():
    """Factory building a DataContext from a density series."""
    return build_context
