"""
Test suite for region partitioning and the lake outline regions.
"""

import pytest

from gsl_heatmap.data_loading.data_context import COORDS_DEFAULT, Station
from gsl_heatmap.data_loading.lake_geometry import (
    LAKE,
    REGION_NORTH_ARM,
    REGION_SOUTH_ARM,
    REGIONS,
    SOURCE_WFS,
    classify_feature_name,
    geometry_polygons,
    parse_lake_geojson,
)
from gsl_heatmap.heatmap.projection import fit_projection
from gsl_heatmap.heatmap.regions import (
    classify_station,
    partition_stations,
    region_samples,
)


class TestClassifyFeatureName:

    @pytest.mark.parametrize('name, region', [
        ('North Arm', REGION_NORTH_ARM),
        ('GUNNISON BAY', REGION_NORTH_ARM),
        ('south arm', REGION_SOUTH_ARM),
        ('Gilbert Bay', REGION_SOUTH_ARM),
        ('Great Salt Lake', None),
        ('', None),
        (None, None),
    ])
    def test_keywords(self, name, region):
        assert classify_feature_name(name) == region


class TestLakeGeometry:
    """Outline parsing into region polygons."""

    def test_named_arms(self, two_arm_boundary):
        assert list(two_arm_boundary.regions) == list(REGIONS)
        assert len(two_arm_boundary.regions[REGION_NORTH_ARM]) == 1
        assert len(two_arm_boundary.polygons) == 2
        assert not two_arm_boundary.single_region

    def test_unnamed_outline_is_single_region(self, simplified_boundary):
        assert list(simplified_boundary.regions) == [LAKE]
        assert simplified_boundary.single_region
        assert simplified_boundary.source == 'simplified'

    def test_multipolygon_and_holes(self):
        geometry = {
            'type': 'MultiPolygon',
            'coordinates': [
                [
                    [[0, 0], [0, 4], [4, 4], [4, 0], [0, 0]],
                    [[1, 1], [1, 2], [2, 2], [2, 1], [1, 1]],
                ],
                [[[10, 10], [10, 11], [11, 11], [10, 10]]],
            ],
        }
        polygons = geometry_polygons(geometry)
        assert len(polygons) == 2
        assert len(polygons[0]) == 2

    def test_malformed_features_skipped(self, logger):
        geojson = {
            'type': 'FeatureCollection',
            'features': [
                'junk',
                {'type': 'Feature', 'geometry': {'type': 'Point', 'coordinates': [0, 0]}},
                {'type': 'Feature', 'geometry': {'type': 'Polygon', 'coordinates': [[[0, 0]]]}},
            ],
        }
        assert parse_lake_geojson(geojson, SOURCE_WFS, logger) is None

    def test_not_a_feature_collection(self, logger):
        assert parse_lake_geojson({'type': 'Feature'}, SOURCE_WFS, logger) is None


class TestPartitionStations:
    """Complete, disjoint assignment of stations to arms."""

    def test_membership_list(self):
        assert classify_station('LVG4') == REGION_NORTH_ARM
        assert classify_station('AC3') == REGION_SOUTH_ARM
        assert classify_station('NEW1') == REGION_SOUTH_ARM

    def test_complete_disjoint_cover(self, arm_stations):
        stations = arm_stations + [Station('NEW1', 'NEW1', -112.5, 41.0, COORDS_DEFAULT)]
        partition = partition_stations(stations)

        assert list(partition) == list(REGIONS)
        ids = [s.id for members in partition.values() for s in members]
        assert sorted(ids) == sorted(s.id for s in stations)
        assert len(ids) == len(set(ids))
        assert [s.id for s in partition[REGION_NORTH_ARM]] == ['RD2']

    def test_boundary_method(self, two_arm_boundary):
        stations = [
            # Listed as north arm but sits in the south arm polygon
            Station('RD1', 'RD1', -112.2, 41.0, COORDS_DEFAULT),
            # Unlisted, inside the north arm polygon
            Station('NEW1', 'NEW1', -112.8, 41.5, COORDS_DEFAULT),
            # Outside every polygon, falls back to the list
            Station('LVG4', 'LVG4', -110.0, 39.0, COORDS_DEFAULT),
        ]
        partition = partition_stations(
            stations, method='boundary', boundary=two_arm_boundary
        )
        assert [s.id for s in partition[REGION_NORTH_ARM]] == ['NEW1', 'LVG4']
        assert [s.id for s in partition[REGION_SOUTH_ARM]] == ['RD1']

    def test_boundary_method_needs_boundary(self, arm_stations):
        with pytest.raises(ValueError):
            partition_stations(arm_stations, method='boundary')

    def test_unknown_method(self, arm_stations):
        with pytest.raises(ValueError):
            partition_stations(arm_stations, method='nearest')


class TestRegionSamples:
    """Per-region sample arrays."""

    def test_samples_split_by_arm(self, arm_context, two_arm_boundary):
        projection = fit_projection(two_arm_boundary, 800, 500, 20)
        samples = region_samples(arm_context, 'density', '2010-07', projection)

        assert set(samples) == set(REGIONS)
        assert samples[REGION_NORTH_ARM].station_ids == ('RD2',)
        assert samples[REGION_NORTH_ARM].values.tolist() == [1.25]
        assert sorted(samples[REGION_SOUTH_ARM].station_ids) == ['AC3', 'FB2']

    def test_missing_values_excluded(
        self, arm_stations, two_arm_boundary, make_context
    ):
        context = make_context(
            arm_stations,
            {'2010-07': {'AC3': 1.05, 'FB2': float('nan')}},
            two_arm_boundary,
        )
        projection = fit_projection(two_arm_boundary, 800, 500, 20)
        samples = region_samples(context, 'density', '2010-07', projection)

        assert len(samples[REGION_NORTH_ARM]) == 0
        assert samples[REGION_SOUTH_ARM].station_ids == ('AC3',)

    def test_single_region_outline(self, arm_stations, simplified_boundary, make_context):
        context = make_context(
            arm_stations,
            {'2010-07': {'RD2': 1.25, 'AC3': 1.05, 'FB2': 1.10}},
            simplified_boundary,
        )
        projection = fit_projection(simplified_boundary, 800, 500, 20)
        samples = region_samples(context, 'density', '2010-07', projection)

        assert list(samples) == [LAKE]
        assert len(samples[LAKE]) == 3

    def test_temperature_uses_lake_value(self, arm_context, two_arm_boundary):
        projection = fit_projection(two_arm_boundary, 800, 500, 20)
        samples = region_samples(arm_context, 'temperature', '2010-07', projection)
        assert samples[REGION_SOUTH_ARM].values.tolist() == [50.0, 50.0]
