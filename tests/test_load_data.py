"""
Test suite for the end-to-end data loader.

The HTTP client is replaced with an AsyncMock that answers by URL.
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, Mock, patch

import httpx
import numpy as np
import pytest
import shapefile

from gsl_heatmap.data_loading.lake_geometry import (
    LAKE,
    REGION_NORTH_ARM,
    REGION_SOUTH_ARM,
    SOURCE_SHAPEFILE,
    SOURCE_SIMPLIFIED,
    SOURCE_WFS,
)
from gsl_heatmap.data_loading.load_data import (
    load_data_context,
    load_data_context_blocking,
    prepare_stations,
)
from gsl_heatmap.data_loading.reconcile_series import (
    STRATEGY_REAL,
    STRATEGY_SYNTHETIC_SITES,
)
from gsl_heatmap.data_loading.synthetic_data import SyntheticGenerator
from gsl_heatmap.heatmap.rasterize import HeatmapEngine

NORTH_RING = [(-113.0, 41.2), (-113.0, 41.7), (-112.5, 41.7), (-112.5, 41.2), (-113.0, 41.2)]
SOUTH_RING = [(-112.5, 40.7), (-112.5, 41.2), (-112.0, 41.2), (-112.0, 40.7), (-112.5, 40.7)]


def site(name, lon, lat, density, months=12):
    """Raw feed record with one reading per month of 2010."""
    return {
        'id': name,
        'site': name,
        'geom': {'type': 'Point', 'coordinates': [lon, lat]},
        'readings': [
            {'date': f'2010-{month:02d}-15', 'density': density, 'temperature': 55}
            for month in range(1, months + 1)
        ],
    }


def response_with(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def dispatching_client(props, sites=None, outline=None, hang=()):
    """
    Client answering the sites and outline URLs.

    A payload of None makes that feed fail with a connection error; URLs in
    hang never answer.
    """
    payloads = {props.sites_api: sites, props.lake_outline_wfs: outline}

    async def get(url, headers=None):
        if url in hang:
            await asyncio.sleep(60)
        payload = payloads[url]
        if payload is None:
            raise httpx.ConnectError('connection refused')
        return response_with(payload)

    client = AsyncMock()
    client.get.side_effect = get
    return client


@pytest.fixture
def feed_sites():
    return [
        site('RD2', -112.75, 41.45, 1.22),
        site('AC3', -112.25, 40.95, 1.08),
        site('FB2', -112.30, 41.00, 1.10),
        site('XYZ', -112.40, 41.10, 1.15),
    ]


class TestLoadDataContext:
    """Feed handling and fallbacks."""

    @pytest.mark.asyncio
    async def test_real_data(self, props, feed_sites, two_arm_geojson, logger):
        client = dispatching_client(props, feed_sites, two_arm_geojson)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1),
            client=client, temperature_table={},
        )

        assert context.strategy == STRATEGY_REAL
        assert not context.using_synthetic_data
        assert [s.id for s in context.stations] == ['RD2', 'AC3', 'FB2']
        assert len(context.time_points) == 12
        assert context.series['density']['2010-03']['RD2'] == pytest.approx(1.22)
        assert context.lake_boundary.source == SOURCE_WFS
        assert set(context.lake_boundary.regions) == {REGION_NORTH_ARM, REGION_SOUTH_ARM}
        assert context.warnings == ()
        assert client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_both_feeds_fail(self, props, logger):
        client = dispatching_client(props)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1),
            client=client, today=date(2001, 3, 1),
        )

        assert context.strategy == STRATEGY_SYNTHETIC_SITES
        assert context.using_synthetic_data
        assert [s.id for s in context.stations] == list(props.allowed_sites)
        assert context.time_points[0] == '2000-01'
        assert context.time_points[-1] == '2001-03'
        assert context.lake_boundary.source == SOURCE_SIMPLIFIED
        assert any('Brine sites feed unavailable' in w for w in context.warnings)
        assert any('simplified lake outline' in w for w in context.warnings)
        assert 'Using synthetic data for every station' in context.warnings

    @pytest.mark.asyncio
    async def test_too_few_time_points_regenerates(
        self, props, two_arm_geojson, logger
    ):
        sites = [
            site('RD2', -112.75, 41.45, 1.22, months=3),
            site('AC3', -112.25, 40.95, 1.08, months=3),
            site('FB2', -112.30, 41.00, 1.10, months=3),
        ]
        client = dispatching_client(props, sites, two_arm_geojson)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1),
            client=client, today=date(2001, 3, 1), temperature_table={},
        )

        assert context.strategy == STRATEGY_SYNTHETIC_SITES
        # Known stations keep their feed location
        rd2 = next(s for s in context.stations if s.id == 'RD2')
        assert (rd2.longitude, rd2.latitude) == (-112.75, 41.45)
        assert any(STRATEGY_REAL in w for w in context.warnings)

    @pytest.mark.asyncio
    async def test_shapefile_fallback(self, props, feed_sites, tmp_path, logger):
        path = str(tmp_path / 'gsl_outline')
        with shapefile.Writer(path, shapeType=shapefile.POLYGON) as writer:
            writer.field('name', 'C')
            writer.poly([NORTH_RING])
            writer.record('North Arm')
            writer.poly([SOUTH_RING])
            writer.record('South Arm')
        props.lake_outline_shp = path

        client = dispatching_client(props, feed_sites, None)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1), client=client
        )

        assert context.lake_boundary.source == SOURCE_SHAPEFILE
        assert set(context.lake_boundary.regions) == {REGION_NORTH_ARM, REGION_SOUTH_ARM}
        assert 'Using lake outline from local shapefile' in context.warnings

    @pytest.mark.asyncio
    async def test_missing_shapefile_uses_simplified(
        self, props, feed_sites, tmp_path, logger
    ):
        props.lake_outline_shp = str(tmp_path / 'missing')
        client = dispatching_client(props, feed_sites, None)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1), client=client
        )
        assert context.lake_boundary.source == SOURCE_SIMPLIFIED
        assert any('shapefile unreadable' in w for w in context.warnings)

    @pytest.mark.asyncio
    async def test_generic_salinity_warning(self, props, two_arm_geojson, logger):
        sites = [site(name, lon, lat, 1.1) for name, lon, lat in (
            ('RD2', -112.75, 41.45), ('AC3', -112.25, 40.95), ('FB2', -112.30, 41.00),
        )]
        sites[0]['readings'][0]['salinity'] = 250
        client = dispatching_client(props, sites, two_arm_geojson)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1), client=client
        )
        assert context.generic_salinity_readings == 1
        assert any('generic salinity field' in w for w in context.warnings)

    @pytest.mark.asyncio
    async def test_undecodable_bodies_fall_back(self, props, logger):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=b'\x80\x81 not utf8')
        )
        async with httpx.AsyncClient(transport=transport) as client:
            context = await load_data_context(
                props, logger, SyntheticGenerator(seed=1),
                client=client, today=date(2001, 3, 1),
            )

        assert context.strategy == STRATEGY_SYNTHETIC_SITES
        assert context.lake_boundary.source == SOURCE_SIMPLIFIED
        assert any('Brine sites feed unavailable' in w for w in context.warnings)
        assert any('Lake outline feed unavailable' in w for w in context.warnings)

    @pytest.mark.asyncio
    async def test_malformed_site_ids_skipped(
        self, props, feed_sites, two_arm_geojson, logger
    ):
        sites = [
            {'site': ['AC3'], 'id': 1, 'readings': []},
            {'site': {'name': 'RD2'}, 'id': 2, 'readings': []},
        ] + feed_sites
        client = dispatching_client(props, sites, two_arm_geojson)
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1),
            client=client, temperature_table={},
        )

        assert context.strategy == STRATEGY_REAL
        assert [s.id for s in context.stations] == ['RD2', 'AC3', 'FB2']

    @pytest.mark.asyncio
    async def test_outline_timeout_rasterizes_whole_lake(
        self, props, feed_sites, logger
    ):
        props.request_timeout = 0.05
        client = dispatching_client(
            props, feed_sites, None, hang=(props.lake_outline_wfs,)
        )
        context = await load_data_context(
            props, logger, SyntheticGenerator(seed=1),
            client=client, temperature_table={},
        )

        assert context.strategy == STRATEGY_REAL
        assert context.lake_boundary.source == SOURCE_SIMPLIFIED
        assert any('timeout' in w for w in context.warnings)

        frame = HeatmapEngine(context, logger).render_frame('density', '2010-06')
        assert list(frame.rasters) == [LAKE]
        assert frame.painted_cells() > 0
        painted = frame.rasters[LAKE][np.isfinite(frame.rasters[LAKE])]
        assert painted.min() >= 1.08 - 1e-12 and painted.max() <= 1.22 + 1e-12


class TestPrepareStations:

    def test_duplicate_site_keeps_first_location(self, logger):
        sites = [
            site('AC3', -112.25, 40.95, 1.08, months=1),
            site('AC3', -112.10, 40.90, 1.09, months=2),
        ]
        stations, readings = prepare_stations(sites, 2000, logger)
        assert len(stations) == 1
        assert stations[0].longitude == -112.25
        assert len(readings) == 3


class TestLoadDataContextBlocking:

    def test_runs_event_loop(self, props, feed_sites, two_arm_geojson, logger):
        client = dispatching_client(props, feed_sites, two_arm_geojson)
        context = load_data_context_blocking(
            props=props, logger=logger,
            generator=SyntheticGenerator(seed=1), client=client,
        )
        assert context.strategy == STRATEGY_REAL

    def test_creates_and_closes_own_client(self, props, feed_sites, two_arm_geojson, logger):
        client = dispatching_client(props, feed_sites, two_arm_geojson)
        with patch(
            'gsl_heatmap.data_loading.load_data.make_client', return_value=client
        ) as make_client:
            load_data_context_blocking(props=props, logger=logger)
        make_client.assert_called_once_with(props.request_timeout)
        client.aclose.assert_awaited_once()
