"""
Load and reconcile lake data into a read-only DataContext.

The site feed and the lake outline feed are fetched concurrently. A failed
feed never aborts the load: sites fall back to synthetic data, and the
outline falls back to a local shapefile (when configured) and then to the
built-in simplified outline. Every fallback is logged and recorded as a
warning on the context.
"""

import asyncio
from datetime import date
from logging import Logger
from typing import Optional

import httpx
import shapefile

from gsl_heatmap.data_loading.data_context import (
    DataContext,
    Station,
    freeze_series,
)
from gsl_heatmap.data_loading.data_ranges import calculate_data_ranges
from gsl_heatmap.data_loading.extract_readings import (
    MonthlyReading,
    extract_station_readings,
)
from gsl_heatmap.data_loading.fetch_feeds import (
    fetch_lake_outline,
    fetch_sites,
    make_client,
)
from gsl_heatmap.data_loading.heatmap_properties import (
    HeatmapProperties,
    load_properties,
)
from gsl_heatmap.data_loading.lake_geometry import (
    SOURCE_SHAPEFILE,
    SOURCE_WFS,
    LakeBoundary,
    parse_lake_geojson,
    read_lake_shapefile,
    simplified_lake_boundary,
)
from gsl_heatmap.data_loading.reconcile_series import build_reconciled_series
from gsl_heatmap.data_loading.site_coordinates import (
    normalize_site_coordinates,
    station_id_for,
)
from gsl_heatmap.data_loading.synthetic_data import SyntheticGenerator
from gsl_heatmap.data_loading.utils import get_logger
from gsl_heatmap.exceptions import FeedError


async def load_lake_boundary(
    client: httpx.AsyncClient,
    props: HeatmapProperties,
    logger: Logger
) -> tuple[LakeBoundary, list[str]]:
    """
    Lake boundary from the first source that yields usable polygons.

    Order: WFS feed, local shapefile (when configured), simplified outline.

    Returns:
        (boundary, warnings)
    """
    warnings = []
    try:
        geojson = await fetch_lake_outline(
            client, props.lake_outline_wfs, props.request_timeout, logger
        )
        boundary = parse_lake_geojson(geojson, SOURCE_WFS, logger)
        if boundary is not None:
            return boundary, warnings
        warnings.append('Lake outline feed had no usable polygons')
    except FeedError as ex:
        logger.warning('Lake outline feed failed: %s', ex)
        warnings.append(f'Lake outline feed unavailable: {ex}')

    if props.lake_outline_shp:
        try:
            boundary = parse_lake_geojson(
                read_lake_shapefile(props.lake_outline_shp, logger),
                SOURCE_SHAPEFILE,
                logger,
            )
            if boundary is not None:
                warnings.append('Using lake outline from local shapefile')
                return boundary, warnings
        except (OSError, shapefile.ShapefileException) as ex:
            logger.warning(
                'Could not read lake outline shapefile %s: %s',
                props.lake_outline_shp, ex,
            )
            warnings.append(f'Lake outline shapefile unreadable: {ex}')

    logger.warning('Using simplified lake outline')
    warnings.append('Using simplified lake outline')
    return simplified_lake_boundary(logger), warnings


async def load_site_data(
    client: httpx.AsyncClient,
    props: HeatmapProperties,
    logger: Logger
) -> tuple[list[dict], list[str]]:
    """
    Raw site records of the allowed sites.

    Returns:
        (sites, warnings); sites is empty when the feed failed
    """
    try:
        sites = await fetch_sites(
            client,
            props.sites_api,
            props.sites_api_profile,
            props.request_timeout,
            logger,
        )
    except FeedError as ex:
        logger.warning('Brine sites feed failed: %s', ex)
        return [], [f'Brine sites feed unavailable: {ex}']

    allowed = set(props.allowed_sites)
    filtered = []
    for site in sites:
        if not isinstance(site, dict) or not isinstance(station_id_for(site), str):
            logger.debug('Skipping malformed site record: %r', site)
            continue
        if station_id_for(site) in allowed:
            filtered.append(site)
    logger.info(
        'Kept %s of %s sites in the allowed site list',
        len(filtered), len(sites),
    )
    return filtered, []


def prepare_stations(
    sites: list[dict],
    min_year: int,
    logger: Logger
) -> tuple[list[Station], list[MonthlyReading]]:
    """
    Resolve station coordinates and extract readings, in feed order.

    A site id appearing more than once keeps its first location; the
    readings of every record are kept.
    """
    stations = {}
    readings = []
    for site in sites:
        station = normalize_site_coordinates(site, logger)
        stations.setdefault(station.id, station)
        readings.extend(
            extract_station_readings(
                station.id, site.get('readings'), min_year, logger
            )
        )
    logger.info(
        'Prepared %s stations with %s monthly readings',
        len(stations), len(readings),
    )
    return list(stations.values()), readings


async def load_data_context(
    props: Optional[HeatmapProperties] = None,
    logger: Optional[Logger] = None,
    generator: Optional[SyntheticGenerator] = None,
    client: Optional[httpx.AsyncClient] = None,
    today: Optional[date] = None,
    temperature_table: Optional[dict[str, float]] = None
) -> DataContext:
    """
    Fetch, reconcile and package all lake data.

    Args:
        props: HeatmapProperties (read from the config file when None)
        logger: Logger instance (configured package logger when None)
        generator: Synthetic value source (seeded from props when None)
        client: Shared HTTP client; one is created and closed when None
        today: Last month of regenerated synthetic data (default today)
        temperature_table: Historical temperatures (default built-in table)

    Returns:
        Read-only DataContext
    """
    logger = logger or get_logger()
    props = props or load_properties(logger)
    generator = generator or SyntheticGenerator(props.random_seed)

    own_client = client is None
    if own_client:
        client = make_client(props.request_timeout)
    try:
        (sites, site_warnings), (boundary, boundary_warnings) = (
            await asyncio.gather(
                load_site_data(client, props, logger),
                load_lake_boundary(client, props, logger),
            )
        )
    finally:
        if own_client:
            await client.aclose()

    stations, readings = prepare_stations(sites, props.min_year, logger)
    result, strategy, outcomes = build_reconciled_series(
        stations, readings, props, generator, logger,
        today=today, temperature_table=temperature_table,
    )

    warnings = site_warnings + boundary_warnings
    for outcome in outcomes:
        if not outcome.succeeded:
            warnings.append(f'Strategy {outcome.name} skipped: {outcome.message}')
    if result.using_synthetic_data:
        warnings.append('Using synthetic data for every station')
    if result.generic_salinity_readings:
        warnings.append(
            f'{result.generic_salinity_readings} salinity values come from the '
            'generic salinity field; their unit is not verified'
        )

    context = DataContext(
        stations=tuple(result.stations),
        time_points=tuple(result.time_points),
        series=freeze_series(result.series),
        ranges=calculate_data_ranges(result.series, logger),
        lake_boundary=boundary,
        using_synthetic_data=result.using_synthetic_data,
        strategy=strategy,
        has_real=dict(result.has_real),
        generic_salinity_readings=result.generic_salinity_readings,
        warnings=tuple(warnings),
    )
    logger.info(
        'Loaded %s stations over %s time points (strategy %s)',
        len(context.stations), len(context.time_points), strategy,
    )
    return context


def load_data_context_blocking(**kwargs) -> DataContext:
    """Run load_data_context to completion from synchronous code."""
    return asyncio.run(load_data_context(**kwargs))
