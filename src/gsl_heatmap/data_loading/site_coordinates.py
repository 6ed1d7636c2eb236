"""
Resolve brine site coordinates to longitude/latitude.

Sites from the PostgREST feed carry their location either as an embedded
GeoJSON point (dict or JSON string) or as UTM zone 12N easting/northing.
Sites with neither usable encoding are placed at a fixed point near the lake
center so that every station can still be plotted.
"""

import json
import math
from functools import lru_cache
from logging import Logger
from typing import Any, Optional

from pyproj import Transformer
from pyproj.exceptions import ProjError

from gsl_heatmap.data_loading.data_context import (
    COORDS_DEFAULT,
    COORDS_GEOMETRY,
    COORDS_PROJECTED,
    Station,
)

DEFAULT_LONGITUDE = -112.5
DEFAULT_LATITUDE = 41.0

# UTM zone 12N on WGS84, the zone covering the Great Salt Lake
UTM_ZONE_12N = 'EPSG:32612'
WGS84 = 'EPSG:4326'


@lru_cache(maxsize=1)
def _utm_transformer() -> Transformer:
    return Transformer.from_crs(UTM_ZONE_12N, WGS84, always_xy=True)


def _finite_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def station_id_for(site: dict) -> str:
    """Station identifier of a raw site record."""
    return site.get('site') or f"site-{site.get('id')}"


def parse_point_geometry(geom: Any) -> Optional[tuple[float, float]]:
    """
    Read (lon, lat) from an embedded GeoJSON point.

    Args:
        geom: dict or JSON-encoded string

    Returns:
        (longitude, latitude), or None when the geometry is not a
        well-formed Point with exactly two finite coordinates
    """
    if isinstance(geom, str):
        try:
            geom = json.loads(geom)
        except ValueError:
            return None
    if not isinstance(geom, dict) or geom.get('type') != 'Point':
        return None

    coordinates = geom.get('coordinates')
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2:
        return None
    longitude = _finite_float(coordinates[0])
    latitude = _finite_float(coordinates[1])
    if longitude is None or latitude is None:
        return None
    return longitude, latitude


def utm_to_lonlat(easting: Any, northing: Any) -> Optional[tuple[float, float]]:
    """
    Convert UTM zone 12N easting/northing (meters) to (lon, lat).

    Returns None for non-numeric input or a non-finite conversion result.
    """
    easting = _finite_float(easting)
    northing = _finite_float(northing)
    if easting is None or northing is None:
        return None

    longitude, latitude = _utm_transformer().transform(easting, northing)
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        return None
    return float(longitude), float(latitude)


def normalize_site_coordinates(site: dict, logger: Logger) -> Station:
    """
    Build a Station with resolved coordinates from a raw site record.

    Order of preference: embedded 'geom' point, then 'utmeasting' /
    'utmnorthing', then the fixed default location. Never raises.

    Args:
        site: Raw site record from the brine sites feed
        logger: Logger instance

    Returns:
        Station tagged with the coordinate source that was used
    """
    station_id = station_id_for(site)
    name = site.get('site') or f"Site {site.get('id')}"

    lonlat = None
    source = COORDS_DEFAULT
    if site.get('geom'):
        lonlat = parse_point_geometry(site['geom'])
        if lonlat is not None:
            source = COORDS_GEOMETRY

    if lonlat is None and (
        site.get('utmeasting') is not None
        and site.get('utmnorthing') is not None
    ):
        try:
            lonlat = utm_to_lonlat(site['utmeasting'], site['utmnorthing'])
        except ProjError as ex:
            logger.debug('UTM conversion failed for site %s: %s', station_id, ex)
            lonlat = None
        if lonlat is not None:
            source = COORDS_PROJECTED

    if lonlat is None:
        logger.warning('Using default coords for site %s', station_id)
        lonlat = (DEFAULT_LONGITUDE, DEFAULT_LATITUDE)
        source = COORDS_DEFAULT

    return Station(
        id=station_id,
        name=name,
        longitude=lonlat[0],
        latitude=lonlat[1],
        coords_source=source,
    )
