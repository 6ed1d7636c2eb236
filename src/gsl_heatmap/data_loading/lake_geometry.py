"""
Lake boundary geometry.

Reads the lake outline from a GeoJSON FeatureCollection (WFS feed), from a
local shapefile, or falls back to a coarse built-in outline. Features whose
name identifies an arm become that arm's region polygons. When no feature is
named after an arm, the whole outline is treated as a single 'lake' region.

Polygons are lists of rings and rings are lists of (lon, lat) tuples; the
first ring is the outer boundary and the rest are holes.
"""

import math
from dataclasses import dataclass, field
from logging import Logger
from typing import Any, Optional

import shapefile

REGION_NORTH_ARM = 'north_arm'
REGION_SOUTH_ARM = 'south_arm'
LAKE = 'lake'

# Cells inside both arms go to the first region listed
REGIONS = (REGION_NORTH_ARM, REGION_SOUTH_ARM)

REGION_KEYWORDS = {
    REGION_NORTH_ARM: ('north', 'gunnison'),
    REGION_SOUTH_ARM: ('south', 'gilbert'),
}

SOURCE_WFS = 'wfs'
SOURCE_SHAPEFILE = 'shapefile'
SOURCE_SIMPLIFIED = 'simplified'

SIMPLIFIED_OUTLINE = [
    [-112.9, 41.4], [-112.6, 41.6], [-112.2, 41.5], [-112.0, 41.2],
    [-112.1, 40.8], [-112.3, 40.7], [-112.7, 40.8], [-112.9, 41.1],
    [-112.9, 41.4],
]

Ring = list[tuple[float, float]]
Polygon = list[Ring]


@dataclass(frozen=True)
class LakeBoundary:
    """
    Lake outline split into region polygons.

    Attributes:
        regions: {region name: polygons}, in REGIONS order, or {'lake': ...}
            for an outline without named arms
        polygons: Every polygon of the outline, used to fit the projection
        source: 'wfs', 'shapefile' or 'simplified'
        feature_names: Names of the features read, '' for unnamed ones
    """

    regions: dict[str, list[Polygon]]
    polygons: list[Polygon]
    source: str
    feature_names: tuple[str, ...] = field(default_factory=tuple)

    @property
    def single_region(self) -> bool:
        return list(self.regions) == [LAKE]


def simplified_lake_geojson() -> dict:
    """Coarse outline of the whole lake as an unnamed GeoJSON feature."""
    return {
        'type': 'FeatureCollection',
        'features': [
            {
                'type': 'Feature',
                'properties': {},
                'geometry': {
                    'type': 'Polygon',
                    'coordinates': [SIMPLIFIED_OUTLINE],
                },
            }
        ],
    }


def _parse_ring(ring: Any) -> Optional[Ring]:
    if not isinstance(ring, (list, tuple)):
        return None
    points = []
    for point in ring:
        if not isinstance(point, (list, tuple)) or len(point) < 2:
            return None
        try:
            lon, lat = float(point[0]), float(point[1])
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None
        points.append((lon, lat))
    return points if len(points) >= 3 else None


def _parse_polygon(rings: Any) -> Optional[Polygon]:
    if not isinstance(rings, (list, tuple)) or not rings:
        return None
    outer = _parse_ring(rings[0])
    if outer is None:
        return None
    holes = [_parse_ring(ring) for ring in rings[1:]]
    return [outer] + [hole for hole in holes if hole is not None]


def geometry_polygons(geometry: Any) -> list[Polygon]:
    """
    Polygons of a GeoJSON Polygon or MultiPolygon geometry.

    Other geometry types and malformed rings yield nothing.
    """
    if not isinstance(geometry, dict):
        return []
    geom_type = geometry.get('type')
    coordinates = geometry.get('coordinates')
    if geom_type == 'Polygon':
        candidates = [coordinates]
    elif geom_type == 'MultiPolygon' and isinstance(coordinates, (list, tuple)):
        candidates = coordinates
    else:
        return []
    polygons = [_parse_polygon(rings) for rings in candidates]
    return [polygon for polygon in polygons if polygon is not None]


def classify_feature_name(name: Optional[str]) -> Optional[str]:
    """
    Region an outline feature belongs to, judged by its name.

    >>> classify_feature_name('Gunnison Bay')
    'north_arm'
    >>> classify_feature_name('Great Salt Lake') is None
    True
    """
    if not name:
        return None
    lowered = name.lower()
    for region in REGIONS:
        if any(keyword in lowered for keyword in REGION_KEYWORDS[region]):
            return region
    return None


def _feature_name(properties: Any) -> str:
    if not isinstance(properties, dict):
        return ''
    for key, value in properties.items():
        if isinstance(key, str) and key.lower() == 'name' and value:
            return str(value)
    return ''


def parse_lake_geojson(
    geojson: Any,
    source: str,
    logger: Logger
) -> Optional[LakeBoundary]:
    """
    Build a LakeBoundary from a GeoJSON FeatureCollection.

    Args:
        geojson: Decoded FeatureCollection
        source: Label of where the geometry came from
        logger: Logger instance

    Returns:
        LakeBoundary, or None when no usable polygon is present
    """
    if not isinstance(geojson, dict) or not isinstance(
        geojson.get('features'), list
    ):
        logger.warning('Lake outline from %s is not a FeatureCollection', source)
        return None

    named = {region: [] for region in REGIONS}
    polygons = []
    names = []
    for feature in geojson['features']:
        if not isinstance(feature, dict):
            logger.debug('Skipping malformed outline feature from %s', source)
            continue
        feature_polygons = geometry_polygons(feature.get('geometry'))
        if not feature_polygons:
            logger.debug('Skipping outline feature without polygons')
            continue
        name = _feature_name(feature.get('properties'))
        names.append(name)
        polygons.extend(feature_polygons)
        region = classify_feature_name(name)
        if region is not None:
            named[region].extend(feature_polygons)

    if not polygons:
        logger.warning('Lake outline from %s has no usable polygons', source)
        return None

    if any(named.values()):
        regions = {region: named[region] for region in REGIONS}
    else:
        regions = {LAKE: list(polygons)}

    logger.info(
        'Lake outline from %s: %s polygons, regions %s',
        source, len(polygons), list(regions),
    )
    return LakeBoundary(
        regions=regions,
        polygons=polygons,
        source=source,
        feature_names=tuple(names),
    )


def read_lake_shapefile(path: str, logger: Logger) -> dict:
    """
    Read a lake outline shapefile as a GeoJSON FeatureCollection.

    Record attributes become feature properties so that a 'name' attribute
    can select the arm.

    Raises:
        shapefile.ShapefileException: If the file cannot be read
        OSError: If the file is missing
    """
    features = []
    with shapefile.Reader(path) as shape:
        for shape_record in shape.shapeRecords():
            features.append(
                {
                    'type': 'Feature',
                    'geometry': shape_record.shape.__geo_interface__,
                    'properties': shape_record.record.as_dict(),
                }
            )
    logger.info('Read %s features from %s', len(features), path)
    return {'type': 'FeatureCollection', 'features': features}


def simplified_lake_boundary(logger: Logger) -> LakeBoundary:
    """The built-in coarse outline as a single-region boundary."""
    return parse_lake_geojson(simplified_lake_geojson(), SOURCE_SIMPLIFIED, logger)
