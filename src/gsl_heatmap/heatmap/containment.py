"""
Point-in-polygon tests for lake region polygons.

Uses matplotlib.path for the containment test. A bounding box filter
discards far away points before the polygon test, and points are processed
in chunks so large grids keep memory bounded.
"""

import math
from logging import Logger
from typing import Optional

import matplotlib.path as mplPath
import numpy as np
import numpy.typing as npt

CHUNK_SIZE = 50000


def polygons_bbox(
    polygons: list[list[list[tuple[float, float]]]]
) -> Optional[tuple[float, float, float, float]]:
    """(min_lon, min_lat, max_lon, max_lat) of the outer rings, or None."""
    outer = [polygon[0] for polygon in polygons if polygon and polygon[0]]
    if not outer:
        return None
    points = np.concatenate([np.asarray(ring, dtype=float) for ring in outer])
    return (
        float(points[:, 0].min()),
        float(points[:, 1].min()),
        float(points[:, 0].max()),
        float(points[:, 1].max()),
    )


def polygon_mask(
    lons: npt.NDArray,
    lats: npt.NDArray,
    polygons: list[list[list[tuple[float, float]]]],
    logger: Optional[Logger] = None
) -> npt.NDArray:
    """
    Boolean mask of points that fall inside any polygon.

    A point is inside a polygon when it lies inside the outer ring and
    outside every hole. Non-finite points are never inside.

    Args:
        lons: Longitudes (any shape)
        lats: Latitudes (same shape as lons)
        polygons: Polygons as lists of rings of (lon, lat)
        logger: Optional logger for progress messages

    Returns:
        Boolean array with the shape of lons
    """
    lons = np.asarray(lons, dtype=float)
    lats = np.asarray(lats, dtype=float)
    points = np.column_stack((lons.ravel(), lats.ravel()))
    mask_flat = np.zeros(points.shape[0], dtype=bool)

    bbox = polygons_bbox(polygons)
    if bbox is None:
        return mask_flat.reshape(lons.shape)

    in_box = (
        np.isfinite(points).all(axis=1)
        & (points[:, 0] >= bbox[0])
        & (points[:, 0] <= bbox[2])
        & (points[:, 1] >= bbox[1])
        & (points[:, 1] <= bbox[3])
    )
    indices_to_check = np.where(in_box)[0]
    n_check = len(indices_to_check)

    paths = [
        (
            mplPath.Path(np.asarray(polygon[0], dtype=float)),
            [mplPath.Path(np.asarray(hole, dtype=float)) for hole in polygon[1:]],
        )
        for polygon in polygons
        if polygon and len(polygon[0]) >= 3
    ]

    n_chunks = math.ceil(n_check / CHUNK_SIZE)
    for i in range(n_chunks):
        chunk_indices = indices_to_check[i * CHUNK_SIZE:(i + 1) * CHUNK_SIZE]
        chunk_points = points[chunk_indices]
        chunk_mask = np.zeros(len(chunk_indices), dtype=bool)
        for outer, holes in paths:
            inside = outer.contains_points(chunk_points)
            for hole in holes:
                inside &= ~hole.contains_points(chunk_points)
            chunk_mask |= inside
        mask_flat[chunk_indices] = chunk_mask

    if logger is not None:
        logger.debug(
            'Polygon mask: %s of %s points inside (%s checked)',
            int(mask_flat.sum()), points.shape[0], n_check,
        )
    return mask_flat.reshape(lons.shape)
