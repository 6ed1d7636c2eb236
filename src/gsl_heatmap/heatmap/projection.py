"""
Map projection fitted to the lake outline.

Spherical Mercator (EPSG:3857) scaled uniformly so that the outline fills a
fixed viewport with a margin, centered, with the y axis pointing down.
"""

from functools import lru_cache
from logging import Logger
from typing import Any, Optional

import numpy as np
import numpy.typing as npt
from pyproj import Transformer

from gsl_heatmap.exceptions import ProjectionError

WGS84 = 'EPSG:4326'
WEB_MERCATOR = 'EPSG:3857'


@lru_cache(maxsize=1)
def _mercator_transformers() -> tuple[Transformer, Transformer]:
    return (
        Transformer.from_crs(WGS84, WEB_MERCATOR, always_xy=True),
        Transformer.from_crs(WEB_MERCATOR, WGS84, always_xy=True),
    )


class LakeProjection:
    """
    Forward and inverse transform between lon/lat and viewport units.

    Attributes
    ----------
    scale : float
        Viewport units per Mercator meter
    x0, y0 : float
        Viewport position of the Mercator bounding box corner
        (min easting, max northing)
    min_x, max_y : float
        Mercator min easting and max northing of the fitted geometry
    width, height : int
        Viewport size
    """

    def __init__(
        self,
        scale: float,
        x0: float,
        y0: float,
        min_x: float,
        max_y: float,
        width: int,
        height: int
    ):
        self.scale = scale
        self.x0 = x0
        self.y0 = y0
        self.min_x = min_x
        self.max_y = max_y
        self.width = width
        self.height = height

    def forward(
        self,
        lons: npt.ArrayLike,
        lats: npt.ArrayLike
    ) -> tuple[npt.NDArray, npt.NDArray]:
        """Project lon/lat (degrees) to viewport x/y."""
        to_mercator, _ = _mercator_transformers()
        mx, my = to_mercator.transform(
            np.asarray(lons, dtype=float), np.asarray(lats, dtype=float)
        )
        x = self.x0 + self.scale * (np.asarray(mx) - self.min_x)
        y = self.y0 + self.scale * (self.max_y - np.asarray(my))
        return x, y

    def invert(
        self,
        x: npt.ArrayLike,
        y: npt.ArrayLike
    ) -> tuple[npt.NDArray, npt.NDArray]:
        """Viewport x/y back to lon/lat (degrees); unusable input gives NaN or inf."""
        _, to_lonlat = _mercator_transformers()
        mx = self.min_x + (np.asarray(x, dtype=float) - self.x0) / self.scale
        my = self.max_y - (np.asarray(y, dtype=float) - self.y0) / self.scale
        lons, lats = to_lonlat.transform(mx, my)
        return np.asarray(lons, dtype=float), np.asarray(lats, dtype=float)

    def __repr__(self) -> str:
        return (
            f'LakeProjection(scale={self.scale:.6g}, '
            f'viewport={self.width}x{self.height})'
        )


def fit_projection(
    boundary: Any,
    width: int,
    height: int,
    margin: int,
    logger: Optional[Logger] = None
) -> LakeProjection:
    """
    Fit the projection to every polygon of a lake boundary.

    Args:
        boundary: LakeBoundary (anything with a polygons attribute)
        width: Viewport width
        height: Viewport height
        margin: Margin kept free on every side
        logger: Optional logger

    Returns:
        LakeProjection

    Raises:
        ProjectionError: If the boundary is missing, has no usable points,
            spans zero width or height, or the viewport leaves no room
            inside the margin
    """
    polygons = getattr(boundary, 'polygons', None)
    if not polygons:
        raise ProjectionError('No lake boundary geometry to fit a projection to')

    rings = [
        np.asarray(ring, dtype=float).reshape(-1, 2)
        for polygon in polygons
        for ring in polygon
    ]
    points = np.concatenate(rings) if rings else np.empty((0, 2))
    to_mercator, _ = _mercator_transformers()
    mx, my = to_mercator.transform(points[:, 0], points[:, 1])
    mx = np.asarray(mx, dtype=float)
    my = np.asarray(my, dtype=float)
    finite = np.isfinite(mx) & np.isfinite(my)
    if not finite.any():
        raise ProjectionError('Lake boundary has no projectable points')
    mx, my = mx[finite], my[finite]

    span_x = float(mx.max() - mx.min())
    span_y = float(my.max() - my.min())
    if span_x <= 0 or span_y <= 0:
        raise ProjectionError(
            f'Lake boundary is degenerate (span {span_x:.3g} x {span_y:.3g} m)'
        )

    avail_w = width - 2 * margin
    avail_h = height - 2 * margin
    if avail_w <= 0 or avail_h <= 0:
        raise ProjectionError(
            f'Viewport {width}x{height} leaves no room inside margin {margin}'
        )

    scale = min(avail_w / span_x, avail_h / span_y)
    x0 = margin + (avail_w - scale * span_x) / 2
    y0 = margin + (avail_h - scale * span_y) / 2
    projection = LakeProjection(
        scale=scale,
        x0=x0,
        y0=y0,
        min_x=float(mx.min()),
        max_y=float(my.max()),
        width=width,
        height=height,
    )
    if logger is not None:
        logger.info('Fitted %r', projection)
    return projection
