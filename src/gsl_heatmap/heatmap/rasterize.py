"""
Rasterize per-region IDW fields over the map viewport.

The viewport is split into square cells. Each cell center is inverse
projected and tested against every region's polygons; a contained cell is
painted with the IDW estimate from that region's samples only. Every other
cell stays NaN, which means "no data" and is distinct from a zero value.

Region masks depend only on the boundary geometry and the grid, so the
engine computes them once. Frames are rebuilt on every request.
"""

import math
from dataclasses import dataclass, field
from logging import Logger
from typing import Optional

import numpy as np
import numpy.typing as npt

from gsl_heatmap.data_loading.data_context import DataContext
from gsl_heatmap.data_loading.heatmap_properties import (
    NORTH_ARM_SITES,
    HeatmapProperties,
)
from gsl_heatmap.data_loading.lake_geometry import LAKE
from gsl_heatmap.data_loading.series_queries import average_value
from gsl_heatmap.data_loading.time_points import time_point_label
from gsl_heatmap.exceptions import ProjectionError
from gsl_heatmap.heatmap.containment import polygon_mask
from gsl_heatmap.heatmap.idw import DEFAULT_POWER, RegionSamples, idw_grid
from gsl_heatmap.heatmap.projection import LakeProjection, fit_projection
from gsl_heatmap.heatmap.regions import (
    METHOD_MEMBERSHIP,
    partition_stations,
    region_samples,
)
from gsl_heatmap.variables import TEMPERATURE, get_variable_config


@dataclass(frozen=True)
class StationPoint:
    """A station as drawn on the map."""

    id: str
    name: str
    x: float
    y: float
    value: Optional[float]
    region: str


@dataclass(frozen=True, eq=False)
class HeatmapFrame:
    """
    One rendered (variable, time point) frame.

    Attributes:
        rasters: {region: (rows, cols) float array}, NaN where unpainted
        cell_size: Cell edge in viewport units
        stations: Projected stations with their value and region
        temperature: Lake-wide temperature at the time point
        average: Station mean of the variable at the time point
        value_range: Color-scale (min, max) of the variable
    """

    variable: str
    time_point: str
    label: str
    rasters: dict[str, npt.NDArray]
    cell_size: int
    stations: list[StationPoint] = field(default_factory=list)
    temperature: Optional[float] = None
    average: Optional[float] = None
    value_range: Optional[tuple[float, float]] = None

    def combined(self) -> npt.NDArray:
        """Single raster with every region painted."""
        rasters = list(self.rasters.values())
        if not rasters:
            return np.empty((0, 0))
        combined = np.full(rasters[0].shape, np.nan)
        for raster in rasters:
            painted = np.isfinite(raster)
            combined[painted] = raster[painted]
        return combined

    def painted_cells(self) -> int:
        return int(sum(np.isfinite(raster).sum() for raster in self.rasters.values()))


def grid_cell_centers(
    width: int,
    height: int,
    cell_size: float
) -> tuple[npt.NDArray, npt.NDArray]:
    """
    Viewport coordinates of every cell center.

    Returns:
        (x, y) arrays of shape (ceil(height / cell_size),
        ceil(width / cell_size))
    """
    if cell_size <= 0:
        raise ValueError(f'Cell size must be positive, got {cell_size}')
    cols = math.ceil(width / cell_size)
    rows = math.ceil(height / cell_size)
    xs = (np.arange(cols) + 0.5) * cell_size
    ys = (np.arange(rows) + 0.5) * cell_size
    return np.meshgrid(xs, ys)


def region_masks(
    boundary,
    projection: LakeProjection,
    cell_size: float,
    logger: Optional[Logger] = None
) -> dict[str, npt.NDArray]:
    """
    Cells belonging to each region.

    Cells whose center cannot be inverse projected belong to no region. A
    cell inside the polygons of several regions goes to the first one in the
    boundary's region order, so the masks never overlap.
    """
    x, y = grid_cell_centers(projection.width, projection.height, cell_size)
    lons, lats = projection.invert(x, y)
    valid = np.isfinite(lons) & np.isfinite(lats)

    claimed = np.zeros(x.shape, dtype=bool)
    masks = {}
    for region, polygons in boundary.regions.items():
        mask = valid & polygon_mask(lons, lats, polygons, logger) & ~claimed
        claimed |= mask
        masks[region] = mask
        if logger is not None:
            logger.debug('Region %s covers %s cells', region, int(mask.sum()))
    return masks


def rasterize_regions(
    masks: dict[str, npt.NDArray],
    samples: dict[str, RegionSamples],
    cell_size: float,
    power: float = DEFAULT_POWER
) -> dict[str, npt.NDArray]:
    """
    Paint each region's cells with IDW estimates from its own samples.

    Args:
        masks: {region: boolean cell mask}
        samples: {region: RegionSamples}
        cell_size: Cell edge in viewport units
        power: IDW distance exponent

    Returns:
        {region: float raster}, NaN outside the region or where the region
        has no samples
    """
    rasters = {}
    for region, mask in masks.items():
        raster = np.full(mask.shape, np.nan)
        region_data = samples.get(region)
        if region_data is not None and len(region_data) and mask.any():
            rows, cols = np.nonzero(mask)
            raster[rows, cols] = idw_grid(
                (cols + 0.5) * cell_size,
                (rows + 0.5) * cell_size,
                region_data,
                power,
            )
        rasters[region] = raster
    return rasters


class HeatmapEngine:
    """
    Renders heatmap frames from a DataContext.

    Args:
        context: Loaded DataContext with a lake boundary
        logger: Logger instance
        cell_size: Cell edge in viewport units
        power: IDW distance exponent
        width, height, margin: Viewport the projection is fitted to
        north_arm_sites: Authoritative north arm membership
        method: Station classification, 'membership' or 'boundary'
    """

    def __init__(
        self,
        context: DataContext,
        logger: Logger,
        cell_size: int = 5,
        power: float = DEFAULT_POWER,
        width: int = 800,
        height: int = 500,
        margin: int = 20,
        north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES,
        method: str = METHOD_MEMBERSHIP
    ):
        self.context = context
        self.logger = logger
        self.cell_size = cell_size
        self.power = power
        self.width = width
        self.height = height
        self.margin = margin
        self.north_arm_sites = north_arm_sites
        self.method = method
        self._projection = None
        self._masks = None

    @classmethod
    def from_properties(
        cls,
        context: DataContext,
        props: HeatmapProperties,
        logger: Logger,
        method: str = METHOD_MEMBERSHIP
    ) -> 'HeatmapEngine':
        return cls(
            context,
            logger,
            cell_size=props.cell_size,
            power=props.idw_power,
            width=props.map_width,
            height=props.map_height,
            margin=props.map_margin,
            north_arm_sites=props.north_arm_sites,
            method=method,
        )

    @property
    def projection(self) -> LakeProjection:
        """
        Projection fitted to the lake boundary, built on first use.

        Raises:
            ProjectionError: If the boundary cannot support a projection
        """
        if self._projection is None:
            try:
                self._projection = fit_projection(
                    self.context.lake_boundary,
                    self.width,
                    self.height,
                    self.margin,
                    self.logger,
                )
            except ProjectionError as ex:
                self.logger.error('Cannot build map projection: %s', ex)
                raise
        return self._projection

    @property
    def masks(self) -> dict[str, npt.NDArray]:
        """Region cell masks, built on first use."""
        if self._masks is None:
            self._masks = region_masks(
                self.context.lake_boundary,
                self.projection,
                self.cell_size,
                self.logger,
            )
        return self._masks

    def _station_points(
        self,
        variable: str,
        time_point: str
    ) -> list[StationPoint]:
        stations = list(self.context.stations)
        if not stations:
            return []
        if self.context.lake_boundary.single_region:
            regions = {station.id: LAKE for station in stations}
        else:
            partition = partition_stations(
                stations,
                self.north_arm_sites,
                method=self.method,
                boundary=self.context.lake_boundary,
            )
            regions = {
                station.id: region
                for region, members in partition.items()
                for station in members
            }

        x, y = self.projection.forward(
            [station.longitude for station in stations],
            [station.latitude for station in stations],
        )
        if variable == TEMPERATURE:
            temperature = self.context.temperature_at(time_point)
            values = {station.id: temperature for station in stations}
        else:
            values = self.context.values_at(variable, time_point)

        return [
            StationPoint(
                id=station.id,
                name=station.name,
                x=float(sx),
                y=float(sy),
                value=values.get(station.id),
                region=regions[station.id],
            )
            for station, sx, sy in zip(
                stations, np.atleast_1d(x), np.atleast_1d(y)
            )
        ]

    def render_frame(self, variable: str, time_point: str) -> HeatmapFrame:
        """
        Render one frame.

        Args:
            variable: 'density', 'salinity' or 'temperature'
            time_point: 'YYYY-MM'

        Returns:
            HeatmapFrame with one raster per region

        Raises:
            ValueError: For an unknown variable
            ProjectionError: If the lake boundary cannot be projected
        """
        get_variable_config(variable)
        samples = region_samples(
            self.context,
            variable,
            time_point,
            self.projection,
            self.logger,
            north_arm_sites=self.north_arm_sites,
            method=self.method,
        )
        rasters = rasterize_regions(self.masks, samples, self.cell_size, self.power)

        frame = HeatmapFrame(
            variable=variable,
            time_point=time_point,
            label=time_point_label(time_point),
            rasters=rasters,
            cell_size=self.cell_size,
            stations=self._station_points(variable, time_point),
            temperature=self.context.temperature_at(time_point),
            average=average_value(self.context, variable, time_point),
            value_range=self.context.ranges.get(variable),
        )
        self.logger.debug(
            'Rendered %s %s: %s painted cells',
            variable, time_point, frame.painted_cells(),
        )
        return frame
