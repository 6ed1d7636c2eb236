"""
Heatmap Module

Region partitioning, map projection, IDW interpolation and rasterization of
the lake heatmap.
"""

from gsl_heatmap.heatmap.containment import polygon_mask
from gsl_heatmap.heatmap.idw import RegionSamples, idw_grid, idw_interpolate
from gsl_heatmap.heatmap.projection import LakeProjection, fit_projection
from gsl_heatmap.heatmap.rasterize import (
    HeatmapEngine,
    HeatmapFrame,
    grid_cell_centers,
    rasterize_regions,
)
from gsl_heatmap.heatmap.regions import (
    classify_station,
    partition_stations,
    region_samples,
)

__all__ = [
    'RegionSamples',
    'idw_interpolate',
    'idw_grid',
    'LakeProjection',
    'fit_projection',
    'classify_station',
    'partition_stations',
    'region_samples',
    'polygon_mask',
    'grid_cell_centers',
    'rasterize_regions',
    'HeatmapEngine',
    'HeatmapFrame',
]
