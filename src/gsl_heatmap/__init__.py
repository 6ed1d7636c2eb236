"""
Great Salt Lake Brine Heatmap Package

Provides tools for:
- Loading brine site readings and the lake outline
- Reconciling sparse readings into complete monthly series
- Partitioning stations into the lake's two arms
- Rasterizing per-arm IDW heatmaps
"""

__version__ = '0.1.0'

# Expose commonly used functionality at package level
from gsl_heatmap.data_loading.heatmap_properties import HeatmapProperties
from gsl_heatmap.data_loading.load_data import (
    load_data_context,
    load_data_context_blocking,
)
from gsl_heatmap.heatmap.rasterize import HeatmapEngine

__all__ = [
    'HeatmapEngine',
    'HeatmapProperties',
    'load_data_context',
    'load_data_context_blocking',
]
