"""
Data Loading Subpackage

Provides functionality for:
- Configuration and logger setup
- Fetching the brine sites and lake outline feeds
- Station coordinate normalization
- Reading extraction and monthly reconciliation
- Synthetic fallback data
- Color-scale ranges and series queries
"""

# Models
from gsl_heatmap.data_loading.data_context import DataContext, Station

# Ranges
from gsl_heatmap.data_loading.data_ranges import (
    calculate_data_ranges,
    calculate_range,
)

# Reading extraction
from gsl_heatmap.data_loading.extract_readings import (
    MonthlyReading,
    extract_density,
    extract_salinity,
    extract_station_readings,
    extract_temperature,
    parse_number,
)
from gsl_heatmap.data_loading.heatmap_properties import (
    HeatmapProperties,
    load_properties,
)

# Lake geometry
from gsl_heatmap.data_loading.lake_geometry import (
    LakeBoundary,
    classify_feature_name,
    parse_lake_geojson,
    read_lake_shapefile,
    simplified_lake_boundary,
)

# Loading
from gsl_heatmap.data_loading.load_data import (
    load_data_context,
    load_data_context_blocking,
)

# Reconciliation
from gsl_heatmap.data_loading.reconcile_series import (
    ReconciledSeries,
    Strategy,
    build_reconciled_series,
    readings_to_frame,
    reconcile_readings,
    run_strategies,
    synthesize_full_dataset,
)
from gsl_heatmap.data_loading.series_queries import (
    average_value,
    station_time_series,
)

# Coordinates
from gsl_heatmap.data_loading.site_coordinates import (
    normalize_site_coordinates,
    parse_point_geometry,
    station_id_for,
    utm_to_lonlat,
)
from gsl_heatmap.data_loading.synthetic_data import SyntheticGenerator
from gsl_heatmap.data_loading.time_points import (
    time_point_label,
    year_start_index,
)
from gsl_heatmap.data_loading.utils import Utils, get_logger

__all__ = [
    # Utilities
    'Utils',
    'get_logger',
    # Properties and models
    'HeatmapProperties',
    'load_properties',
    'DataContext',
    'Station',
    'LakeBoundary',
    # Coordinates
    'station_id_for',
    'parse_point_geometry',
    'utm_to_lonlat',
    'normalize_site_coordinates',
    # Readings
    'MonthlyReading',
    'parse_number',
    'extract_density',
    'extract_salinity',
    'extract_temperature',
    'extract_station_readings',
    # Reconciliation
    'SyntheticGenerator',
    'ReconciledSeries',
    'Strategy',
    'readings_to_frame',
    'reconcile_readings',
    'synthesize_full_dataset',
    'run_strategies',
    'build_reconciled_series',
    # Ranges and queries
    'calculate_range',
    'calculate_data_ranges',
    'station_time_series',
    'average_value',
    'time_point_label',
    'year_start_index',
    # Geometry and loading
    'classify_feature_name',
    'parse_lake_geojson',
    'read_lake_shapefile',
    'simplified_lake_boundary',
    'load_data_context',
    'load_data_context_blocking',
]
