"""
Heatmap Properties

This module defines the HeatmapProperties class which holds the feed
addresses, station lists and interpolation parameters, and the loader that
overlays conf/gsl_heatmap.conf onto the built-in defaults.
"""

from logging import Logger
from typing import Optional

from gsl_heatmap.data_loading.utils import Utils, parse_list_option

SITES_API = (
    'https://postgrest-seamlessgeolmap-734948684426.us-central1.run.app/'
    'gsl_brine_sites'
)
LAKE_OUTLINE_WFS = (
    'https://ugs-geoserver-prod-flbcoqv7oa-uc.a.run.app/geoserver/gen_gis/ows'
    '?service=WFS&version=1.0.0&request=GetFeature'
    '&typeName=gen_gis%3Agsl_outline&maxFeatures=50'
    '&outputFormat=application%2Fjson'
)
ALLOWED_SITES = ('AC3', 'AIS', 'AS2', 'FB2', 'RT4', 'RD2', 'SJ-1', 'RD1', 'LVG4')
NORTH_ARM_SITES = ('LVG4', 'RD1', 'RD2', 'SJ-1')


class HeatmapProperties:
    """
    Properties and configuration for loading and rasterizing lake data.

    Attributes
    ----------
    sites_api : str
        PostgREST endpoint returning brine sites with nested readings
    sites_api_profile : str
        Value of the Accept-Profile header for the PostgREST schema
    lake_outline_wfs : str
        WFS endpoint returning the lake outline as GeoJSON
    lake_outline_shp : str
        Optional local shapefile with the lake outline ('' = unused)
    allowed_sites : tuple of str
        Site ids kept from the feed, also used for synthetic regeneration
    north_arm_sites : tuple of str
        Authoritative membership list of the north arm
    request_timeout : float
        Seconds before a feed request is treated as failed
    min_year : int
        Earliest calendar year kept
    min_stations : int
        Fewer real stations than this triggers synthetic regeneration
    min_time_points : int
        Fewer time points than this triggers synthetic regeneration
    map_width, map_height, map_margin : int
        Viewport size and margin the projection is fitted to
    cell_size : int
        Edge of one raster cell in viewport units
    idw_power : float
        Distance exponent of the IDW weights
    random_seed : int or None
        Seed for the synthetic residuals (None = unseeded)

    Examples
    --------
    >>> prop = HeatmapProperties()
    >>> prop.cell_size = 10
    """

    def __init__(self):
        """Initialize HeatmapProperties with default values."""
        self.sites_api: str = SITES_API
        self.sites_api_profile: str = 'emp'
        self.lake_outline_wfs: str = LAKE_OUTLINE_WFS
        self.lake_outline_shp: str = ''

        self.allowed_sites: tuple[str, ...] = ALLOWED_SITES
        self.north_arm_sites: tuple[str, ...] = NORTH_ARM_SITES

        self.request_timeout: float = 5.0
        self.min_year: int = 2000
        self.min_stations: int = 3
        self.min_time_points: int = 10

        self.map_width: int = 800
        self.map_height: int = 500
        self.map_margin: int = 20
        self.cell_size: int = 5
        self.idw_power: float = 2.0
        self.random_seed: Optional[int] = None

    def __repr__(self) -> str:
        """String representation of HeatmapProperties."""
        return (
            f"HeatmapProperties(sites={len(self.allowed_sites)}, "
            f"cell_size={self.cell_size}, idw_power={self.idw_power})"
        )


def load_properties(
    logger: Logger,
    utils: Optional[Utils] = None
) -> HeatmapProperties:
    """
    Build HeatmapProperties from the configuration file.

    Options absent from the file keep their defaults; options that fail to
    parse are logged and ignored.

    Args:
        logger: Logger instance
        utils: Utils instance pointing at the config file (default location
            when None)

    Returns:
        Populated HeatmapProperties
    """
    utils = utils or Utils()
    prop = HeatmapProperties()

    urls = utils.read_config_section('urls', logger)
    prop.sites_api = urls.get('sites_api') or prop.sites_api
    prop.sites_api_profile = (
        urls.get('sites_api_profile') or prop.sites_api_profile
    )
    prop.lake_outline_wfs = urls.get('lake_outline_wfs') or prop.lake_outline_wfs

    stations = utils.read_config_section('stations', logger)
    if stations.get('allowed_sites'):
        prop.allowed_sites = tuple(parse_list_option(stations['allowed_sites']))
    if stations.get('north_arm_sites'):
        prop.north_arm_sites = tuple(
            parse_list_option(stations['north_arm_sites'])
        )

    directories = utils.read_config_section('directories', logger)
    prop.lake_outline_shp = directories.get('lake_outline_shp', '').strip()

    params = utils.read_config_section('parameters', logger)
    casts = {
        'request_timeout': float,
        'min_year': int,
        'min_stations': int,
        'min_time_points': int,
        'map_width': int,
        'map_height': int,
        'map_margin': int,
        'cell_size': int,
        'idw_power': float,
        'random_seed': int,
    }
    for option, cast in casts.items():
        raw = params.get(option, '').strip()
        if not raw:
            continue
        try:
            setattr(prop, option, cast(raw))
        except ValueError:
            logger.error(
                'Could not read option %s = %r, keeping default %r',
                option, raw, getattr(prop, option),
            )

    logger.info('Loaded %r', prop)
    return prop
